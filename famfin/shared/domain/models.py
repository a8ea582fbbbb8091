"""
Domain records exchanged with the family finance API.

Server JSON uses camelCase keys and Mongo-style ``_id``; every model accepts
both the server aliases and the Python field names.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# =============================================================================
# ENUMS & CATEGORIES
# =============================================================================

class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


CATEGORIES: Dict[TransactionType, List[str]] = {
    TransactionType.INCOME: ["Gaji", "Bonus", "Investasi", "Lainnya"],
    TransactionType.EXPENSE: [
        "Makanan",
        "Transport",
        "Belanja",
        "Pendidikan",
        "Kesehatan",
        "Hiburan",
        "Lainnya",
    ],
}


def categories_for(transaction_type: TransactionType | str) -> List[str]:
    """Fixed category list for a transaction type; empty for unknown types."""
    try:
        return list(CATEGORIES[TransactionType(transaction_type)])
    except ValueError:
        return []


class ServerModel(BaseModel):
    """Base for records issued by the server."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


def _as_text(value: Any) -> Any:
    """Server ids and labels may arrive as numbers; keep them as strings.

    Anything that is not a scalar is dropped rather than rejected.
    """
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return None


# =============================================================================
# USERS & SESSION
# =============================================================================

class UserProfile(ServerModel):
    """Opaque user record. Unknown fields are kept so it round-trips to storage."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[str] = Field(default=None, alias="_id")
    name: Optional[str] = None
    email: Optional[str] = None
    family: Optional[Any] = None

    @field_validator("id", "name", "email", mode="before")
    @classmethod
    def _scalar_to_text(cls, value: Any) -> Any:
        return _as_text(value)

    def to_storage(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class Session(BaseModel):
    """Immutable view of the authenticated identity.

    Token and user are either both present or both absent.
    """
    model_config = ConfigDict(frozen=True)

    token: Optional[str] = None
    user: Optional[UserProfile] = None
    is_restoring: bool = False

    @model_validator(mode="after")
    def _token_and_user_together(self) -> "Session":
        if (self.token is None) != (self.user is None):
            raise ValueError("token and user must be set together")
        return self

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None


class AuthResult(BaseModel):
    """Success/failure envelope returned to forms instead of raising."""

    success: bool
    error: Optional[str] = None

    @classmethod
    def ok(cls) -> "AuthResult":
        return cls(success=True)

    @classmethod
    def fail(cls, message: str) -> "AuthResult":
        return cls(success=False, error=message)


# =============================================================================
# TRANSACTIONS
# =============================================================================

class Creator(ServerModel):
    id: Optional[str] = Field(default=None, alias="_id")
    name: Optional[str] = None

    @field_validator("id", "name", mode="before")
    @classmethod
    def _scalar_to_text(cls, value: Any) -> Any:
        return _as_text(value)


class Transaction(ServerModel):
    id: Optional[str] = Field(default=None, alias="_id")
    type: TransactionType
    amount: float
    description: str = ""
    category: str = ""
    date: Optional[str] = None
    created_by: Optional[Creator] = Field(default=None, alias="createdBy")

    @field_validator("created_by", mode="before")
    @classmethod
    def _creator_from_id(cls, value: Any) -> Any:
        # Unpopulated references arrive as a bare id string
        if isinstance(value, (str, int)) and not isinstance(value, bool):
            return {"_id": value}
        return value

    @property
    def date_only(self) -> str:
        """The YYYY-MM-DD part of the server timestamp."""
        return (self.date or "").split("T")[0]

    @property
    def creator_name(self) -> str:
        if self.created_by and self.created_by.name:
            return self.created_by.name
        return "Unknown"


class TransactionDraft(BaseModel):
    """Validated payload for create/update."""

    type: TransactionType
    amount: float = Field(gt=0)
    description: str = Field(min_length=1)
    category: str = Field(min_length=1)
    date: str = Field(pattern=r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
    user: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload = self.model_dump(mode="json", exclude_none=True)
        return payload


# =============================================================================
# DASHBOARD AGGREGATES
# =============================================================================

class Summary(ServerModel):
    total_income: float = Field(default=0.0, alias="totalIncome")
    total_expense: float = Field(default=0.0, alias="totalExpense")
    balance: float = 0.0

    @field_validator("total_income", "total_expense", "balance", mode="before")
    @classmethod
    def _none_is_zero(cls, value: Any) -> Any:
        return 0.0 if value is None else value


class MonthlyStats(ServerModel):
    """Raw monthly series; values are sanitized only when charted."""

    months: List[str] = Field(default_factory=list)
    income: List[Any] = Field(default_factory=list)
    expense: List[Any] = Field(default_factory=list)


class DashboardData(BaseModel):
    summary: Summary = Field(default_factory=Summary)
    recent: List[Transaction] = Field(default_factory=list)
    monthly: MonthlyStats = Field(default_factory=MonthlyStats)


# =============================================================================
# FAMILY
# =============================================================================

class FamilyMember(ServerModel):
    id: Optional[str] = Field(default=None, alias="_id")
    name: Optional[str] = None
    email: Optional[str] = None
    role: str = "member"

    @property
    def is_owner(self) -> bool:
        return self.role == "owner"


class Family(ServerModel):
    id: Optional[str] = Field(default=None, alias="_id")
    name: str = ""
    invite_code: Optional[str] = Field(default=None, alias="inviteCode")
    members: List[FamilyMember] = Field(default_factory=list)
    is_owner: bool = Field(default=False, alias="isOwner")

    @property
    def member_count(self) -> int:
        return len(self.members)


class FamilyLookup(BaseModel):
    """Outcome of fetching the caller's family.

    ``family`` is None both when the user has no family (404) and on error;
    ``error`` tells the two apart.
    """

    family: Optional[Family] = None
    error: Optional[str] = None

    @property
    def has_family(self) -> bool:
        return self.family is not None
