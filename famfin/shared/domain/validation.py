"""Client-side form guards.

Each ``validate_*`` function returns None when the input is acceptable, or the
message to show inline on the form. Nothing here touches the network.
"""

from __future__ import annotations

import math
import re
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from famfin.shared.domain.models import TransactionDraft, TransactionType, categories_for

DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
MIN_PASSWORD_LENGTH = 6

MSG_ALL_FIELDS_REQUIRED = "Semua field harus diisi"
MSG_INVALID_AMOUNT = "Jumlah harus berupa angka lebih dari 0"
MSG_INVALID_DATE = "Format tanggal harus YYYY-MM-DD"
MSG_INVALID_CATEGORY = "Kategori tidak valid"
MSG_INVALID_TYPE = "Jenis transaksi tidak valid"
MSG_PASSWORD_MISMATCH = "Password tidak cocok"
MSG_NEW_PASSWORD_MISMATCH = "Password baru tidak cocok"
MSG_PASSWORD_TOO_SHORT = f"Password minimal {MIN_PASSWORD_LENGTH} karakter"
MSG_CREDENTIALS_REQUIRED = "Email dan password harus diisi"
MSG_INVITE_CODE_REQUIRED = "Masukkan kode invite terlebih dahulu"
MSG_FAMILY_NAME_REQUIRED = "Nama keluarga harus diisi"


class FormValidationError(ValueError):
    """Raised by builders when a guard rejects the input."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def parse_amount(amount: str | float | int | None) -> Optional[float]:
    """Parse a positive, finite amount; None when it is not one."""
    if amount is None or isinstance(amount, bool):
        return None
    text = str(amount).strip()
    # float() also takes "1_000" and non-ASCII digits; the form does not
    if "_" in text or not text.isascii():
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def validate_transaction_form(
    type: str,
    amount: str | float | None,
    description: Optional[str],
    category: Optional[str],
    date: Optional[str],
) -> Optional[str]:
    amount_text = "" if amount is None else str(amount)
    if any(_blank(v) for v in (amount_text, description, category, date)):
        return MSG_ALL_FIELDS_REQUIRED

    if parse_amount(amount) is None:
        return MSG_INVALID_AMOUNT

    if not DATE_PATTERN.fullmatch(str(date)):
        return MSG_INVALID_DATE

    try:
        transaction_type = TransactionType(type)
    except ValueError:
        return MSG_INVALID_TYPE

    if category not in categories_for(transaction_type):
        return MSG_INVALID_CATEGORY

    return None


def build_transaction_draft(
    type: str,
    amount: str | float | None,
    description: Optional[str],
    category: Optional[str],
    date: Optional[str],
    user_id: Optional[str] = None,
) -> TransactionDraft:
    """Validate the form and return the submission payload.

    Raises:
        FormValidationError: with the inline message when a guard fails
    """
    error = validate_transaction_form(type, amount, description, category, date)
    if error:
        raise FormValidationError(error)

    try:
        return TransactionDraft(
            type=TransactionType(type),
            amount=parse_amount(amount),
            description=str(description).strip(),
            category=str(category),
            date=str(date),
            user=user_id,
        )
    except PydanticValidationError as e:
        raise FormValidationError(MSG_ALL_FIELDS_REQUIRED) from e


def validate_login(email: Optional[str], password: Optional[str]) -> Optional[str]:
    if _blank(email) or not password:
        return MSG_CREDENTIALS_REQUIRED
    return None


def validate_registration(
    name: Optional[str],
    email: Optional[str],
    password: Optional[str],
    confirm_password: Optional[str],
) -> Optional[str]:
    if _blank(name) or _blank(email) or not password:
        return MSG_ALL_FIELDS_REQUIRED
    if password != confirm_password:
        return MSG_PASSWORD_MISMATCH
    if len(password) < MIN_PASSWORD_LENGTH:
        return MSG_PASSWORD_TOO_SHORT
    return None


def validate_password_change(
    old_password: Optional[str],
    new_password: Optional[str],
    confirm_password: Optional[str],
) -> Optional[str]:
    if not old_password or not new_password:
        return MSG_ALL_FIELDS_REQUIRED
    if new_password != confirm_password:
        return MSG_NEW_PASSWORD_MISMATCH
    if len(new_password) < MIN_PASSWORD_LENGTH:
        return MSG_PASSWORD_TOO_SHORT
    return None


def validate_invite_code(invite_code: Optional[str]) -> Optional[str]:
    if _blank(invite_code):
        return MSG_INVITE_CODE_REQUIRED
    return None


def validate_family_name(name: Optional[str]) -> Optional[str]:
    if _blank(name):
        return MSG_FAMILY_NAME_REQUIRED
    return None
