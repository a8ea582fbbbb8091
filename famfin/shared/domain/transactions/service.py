"""Transaction CRUD and the family dashboard aggregates."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from pydantic import ValidationError as ModelValidationError

from famfin.shared.core import events
from famfin.shared.core.event_bus import EventBus
from famfin.shared.domain.models import (
    AuthResult,
    DashboardData,
    MonthlyStats,
    Summary,
    Transaction,
    TransactionDraft,
)
from famfin.shared.domain.session.store import SessionStore
from famfin.shared.infrastructure.api.endpoints import TransactionsApi
from famfin.shared.infrastructure.api.errors import (
    ApiError,
    AuthenticationError,
    PermissionDeniedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

MSG_INVALID_DATA = "Data tidak valid"
MSG_SESSION_EXPIRED = "Sesi telah berakhir, silakan login kembali"
MSG_FORBIDDEN = "Anda tidak memiliki izin untuk melakukan ini"
MSG_GENERIC = "Terjadi kesalahan, silakan coba lagi"

TYPE_ALL = "all"


def submission_error_message(error: ApiError) -> str:
    """Inline message for a failed create/update."""
    if isinstance(error, ValidationError):
        return error.user_message(MSG_INVALID_DATA)
    if isinstance(error, AuthenticationError):
        return MSG_SESSION_EXPIRED
    if isinstance(error, PermissionDeniedError):
        return MSG_FORBIDDEN
    return MSG_GENERIC


class TransactionService:
    """Transaction operations for the signed-in user.

    Read operations return None on failure so screens keep what they already
    show; nothing here raises ApiError to the caller.
    """

    def __init__(self, api: TransactionsApi, session: SessionStore, bus: EventBus) -> None:
        self.api = api
        self.session = session
        self.bus = bus

    async def _on_failure(self, action: str, error: Exception) -> None:
        logger.error(f"Error {action}: {error!r}")
        if isinstance(error, AuthenticationError):
            await self.session.handle_unauthorized()

    async def list(self, search: str = "", type: str = TYPE_ALL) -> Optional[List[Transaction]]:
        """Transactions matching a free-text search and a type filter.

        ``type="all"`` and an empty search send no filter at all.
        """
        try:
            rows = await self.api.list(
                self.session.credential(),
                search=search.strip() or None,
                type=None if type == TYPE_ALL else type,
            )
            return [Transaction.model_validate(row) for row in rows]
        except (ApiError, ModelValidationError) as e:
            await self._on_failure("fetching transactions", e)
            return None

    async def save(self, draft: TransactionDraft, transaction_id: Optional[str] = None) -> AuthResult:
        """Create, or update when ``transaction_id`` is given."""
        payload = draft.to_payload()
        try:
            if transaction_id:
                await self.api.update(self.session.credential(), transaction_id, payload)
                action = "updated"
            else:
                created = await self.api.create(self.session.credential(), payload)
                transaction_id = created.get("_id") if isinstance(created, dict) else None
                action = "created"
        except ApiError as e:
            logger.error(f"Error submitting transaction: {e!r} payload={e.payload}")
            if isinstance(e, AuthenticationError):
                await self.session.handle_unauthorized()
            return AuthResult.fail(submission_error_message(e))

        logger.info(f"Transaction {action}: {transaction_id}")
        await self.bus.publish(
            events.TOPIC_TRANSACTIONS_CHANGED,
            events.create_transactions_changed_event(action, transaction_id),
        )
        return AuthResult.ok()

    async def delete(self, transaction_id: str) -> bool:
        try:
            await self.api.delete(self.session.credential(), transaction_id)
        except ApiError as e:
            await self._on_failure("deleting transaction", e)
            return False

        logger.info(f"Transaction deleted: {transaction_id}")
        await self.bus.publish(
            events.TOPIC_TRANSACTIONS_CHANGED,
            events.create_transactions_changed_event("deleted", transaction_id),
        )
        return True

    async def load_dashboard(self, months: int) -> Optional[DashboardData]:
        """Fetch summary, recent transactions and monthly stats concurrently."""
        token = self.session.credential()
        try:
            summary, recent, monthly = await asyncio.gather(
                self.api.family_summary(token),
                self.api.family_recent(token),
                self.api.family_monthly_stats(token, months),
            )
            return DashboardData(
                summary=Summary.model_validate(summary),
                recent=[Transaction.model_validate(row) for row in recent],
                monthly=MonthlyStats.model_validate(monthly),
            )
        except (ApiError, ModelValidationError) as e:
            await self._on_failure("fetching dashboard data", e)
            return None

    def can_edit(self, transaction: Transaction) -> bool:
        """Only the creator may edit or delete a transaction."""
        user = self.session.user
        if user is None or user.id is None or transaction.created_by is None:
            return False
        return transaction.created_by.id == user.id
