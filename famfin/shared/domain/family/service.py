"""Family group membership."""

from __future__ import annotations

import logging

from pydantic import ValidationError as ModelValidationError

from famfin.shared.core import events
from famfin.shared.core.event_bus import EventBus
from famfin.shared.domain.models import AuthResult, Family, FamilyLookup
from famfin.shared.domain.session.store import SessionStore
from famfin.shared.domain.validation import validate_family_name, validate_invite_code
from famfin.shared.infrastructure.api.endpoints import FamilyApi
from famfin.shared.infrastructure.api.errors import ApiError, AuthenticationError, NotFoundError

logger = logging.getLogger(__name__)

MSG_FETCH_FAILED = "Terjadi kesalahan saat mengambil data keluarga"
MSG_JOIN_FAILED = "Gagal bergabung dengan keluarga"


class FamilyService:
    """Create, join, leave and look up the caller's family."""

    def __init__(self, api: FamilyApi, session: SessionStore, bus: EventBus) -> None:
        self.api = api
        self.session = session
        self.bus = bus

    async def _on_failure(self, action: str, error: Exception) -> None:
        logger.error(f"Error {action}: {error!r}")
        if isinstance(error, AuthenticationError):
            await self.session.handle_unauthorized()

    async def _changed(self, action: str) -> None:
        logger.info(f"Family {action}")
        await self.bus.publish(events.TOPIC_FAMILY_CHANGED, events.create_family_changed_event(action))

    async def fetch(self) -> FamilyLookup:
        """The caller's family. A 404 means "no family yet", not an error."""
        try:
            data = await self.api.my_family(self.session.credential())
            if not data:
                return FamilyLookup()
            return FamilyLookup(family=Family.model_validate(data))
        except NotFoundError:
            return FamilyLookup()
        except (ApiError, ModelValidationError) as e:
            await self._on_failure("fetching family", e)
            message = e.user_message(MSG_FETCH_FAILED) if isinstance(e, ApiError) else MSG_FETCH_FAILED
            return FamilyLookup(error=message)

    async def create(self, name: str) -> bool:
        if validate_family_name(name):
            return False
        try:
            await self.api.create(self.session.credential(), name.strip())
        except ApiError as e:
            await self._on_failure("creating family", e)
            return False
        await self._changed("created")
        return True

    async def join(self, invite_code: str) -> bool:
        result = await self.join_with_message(invite_code)
        return result.success

    async def join_with_message(self, invite_code: str) -> AuthResult:
        """Join by invite code, keeping the server's reason on failure."""
        error = validate_invite_code(invite_code)
        if error:
            return AuthResult.fail(error)
        try:
            await self.api.join(self.session.credential(), invite_code.strip())
        except ApiError as e:
            await self._on_failure("joining family", e)
            return AuthResult.fail(e.user_message(MSG_JOIN_FAILED))
        await self._changed("joined")
        return AuthResult.ok()

    async def leave(self) -> bool:
        try:
            await self.api.leave(self.session.credential())
        except ApiError as e:
            await self._on_failure("leaving family", e)
            return False
        await self._changed("left")
        return True
