"""Session Store - owner of the bearer token and the signed-in user.

The store is created once at startup and handed to whoever needs it. Every
state change is announced on the EventBus (``session.changed``), and the end
of the startup restore is announced once (``session.restored``).

No public coroutine raises: auth calls return an AuthResult, logout and
restore log their failures.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Optional

from famfin.shared.core import events
from famfin.shared.core.event_bus import EventBus
from famfin.shared.domain.models import AuthResult, Session, UserProfile
from famfin.shared.domain.validation import validate_password_change
from famfin.shared.infrastructure.api.endpoints import AuthApi
from famfin.shared.infrastructure.api.errors import ApiError
from famfin.shared.infrastructure.persistence.key_value import KeyValueStorage

logger = logging.getLogger(__name__)

MSG_LOGIN_FAILED = "Terjadi kesalahan saat login"
MSG_REGISTER_FAILED = "Terjadi kesalahan saat registrasi"
MSG_CHANGE_PASSWORD_FAILED = "Gagal mengubah password"


class SessionStore:
    """Authentication state with a persisted copy in local storage.

    Args:
        api: Auth endpoint group
        storage: Device-local key-value storage
        bus: Shared event bus
        token_key: Storage key of the bearer token
        user_key: Storage key of the serialized user record
    """

    def __init__(
        self,
        api: AuthApi,
        storage: KeyValueStorage,
        bus: EventBus,
        token_key: str = "userToken",
        user_key: str = "userData",
    ) -> None:
        self.api = api
        self.storage = storage
        self.bus = bus
        self.token_key = token_key
        self.user_key = user_key

        self._token: Optional[str] = None
        self._user: Optional[UserProfile] = None
        self._is_restoring = True
        self._restore_task: Optional[asyncio.Task] = None
        # Serializes login/logout so storage and memory never interleave
        self._mutation_lock = asyncio.Lock()

    # --- State ---

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def user(self) -> Optional[UserProfile]:
        return self._user

    @property
    def is_restoring(self) -> bool:
        return self._is_restoring

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    def snapshot(self) -> Session:
        return Session(token=self._token, user=self._user, is_restoring=self._is_restoring)

    def credential(self) -> Optional[str]:
        """Token to attach to the next authenticated request."""
        return self._token

    def _adopt(self, token: str, user: UserProfile) -> None:
        self._token = token
        self._user = user

    def _clear(self) -> None:
        self._token = None
        self._user = None

    async def _publish_change(self) -> None:
        user = self._user.to_storage() if self._user else None
        await self.bus.publish(
            events.TOPIC_SESSION_CHANGED,
            events.create_session_event(self.is_authenticated, user),
        )

    # --- Startup ---

    async def restore(self) -> Session:
        """Adopt the persisted session, if any. Runs once per store.

        Concurrent or repeated callers all await the same restore.
        """
        if self._restore_task is None:
            self._restore_task = asyncio.create_task(self._restore())
        await asyncio.shield(self._restore_task)
        return self.snapshot()

    async def _restore(self) -> None:
        try:
            values = await self.storage.multi_get([self.token_key, self.user_key])
            token = values.get(self.token_key)
            raw_user = values.get(self.user_key)

            if token and raw_user:
                user = UserProfile.model_validate(json.loads(raw_user))
                self._adopt(token, user)
                logger.info(f"Session restored for {user.email or user.id}")
            else:
                logger.info("No persisted session")
        except Exception as e:
            logger.exception(f"Error loading persisted session, starting signed out: {e}")
            self._clear()
        finally:
            self._is_restoring = False

        await self.bus.publish(
            events.TOPIC_SESSION_RESTORED,
            events.create_session_event(
                self.is_authenticated,
                self._user.to_storage() if self._user else None,
            ),
        )

    # --- Auth entry points ---

    async def login(self, email: str, password: str) -> AuthResult:
        """Authenticate, persist token+user, then adopt them.

        Memory is updated only after storage accepted both values, so a
        failed login never leaves a half-written session.
        """
        async with self._mutation_lock:
            try:
                data = await self.api.login(email, password)
                if not isinstance(data, dict) or not data.get("token") or not isinstance(data.get("user"), dict):
                    raise ApiError("Malformed login response", payload=data)

                token = str(data["token"])
                user = UserProfile.model_validate(data["user"])
                await self.storage.multi_set({
                    self.token_key: token,
                    self.user_key: json.dumps(user.to_storage()),
                })
            except ApiError as e:
                logger.warning(f"Login failed for {email}: {e!r}")
                return AuthResult.fail(e.user_message(MSG_LOGIN_FAILED))
            except Exception as e:
                logger.exception(f"Login failed for {email}: {e}")
                return AuthResult.fail(MSG_LOGIN_FAILED)

            self._adopt(token, user)
            logger.info(f"Logged in as {user.email or email}")
            await self._publish_change()
            return AuthResult.ok()

    async def register(self, name: str, email: str, password: str) -> AuthResult:
        """Create an account. The new account still has to log in."""
        try:
            await self.api.register(name, email, password)
        except ApiError as e:
            logger.warning(f"Registration failed for {email}: {e!r}")
            return AuthResult.fail(e.user_message(MSG_REGISTER_FAILED))
        except Exception as e:
            logger.exception(f"Registration failed for {email}: {e}")
            return AuthResult.fail(MSG_REGISTER_FAILED)

        logger.info(f"Registered {email}")
        return AuthResult.ok()

    async def logout(self) -> None:
        """Forget the session. Best-effort: storage errors are only logged.

        A second logout is a no-op apart from the storage removal.
        """
        async with self._mutation_lock:
            try:
                await self.storage.multi_remove([self.token_key, self.user_key])
            except Exception as e:
                logger.error(f"Error during logout: {e}", exc_info=True)

            was_authenticated = self.is_authenticated
            self._clear()
            if was_authenticated:
                logger.info("Logged out")
                await self._publish_change()

    async def handle_unauthorized(self) -> None:
        """Called by services when the server rejects the token."""
        if not self.is_authenticated:
            return
        logger.warning("Server rejected the session token, signing out")
        await self.logout()

    async def change_password(self, old_password: str, new_password: str, confirm_password: str) -> AuthResult:
        error = validate_password_change(old_password, new_password, confirm_password)
        if error:
            return AuthResult.fail(error)

        try:
            await self.api.change_password(self.credential(), old_password, new_password)
        except ApiError as e:
            logger.warning(f"Password change failed: {e!r}")
            return AuthResult.fail(e.user_message(MSG_CHANGE_PASSWORD_FAILED))
        except Exception as e:
            logger.exception(f"Password change failed: {e}")
            return AuthResult.fail(MSG_CHANGE_PASSWORD_FAILED)

        logger.info("Password changed")
        return AuthResult.ok()
