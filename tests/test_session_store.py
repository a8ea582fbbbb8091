"""
Tests for the SessionStore.

Covers startup restore, login/logout persistence and the events each state
change publishes.
"""

import asyncio
import json

import pytest

from famfin.shared.core import events
from famfin.shared.domain.session.store import (
    MSG_CHANGE_PASSWORD_FAILED,
    MSG_LOGIN_FAILED,
    MSG_REGISTER_FAILED,
    SessionStore,
)
from famfin.shared.domain.validation import MSG_NEW_PASSWORD_MISMATCH
from famfin.shared.infrastructure.api.endpoints import AuthApi
from famfin.shared.infrastructure.persistence.key_value import MemoryKeyValueStorage

from .conftest import TOKEN, USER, request_json


class BrokenWriteStorage(MemoryKeyValueStorage):
    async def multi_set(self, items):
        raise OSError("disk full")

    async def multi_remove(self, keys):
        raise OSError("disk gone")


class BrokenReadStorage(MemoryKeyValueStorage):
    async def get_item(self, key):
        raise OSError("unreadable")


class CountingStorage(MemoryKeyValueStorage):
    def __init__(self, initial=None):
        super().__init__(initial)
        self.reads = 0

    async def multi_get(self, keys):
        self.reads += 1
        await asyncio.sleep(0)
        return await super().multi_get(keys)


def store_with(client, bus, storage):
    return SessionStore(AuthApi(client), storage, bus)


@pytest.mark.asyncio
class TestRestore:
    """Startup restore from local storage."""

    async def test_starts_restoring(self, session):
        assert session.is_restoring is True
        assert session.is_authenticated is False

    async def test_restore_persisted_session(self, client, bus, recorder):
        """token + user JSON in storage restore an authenticated session."""
        storage = MemoryKeyValueStorage({"userToken": "abc", "userData": '{"name":"Ana"}'})
        session = store_with(client, bus, storage)
        await bus.subscribe(events.TOPIC_SESSION_RESTORED, recorder)

        snapshot = await session.restore()
        await bus.wait_until_idle()

        assert session.is_restoring is False
        assert session.token == "abc"
        assert session.user.name == "Ana"
        assert snapshot.is_authenticated
        assert recorder.payloads == [{"authenticated": True, "user": {"name": "Ana"}}]

    async def test_restore_empty_storage(self, session, bus, recorder):
        await bus.subscribe(events.TOPIC_SESSION_RESTORED, recorder)
        await session.restore()
        await bus.wait_until_idle()

        assert session.is_restoring is False
        assert session.is_authenticated is False
        assert recorder.payloads == [{"authenticated": False, "user": None}]

    async def test_numeric_user_id_is_kept(self, client, bus):
        """The user record is opaque; a numeric id still restores."""
        session = store_with(client, bus, MemoryKeyValueStorage({"userToken": "abc", "userData": '{"id": 7, "name": "Ana"}'}))
        await session.restore()

        assert session.is_authenticated is True
        assert session.user.id == "7"

    async def test_token_without_user_is_ignored(self, client, bus):
        session = store_with(client, bus, MemoryKeyValueStorage({"userToken": "abc"}))
        await session.restore()
        assert session.is_authenticated is False
        assert session.user is None

    async def test_corrupt_user_json_starts_signed_out(self, client, bus):
        session = store_with(client, bus, MemoryKeyValueStorage({"userToken": "abc", "userData": "{not json"}))
        await session.restore()
        assert session.is_restoring is False
        assert session.is_authenticated is False

    async def test_unreadable_storage_starts_signed_out(self, client, bus):
        session = store_with(client, bus, BrokenReadStorage())
        await session.restore()
        assert session.is_restoring is False
        assert session.is_authenticated is False

    async def test_concurrent_restores_read_once(self, client, bus, recorder):
        """Repeated or concurrent callers share one restore."""
        storage = CountingStorage({"userToken": TOKEN, "userData": json.dumps(USER)})
        session = store_with(client, bus, storage)
        await bus.subscribe(events.TOPIC_SESSION_RESTORED, recorder)

        await asyncio.gather(session.restore(), session.restore())
        await session.restore()
        await bus.wait_until_idle()

        assert storage.reads == 1
        assert len(recorder.payloads) == 1


@pytest.mark.asyncio
class TestLogin:
    """Login persists before adopting."""

    async def test_login_success(self, session, server, storage, bus, recorder):
        server.on("POST", "/auth/login", json={"token": TOKEN, "user": USER})
        await bus.subscribe(events.TOPIC_SESSION_CHANGED, recorder)
        await session.restore()

        result = await session.login("ana@example.com", "secret")
        await bus.wait_until_idle()

        assert result.success is True
        assert result.error is None
        assert session.token == TOKEN
        assert session.user.name == "Ana"
        assert storage.snapshot()["userToken"] == TOKEN
        assert json.loads(storage.snapshot()["userData"]) == USER
        assert recorder.payloads == [{"authenticated": True, "user": USER}]

    async def test_login_with_numeric_user_id(self, session, server):
        server.on("POST", "/auth/login", json={"token": TOKEN, "user": {"_id": 42, "name": "Ana"}})
        await session.restore()

        result = await session.login("ana@example.com", "secret")

        assert result.success is True
        assert session.is_authenticated is True
        assert session.user.id == "42"

    async def test_login_does_not_send_token(self, session, server):
        server.on("POST", "/auth/login", json={"token": TOKEN, "user": USER})
        await session.login("ana@example.com", "secret")
        assert "Authorization" not in server.last("POST", "/auth/login").headers

    async def test_invalid_credentials(self, session, server, storage):
        """A rejected login returns the server's message and stores nothing."""
        server.on("POST", "/auth/login", status=401, json={"message": "Email atau password salah"})

        result = await session.login("ana@example.com", "wrong")

        assert result.success is False
        assert result.error == "Email atau password salah"
        assert session.is_authenticated is False
        assert storage.snapshot() == {}

    async def test_login_without_server_message_uses_fallback(self, session, server):
        server.on("POST", "/auth/login", status=500)
        result = await session.login("ana@example.com", "secret")
        assert result.error == MSG_LOGIN_FAILED

    async def test_malformed_login_response(self, session, server, storage):
        server.on("POST", "/auth/login", json={"token": TOKEN})
        result = await session.login("ana@example.com", "secret")
        assert result.success is False
        assert result.error == MSG_LOGIN_FAILED
        assert storage.snapshot() == {}

    async def test_storage_failure_keeps_memory_signed_out(self, client, server, bus, recorder):
        server.on("POST", "/auth/login", json={"token": TOKEN, "user": USER})
        session = store_with(client, bus, BrokenWriteStorage())
        await bus.subscribe(events.TOPIC_SESSION_CHANGED, recorder)

        result = await session.login("ana@example.com", "secret")
        await bus.wait_until_idle()

        assert result.success is False
        assert session.is_authenticated is False
        assert recorder.payloads == []


@pytest.mark.asyncio
class TestLogout:
    """Logout is best-effort and idempotent."""

    async def test_logout_clears_storage_and_memory(self, signed_in, bus, recorder):
        await bus.subscribe(events.TOPIC_SESSION_CHANGED, recorder)

        await signed_in.logout()
        await bus.wait_until_idle()

        assert signed_in.is_authenticated is False
        assert signed_in.user is None
        assert signed_in.storage.snapshot() == {}
        assert recorder.payloads == [{"authenticated": False, "user": None}]

    async def test_second_logout_publishes_nothing(self, signed_in, bus, recorder):
        await signed_in.logout()
        await bus.wait_until_idle()
        await bus.subscribe(events.TOPIC_SESSION_CHANGED, recorder)

        await signed_in.logout()
        await bus.wait_until_idle()
        assert recorder.payloads == []

    async def test_storage_failure_still_clears_memory(self, client, bus):
        storage = BrokenWriteStorage({"userToken": TOKEN, "userData": json.dumps(USER)})
        session = store_with(client, bus, storage)
        await session.restore()
        assert session.is_authenticated

        await session.logout()
        assert session.is_authenticated is False

    async def test_handle_unauthorized_logs_out(self, signed_in):
        await signed_in.handle_unauthorized()
        assert signed_in.is_authenticated is False

    async def test_login_and_logout_serialize(self, session, server):
        """A logout issued during a login runs after it completes."""
        server.on("POST", "/auth/login", json={"token": TOKEN, "user": USER})
        await session.restore()

        await asyncio.gather(session.login("ana@example.com", "secret"), session.logout())

        assert session.is_authenticated is False
        assert session.storage.snapshot() == {}


@pytest.mark.asyncio
class TestAccount:
    """Registration and password change."""

    async def test_register_success(self, session, server):
        server.on("POST", "/auth/register", status=201, json={"message": "ok"})
        result = await session.register("Ana", "ana@example.com", "secret")

        assert result.success is True
        assert session.is_authenticated is False
        assert request_json(server.last("POST", "/auth/register")) == {
            "name": "Ana",
            "email": "ana@example.com",
            "password": "secret",
        }

    async def test_register_failure_message(self, session, server):
        server.on("POST", "/auth/register", status=400, json={"message": "Email sudah terdaftar"})
        result = await session.register("Ana", "ana@example.com", "secret")
        assert result.error == "Email sudah terdaftar"

    async def test_register_network_failure(self, session, server):
        server.on("POST", "/auth/register", status=502)
        result = await session.register("Ana", "ana@example.com", "secret")
        assert result.error == MSG_REGISTER_FAILED

    async def test_change_password_sends_token(self, signed_in, server):
        server.on("POST", "/auth/change-password", json={"message": "ok"})
        result = await signed_in.change_password("oldpass", "newpass", "newpass")

        assert result.success is True
        assert server.last("POST", "/auth/change-password").headers["Authorization"] == f"Bearer {TOKEN}"

    async def test_change_password_validates_first(self, signed_in, server):
        result = await signed_in.change_password("oldpass", "newpass", "other")
        assert result.error == MSG_NEW_PASSWORD_MISMATCH
        assert server.requests == []

    async def test_change_password_failure(self, signed_in, server):
        server.on("POST", "/auth/change-password", status=500)
        result = await signed_in.change_password("oldpass", "newpass", "newpass")
        assert result.error == MSG_CHANGE_PASSWORD_FAILED

    async def test_register_unexpected_error(self, session, server):
        def explode(request):
            raise RuntimeError("handler crashed")

        server.on("POST", "/auth/register", handler=explode)
        result = await session.register("Ana", "ana@example.com", "secret")
        assert result.success is False
        assert result.error == MSG_REGISTER_FAILED

    async def test_change_password_unexpected_error(self, signed_in, server):
        def explode(request):
            raise RuntimeError("handler crashed")

        server.on("POST", "/auth/change-password", handler=explode)
        result = await signed_in.change_password("oldpass", "newpass", "newpass")
        assert result.success is False
        assert result.error == MSG_CHANGE_PASSWORD_FAILED
