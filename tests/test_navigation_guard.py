"""Tests for the NavigationGuard flow state machine."""

import json

import pytest

from famfin.client.navigation.guard import APP_ROUTES, AUTH_ROUTES, Flow, NavigationGuard
from famfin.shared.core import events
from famfin.shared.domain.session.store import SessionStore
from famfin.shared.infrastructure.api.endpoints import AuthApi
from famfin.shared.infrastructure.persistence.key_value import MemoryKeyValueStorage

from .conftest import TOKEN, USER


@pytest.mark.asyncio
class TestNavigationGuard:
    """RESTORING → UNAUTHENTICATED ⇄ AUTHENTICATED."""

    async def test_restoring_mounts_nothing(self, session, bus):
        guard = NavigationGuard(session, bus)
        await guard.attach()

        assert guard.state is Flow.RESTORING
        assert guard.routes() == []
        assert guard.initial_route() is None

    async def test_empty_storage_leads_to_login(self, session, bus):
        guard = NavigationGuard(session, bus)
        await guard.attach()

        await session.restore()
        await bus.wait_until_idle()

        assert guard.state is Flow.UNAUTHENTICATED
        assert guard.routes() == AUTH_ROUTES
        assert guard.initial_route() == "login"

    async def test_persisted_session_leads_to_app(self, client, bus):
        storage = MemoryKeyValueStorage({"userToken": TOKEN, "userData": json.dumps(USER)})
        session = SessionStore(AuthApi(client), storage, bus)
        guard = NavigationGuard(session, bus)
        await guard.attach()

        await session.restore()
        await bus.wait_until_idle()

        assert guard.state is Flow.AUTHENTICATED
        assert guard.routes() == APP_ROUTES
        assert guard.initial_route() == "dashboard"

    async def test_attach_after_restore_catches_up(self, signed_in, bus):
        """A guard attached late reads the store directly."""
        guard = NavigationGuard(signed_in, bus)
        await guard.attach()
        assert guard.state is Flow.AUTHENTICATED

    async def test_login_then_logout(self, session, server, bus):
        server.on("POST", "/auth/login", json={"token": TOKEN, "user": USER})
        guard = NavigationGuard(session, bus)
        transitions = []
        guard.add_listener(lambda previous, current: transitions.append((previous, current)))
        await guard.attach()
        await session.restore()
        await bus.wait_until_idle()

        await session.login("ana@example.com", "secret")
        await bus.wait_until_idle()
        assert guard.state is Flow.AUTHENTICATED

        await session.logout()
        await bus.wait_until_idle()
        assert guard.state is Flow.UNAUTHENTICATED

        assert transitions == [
            (Flow.RESTORING, Flow.UNAUTHENTICATED),
            (Flow.UNAUTHENTICATED, Flow.AUTHENTICATED),
            (Flow.AUTHENTICATED, Flow.UNAUTHENTICATED),
        ]

    async def test_failed_login_keeps_flow(self, session, server, bus):
        server.on("POST", "/auth/login", status=401, json={"message": "Salah"})
        guard = NavigationGuard(session, bus)
        await guard.attach()
        await session.restore()
        await bus.wait_until_idle()

        await session.login("ana@example.com", "wrong")
        await bus.wait_until_idle()
        assert guard.state is Flow.UNAUTHENTICATED

    async def test_flow_event_is_published(self, session, bus, recorder):
        await bus.subscribe(events.TOPIC_NAV_FLOW, recorder)
        guard = NavigationGuard(session, bus)
        await guard.attach()

        await session.restore()
        await bus.wait_until_idle()

        assert recorder.payloads == [{"previous": "restoring", "current": "unauthenticated"}]

    async def test_listener_errors_are_contained(self, session, bus):
        guard = NavigationGuard(session, bus)
        seen = []

        def broken(previous, current):
            raise RuntimeError("render failed")

        guard.add_listener(broken)
        guard.add_listener(lambda previous, current: seen.append(current))
        await guard.attach()
        await session.restore()
        await bus.wait_until_idle()

        assert seen == [Flow.UNAUTHENTICATED]

    async def test_removed_listener_is_not_called(self, session, bus):
        guard = NavigationGuard(session, bus)
        seen = []
        unsubscribe = guard.add_listener(lambda previous, current: seen.append(current))
        unsubscribe()
        unsubscribe()

        await guard.attach()
        await session.restore()
        await bus.wait_until_idle()
        assert seen == []

    async def test_detach_stops_following_session(self, signed_in, bus):
        guard = NavigationGuard(signed_in, bus)
        await guard.attach()
        await guard.detach()
        assert bus.subscriber_count(events.TOPIC_SESSION_CHANGED) == 0

        await signed_in.logout()
        await bus.wait_until_idle()
        assert guard.state is Flow.AUTHENTICATED
