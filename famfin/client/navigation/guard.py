"""Navigation Guard - picks which navigation tree is mounted.

Three flows: RESTORING (initial, nothing mounted), UNAUTHENTICATED
(login/register) and AUTHENTICATED (the app tabs). The guard follows the
SessionStore through the EventBus and reads the store itself as the source
of truth, so event payloads never disagree with what is rendered.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, List

from famfin.shared.core import events
from famfin.shared.core.event_bus import EventBus, EventPayload
from famfin.shared.domain.session.store import SessionStore

logger = logging.getLogger(__name__)


class Flow(str, Enum):
    RESTORING = "restoring"
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


FlowListener = Callable[[Flow, Flow], None]

AUTH_ROUTES = ["login", "register"]
APP_ROUTES = [
    "dashboard",
    "transactions",
    "family",
    "profile",
    "add_transaction",
    "settings",
]


class NavigationGuard:
    """State machine over the session lifecycle.

    Usage:
        guard = NavigationGuard(session, bus)
        await guard.attach()
        unsubscribe = guard.add_listener(on_flow)
        ...
        unsubscribe()
        await guard.detach()
    """

    def __init__(self, session: SessionStore, bus: EventBus) -> None:
        self.session = session
        self.bus = bus
        self._state = Flow.RESTORING
        self._listeners: List[FlowListener] = []
        self._attached = False

    @property
    def state(self) -> Flow:
        return self._state

    def routes(self) -> List[str]:
        """Routes reachable in the current flow; none while restoring."""
        if self._state is Flow.AUTHENTICATED:
            return list(APP_ROUTES)
        if self._state is Flow.UNAUTHENTICATED:
            return list(AUTH_ROUTES)
        return []

    def initial_route(self) -> str | None:
        routes = self.routes()
        return routes[0] if routes else None

    # --- Lifecycle ---

    async def attach(self) -> None:
        """Subscribe to session events and catch up with the store."""
        if self._attached:
            return
        await self.bus.subscribe(events.TOPIC_SESSION_RESTORED, self._on_session_event)
        await self.bus.subscribe(events.TOPIC_SESSION_CHANGED, self._on_session_event)
        self._attached = True

        # The restore may have finished before we subscribed
        if not self.session.is_restoring:
            await self.sync()

    async def detach(self) -> None:
        """Unsubscribe from the bus and drop all listeners."""
        if not self._attached:
            return
        await self.bus.unsubscribe(events.TOPIC_SESSION_RESTORED, self._on_session_event)
        await self.bus.unsubscribe(events.TOPIC_SESSION_CHANGED, self._on_session_event)
        self._listeners.clear()
        self._attached = False

    def add_listener(self, listener: FlowListener) -> Callable[[], None]:
        """Call ``listener(previous, current)`` on every transition.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # --- Transitions ---

    def _target(self) -> Flow:
        if self.session.is_restoring:
            return Flow.RESTORING
        if self.session.is_authenticated:
            return Flow.AUTHENTICATED
        return Flow.UNAUTHENTICATED

    async def sync(self) -> None:
        """Move to the flow the session currently implies, if it changed."""
        target = self._target()
        if target is self._state:
            return

        previous, self._state = self._state, target
        logger.info(f"Navigation flow: {previous.value} -> {target.value}")

        for listener in list(self._listeners):
            try:
                listener(previous, target)
            except Exception:
                logger.exception(f"Flow listener {getattr(listener, '__name__', listener)} failed")

        await self.bus.publish(
            events.TOPIC_NAV_FLOW,
            events.create_flow_event(previous.value, target.value),
        )

    async def _on_session_event(self, payload: EventPayload) -> None:
        await self.sync()
