"""Application Shell State Management.

Reactive FletXr properties the shell listens to. Domain events arrive on the
EventBus and are mirrored here so UI code only ever reads Rx values.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fletx.core import RxBool, RxList, RxStr

from famfin.client.navigation.guard import Flow
from famfin.shared.core import events
from famfin.shared.core.event_bus import EventBus, EventPayload

MAX_LOG_ENTRIES = 200

DEFAULT_ROUTES = {
    Flow.RESTORING.value: "",
    Flow.UNAUTHENTICATED.value: "login",
    Flow.AUTHENTICATED.value: "dashboard",
}

STATUS_READY = "Siap"

FLOW_STATUS = {
    Flow.UNAUTHENTICATED.value: "Silakan masuk",
    Flow.AUTHENTICATED.value: STATUS_READY,
}


class AppState:
    """Reactive State for the Application Shell.

    Holds the mounted flow, the current route, the status line, the signed-in
    user's display name and a bounded log feed.
    """

    def __init__(self, event_bus: EventBus) -> None:
        """Initialize application state.

        Args:
            event_bus: The shared event bus for cross-cutting concerns
        """
        self.bus = event_bus

        # Navigation State
        self.flow: RxStr = RxStr(Flow.RESTORING.value)
        self.route: RxStr = RxStr("")

        # Status & Identity
        self.status_text: RxStr = RxStr("Memuat sesi...")
        self.user_name: RxStr = RxStr("")
        self.is_busy: RxBool = RxBool(False)

        # Log entries (each is a dict: {message, level, ts})
        self.logs: RxList[Dict[str, Any]] = RxList([])

        self._busy_depth = 0
        self._started = False

    async def initialize(self) -> None:
        """Bind to EventBus events. Safe to call twice."""
        if self._started:
            return

        await self.bus.subscribe(events.TOPIC_NAV_FLOW, self._handle_nav_flow)
        await self.bus.subscribe(events.TOPIC_STATUS_TEXT, self._handle_status_text)
        await self.bus.subscribe(events.TOPIC_LOGS_EVENT, self._handle_log_event)
        await self.bus.subscribe(events.TOPIC_SESSION_CHANGED, self._handle_session)
        await self.bus.subscribe(events.TOPIC_SESSION_RESTORED, self._handle_session)

        self._started = True

    # --- Public Actions ---

    def set_route(self, route_id: str) -> None:
        self.route.value = route_id

    def set_busy(self, busy: bool) -> None:
        self.is_busy.value = busy

    @asynccontextmanager
    async def busy(self, text: str) -> AsyncIterator[None]:
        """Show ``text`` on the status line and mark the shell busy for the block.

        Blocks may overlap; the shell stays busy until the last one exits.
        """
        self._busy_depth += 1
        self.set_busy(True)
        await self.push_status(text)
        try:
            yield
        finally:
            self._busy_depth -= 1
            if self._busy_depth == 0:
                self.set_busy(False)
                await self.push_status(STATUS_READY)

    async def publish(self, topic: str, payload: EventPayload) -> None:
        await self.bus.publish(topic, payload)

    async def push_status(self, text: str) -> None:
        await self.publish(events.TOPIC_STATUS_TEXT, events.create_status_text_event(text))

    async def push_log(self, message: str, level: str = "info") -> None:
        """Publish a log entry; the handler appends it to ``logs``."""
        await self.publish(events.TOPIC_LOGS_EVENT, events.create_logs_event(message, level))

    # --- Event Handlers ---

    async def _handle_nav_flow(self, payload: EventPayload) -> None:
        current = payload.get("current")
        if current:
            self.flow.value = str(current)
            self.route.value = DEFAULT_ROUTES.get(str(current), "")
            if str(current) in FLOW_STATUS:
                self.status_text.value = FLOW_STATUS[str(current)]

    async def _handle_status_text(self, payload: EventPayload) -> None:
        text = payload.get("text")
        if text:
            self.status_text.value = str(text)

    async def _handle_log_event(self, payload: EventPayload) -> None:
        if payload:
            self.logs.append(payload)
            if len(self.logs.value) > MAX_LOG_ENTRIES:
                self.logs.value = list(self.logs.value)[-MAX_LOG_ENTRIES:]

    async def _handle_session(self, payload: EventPayload) -> None:
        user: Optional[Dict[str, Any]] = payload.get("user")
        self.user_name.value = str(user.get("name") or "") if user else ""
