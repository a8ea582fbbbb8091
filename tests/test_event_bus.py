"""Tests for the async EventBus."""

import pytest

from famfin.shared.core import events
from famfin.shared.core.event_bus import EventBus


@pytest.mark.asyncio
class TestEventBus:
    """Publish/subscribe behavior."""

    async def test_publish_reaches_every_subscriber(self, bus, recorder):
        """Every handler of a topic receives the payload."""
        received = []

        async def other(payload):
            received.append(payload)

        await bus.subscribe("topic", recorder)
        await bus.subscribe("topic", other)
        await bus.publish("topic", {"n": 1})
        await bus.wait_until_idle()

        assert recorder.payloads == [{"n": 1}]
        assert received == [{"n": 1}]

    async def test_duplicate_subscription_is_ignored(self, bus, recorder):
        """Subscribing the same handler twice delivers once."""
        await bus.subscribe("topic", recorder)
        await bus.subscribe("topic", recorder)
        assert bus.subscriber_count("topic") == 1

        await bus.publish("topic", {})
        await bus.wait_until_idle()
        assert len(recorder.payloads) == 1

    async def test_unsubscribe_stops_delivery(self, bus, recorder):
        """An unsubscribed handler no longer receives events."""
        await bus.subscribe("topic", recorder)
        await bus.unsubscribe("topic", recorder)
        await bus.publish("topic", {"n": 1})
        await bus.wait_until_idle()

        assert recorder.payloads == []
        assert bus.subscriber_count("topic") == 0

    async def test_unsubscribe_unknown_handler_is_noop(self, bus, recorder):
        """Removing a handler that was never added does not raise."""
        await bus.unsubscribe("missing", recorder)

    async def test_failing_handler_does_not_stop_others(self, bus, recorder):
        """One handler raising does not prevent delivery to the rest."""

        async def broken(payload):
            raise RuntimeError("boom")

        await bus.subscribe("topic", broken)
        await bus.subscribe("topic", recorder)
        await bus.publish("topic", {"ok": True})

        assert await bus.wait_until_idle() is True
        assert recorder.payloads == [{"ok": True}]

    async def test_publish_without_subscribers(self, bus):
        """Publishing to an empty topic is a no-op."""
        await bus.publish("nobody", {})
        assert await bus.wait_until_idle() is True

    async def test_wait_until_idle_follows_chained_publishes(self, bus, recorder):
        """Handlers that publish again are awaited too."""

        async def relay(payload):
            await bus.publish("second", payload)

        await bus.subscribe("first", relay)
        await bus.subscribe("second", recorder)
        await bus.publish("first", {"hop": 1})
        await bus.wait_until_idle()

        assert recorder.payloads == [{"hop": 1}]

    async def test_clear_removes_all_subscriptions(self, recorder):
        """clear() drops every topic."""
        bus = EventBus()
        await bus.subscribe("a", recorder)
        await bus.subscribe("b", recorder)
        bus.clear()

        assert bus.subscriber_count("a") == 0
        assert bus.subscriber_count("b") == 0


class TestEventPayloads:
    """Payload builders."""

    def test_session_event(self):
        """Session events carry the authenticated flag and the user record."""
        payload = events.create_session_event(True, {"name": "Ana"})
        assert payload == {"authenticated": True, "user": {"name": "Ana"}}

    def test_flow_event(self):
        payload = events.create_flow_event("restoring", "authenticated")
        assert payload["previous"] == "restoring"
        assert payload["current"] == "authenticated"

    def test_transactions_changed_event(self):
        payload = events.create_transactions_changed_event("deleted", "t1")
        assert payload["action"] == "deleted"
        assert payload["transaction_id"] == "t1"
