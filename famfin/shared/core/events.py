"""Canonical event definitions for famfin."""

from __future__ import annotations

import time
from typing import Any, Dict, Literal, Optional

from .event_bus import EventPayload

# Session lifecycle
TOPIC_SESSION_RESTORED = "session.restored"
TOPIC_SESSION_CHANGED = "session.changed"

# Navigation
TOPIC_NAV_FLOW = "nav.flow"

# Shell
TOPIC_LOGS_EVENT = "logs.event"
TOPIC_STATUS_TEXT = "status.text"

# Server-side data changes
TOPIC_TRANSACTIONS_CHANGED = "transactions.changed"
TOPIC_FAMILY_CHANGED = "family.changed"


def create_session_event(token_present: bool, user: Optional[Dict[str, Any]]) -> EventPayload:
    """Create a session event. The token itself never travels on the bus."""
    return {
        "authenticated": token_present,
        "user": user,
    }


def create_flow_event(previous: str, current: str) -> EventPayload:
    """Create a navigation flow transition event."""
    return {
        "previous": previous,
        "current": current,
    }


def create_logs_event(
    message: str,
    level: Literal["info", "warning", "error", "success"] = "info",
) -> EventPayload:
    """Create a Log event."""
    return {
        "message": message,
        "level": level,
        "ts": time.time(),
    }


def create_status_text_event(text: str) -> EventPayload:
    return {"text": text}


def create_transactions_changed_event(action: str, transaction_id: Optional[str] = None) -> EventPayload:
    """Create a transactions changed event.

    Args:
        action: One of "created", "updated", "deleted"
        transaction_id: Server id of the affected transaction, when known
    """
    return {
        "action": action,
        "transaction_id": transaction_id,
    }


def create_family_changed_event(action: str) -> EventPayload:
    return {"action": action}
