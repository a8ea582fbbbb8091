"""FletXr Reactive State Management for the famfin client.

Architecture:
- AppState: application shell state (flow, route, status, logs)
- Store: explicit container holding state and domain services
"""

from .app_state import AppState
from .store import Store

__all__ = ["AppState", "Store"]
