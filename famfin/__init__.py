"""famfin - family finance tracker."""

from .shared import __version__
from .shared.core.event_bus import EventBus

__all__ = ["EventBus", "__version__"]
