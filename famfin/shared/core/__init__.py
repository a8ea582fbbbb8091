"""
Shared Core Module
==================

Event system, configuration and logging.
"""

# Event System
from .event_bus import EventBus, EventPayload
from . import events

# Configuration
from .configuration import (
    ApiConfig,
    ConfigManager,
    LoggingConfig,
    StorageConfig,
    SystemConfig,
    UIConfig,
    ValidationLevel,
    get_config,
    get_config_manager,
    reset_config,
)
from .logging_setup import configure_logging

__all__ = [
    # Event System
    "EventBus",
    "EventPayload",
    "events",
    # Configuration
    "ApiConfig",
    "ConfigManager",
    "LoggingConfig",
    "StorageConfig",
    "SystemConfig",
    "UIConfig",
    "ValidationLevel",
    "get_config",
    "get_config_manager",
    "reset_config",
    # Logging
    "configure_logging",
]
