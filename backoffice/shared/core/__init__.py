"""
Shared Core Module
==================

Event system, configuration and logging setup.
"""

# Event System
from .event_bus import EventBus, EventPayload
from . import events

# Configuration
from .configuration import (
    ConfigManager,
    SystemConfig,
    ValidationLevel,
    get_config,
    get_config_manager,
)

# Logging
from .logging_setup import configure_logging

__all__ = [
    # Event System
    "EventBus",
    "EventPayload",
    "events",
    # Configuration
    "ConfigManager",
    "SystemConfig",
    "ValidationLevel",
    "get_config",
    "get_config_manager",
    # Logging
    "configure_logging",
]
