"""
Shared Core Module
==================

Event system, error taxonomy, configuration and service registry.
"""

# Event System
from .event_bus import EventBus, EventPayload
from . import events

# Errors
from .errors import (
    BananaClientError,
    ValidationError,
    AuthRejected,
    SessionExpired,
    NetworkUnavailable,
    InvalidResponseFormat,
    OperationInProgress,
)

# Service Registry
from .service_registry import register_cleanup_handler, run_cleanup_handlers

# Configuration
from .configuration import (
    ConfigManager,
    SystemConfig,
    get_config_manager,
    get_config,
    ValidationLevel,
)

__all__ = [
    # Event System
    "EventBus",
    "EventPayload",
    "events",
    # Errors
    "BananaClientError",
    "ValidationError",
    "AuthRejected",
    "SessionExpired",
    "NetworkUnavailable",
    "InvalidResponseFormat",
    "OperationInProgress",
    # Service Registry
    "register_cleanup_handler",
    "run_cleanup_handlers",
    # Configuration
    "ConfigManager",
    "SystemConfig",
    "get_config_manager",
    "get_config",
    "ValidationLevel",
]
