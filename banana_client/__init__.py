"""Banana client package."""

from .shared.core.event_bus import EventBus
from .client.state import AppState, Store

__all__ = ["AppState", "EventBus", "Store"]
