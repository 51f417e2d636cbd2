"""Canonical event definitions for the Banana client."""

from __future__ import annotations

import time
from typing import Any, Dict, Literal

from .event_bus import EventPayload

# Event Topics
TOPIC_NOTIFY = "notify"
TOPIC_VIEW_CHANGED = "view.changed"
TOPIC_SESSION_CLEARED = "session.cleared"
TOPIC_LEADERBOARD_LOADED = "leaderboard.loaded"

NotificationVariant = Literal["success", "destructive", "info"]


def create_notify_event(
    title: str,
    description: str,
    variant: NotificationVariant = "info",
) -> EventPayload:
    """Create a user-facing notification (toast) event."""
    return {
        "title": title,
        "description": description,
        "variant": variant,
        "ts": time.time(),
    }


def create_view_changed_event(view: str, previous: str | None, **details: Any) -> EventPayload:
    """Create a view transition event.

    Args:
        view: Name of the view that is now active
        previous: Name of the view that was active before, if any
        **details: View-specific data (auth mode, score, username)
    """
    event: EventPayload = {
        "view": view,
        "previous": previous,
    }
    event.update(details)
    return event


def create_session_cleared_event(reason: str) -> EventPayload:
    """Create a session cleared event (logout or expiry)."""
    return {
        "reason": reason,
    }


def create_leaderboard_loaded_event(entries: list[Dict[str, Any]], rank: int) -> EventPayload:
    """Create a leaderboard loaded event."""
    return {
        "entries": entries,
        "rank": rank,
    }
