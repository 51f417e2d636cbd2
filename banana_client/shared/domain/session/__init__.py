"""Session state: models and the persisted Session Store."""

from banana_client.shared.domain.session.models import (
    AuthSuccess,
    Leaderboard,
    LeaderboardEntry,
    LogoutMode,
    LogoutResult,
    Session,
)
from banana_client.shared.domain.session.session_store import SessionStore

__all__ = [
    "AuthSuccess",
    "Leaderboard",
    "LeaderboardEntry",
    "LogoutMode",
    "LogoutResult",
    "Session",
    "SessionStore",
]
