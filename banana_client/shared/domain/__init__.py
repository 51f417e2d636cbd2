"""
Shared Domain Module
====================

Client-side session logic:
- session: Session model and the persisted Session Store
- auth: login/registration gateway and logout coordinator
- leaderboard: authenticated leaderboard reads
"""

from banana_client.shared.domain.session import (
    AuthSuccess,
    Leaderboard,
    LeaderboardEntry,
    LogoutMode,
    LogoutResult,
    Session,
    SessionStore,
)
from banana_client.shared.domain.auth import AuthGateway, LogoutCoordinator
from banana_client.shared.domain.leaderboard import LeaderboardFetcher

__all__ = [
    "AuthSuccess",
    "Leaderboard",
    "LeaderboardEntry",
    "LogoutMode",
    "LogoutResult",
    "Session",
    "SessionStore",
    "AuthGateway",
    "LogoutCoordinator",
    "LeaderboardFetcher",
]
