"""View-state management for the Banana client.

Architecture:
- AppState: the view state machine (landing, auth, playing, leaderboard)
- Store: Service locator for accessing state from any component
"""

from .app_state import AppState
from .store import Store
from .views import AuthMode, AuthView, LandingView, LeaderboardView, PlayingView, ViewState

__all__ = [
    "AppState",
    "Store",
    "AuthMode",
    "AuthView",
    "LandingView",
    "LeaderboardView",
    "PlayingView",
    "ViewState",
]
