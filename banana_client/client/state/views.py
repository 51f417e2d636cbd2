"""Screens of the client. Exactly one is active at a time."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Union


class AuthMode(str, Enum):
    LOGIN = "login"
    REGISTER = "register"


@dataclass(frozen=True)
class LandingView:
    name = "landing"

    def details(self) -> Dict[str, Any]:
        return {}


@dataclass(frozen=True)
class AuthView:
    mode: AuthMode = AuthMode.LOGIN
    name = "auth"

    def details(self) -> Dict[str, Any]:
        return {"mode": self.mode.value}


@dataclass(frozen=True)
class PlayingView:
    name = "playing"

    def details(self) -> Dict[str, Any]:
        return {}


@dataclass(frozen=True)
class LeaderboardView:
    score: int = 0
    name = "leaderboard"

    def details(self) -> Dict[str, Any]:
        return {"score": self.score}


ViewState = Union[LandingView, AuthView, PlayingView, LeaderboardView]
