"""Data models for the client session and the leaderboard."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Session(BaseModel):
    """The client's current belief about who is logged in."""
    model_config = ConfigDict(frozen=True)

    username: Optional[str] = None
    access: Optional[str] = None
    refresh: Optional[str] = None

    @property
    def has_credentials(self) -> bool:
        """True when at least one credential is present.

        A remembered username alone never counts.
        """
        return bool(self.access or self.refresh)

    @property
    def is_empty(self) -> bool:
        return not (self.username or self.has_credentials)


class AuthSuccess(BaseModel):
    """Successful login or registration response."""
    model_config = ConfigDict(extra='ignore')

    access: str = Field(min_length=1)
    refresh: str = Field(min_length=1)
    username: str = Field(min_length=1)


class LogoutMode(str, Enum):
    """Which server-side sessions a logout invalidates."""
    STANDARD = "logout"
    ALL = "logout-all"

    @property
    def path(self) -> str:
        return f"/banana/{self.value}/"


@dataclass(frozen=True)
class LogoutResult:
    """Outcome of the server-side part of a logout.

    ``status`` is 0 when no HTTP response was received (or no call was made).
    The local session is cleared whatever this says.
    """
    ok: bool
    status: int
    message: Optional[str] = None


class LeaderboardEntry(BaseModel):
    model_config = ConfigDict(extra='ignore', frozen=True)

    username: str
    score: int = Field(ge=0)


@dataclass(frozen=True)
class Leaderboard:
    """Ranked scores in server order. Never resorted client-side."""
    entries: List[LeaderboardEntry]

    def rank_of(self, username: Optional[str]) -> int:
        """1-based rank of ``username``, or 0 when not listed."""
        for index, entry in enumerate(self.entries):
            if entry.username == username:
                return index + 1
        return 0

    def top(self, n: int = 10) -> List[LeaderboardEntry]:
        return self.entries[:n]

    def __len__(self) -> int:
        return len(self.entries)
