"""Leaderboard reads."""

from banana_client.shared.domain.leaderboard.fetcher import LeaderboardFetcher, LeaderboardFetchError

__all__ = ["LeaderboardFetcher", "LeaderboardFetchError"]
