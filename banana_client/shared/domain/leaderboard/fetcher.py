"""Leaderboard Fetcher - authenticated read of ranked scores."""

from __future__ import annotations

import logging

from pydantic import ValidationError as PydanticValidationError

from banana_client.shared.core.errors import (
    InvalidResponseFormat,
    SessionExpired,
    ValidationError,
)
from banana_client.shared.domain.session.models import Leaderboard, LeaderboardEntry
from banana_client.shared.domain.session.session_store import SessionStore
from banana_client.shared.infrastructure.http.api_client import BananaApiClient, json_body

logger = logging.getLogger(__name__)

LEADERBOARD_PATH = "/banana/leaderboard/"


class LeaderboardFetchError(InvalidResponseFormat):
    """Non-401 failure status from the leaderboard endpoint."""

    def __init__(self, message: str, status: int):
        super().__init__(message)
        self.status = status


class LeaderboardFetcher:
    """Reads the leaderboard; fails closed without an access credential."""

    def __init__(self, api: BananaApiClient, session_store: SessionStore):
        self.api = api
        self.session_store = session_store

    async def fetch(self) -> Leaderboard:
        """Fetch ranked scores in server order.

        The access credential is re-read from the store on every call.

        Raises:
            ValidationError: If no access credential is stored (no request is made)
            SessionExpired: On 401; the caller must clear the session
            NetworkUnavailable: If the server cannot be reached
            InvalidResponseFormat: On a failure status or a non-array body
        """
        token = self.session_store.access_token()
        if not token:
            raise ValidationError("No access token found. Please log in again.")

        response = await self.api.request("GET", LEADERBOARD_PATH, token=token)

        if response.status_code == 401:
            raise SessionExpired("Session expired. Please log in again.")
        if not response.is_success:
            raise LeaderboardFetchError(
                "Could not fetch leaderboard data from the server.", response.status_code
            )

        data = json_body(response)
        if not isinstance(data, list):
            raise InvalidResponseFormat("Invalid data format from leaderboard API.")

        try:
            entries = [LeaderboardEntry.model_validate(item) for item in data]
        except PydanticValidationError as exc:
            raise InvalidResponseFormat("Invalid data format from leaderboard API.") from exc

        logger.info(f"Fetched {len(entries)} leaderboard entries")
        return Leaderboard(entries=entries)
