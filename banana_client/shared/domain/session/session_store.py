"""Session Store - the only owner of persisted credentials.

Reads are free for everyone; writes are reserved for the Auth Gateway and the
Logout Coordinator (and the View State Machine when a 401 forces a clear).
"""

from __future__ import annotations

import logging
from typing import Optional

from banana_client.shared.domain.session.models import Session
from banana_client.shared.infrastructure.persistence.storage import KeyValueStorage

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "accessToken"
REFRESH_TOKEN_KEY = "refreshToken"
USERNAME_KEY = "banana-user"


class SessionStore:
    """Durable record of the current session on top of a key-value port."""

    def __init__(self, storage: KeyValueStorage):
        self._storage = storage

    def get(self) -> Session:
        """Read the session afresh from storage."""
        return Session(
            username=self._storage.get(USERNAME_KEY) or None,
            access=self._storage.get(ACCESS_TOKEN_KEY) or None,
            refresh=self._storage.get(REFRESH_TOKEN_KEY) or None,
        )

    def access_token(self) -> Optional[str]:
        return self._storage.get(ACCESS_TOKEN_KEY) or None

    def set_tokens(self, access: str, refresh: str) -> None:
        """Store both credentials in a single write."""
        if not access or not refresh:
            raise ValueError("Both access and refresh credentials are required")
        self._storage.update({ACCESS_TOKEN_KEY: access, REFRESH_TOKEN_KEY: refresh})

    def set_username(self, name: str) -> None:
        if not name:
            raise ValueError("Username must not be empty")
        self._storage.set(USERNAME_KEY, name)

    def clear(self) -> None:
        """Remove all three fields. Idempotent."""
        self._storage.update({
            ACCESS_TOKEN_KEY: None,
            REFRESH_TOKEN_KEY: None,
            USERNAME_KEY: None,
        })
        logger.debug("Session store cleared")

    def set_session(self, access: str, refresh: str, username: str) -> None:
        """Store credentials and the echoed username in a single write."""
        if not (access and refresh and username):
            raise ValueError("Access, refresh and username are all required")
        self._storage.update({
            ACCESS_TOKEN_KEY: access,
            REFRESH_TOKEN_KEY: refresh,
            USERNAME_KEY: username,
        })
        logger.info(f"Session established for '{username}'")
