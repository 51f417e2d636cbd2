"""Logout Coordinator - server-side invalidation with a fail-safe local clear."""

from __future__ import annotations

import logging
from typing import Optional

from banana_client.shared.core.errors import NetworkUnavailable
from banana_client.shared.domain.session.models import LogoutMode, LogoutResult, Session
from banana_client.shared.domain.session.session_store import SessionStore
from banana_client.shared.infrastructure.http.api_client import (
    BananaApiClient,
    detail_message,
    json_body,
)

logger = logging.getLogger(__name__)


class LogoutCoordinator:
    """Invalidates the session server-side, then always clears it locally.

    ``LogoutMode.ALL`` is the primary path for "log out everywhere"; if the
    server fails it with anything but 401, the current session is invalidated
    through ``LogoutMode.STANDARD`` instead. Whatever happens on the wire,
    the Session Store is empty when ``logout`` returns.
    """

    def __init__(self, api: BananaApiClient, session_store: SessionStore):
        self.api = api
        self.session_store = session_store

    async def logout(self, mode: LogoutMode = LogoutMode.STANDARD) -> LogoutResult:
        try:
            session = self.session_store.get()
            if not session.has_credentials:
                logger.info("Logout requested without credentials; treating as logged out")
                return LogoutResult(ok=True, status=0, message="Already logged out.")

            result = await self._invalidate(session, mode)
            if not result.ok and result.status and mode is LogoutMode.ALL:
                logger.warning(
                    f"{mode.path} failed ({result.status}); falling back to {LogoutMode.STANDARD.path}"
                )
                fallback = await self._invalidate(session, LogoutMode.STANDARD)
                if fallback.ok:
                    result = fallback
            return result
        finally:
            self.session_store.clear()

    async def _invalidate(self, session: Session, mode: LogoutMode) -> LogoutResult:
        body: Optional[dict] = {"refresh": session.refresh} if session.refresh else None
        try:
            response = await self.api.request("POST", mode.path, json=body, token=session.access)
        except NetworkUnavailable as exc:
            return LogoutResult(ok=False, status=0, message=exc.message)

        if response.is_success:
            logger.info(f"Server invalidated session via {mode.path}")
            return LogoutResult(ok=True, status=response.status_code)

        if response.status_code == 401:
            # Already invalid server-side, which is the state we wanted
            return LogoutResult(ok=True, status=401, message="Session already invalid.")

        message = detail_message(json_body(response)) or "Failed to log out."
        logger.warning(f"Logout via {mode.path} failed ({response.status_code}): {message}")
        return LogoutResult(ok=False, status=response.status_code, message=message)
