"""Auth Gateway - login and registration against the Banana backend."""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from banana_client.shared.core.errors import (
    AuthRejected,
    InvalidResponseFormat,
    ValidationError,
)
from banana_client.shared.domain.session.models import AuthSuccess
from banana_client.shared.domain.session.session_store import SessionStore
from banana_client.shared.infrastructure.http.api_client import (
    BananaApiClient,
    detail_message,
    json_body,
)

logger = logging.getLogger(__name__)

LOGIN_PATH = "/banana/login/"
REGISTER_PATH = "/banana/register/"

# Order in which per-field registration errors are surfaced
REGISTER_FIELDS = ("username", "email", "password", "confirm_password")


class AuthGateway:
    """Performs login/registration and, on success, populates the Session Store.

    This is the only path by which the session gains credentials.
    """

    def __init__(self, api: BananaApiClient, session_store: SessionStore):
        self.api = api
        self.session_store = session_store

    async def login(self, username: str, password: str) -> AuthSuccess:
        """Log in with username and password.

        Raises:
            ValidationError: If either field is empty (no request is made)
            AuthRejected: If the server declines the credentials
            NetworkUnavailable: If the server cannot be reached
            InvalidResponseFormat: If a success body lacks credentials
        """
        if not username or not password:
            raise ValidationError("Please fill in all fields")

        response = await self.api.request(
            "POST", LOGIN_PATH, json={"username": username, "password": password}
        )
        data = json_body(response)

        if not response.is_success:
            message = detail_message(data) or "Invalid username or password"
            logger.info(f"Login rejected for '{username}' ({response.status_code})")
            raise AuthRejected(message, status=response.status_code)

        return self._establish(data)

    async def register(
        self,
        username: str,
        email: str,
        password: str,
        confirm_password: str,
    ) -> AuthSuccess:
        """Create an account and log it in.

        Password confirmation is checked by the server, not here.

        Raises:
            ValidationError: If any field is empty (no request is made)
            AuthRejected: With the first field error the server reports
            NetworkUnavailable: If the server cannot be reached
            InvalidResponseFormat: If a success body lacks credentials
        """
        if not (username and email and password and confirm_password):
            raise ValidationError("Please fill in all fields, including Confirm Password")

        response = await self.api.request(
            "POST",
            REGISTER_PATH,
            json={
                "username": username,
                "email": email,
                "password": password,
                "confirm_password": confirm_password,
            },
        )
        data = json_body(response)

        if not response.is_success:
            message = registration_error(data) or "Please check your input"
            logger.info(f"Registration rejected for '{username}' ({response.status_code})")
            raise AuthRejected(message, status=response.status_code)

        return self._establish(data)

    def _establish(self, data: Any) -> AuthSuccess:
        try:
            success = AuthSuccess.model_validate(data)
        except PydanticValidationError as exc:
            raise InvalidResponseFormat(
                "Authentication response did not include credentials."
            ) from exc

        self.session_store.set_session(success.access, success.refresh, success.username)
        return success


def registration_error(data: Any) -> Optional[str]:
    """First field-level error in ``detail``, else a plain-string detail."""
    if not isinstance(data, dict):
        return None

    detail = data.get("detail")
    if isinstance(detail, dict):
        for field in REGISTER_FIELDS:
            message = _first_message(detail.get(field))
            if message:
                return message
        return None

    return detail_message(data)


def _first_message(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value or None
    if isinstance(value, list) and value and isinstance(value[0], str):
        return value[0] or None
    return None
