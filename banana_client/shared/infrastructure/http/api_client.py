"""Thin async HTTP wrapper for the Banana backend.

Owns a single ``httpx.AsyncClient`` and turns transport failures into
``NetworkUnavailable``. Status interpretation is left to the callers, since
each endpoint reads 401 differently.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from banana_client.shared.core.errors import NetworkUnavailable

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = (
    "Unable to connect to the server. "
    "Please check if the backend server is running and try again."
)


class BananaApiClient:
    """Async client bound to one backend base URL."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> "BananaApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        token: Optional[str] = None,
    ) -> httpx.Response:
        """Send a request and return the response, whatever its status.

        Args:
            method: HTTP method
            path: Path relative to the base URL, e.g. ``/banana/login/``
            json: Optional JSON body; omitted entirely when None
            token: Optional bearer credential

        Raises:
            NetworkUnavailable: If no response was received
        """
        headers = {}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self._client.request(method, path, json=json, headers=headers)
        except httpx.TransportError as exc:
            logger.warning(f"{method} {path} failed without a response: {exc!r}")
            raise NetworkUnavailable(NETWORK_ERROR_MESSAGE) from exc

        logger.debug(f"{method} {path} -> {response.status_code}")
        return response


def json_body(response: httpx.Response) -> Any:
    """Decode a JSON body, or None when the body is empty or not JSON."""
    try:
        return response.json()
    except ValueError:
        return None


def detail_message(data: Any) -> Optional[str]:
    """Pull a plain-string ``detail`` or ``message`` out of an error body."""
    if not isinstance(data, dict):
        return None
    for key in ("detail", "message"):
        value = data.get(key)
        if isinstance(value, str) and value:
            return value
    return None
