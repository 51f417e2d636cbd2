"""HTTP transport for the Banana backend."""

from banana_client.shared.infrastructure.http.api_client import (
    BananaApiClient,
    NETWORK_ERROR_MESSAGE,
    detail_message,
    json_body,
)

__all__ = ["BananaApiClient", "NETWORK_ERROR_MESSAGE", "detail_message", "json_body"]
