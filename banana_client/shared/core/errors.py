"""Error taxonomy for the Banana client core.

Every error carries a human-readable ``message`` that the presentation layer
can show as-is. None of them is fatal to the process.
"""

from __future__ import annotations


class BananaClientError(Exception):
    """Base class for client-side errors."""

    title = "Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BananaClientError):
    """Missing or malformed local input. Never reaches the network."""

    title = "Missing fields"


class AuthRejected(BananaClientError):
    """Server declined credentials or registration input."""

    title = "Authentication failed"

    def __init__(self, message: str, status: int = 0):
        super().__init__(message)
        self.status = status


class SessionExpired(BananaClientError):
    """Authenticated call answered with 401. Forces a session clear."""

    title = "Session expired"


class NetworkUnavailable(BananaClientError):
    """No response received from the backend."""

    title = "Connection error"


class InvalidResponseFormat(BananaClientError):
    """Response received but its body violates the expected shape."""

    title = "API Error"


class OperationInProgress(BananaClientError):
    """The same logical operation is already in flight."""

    title = "Please wait"

    def __init__(self, operation: str):
        super().__init__(f"'{operation}' is already in progress")
        self.operation = operation
