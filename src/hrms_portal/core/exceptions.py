from __future__ import annotations

from typing import Any, Optional

from .constants import NETWORK_ERROR_MESSAGE, REQUEST_FAILED_MESSAGE


class PortalError(Exception):
    """Base exception for the portal."""


class ValidationError(PortalError):
    """Raised when a required input is missing."""


class AuthenticationError(PortalError):
    """Raised when the backend rejects a login attempt."""


def extract_error_message(data: Any, fallback: str) -> str:
    """Pull the human-readable ``error`` field out of an error body."""
    if isinstance(data, dict):
        message = data.get("error") or data.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return fallback


class ApiError(PortalError):
    """The server responded with a non-2xx status."""

    def __init__(self, status: int, data: Any = None, *, fallback: str = REQUEST_FAILED_MESSAGE):
        self.status: Optional[int] = status
        self.data = data
        self.message = extract_error_message(data, fallback)
        super().__init__(self.message)

    def message_or(self, fallback: str) -> str:
        return extract_error_message(self.data, fallback)


class TransportError(PortalError):
    """No response was received (DNS, timeout, refused connection).

    ``status`` is always ``None`` so callers can tell it apart from an HTTP error.
    """

    status = None
    data = None

    def __init__(self, message: str = NETWORK_ERROR_MESSAGE):
        self.message = message
        super().__init__(message)

    def message_or(self, fallback: str) -> str:
        return fallback
