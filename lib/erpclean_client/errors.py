from __future__ import annotations

from typing import Any


class ERPCleanError(Exception):
    """Base client error."""


class ConfigurationError(ERPCleanError):
    """Raised before any network call: bad environment or missing required field."""

    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.field = field


class TransportError(ERPCleanError):
    """Transport/network layer error (connection, timeout, DNS)."""


class ApiError(ERPCleanError):
    def __init__(self, status_code: int, message: str, details: str | None = None, response: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details
        self.response = response


class RemoteError(ApiError):
    """Non-200 response carrying a `message` or `errors` field."""


class UnrecognizedResponseError(ApiError):
    """Non-200 response with neither `message` nor `errors`."""
