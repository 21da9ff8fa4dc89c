"""
Custom exceptions for the Snow Oracle SDK.

Exception hierarchy:
    SnowOracleError (base)
    ├── ApiError
    ├── InvalidResponseError
    ├── NetworkError
    │   ├── ConnectionError
    │   ├── TimeoutError
    │   └── WebSocketError
    │       ├── StreamUnavailableError
    │       └── MessageParseError
    └── ConfigurationError
"""

from typing import Any


class SnowOracleError(Exception):
    """Base exception for all Snow Oracle errors."""

    def __init__(self, message: str, raw: Any = None) -> None:
        self.message = message
        self.raw = raw  # Raw payload that caused the error, if any
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# === API Errors ===


class ApiError(SnowOracleError):
    """The API answered with a non-success HTTP status."""

    def __init__(
        self,
        status: int,
        body: str,
        endpoint: str | None = None,
    ) -> None:
        super().__init__(f"API Error {status}: {body}", raw=body)
        self.status = status
        self.body = body
        self.endpoint = endpoint


class InvalidResponseError(SnowOracleError):
    """A successful response carried a body that is not valid JSON."""

    def __init__(self, message: str, endpoint: str | None = None, raw: Any = None) -> None:
        super().__init__(message, raw)
        self.endpoint = endpoint


# === Network Errors ===


class NetworkError(SnowOracleError):
    """Network-related error."""

    pass


class ConnectionError(NetworkError):
    """Failed to establish connection."""

    pass


class TimeoutError(NetworkError):
    """Request did not complete within the configured timeout."""

    def __init__(
        self,
        message: str,
        timeout_seconds: float | None = None,
        raw: Any = None,
    ) -> None:
        super().__init__(message, raw)
        self.timeout_seconds = timeout_seconds


class WebSocketError(NetworkError):
    """WebSocket-specific error."""

    pass


class StreamUnavailableError(WebSocketError):
    """No WebSocket transport is available in this environment."""

    pass


class MessageParseError(WebSocketError):
    """Inbound feed frame could not be decoded."""

    pass


# === Configuration Errors ===


class ConfigurationError(SnowOracleError):
    """Invalid configuration."""

    pass
