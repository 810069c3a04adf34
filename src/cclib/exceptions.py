"""Exception classes for cclib."""

from __future__ import annotations

import asyncio


class CclibError(Exception):
    """Base exception for all cclib errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AuthorizationRequired(CclibError):
    """No token and no credentials are available for an authenticated call.

    Raised before anything is sent over the network. Call
    ``Session.authenticate`` (or ``set_token``) first.
    """

    def __init__(self, message: str = "Token required. Authenticate first.") -> None:
        super().__init__(message)


class TransportError(CclibError):
    """Failed to reach the API.

    This error is raised when:
    - DNS resolution fails
    - The TLS handshake or certificate verification fails
    - The connection is refused or dropped
    """

    def __init__(
        self,
        message: str = "Failed to connect to the cloudControl API",
        cause: Exception | None = None,
    ) -> None:
        self.cause = cause
        super().__init__(message)


class TimeoutError(TransportError):
    """The HTTP stack gave up waiting for the server."""

    def __init__(
        self,
        message: str = "Request timed out",
        timeout_seconds: float | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(message, cause)


class HTTPStatusError(CclibError):
    """The API answered with a status outside 200, 201 and 204.

    Attributes:
        status_code: HTTP status code.
        status_line: Status line text, e.g. ``"404 Not Found"``.
    """

    def __init__(self, status_code: int, status_line: str) -> None:
        self.status_code = status_code
        self.status_line = status_line
        super().__init__(status_line)

    @property
    def is_unauthorized(self) -> bool:
        """True when the token was rejected and the caller should re-authenticate."""
        return self.status_code == 401


class DecodeError(CclibError):
    """A response body is neither plain JSON nor gzip-wrapped JSON."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class FieldMappingError(CclibError):
    """A decoded tree does not have the shape of the expected record."""

    def __init__(self, record: str, cause: Exception | None = None) -> None:
        self.record = record
        self.cause = cause
        super().__init__(f"Response does not match {record}: {cause}")


class CredentialsFileError(CclibError):
    """The credentials file cannot be read or is incomplete."""


# Caller cancellation is never wrapped: asyncio.timeout and wait_for compare
# against this exact type.
CancelledError = asyncio.CancelledError
