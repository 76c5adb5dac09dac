"""
Exception hierarchy raised by the TryFi API client.

Callers branch on the class, not the message:
- AuthError             session missing or rejected, re-login may help
- TransientRemoteError  server busy or request timed out, retry later
- RemoteError           any other application-level failure
- MalformedResponseError  body missing expected fields (a RemoteError)
"""
from __future__ import annotations


class TryFiError(Exception):
    """Base class for all TryFi client errors."""


class AuthError(TryFiError):
    """Raised when credentials are invalid or the session was rejected."""


class TransientRemoteError(TryFiError):
    """Raised when the remote service is temporarily unavailable."""

    def __init__(self, message: str, status: int | None = None) -> None:
        self.status = status
        super().__init__(message)


class RequestTimeoutError(TransientRemoteError):
    """Raised when every attempt of a request timed out."""


class RemoteError(TryFiError):
    """Raised when the remote service returns an application-level error."""

    def __init__(self, message: str, payload: dict | None = None) -> None:
        self.payload = payload
        super().__init__(message)


class MalformedResponseError(RemoteError):
    """Raised when a response is missing fields or is not JSON."""
