"""Client for the TryFi cloud API."""
from .client import TryFiApi
from .errors import (
    AuthError,
    MalformedResponseError,
    RemoteError,
    RequestTimeoutError,
    TransientRemoteError,
    TryFiError,
)

__all__ = [
    "AuthError",
    "MalformedResponseError",
    "RemoteError",
    "RequestTimeoutError",
    "TransientRemoteError",
    "TryFiApi",
    "TryFiError",
]
