"""Remote API client implementations."""

from .base import RemoteClient
from .errors import ConnectivityError, HttpError, RemoteError, describe_error
from .http_client import HttpRemoteClient

__all__ = [
    "ConnectivityError",
    "HttpError",
    "HttpRemoteClient",
    "RemoteClient",
    "RemoteError",
    "describe_error",
]
