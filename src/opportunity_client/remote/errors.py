from __future__ import annotations


class RemoteError(Exception):
    """Raised when a remote API call fails."""


class ConnectivityError(RemoteError):
    """Raised when the server cannot be reached at all."""

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url
        super().__init__(
            f"Cannot reach the server. Make sure the API is running at {base_url}"
        )


class HttpError(RemoteError):
    """Raised when the server answers with a non-success status."""

    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self.body = body
        super().__init__(f"HTTP {status}: {body}" if body else f"HTTP {status}")


def describe_error(exc: BaseException, fallback: str) -> str:
    """Turn a failure into the message shown to the user."""
    if isinstance(exc, ConnectivityError):
        return str(exc)
    if isinstance(exc, HttpError):
        return exc.body.strip() or fallback
    return str(exc) or "Unknown error"
