from __future__ import annotations

import asyncio
import logging
from typing import Any

import requests

from opportunity_client.config import ApiSettings
from opportunity_client.utils.url_utils import join_url

from .base import RemoteClient
from .errors import ConnectivityError, HttpError, RemoteError

logger = logging.getLogger(__name__)

_JSON_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


class HttpRemoteClient(RemoteClient):
    """JSON client for the opportunity API.

    Holds only its configuration; nothing carries over between requests.
    The blocking ``requests`` call runs in a worker thread so callers on the
    event loop stay responsive while a request is in flight.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: int = 30,
        cookies: dict[str, str] | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.cookies = dict(cookies or {})

    @classmethod
    def from_settings(cls, settings: ApiSettings) -> HttpRemoteClient:
        return cls(
            settings.base_url,
            timeout_seconds=settings.timeout_seconds,
            cookies=settings.cookies,
        )

    async def request(self, method: str, path: str, body: Any | None = None) -> Any:
        return await asyncio.to_thread(self._send, method.upper(), path, body)

    def _send(self, method: str, path: str, body: Any | None) -> Any:
        url = join_url(self.base_url, path)
        logger.debug("%s %s", method, url)

        try:
            response = requests.request(
                method,
                url,
                headers=_JSON_HEADERS,
                json=body,
                cookies=self.cookies or None,
                timeout=self.timeout_seconds,
            )
        except requests.ConnectionError as exc:
            logger.warning("%s %s could not connect: %s", method, url, exc)
            raise ConnectivityError(self.base_url) from exc
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise RemoteError(f"{method} {path} failed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            logger.warning("%s %s returned %d", method, url, response.status_code)
            raise HttpError(response.status_code, response.text or "")

        if not (response.text or "").strip():
            return None

        try:
            return response.json()
        except ValueError as exc:
            raise RemoteError(f"invalid JSON response from {method} {path}") from exc
