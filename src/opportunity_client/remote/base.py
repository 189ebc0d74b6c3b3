from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class RemoteClient(ABC):
    @abstractmethod
    async def request(self, method: str, path: str, body: Any | None = None) -> Any:
        """Send a request relative to the base address and return parsed JSON."""

    async def get(self, path: str) -> Any:
        return await self.request("GET", path)

    async def post(self, path: str, body: Any) -> Any:
        return await self.request("POST", path, body)
