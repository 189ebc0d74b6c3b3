from __future__ import annotations

import logging
from dataclasses import dataclass

from opportunity_client.models import Opportunity
from opportunity_client.remote import RemoteClient, RemoteError, describe_error
from opportunity_client.serialization import opportunities_from_wire

from .base import FetchStatus, StateController

logger = logging.getLogger(__name__)

ALL_OPPORTUNITIES_PATH = "/api/opportunities"
NEW_OPPORTUNITIES_PATH = "/api/opportunities/new"
_FETCH_FAILED_MESSAGE = "Failed to fetch opportunities"


@dataclass(slots=True, frozen=True)
class ListState:
    status: FetchStatus = FetchStatus.LOADING
    filter_new_only: bool = False
    data: tuple[Opportunity, ...] = ()
    error_message: str | None = None


class ListSyncController(StateController[ListState]):
    """Keeps the opportunity list in sync with the backend.

    Each fetch gets a generation number; only the latest generation may
    write its result, so a slow response from before a filter change cannot
    overwrite a newer one.
    """

    def __init__(self, client: RemoteClient) -> None:
        super().__init__(ListState())
        self.client = client
        self._generation = 0

    def path_for(self, new_only: bool) -> str:
        return NEW_OPPORTUNITIES_PATH if new_only else ALL_OPPORTUNITIES_PATH

    async def set_filter(self, new_only: bool) -> ListState:
        self._update(filter_new_only=bool(new_only))
        return await self.refetch()

    async def refetch(self) -> ListState:
        self._generation += 1
        generation = self._generation
        path = self.path_for(self.state.filter_new_only)

        self._update(status=FetchStatus.LOADING)
        try:
            payload = await self.client.get(path)
            opportunities = opportunities_from_wire(payload)
        except Exception as exc:  # noqa: BLE001
            if not self._is_current(generation):
                logger.info("Dropping stale failure for %s (generation %d)", path, generation)
                return self.state
            if isinstance(exc, RemoteError):
                logger.warning("Fetching %s failed: %s", path, exc)
            else:
                logger.exception("Unexpected failure fetching %s", path)
            return self._update(
                status=FetchStatus.ERROR,
                error_message=describe_error(exc, _FETCH_FAILED_MESSAGE),
            )
        else:
            if not self._is_current(generation):
                logger.info("Dropping stale response for %s (generation %d)", path, generation)
                return self.state

            logger.info("Fetched %d opportunities from %s", len(opportunities), path)
            return self._update(
                status=FetchStatus.SUCCESS,
                data=tuple(opportunities),
                error_message=None,
            )
        finally:
            # only reached in LOADING if the await was cancelled
            if self._is_current(generation) and self.state.status is FetchStatus.LOADING:
                self._update(status=FetchStatus.IDLE)

    async def retry(self) -> ListState:
        return await self.refetch()

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation
