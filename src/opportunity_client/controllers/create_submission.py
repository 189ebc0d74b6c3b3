from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable

from opportunity_client.models import Account, OpportunityDraft
from opportunity_client.remote import RemoteClient, RemoteError, describe_error
from opportunity_client.serialization import (
    ValidationError,
    accounts_from_wire,
    check_draft_choices,
    draft_to_wire,
    resolve_draft_field,
    stage_names_from_wire,
)

from .base import OptionsStatus, StateController, SubmitStatus

logger = logging.getLogger(__name__)

STAGE_NAMES_PATH = "/api/opportunities/stagenames"
ACCOUNTS_PATH = "/api/opportunities/accounts"
CREATE_PATH = "/api/opportunities"
_CREATE_FAILED_MESSAGE = "Failed to create opportunity"
_OPTIONS_FAILED_MESSAGE = "request failed"


@dataclass(slots=True, frozen=True)
class CreateState:
    options_status: OptionsStatus = OptionsStatus.LOADING
    stage_names: tuple[str, ...] = ()
    accounts: tuple[Account, ...] = ()
    options_error: str | None = None
    draft: OpportunityDraft = field(default_factory=OpportunityDraft)
    submit_status: SubmitStatus = SubmitStatus.IDLE
    submit_error: str | None = None

    @property
    def can_submit(self) -> bool:
        return (
            self.options_status is OptionsStatus.READY
            and self.submit_status is not SubmitStatus.SUBMITTING
        )


class CreateSubmissionController(StateController[CreateState]):
    """Drives the create form: option loading first, then draft submission."""

    def __init__(self, client: RemoteClient) -> None:
        super().__init__(CreateState())
        self.client = client

    async def activate(self) -> CreateState:
        self._update(draft=OpportunityDraft())
        return await self.load_options()

    async def load_options(self) -> CreateState:
        self._update(options_status=OptionsStatus.LOADING)
        try:
            stage_result, accounts_result = await asyncio.gather(
                self._fetch(STAGE_NAMES_PATH, stage_names_from_wire),
                self._fetch(ACCOUNTS_PATH, accounts_from_wire),
                return_exceptions=True,
            )

            for label, result in (
                ("stage names", stage_result),
                ("accounts", accounts_result),
            ):
                if isinstance(result, BaseException):
                    if not isinstance(result, Exception):
                        raise result
                    message = f"Error fetching {label}: {describe_error(result, _OPTIONS_FAILED_MESSAGE)}"
                    logger.warning(message)
                    return self._update(
                        options_status=OptionsStatus.ERROR,
                        options_error=message,
                    )

            logger.info(
                "Loaded %d stage names and %d accounts",
                len(stage_result),
                len(accounts_result),
            )
            return self._update(
                options_status=OptionsStatus.READY,
                stage_names=tuple(stage_result),
                accounts=tuple(accounts_result),
                options_error=None,
            )
        finally:
            if self.state.options_status is OptionsStatus.LOADING:
                self._update(
                    options_status=OptionsStatus.ERROR,
                    options_error="Loading options was interrupted",
                )

    def update_field(self, name: str, value: Any) -> OpportunityDraft:
        attribute = resolve_draft_field(name)
        draft = replace(self.state.draft, **{attribute: value})
        self._update(draft=draft)
        return draft

    async def submit(self) -> Any | None:
        if not self.state.can_submit:
            logger.info(
                "Ignoring submit (options=%s, submit=%s)",
                self.state.options_status.value,
                self.state.submit_status.value,
            )
            return None

        self._update(submit_status=SubmitStatus.SUBMITTING, submit_error=None)
        try:
            payload = draft_to_wire(self.state.draft)
            check_draft_choices(
                self.state.draft,
                stage_names=self.state.stage_names,
                accounts=self.state.accounts,
            )
            created = await self.client.post(CREATE_PATH, payload)
        except ValidationError as exc:
            logger.info("Draft rejected before submission: %s", exc)
            self._update(submit_status=SubmitStatus.ERROR, submit_error=str(exc))
            return None
        except Exception as exc:  # noqa: BLE001
            if isinstance(exc, RemoteError):
                logger.warning("Creating opportunity failed: %s", exc)
            else:
                logger.exception("Unexpected failure creating opportunity")
            self._update(
                submit_status=SubmitStatus.ERROR,
                submit_error=describe_error(exc, _CREATE_FAILED_MESSAGE),
            )
            return None
        else:
            logger.info("Created opportunity %r", payload.get("name"))
            self._update(
                submit_status=SubmitStatus.SUCCESS,
                draft=OpportunityDraft(),
            )
            return created
        finally:
            if self.state.submit_status is SubmitStatus.SUBMITTING:
                self._update(submit_status=SubmitStatus.IDLE)

    async def _fetch(self, path: str, parse: Callable[[Any], list]) -> list:
        payload = await self.client.get(path)
        return parse(payload)
