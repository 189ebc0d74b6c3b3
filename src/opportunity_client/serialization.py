"""Translation between client-side types and the backend wire shape.

The create endpoint expects camelCase keys, except for the account reference,
which the backend reads as ``AccountId``. ``DRAFT_WIRE_FIELDS`` is the single
place that mapping lives.
"""

from __future__ import annotations

import logging
import math
from dataclasses import fields
from typing import Any

from opportunity_client.models import Account, Opportunity, OpportunityDraft
from opportunity_client.remote.errors import RemoteError
from opportunity_client.utils.datetime_utils import to_calendar_date

logger = logging.getLogger(__name__)

# draft attribute -> wire key
DRAFT_WIRE_FIELDS: dict[str, str] = {
    "name": "name",
    "amount": "amount",
    "stage_name": "stageName",
    "close_date": "closeDate",
    "account_id": "AccountId",
    "description": "description",
}

# form control names -> draft attribute
FORM_FIELD_ALIASES: dict[str, str] = {
    "stageName": "stage_name",
    "closeDate": "close_date",
    "accountId": "account_id",
}

_DRAFT_ATTRIBUTES = frozenset(item.name for item in fields(OpportunityDraft))


class ValidationError(ValueError):
    """Raised when draft input cannot be submitted as entered."""


def resolve_draft_field(name: str) -> str:
    attribute = FORM_FIELD_ALIASES.get(name, name)
    if attribute not in _DRAFT_ATTRIBUTES:
        raise KeyError(f"Unknown draft field: {name!r}")
    return attribute


def parse_amount(value: Any) -> float:
    if isinstance(value, bool):
        raise ValidationError("invalid amount")
    try:
        parsed = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError("invalid amount") from exc
    if not math.isfinite(parsed):
        raise ValidationError("invalid amount")
    return parsed


def normalize_close_date(value: Any) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        return ""
    normalized = to_calendar_date(value)
    if normalized is None:
        raise ValidationError("invalid close date")
    return normalized


def draft_to_wire(draft: OpportunityDraft) -> dict[str, Any]:
    """Build the create payload, validating amount and close date first."""
    values: dict[str, Any] = {
        "name": draft.name,
        "amount": parse_amount(draft.amount),
        "stage_name": draft.stage_name,
        "close_date": normalize_close_date(draft.close_date),
        "account_id": draft.account_id,
        "description": draft.description,
    }
    return {DRAFT_WIRE_FIELDS[attribute]: value for attribute, value in values.items()}


def check_draft_choices(
    draft: OpportunityDraft,
    *,
    stage_names: tuple[str, ...] | list[str],
    accounts: tuple[Account, ...] | list[Account],
) -> None:
    """Reject drafts with missing required fields or choices that were not loaded."""
    if not str(draft.name or "").strip():
        raise ValidationError("name is required")
    if isinstance(draft.close_date, str) and not draft.close_date.strip():
        raise ValidationError("close date is required")
    if draft.stage_name not in stage_names:
        raise ValidationError(f"unknown stage: {draft.stage_name!r}")
    if draft.account_id not in {account.id for account in accounts}:
        raise ValidationError(f"unknown account: {draft.account_id!r}")


def opportunities_from_wire(payload: Any) -> list[Opportunity]:
    if not isinstance(payload, list):
        raise RemoteError("unexpected response: expected a list of opportunities")
    return [Opportunity.from_wire(item) for item in payload if isinstance(item, dict)]


def stage_names_from_wire(payload: Any) -> list[str]:
    if not isinstance(payload, list):
        raise RemoteError("unexpected response: expected a list of stage names")
    return [str(item) for item in payload if item is not None]


def accounts_from_wire(payload: Any) -> list[Account]:
    # A malformed accounts payload is tolerated: the form just offers no choices.
    if not isinstance(payload, list):
        logger.warning("accounts response is not a list (%s); using no accounts", type(payload).__name__)
        return []
    return [Account.from_wire(item) for item in payload if isinstance(item, dict)]
