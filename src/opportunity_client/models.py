from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from opportunity_client.utils.datetime_utils import parse_datetime_utc

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Opportunity:
    id: str
    name: str
    amount: Decimal
    stage_name: str
    probability: int
    description: str | None
    created_date: datetime | None
    last_modified_date: datetime | None
    account_id: str
    account_name: str
    owner_id: str
    owner_name: str

    @classmethod
    def from_wire(cls, payload: dict[str, Any]) -> Opportunity:
        description = payload.get("description")
        return cls(
            id=_as_text(payload.get("id")),
            name=_as_text(payload.get("name")),
            amount=_as_decimal(payload.get("amount")),
            stage_name=_as_text(payload.get("stageName")),
            probability=_as_probability(payload.get("probability")),
            description=str(description) if description else None,
            created_date=parse_datetime_utc(payload.get("createdDate")),
            last_modified_date=parse_datetime_utc(payload.get("lastModifiedDate")),
            account_id=_as_text(payload.get("accountId")),
            account_name=_as_text(payload.get("accountName")),
            owner_id=_as_text(payload.get("ownerId")),
            owner_name=_as_text(payload.get("ownerName")),
        )


@dataclass(slots=True, frozen=True)
class Account:
    id: str
    name: str

    @classmethod
    def from_wire(cls, payload: dict[str, Any]) -> Account:
        return cls(
            id=_as_text(payload.get("Id", payload.get("id"))),
            name=_as_text(payload.get("Name", payload.get("name"))),
        )


@dataclass(slots=True)
class OpportunityDraft:
    name: str = ""
    # "" is the empty sentinel while the user is still editing
    amount: str | int | float = ""
    stage_name: str = ""
    close_date: str | date | datetime = ""
    account_id: str = ""
    description: str = ""


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _as_decimal(value: Any) -> Decimal:
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        parsed = Decimal(str(value))
    except (InvalidOperation, ValueError):
        logger.warning("opportunity amount %r is not a number; showing 0", value)
        return Decimal("0")
    if not parsed.is_finite():
        logger.warning("opportunity amount %r is not finite; showing 0", value)
        return Decimal("0")
    return parsed


def _as_probability(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    try:
        parsed = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return min(max(parsed, 0), 100)
