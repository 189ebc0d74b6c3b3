from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any

from dateutil import parser


def to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_datetime_utc(value: Any) -> datetime | None:
    if value is None:
        return None

    if isinstance(value, datetime):
        return to_utc(value)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            return to_utc(parser.isoparse(value))
        except (ValueError, TypeError, OverflowError):
            pass
        try:
            return to_utc(parser.parse(value))
        except (ValueError, TypeError, OverflowError):
            return None

    return None


def to_calendar_date(value: Any) -> str | None:
    """Return the UTC calendar date of ``value`` as ``YYYY-MM-DD``.

    Date-only inputs are taken as UTC midnight, so they keep their day.
    Strings must be ISO-8601; partial text such as "March" is not filled in
    from today's date. Returns None when the value cannot be parsed.
    """
    if isinstance(value, str):
        try:
            parsed = to_utc(parser.isoparse(value.strip()))
        except (ValueError, TypeError, OverflowError):
            return None
    else:
        parsed = parse_datetime_utc(value)
    if parsed is None:
        return None
    return parsed.date().isoformat()


def format_date(value: datetime | None) -> str:
    if value is None:
        return "unknown"
    return to_utc(value).strftime("%Y-%m-%d")
