"""Timestamps for registry records."""

from __future__ import annotations

from datetime import datetime, timezone

import pendulum


def parse_datetime(value: str) -> datetime:
    """Parse a snapshot timestamp; naive values are taken as UTC."""
    parsed = pendulum.parse(value.strip(), tz="UTC", strict=False)
    if isinstance(parsed, pendulum.DateTime):
        return parsed
    # date-only strings parse to a Date
    return pendulum.datetime(
        parsed.year, parsed.month, parsed.day, tz="UTC"  # type: ignore[union-attr]
    )


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def format_iso(dt: datetime) -> str:
    return (dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)).isoformat()
