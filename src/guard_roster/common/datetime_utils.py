from __future__ import annotations

import calendar
from datetime import date, datetime, timezone
from typing import Iterator, Optional

from ..core.exceptions import ValidationError


def now_utc() -> datetime:
    """Current time (UTC, timezone-aware).

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(timezone.utc)


def days_in_month(month: int, year: int) -> int:
    """Number of days in a 0-indexed month."""
    return calendar.monthrange(year, month + 1)[1]


def date_key(year: int, month: int, day: int) -> str:
    """Build a ``YYYY-MM-DD`` key from a 0-indexed month."""
    return f"{year:04d}-{month + 1:02d}-{day:02d}"


def parse_date_key(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` key, rejecting anything that would not round-trip."""
    try:
        parsed = datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date: {value!r}")
    if parsed.isoformat() != value:
        raise ValidationError(f"Invalid date: {value!r}")
    return parsed


def month_date_keys(month: int, year: int) -> Iterator[str]:
    for day in range(1, days_in_month(month, year) + 1):
        yield date_key(year, month, day)


def in_month(value: str, month: int, year: int) -> bool:
    d = parse_date_key(value)
    return d.year == year and d.month == month + 1


def to_iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def from_iso(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None
