"""Time utility helpers."""

from __future__ import annotations

import re
from datetime import UTC, date, datetime, time
from zoneinfo import ZoneInfo

_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def now_utc() -> datetime:
    """Return current timezone-aware UTC datetime."""
    return datetime.now(tz=UTC)


def utc_today() -> date:
    """Return current UTC date."""
    return now_utc().date()


def local_today(timezone: str) -> date:
    """Return the current date in the named IANA timezone."""
    return now_utc().astimezone(ZoneInfo(timezone)).date()


def parse_iso_date(value: str | None, default: date | None = None) -> date:
    """Parse an ISO date string with an optional fallback default."""
    if not value:
        if default is None:
            raise ValueError("Missing required date value")
        return default
    return date.fromisoformat(value[:10])


def parse_timestamp(value: str | datetime | date) -> datetime:
    """Coerce a stored timestamp into an aware UTC datetime.

    Bare dates are read as midnight UTC and naive datetimes are assumed UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def parse_month(value: str | None, default: date | None = None) -> tuple[int, int]:
    """Parse a ``YYYY-MM`` label into ``(year, month)``.

    Falls back to the month of ``default`` (or today) when ``value`` is empty.
    """
    if not value:
        base = default or utc_today()
        return base.year, base.month

    match = _MONTH_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"Invalid month {value!r}, expected YYYY-MM")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month {value!r}, expected YYYY-MM")
    if not 1 <= year <= 9998:
        raise ValueError(f"Month {value!r} is out of range")
    return year, month


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move ``delta`` calendar months forward (or backward when negative)."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_label(year: int, month: int) -> str:
    """Format a calendar month as ``YYYY-MM``."""
    return f"{year:04d}-{month:02d}"


def month_window(year: int, month: int) -> tuple[datetime, datetime]:
    """Return the half-open UTC window ``[first_of_month, first_of_next_month)``."""
    next_year, next_month = shift_month(year, month, 1)
    start = datetime(year, month, 1, tzinfo=UTC)
    end = datetime(next_year, next_month, 1, tzinfo=UTC)
    return start, end


def trailing_months(anchor: date, count: int) -> list[tuple[int, int]]:
    """Return ``count`` calendar months ending at ``anchor``'s month, oldest first."""
    return [shift_month(anchor.year, anchor.month, -offset) for offset in range(count - 1, -1, -1)]
