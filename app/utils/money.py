"""Decimal helpers for stored monetary amounts."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from typing import Any

ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """Read a stored amount (numeric, str, int or float) as an exact Decimal."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def total(rows: Iterable[dict[str, Any]], key: str = "amount") -> Decimal:
    """Sum ``key`` across rows."""
    return sum((to_decimal(row.get(key)) for row in rows), ZERO)
