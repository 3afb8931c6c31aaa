"""Domain layer utilities."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def resolve_now(now: datetime | None) -> datetime:
    """Return `now` normalized to UTC, or the current time when None."""
    if now is None:
        return utc_now()
    return ensure_utc(now)


def ensure_utc(value: datetime) -> datetime:
    """Return `value` as an aware UTC datetime. Naive values are treated as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Convert a numeric input into a Decimal without binary float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def round_half_up(value: Decimal, places: int = 0) -> Decimal:
    """Round like a person would (0.5 goes up) to `places` decimals."""
    exponent = Decimal(1).scaleb(-places)
    return value.quantize(exponent, rounding=ROUND_HALF_UP)


def truncate(text: str, limit: int, suffix: str = "...") -> str:
    """Cut `text` to `limit` characters, appending `suffix` when cut."""
    if len(text) <= limit:
        return text
    return f"{text[:limit]}{suffix}"
