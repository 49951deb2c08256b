"""
Core Utilities.

Shared utility functions used across the backend.
All modules should import utilities from this module.
"""

import math
from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application are timezone-naive
    and assumed to be UTC, matching how they are stored.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime | None) -> datetime | None:
    """Convert an aware datetime to naive UTC. Naive values pass through."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def round_half_up(value: float) -> int:
    """Round halves upward: 12.5 becomes 13 and -37.5 becomes -37."""
    return math.floor(value + 0.5)


def percent(part: int | float, whole: int | float | None) -> int:
    """Rounded percentage of part over whole, 0 when whole is empty."""
    if not whole:
        return 0
    return round_half_up(part / whole * 100)


def percent_change(current: int | float, previous: int | float) -> int:
    """Rounded percentage change. A move off a zero baseline counts as 100."""
    if previous == 0:
        return 0 if current == 0 else 100
    return round_half_up((current - previous) / previous * 100)
