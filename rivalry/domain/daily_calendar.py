"""Calendar-day rules: date keys, seeds and the daily submission deadline.

Callers pass ``now`` in; nothing here reads the wall clock.
"""

from datetime import datetime


def date_key(now: datetime) -> str:
    """Return the ``YYYY-MM-DD`` key of the calendar day ``now`` falls on."""
    return f"{now.year:04d}-{now.month:02d}-{now.day:02d}"


def seed_from_date_key(key: str) -> int:
    """Turn ``2024-05-01`` into ``20240501``."""
    digits = key.replace("-", "")
    if len(digits) != 8 or not digits.isdigit():
        raise ValueError(f"date key must look like YYYY-MM-DD, got {key!r}")
    return int(digits)


def daily_deadline(now: datetime, deadline_hour: int) -> tuple[datetime, bool]:
    """Return today's deadline and whether ``now`` is already past it."""
    deadline = now.replace(hour=deadline_hour, minute=0, second=0, microsecond=0)
    return deadline, now > deadline
