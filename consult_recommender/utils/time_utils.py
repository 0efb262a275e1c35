"""
Time and date helpers for recommendation generation.

Key concepts:
  - Recommendation ids carry a millisecond stamp taken once per call.
  - Seasonal rules work on calendar quarters of the reference date.
  - Account age drives experience inference.
"""

from __future__ import annotations

from datetime import date, datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC datetime with timezone info.

    Prefer this over ``datetime.utcnow()`` (which returns naive datetimes).
    """
    return datetime.now(tz=timezone.utc)


def epoch_millis(moment: datetime) -> int:
    """Return ``moment`` as integer milliseconds since the Unix epoch.

    Naive datetimes are interpreted as UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp() * 1000)


def quarter_of(check_date: date) -> int:
    """Return the calendar quarter (1–4) containing ``check_date``."""
    return (check_date.month - 1) // 3 + 1


def is_q4(check_date: date) -> bool:
    """True for October, November and December."""
    return quarter_of(check_date) == 4


def days_between(earlier: datetime, later: datetime) -> int:
    """Return whole days from ``earlier`` to ``later`` (floored, may be negative).

    Naive datetimes are interpreted as UTC so mixed inputs compare cleanly.
    """
    if earlier.tzinfo is None:
        earlier = earlier.replace(tzinfo=timezone.utc)
    if later.tzinfo is None:
        later = later.replace(tzinfo=timezone.utc)
    return (later - earlier).days
