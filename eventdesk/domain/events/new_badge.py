"""
"New" badge rule for event cards.

An active event is badged while its newest market (or the event itself,
when no market carries a timestamp) is younger than a window that
depends on how often the event's series recurs.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from eventdesk.domain.events.constants import STATUS_ACTIVE

NEW_BADGE_WINDOW_DEFAULT = timedelta(hours=24)
NEW_BADGE_WINDOW_DAILY = timedelta(hours=2)
NEW_BADGE_WINDOW_SUB_HOURLY = timedelta(minutes=10)

_NAMED_RECURRENCES = {
    "hourly": timedelta(hours=1),
    "daily": timedelta(days=1),
    "weekly": timedelta(days=7),
    "monthly": timedelta(days=30),
}

_RECURRENCE_PATTERN = re.compile(r"(\d+)\s*([a-z]+)\b")

_MINUTE_UNITS = frozenset({"m", "min", "mins", "minute", "minutes"})
_HOUR_UNITS = frozenset({"h", "hr", "hrs", "hour", "hours"})
_DAY_UNITS = frozenset({"d", "day", "days"})


def parse_recurrence(series_recurrence: Optional[str]) -> Optional[timedelta]:
    """Parse a recurrence descriptor such as ``daily`` or ``30m``.

    Returns None for empty or unrecognised descriptors.
    """
    normalized = (series_recurrence or "").strip().lower()
    if not normalized:
        return None

    if normalized in _NAMED_RECURRENCES:
        return _NAMED_RECURRENCES[normalized]

    match = _RECURRENCE_PATTERN.search(normalized)
    if not match:
        return None

    amount = int(match.group(1))
    if amount <= 0:
        return None

    unit = match.group(2)
    if unit in _MINUTE_UNITS:
        return timedelta(minutes=amount)
    if unit in _HOUR_UNITS:
        return timedelta(hours=amount)
    if unit in _DAY_UNITS:
        return timedelta(days=amount)
    return None


def new_badge_window(series_recurrence: Optional[str]) -> timedelta:
    recurrence = parse_recurrence(series_recurrence)

    if recurrence is not None and recurrence < timedelta(hours=1):
        return NEW_BADGE_WINDOW_SUB_HOURLY

    if recurrence == timedelta(days=1):
        return NEW_BADGE_WINDOW_DAILY

    return NEW_BADGE_WINDOW_DEFAULT


def _reference_created_at(
    event_created_at: Optional[datetime],
    market_created_at: Iterable[Optional[datetime]],
) -> Optional[datetime]:
    timestamps = [value for value in market_created_at if value is not None]
    if timestamps:
        return max(timestamps)
    return event_created_at


def should_show_new_badge(
    status: str,
    series_recurrence: Optional[str],
    event_created_at: Optional[datetime],
    market_created_at: Iterable[Optional[datetime]],
    now: Optional[datetime] = None,
) -> bool:
    """Return True when an event card should carry the "new" badge.

    Args:
        status: Event status; only active events are badged.
        series_recurrence: Recurrence descriptor of the event's series.
        event_created_at: Event creation time (timezone-aware).
        market_created_at: Creation times of the event's markets.
        now: Reference time, defaults to the current UTC time.
    """
    if status != STATUS_ACTIVE:
        return False

    reference = _reference_created_at(event_created_at, market_created_at)
    if reference is None:
        return False

    now = now or datetime.now(timezone.utc)
    age = max(timedelta(0), now - reference)
    return age <= new_badge_window(series_recurrence)
