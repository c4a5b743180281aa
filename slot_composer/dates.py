"""Calendar-day selection.

Dates are keyed by their calendar day (a ``datetime.date``); any time-of-day
component of an incoming ``datetime`` is discarded. Selections are kept as
ascending lists so iteration order never depends on insertion order.
"""

import logging
from datetime import date, datetime
from typing import Iterable, List, Optional, Set, Tuple

from slot_composer.models import ExistingOption

logger = logging.getLogger(__name__)

SlotKey = Tuple[date, str, str]


def day_key(value: date) -> date:
    """Reduces a date or datetime to its calendar day."""
    if isinstance(value, datetime):
        return value.date()
    return value


def toggle_date(dates: List[date], value: date) -> List[date]:
    """Removes the calendar day if present, otherwise inserts it. Returns a new ascending list."""
    key = day_key(value)
    if key in dates:
        logger.debug(f"Deselected {key.isoformat()}")
        return [d for d in dates if d != key]
    logger.debug(f"Selected {key.isoformat()}")
    return sorted([*dates, key])


def remove_date(dates: List[date], value: date) -> List[date]:
    key = day_key(value)
    return [d for d in dates if d != key]


def is_selectable(value: date, today: Optional[date] = None) -> bool:
    """Days before today (local midnight) cannot be picked."""
    today = today or date.today()
    return day_key(value) >= today


def local_time(value: datetime) -> datetime:
    """Converts an aware datetime to local wall-clock time. Naive values are already local."""
    if value.tzinfo is None:
        return value
    return value.astimezone()


def dates_with_options(existing_options: Iterable[ExistingOption]) -> List[date]:
    """Calendar days that already have a time-based option, for highlighting."""
    days: Set[date] = {local_time(opt.start_time).date() for opt in existing_options if opt.start_time}
    return sorted(days)


def existing_slot_keys(existing_options: Iterable[ExistingOption]) -> Set[SlotKey]:
    """Builds (day, HH:MM, HH:MM) keys for options that carry both a start and an end."""
    keys: Set[SlotKey] = set()
    for opt in existing_options:
        if opt.start_time and opt.end_time:
            start, end = local_time(opt.start_time), local_time(opt.end_time)
            keys.add((start.date(), start.strftime("%H:%M"), end.strftime("%H:%M")))
    return keys
