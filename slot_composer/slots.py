import logging
from datetime import date, datetime
from typing import Callable, Dict, List

from slot_composer import config
from slot_composer.models import SlotField, TimeSlot

logger = logging.getLogger(__name__)

SlotValidator = Callable[[date, TimeSlot], bool]
PerDateSlots = Dict[date, List[TimeSlot]]


def is_valid_time(value: str) -> bool:
    """Checks for a HH:MM 24-hour wall-clock value."""
    try:
        datetime.strptime(value, config.TIME_FORMAT)
    except (TypeError, ValueError):
        return False
    return len(value) == 5


def next_slot(slots: List[TimeSlot]) -> TimeSlot:
    """Builds the slot that continues after the last one.

    The new slot starts where the previous one ended (or at the default start
    on an empty list) and lasts one hour. The end hour is clamped to 23 with
    the minutes left unchanged, so "23:00" continues as "23:00"-"23:00".
    """
    start_time = slots[-1].end_time if slots else config.DEFAULT_SLOT_START
    hours, minutes = (int(part) for part in start_time.split(":"))
    end_hours = min(hours + 1, config.MAX_END_HOUR)
    return TimeSlot(start_time=start_time, end_time=f"{end_hours:02d}:{minutes:02d}")


def add_slot(slots: List[TimeSlot]) -> List[TimeSlot]:
    return [*slots, next_slot(slots)]


def update_slot(slots: List[TimeSlot], index: int, field: SlotField, value: str) -> List[TimeSlot]:
    """Replaces one time of the slot at ``index``.

    Bad indexes, unknown fields and values that are not ``HH:MM`` leave the list
    unchanged. The format check is stricter than the web picker, which took any
    value its time dropdown produced.
    """
    if not 0 <= index < len(slots):
        logger.warning(f"No slot at index {index}, ignoring update")
        return slots
    if field not in ("start_time", "end_time"):
        logger.warning(f"Unknown slot field '{field}', ignoring update")
        return slots
    if not is_valid_time(value):
        logger.warning(f"Invalid time format '{value}' for {field}, ignoring")
        return slots
    return [slot.model_copy(update={field: value}) if i == index else slot for i, slot in enumerate(slots)]


def remove_slot(slots: List[TimeSlot], index: int) -> List[TimeSlot]:
    """Removes the slot at ``index`` unless it is the only one left."""
    if len(slots) <= 1:
        logger.debug("Refusing to remove the last remaining slot")
        return slots
    if not 0 <= index < len(slots):
        logger.warning(f"No slot at index {index}, ignoring removal")
        return slots
    return [slot for i, slot in enumerate(slots) if i != index]


# --- Mode conversion ---


def to_per_date(shared_slots: List[TimeSlot], dates: List[date]) -> PerDateSlots:
    """Gives every selected date its own copy of the shared slots."""
    return {d: list(shared_slots) for d in dates}


def to_shared(per_date_slots: PerDateSlots, dates: List[date]) -> List[TimeSlot]:
    """Keeps only the slots of the earliest selected date; the others are dropped."""
    if not dates:
        return []
    return list(per_date_slots.get(min(dates), []))


# --- Validators ---


def end_after_start(_day: date, slot: TimeSlot) -> bool:
    return slot.end_time > slot.start_time


def accept_all(_day: date, _slot: TimeSlot) -> bool:
    return True


def default_validator() -> SlotValidator:
    return end_after_start if config.REJECT_INVERTED_SLOTS else accept_all
