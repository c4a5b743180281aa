from datetime import date
from unittest.mock import patch

from slot_composer import slots
from slot_composer.models import TimeSlot


def _slot(start, end):
    return TimeSlot(start_time=start, end_time=end)


def test_next_slot_on_empty_list():
    assert slots.next_slot([]) == _slot("09:00", "10:00")


def test_next_slot_continues_from_last_end():
    assert slots.next_slot([_slot("21:00", "22:30")]) == _slot("22:30", "23:30")


def test_next_slot_clamps_hour_and_keeps_minutes():
    assert slots.next_slot([_slot("22:00", "23:00")]) == _slot("23:00", "23:00")
    assert slots.next_slot([_slot("22:00", "23:45")]) == _slot("23:45", "23:45")


def test_next_slot_only_looks_at_last_slot():
    existing = [_slot("15:00", "17:00"), _slot("08:00", "08:15")]
    assert slots.next_slot(existing) == _slot("08:15", "09:15")


def test_add_slot_appends_without_mutating():
    original = [_slot("09:00", "11:00")]
    result = slots.add_slot(original)
    assert result == [_slot("09:00", "11:00"), _slot("11:00", "12:00")]
    assert original == [_slot("09:00", "11:00")]


def test_update_slot():
    original = [_slot("09:00", "11:00"), _slot("12:00", "14:00")]
    result = slots.update_slot(original, 1, "end_time", "15:30")
    assert result == [_slot("09:00", "11:00"), _slot("12:00", "15:30")]
    result = slots.update_slot(result, 0, "start_time", "08:00")
    assert result[0] == _slot("08:00", "11:00")


def test_update_slot_ignores_bad_input():
    original = [_slot("09:00", "11:00")]
    assert slots.update_slot(original, 3, "end_time", "12:00") is original
    assert slots.update_slot(original, -1, "end_time", "12:00") is original
    assert slots.update_slot(original, 0, "end_time", "25:00") is original
    assert slots.update_slot(original, 0, "end_time", "9:00") is original
    assert slots.update_slot(original, 0, "duration", "01:00") is original


def test_update_slot_accepts_inverted_times():
    """Nothing enforces start before end while editing."""
    result = slots.update_slot([_slot("09:00", "11:00")], 0, "end_time", "08:00")
    assert result == [_slot("09:00", "08:00")]


def test_remove_slot():
    original = [_slot("09:00", "11:00"), _slot("12:00", "14:00"), _slot("15:00", "17:00")]
    assert slots.remove_slot(original, 1) == [_slot("09:00", "11:00"), _slot("15:00", "17:00")]


def test_remove_slot_keeps_last_slot():
    original = [_slot("09:00", "11:00")]
    assert slots.remove_slot(original, 0) is original
    assert slots.remove_slot([], 0) == []


def test_remove_slot_never_goes_below_one():
    current = [_slot("09:00", "10:00"), _slot("10:00", "11:00"), _slot("11:00", "12:00")]
    for _ in range(5):
        current = slots.remove_slot(current, 0)
    assert current == [_slot("11:00", "12:00")]


def test_to_per_date_copies_for_every_date():
    shared = [_slot("09:00", "12:00"), _slot("14:00", "17:00")]
    days = [date(2026, 11, 2), date(2026, 11, 3)]
    per_date = slots.to_per_date(shared, days)
    assert per_date == {days[0]: shared, days[1]: shared}
    # Lists are independent copies
    per_date[days[0]].append(_slot("18:00", "19:00"))
    assert len(per_date[days[1]]) == 2
    assert len(shared) == 2


def test_to_shared_keeps_earliest_date():
    days = [date(2026, 11, 2), date(2026, 11, 3)]
    per_date = {
        days[1]: [_slot("14:00", "15:00")],
        days[0]: [_slot("08:00", "09:00"), _slot("10:00", "11:00")],
    }
    assert slots.to_shared(per_date, days) == [_slot("08:00", "09:00"), _slot("10:00", "11:00")]
    assert slots.to_shared(per_date, []) == []


def test_is_valid_time():
    assert slots.is_valid_time("00:00") is True
    assert slots.is_valid_time("23:59") is True
    assert slots.is_valid_time("24:00") is False
    assert slots.is_valid_time("7:05") is False
    assert slots.is_valid_time("noon") is False
    assert slots.is_valid_time(None) is False


def test_end_after_start():
    day = date(2026, 11, 2)
    assert slots.end_after_start(day, _slot("09:00", "10:00")) is True
    assert slots.end_after_start(day, _slot("23:00", "23:00")) is False
    assert slots.end_after_start(day, _slot("10:00", "09:00")) is False


@patch("slot_composer.slots.config.REJECT_INVERTED_SLOTS", True)
def test_default_validator_rejects_inverted_when_configured():
    assert slots.default_validator() is slots.end_after_start


@patch("slot_composer.slots.config.REJECT_INVERTED_SLOTS", False)
def test_default_validator_accepts_everything_by_default():
    validator = slots.default_validator()
    assert validator(date(2026, 11, 2), _slot("10:00", "09:00")) is True
