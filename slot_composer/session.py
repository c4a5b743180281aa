"""Picker session: turns date, template and slot edits into poll options.

All picker state lives in one ``SessionState`` record. Every user action is a
method on ``PickerSession``; actions that do not apply in the current phase or
mode are refused (they log the reason and return False) instead of raising.
``commit()`` calls the caller's emitters once per generated option, returns
the same options as a ``CommitResult`` and puts the session back to idle.
"""

import logging
from datetime import date
from typing import Callable, Iterable, List, Optional, Set

from slot_composer import config, dates, slots, weekdays
from slot_composer.dates import SlotKey
from slot_composer.models import (
    CommitResult,
    ExistingOption,
    Mode,
    Phase,
    SessionState,
    SlotField,
    Template,
    TextOption,
    TimeSlot,
    TimeSlotOption,
)

logger = logging.getLogger(__name__)

EmitTimeSlot = Callable[[date, str, str], None]
EmitTextOption = Callable[[str], None]


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


class PickerSession:
    def __init__(
        self,
        emit_time_slot: Optional[EmitTimeSlot] = None,
        emit_text_option: Optional[EmitTextOption] = None,
        existing_options: Optional[Iterable[ExistingOption]] = None,
        slot_validator: Optional[slots.SlotValidator] = None,
        locale: Optional[str] = None,
    ):
        self.emit_time_slot = emit_time_slot
        self.emit_text_option = emit_text_option
        self.slot_validator = slot_validator or slots.default_validator()
        self.locale = locale or config.LOCALE
        self.existing_options: List[ExistingOption] = list(existing_options or [])
        self._existing_keys = dates.existing_slot_keys(self.existing_options)
        self.state = SessionState()
        # Emitted in this session but not yet reflected in existing_options
        self._pending: Set[SlotKey] = set()

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def mode(self) -> Mode:
        return self.state.mode

    def _require(self, phase: Phase, action: str, mode: Optional[Mode] = None) -> bool:
        if self.state.phase != phase:
            logger.warning(f"Cannot {action} in phase '{self.state.phase.value}'")
            return False
        if mode is not None and self.state.mode != mode:
            logger.warning(f"Cannot {action} in {self.state.mode.value} mode")
            return False
        return True

    def _reset(self):
        self.state = SessionState()

    # --- Existing options ---

    def update_existing_options(self, existing_options: Iterable[ExistingOption]):
        """Replaces the caller's option list and forgets pending slots it now contains."""
        self.existing_options = list(existing_options)
        self._existing_keys = dates.existing_slot_keys(self.existing_options)
        self._pending -= self._existing_keys

    def dates_with_options(self) -> List[date]:
        return dates.dates_with_options(self.existing_options)

    def is_duplicate(self, day: date, start_time: str, end_time: str) -> bool:
        key = (dates.day_key(day), start_time, end_time)
        return key in self._pending or key in self._existing_keys

    # --- Single-date flow ---

    def select_date(self, value: date) -> bool:
        """Opens the one-slot dialog for a calendar day."""
        if self.state.phase not in (Phase.IDLE, Phase.SINGLE_SLOT):
            logger.warning(f"Cannot open a single date while in phase '{self.state.phase.value}'")
            return False
        self._reset()
        self.state.phase = Phase.SINGLE_SLOT
        self.state.single_date = dates.day_key(value)
        self.state.single_slot = TimeSlot(start_time=config.SINGLE_SLOT_START, end_time=config.SINGLE_SLOT_END)
        return True

    def set_single_time(self, field: SlotField, value: str) -> bool:
        if not self._require(Phase.SINGLE_SLOT, "edit the single slot"):
            return False
        before = self.state.single_slot
        self.state.single_slot = slots.update_slot([before], 0, field, value)[0]
        return self.state.single_slot is not before

    # --- Templates ---

    def select_template(self, template: Template) -> bool:
        """Starts a fresh template flow; whatever was being edited is discarded."""
        if template.is_weekday_template and self.emit_text_option is None:
            logger.warning("Weekday template needs a text option emitter, ignoring selection")
            return False
        self._reset()
        self.state.template = template
        if template.is_weekday_template:
            self.state.phase = Phase.WEEKDAY
        else:
            self.state.phase = Phase.MULTI_DATE
            self.state.shared_slots = list(template.presets)
        logger.debug(f"Selected template '{template.id}'")
        return True

    # --- Date selection ---

    def toggle_date(self, value: date) -> bool:
        if not self._require(Phase.MULTI_DATE, "toggle a date"):
            return False
        key = dates.day_key(value)
        self.state.dates = dates.toggle_date(self.state.dates, key)
        if self.state.mode == Mode.INDIVIDUAL:
            if key in self.state.dates:
                self.state.per_date_slots[key] = list(self.state.shared_slots)
            else:
                self.state.per_date_slots.pop(key, None)
        return True

    def remove_date(self, value: date) -> bool:
        if not self._require(Phase.MULTI_DATE, "remove a date"):
            return False
        key = dates.day_key(value)
        self.state.dates = dates.remove_date(self.state.dates, key)
        self.state.per_date_slots.pop(key, None)
        return True

    # --- Shared slot list ---

    def add_slot(self) -> bool:
        if not self._require(Phase.MULTI_DATE, "add a shared slot", Mode.SHARED):
            return False
        self.state.shared_slots = slots.add_slot(self.state.shared_slots)
        return True

    def update_slot(self, index: int, field: SlotField, value: str) -> bool:
        if not self._require(Phase.MULTI_DATE, "update a shared slot", Mode.SHARED):
            return False
        before = self.state.shared_slots
        self.state.shared_slots = slots.update_slot(before, index, field, value)
        return self.state.shared_slots is not before

    def remove_slot(self, index: int) -> bool:
        if not self._require(Phase.MULTI_DATE, "remove a shared slot", Mode.SHARED):
            return False
        before = self.state.shared_slots
        self.state.shared_slots = slots.remove_slot(before, index)
        return self.state.shared_slots is not before

    # --- Per-date slots ---

    def _require_day(self, day: date, action: str) -> Optional[date]:
        if not self._require(Phase.MULTI_DATE, action, Mode.INDIVIDUAL):
            return None
        key = dates.day_key(day)
        if key not in self.state.dates:
            logger.warning(f"Cannot {action}: {key.isoformat()} is not selected")
            return None
        return key

    def add_date_slot(self, day: date) -> bool:
        key = self._require_day(day, "add a slot")
        if key is None:
            return False
        self.state.per_date_slots[key] = slots.add_slot(self.state.per_date_slots.get(key, []))
        return True

    def update_date_slot(self, day: date, index: int, field: SlotField, value: str) -> bool:
        key = self._require_day(day, "update a slot")
        if key is None:
            return False
        before = self.state.per_date_slots.get(key, [])
        self.state.per_date_slots[key] = slots.update_slot(before, index, field, value)
        return self.state.per_date_slots[key] is not before

    def remove_date_slot(self, day: date, index: int) -> bool:
        key = self._require_day(day, "remove a slot")
        if key is None:
            return False
        before = self.state.per_date_slots.get(key, [])
        self.state.per_date_slots[key] = slots.remove_slot(before, index)
        return self.state.per_date_slots[key] is not before

    # --- Mode conversion ---

    def switch_to_individual(self) -> bool:
        if not self._require(Phase.MULTI_DATE, "switch to individual mode", Mode.SHARED):
            return False
        self.state.per_date_slots = slots.to_per_date(self.state.shared_slots, self.state.dates)
        self.state.mode = Mode.INDIVIDUAL
        return True

    def switch_to_shared(self) -> bool:
        """Only the earliest date's slots survive the switch back."""
        if not self._require(Phase.MULTI_DATE, "switch to shared mode", Mode.INDIVIDUAL):
            return False
        self.state.shared_slots = slots.to_shared(self.state.per_date_slots, self.state.dates)
        self.state.per_date_slots = {}
        self.state.mode = Mode.SHARED
        return True

    # --- Weekdays ---

    def toggle_weekday(self, name: str) -> bool:
        if not self._require(Phase.WEEKDAY, "toggle a weekday"):
            return False
        self.state.weekdays = weekdays.toggle_weekday(self.state.weekdays, name)
        return True

    # --- Counting ---

    def slots_for(self, day: date) -> List[TimeSlot]:
        if self.state.mode == Mode.INDIVIDUAL:
            return self.state.per_date_slots.get(day, [])
        return self.state.shared_slots

    def total_count(self) -> int:
        """Number of options a commit would generate, before duplicate filtering."""
        phase = self.state.phase
        if phase == Phase.SINGLE_SLOT:
            return 1
        if phase == Phase.WEEKDAY:
            return len(self.state.weekdays)
        if phase != Phase.MULTI_DATE:
            return 0
        if self.state.mode == Mode.SHARED:
            return len(self.state.dates) * len(self.state.shared_slots)
        return sum(len(self.state.per_date_slots.get(d, [])) for d in self.state.dates)

    def can_commit(self) -> bool:
        phase = self.state.phase
        if phase == Phase.SINGLE_SLOT:
            return True
        if phase == Phase.WEEKDAY:
            return bool(self.state.weekdays) and self.emit_text_option is not None
        if phase == Phase.MULTI_DATE:
            return bool(self.state.dates) and self.total_count() > 0
        return False

    def preview_text(self) -> str:
        if not self.can_commit():
            return ""
        total = self.total_count()
        if self.state.phase != Phase.MULTI_DATE:
            return _plural(total, "option")
        n_dates = len(self.state.dates)
        if self.state.mode == Mode.SHARED:
            n_slots = len(self.state.shared_slots)
            return f"{_plural(n_dates, 'date')} x {_plural(n_slots, 'slot')} = {_plural(total, 'option')}"
        return f"{_plural(total, 'option')} across {_plural(n_dates, 'date')}"

    # --- Commit / cancel ---

    def cancel(self):
        """Discards the open flow without emitting anything."""
        if self.state.phase != Phase.IDLE:
            logger.debug(f"Cancelled {self.state.phase.value} flow")
        self._reset()

    def commit(self) -> Optional[CommitResult]:
        """Emits the options of the open flow and resets the session.

        Returns None, leaving all state untouched, when there is nothing to commit.
        """
        if not self.can_commit():
            logger.warning(f"Nothing to commit in phase '{self.state.phase.value}'")
            return None

        if self.state.phase == Phase.SINGLE_SLOT:
            result = self._commit_single()
        elif self.state.phase == Phase.WEEKDAY:
            result = self._commit_weekdays()
        else:
            result = self._commit_multi_date()

        if result is None:
            return None

        for option in result.time_slots:
            self._pending.add((option.day, option.start_time, option.end_time))
            if self.emit_time_slot is not None:
                self.emit_time_slot(option.day, option.start_time, option.end_time)
        for text_option in result.text_options:
            self.emit_text_option(text_option.text)

        logger.info(
            f"Committed {result.added} options "
            f"({result.skipped} duplicates skipped, {result.rejected} rejected)"
        )
        self._reset()
        return result

    def _commit_single(self) -> Optional[CommitResult]:
        day, slot = self.state.single_date, self.state.single_slot
        if self.is_duplicate(day, slot.start_time, slot.end_time):
            logger.warning(f"Slot {slot.start_time}-{slot.end_time} on {day.isoformat()} already exists")
            return None
        if not self.slot_validator(day, slot):
            logger.warning(f"Slot {slot.start_time}-{slot.end_time} on {day.isoformat()} rejected by validator")
            return None
        return CommitResult(time_slots=[TimeSlotOption(day=day, start_time=slot.start_time, end_time=slot.end_time)])

    def _commit_multi_date(self) -> CommitResult:
        result = CommitResult()
        for day in self.state.dates:
            for slot in self.slots_for(day):
                key = (day, slot.start_time, slot.end_time)
                if self.is_duplicate(*key):
                    result.skipped += 1
                    continue
                if not self.slot_validator(day, slot):
                    result.rejected += 1
                    continue
                result.time_slots.append(TimeSlotOption(day=day, start_time=slot.start_time, end_time=slot.end_time))
        return result

    def _commit_weekdays(self) -> CommitResult:
        result = CommitResult()
        existing_texts = {opt.text.lower() for opt in self.existing_options}
        for name in weekdays.canonical_order(self.state.weekdays, self.locale):
            if name.lower() in existing_texts:
                result.skipped += 1
                continue
            existing_texts.add(name.lower())
            result.text_options.append(TextOption(text=name))
        return result
