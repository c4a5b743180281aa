import json
import logging
import sys
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, List, Optional

from slot_composer import dates, templates
from slot_composer.models import Action, CommitResult, Phase, ReplayScript, TextOption, TimeSlotOption
from slot_composer.session import PickerSession

logger = logging.getLogger(__name__)


@dataclass
class ReplayOutcome:
    time_slots: List[TimeSlotOption] = field(default_factory=list)
    text_options: List[TextOption] = field(default_factory=list)
    commits: List[CommitResult] = field(default_factory=list)
    refused: int = 0


def load_script(path: str) -> ReplayScript:
    """Reads an action script from a JSON file, or from stdin when path is '-'."""
    if path == "-":
        data = json.load(sys.stdin)
    else:
        with open(path, "r") as f:
            data = json.load(f)
    # A bare list is shorthand for a script without existing options
    if isinstance(data, list):
        data = {"actions": data}
    return ReplayScript.model_validate(data)


def _needs(action: Action, *names: str) -> bool:
    missing = [n for n in names if getattr(action, n) is None]
    if missing:
        logger.warning(f"Action '{action.action}' is missing {', '.join(missing)}, skipping")
        return False
    return True


def _select_template(session: PickerSession, action: Action) -> bool:
    try:
        template = templates.get_template(action.template)
    except KeyError:
        logger.warning(f"Unknown template '{action.template}', skipping")
        return False
    return session.select_template(template)


def _pick_date(handler: Callable[[date], bool], action: Action, today: date) -> bool:
    if not dates.is_selectable(action.day, today):
        logger.warning(f"{action.day.isoformat()} is in the past, skipping")
        return False
    return handler(action.day)


def apply_action(session: PickerSession, action: Action, today: date, outcome: ReplayOutcome) -> bool:
    """Applies one scripted action to the session. Returns False when it was refused."""
    required: Dict[str, tuple] = {
        "select_date": ("day",),
        "set_single_time": ("field", "value"),
        "select_template": ("template",),
        "toggle_date": ("day",),
        "remove_date": ("day",),
        "update_slot": ("index", "field", "value"),
        "remove_slot": ("index",),
        "add_date_slot": ("day",),
        "update_date_slot": ("day", "index", "field", "value"),
        "remove_date_slot": ("day", "index"),
        "toggle_weekday": ("name",),
    }
    name = action.action
    if not _needs(action, *required.get(name, ())):
        return False

    if name == "select_date":
        return _pick_date(session.select_date, action, today)
    if name == "set_single_time":
        return session.set_single_time(action.field, action.value)
    if name == "select_template":
        return _select_template(session, action)
    if name == "toggle_date":
        return _pick_date(session.toggle_date, action, today)
    if name == "remove_date":
        return session.remove_date(action.day)
    if name == "add_slot":
        return session.add_slot()
    if name == "update_slot":
        return session.update_slot(action.index, action.field, action.value)
    if name == "remove_slot":
        return session.remove_slot(action.index)
    if name == "add_date_slot":
        return session.add_date_slot(action.day)
    if name == "update_date_slot":
        return session.update_date_slot(action.day, action.index, action.field, action.value)
    if name == "remove_date_slot":
        return session.remove_date_slot(action.day, action.index)
    if name == "switch_to_individual":
        return session.switch_to_individual()
    if name == "switch_to_shared":
        return session.switch_to_shared()
    if name == "toggle_weekday":
        return session.toggle_weekday(action.name)
    if name == "cancel":
        session.cancel()
        return True
    if name == "commit":
        result = session.commit()
        if result is None:
            return False
        outcome.commits.append(result)
        return True

    logger.warning(f"Unknown action '{name}', skipping")
    return False


def replay(script: ReplayScript, today: Optional[date] = None) -> ReplayOutcome:
    """Runs a scripted sequence of user actions against a fresh picker session."""
    today = today or date.today()
    outcome = ReplayOutcome()

    def emit_time_slot(day: date, start_time: str, end_time: str):
        outcome.time_slots.append(TimeSlotOption(day=day, start_time=start_time, end_time=end_time))

    def emit_text_option(text: str):
        outcome.text_options.append(TextOption(text=text))

    session = PickerSession(
        emit_time_slot=emit_time_slot,
        emit_text_option=emit_text_option,
        existing_options=script.existing_options,
    )

    for action in script.actions:
        if not apply_action(session, action, today, outcome):
            outcome.refused += 1

    if session.phase != Phase.IDLE:
        logger.info(f"Script ended with an open {session.phase.value} flow, discarding it")
        session.cancel()

    return outcome


def print_replay_report(outcome: ReplayOutcome):
    """Prints the emitted options to stdout."""
    print("\n--- Emitted Options ---")

    for option in outcome.time_slots:
        print(f"[SLOT] {option.day.isoformat()} {option.start_time}-{option.end_time}")
    for option in outcome.text_options:
        print(f"[TEXT] {option.text}")

    skipped = sum(c.skipped for c in outcome.commits)
    rejected = sum(c.rejected for c in outcome.commits)
    total = len(outcome.time_slots) + len(outcome.text_options)
    print(
        f"Summary: {total} options from {len(outcome.commits)} commits "
        f"({skipped} duplicates skipped, {rejected} rejected, {outcome.refused} actions refused)."
    )


def dump_outcome(outcome: ReplayOutcome) -> str:
    data = {
        "time_slots": [o.model_dump(mode="json") for o in outcome.time_slots],
        "text_options": [o.model_dump(mode="json") for o in outcome.text_options],
        "refused": outcome.refused,
    }
    return json.dumps(data, indent=2)


def run(script_path: str, today: Optional[date] = None, as_json: bool = False) -> ReplayOutcome:
    """Loads a script, replays it and reports what was emitted."""
    script = load_script(script_path)
    logger.info(f"Replaying {len(script.actions)} actions against {len(script.existing_options)} existing options")

    outcome = replay(script, today)
    if as_json:
        print(dump_outcome(outcome))
    else:
        print_replay_report(outcome)
    return outcome
