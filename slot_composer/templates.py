"""Quick-start templates offered next to the calendar."""

import logging
from typing import Dict, List

from slot_composer.models import Template, TimeSlot

logger = logging.getLogger(__name__)


def _slots(*pairs) -> List[TimeSlot]:
    return [TimeSlot(start_time=start, end_time=end) for start, end in pairs]


DEFAULT_TEMPLATES: List[Template] = [
    Template(
        id="multiple-times",
        name="Multiple times per day",
        description="Three two-hour blocks across the day",
        presets=_slots(("09:00", "11:00"), ("12:00", "14:00"), ("15:00", "17:00")),
    ),
    Template(
        id="weekday",
        name="Weekdays",
        description="Vote on days of the week instead of dates",
        is_weekday_template=True,
    ),
    Template(
        id="morning-afternoon",
        name="Morning & afternoon",
        description="One morning and one afternoon block",
        presets=_slots(("09:00", "12:00"), ("14:00", "17:00")),
    ),
    Template(
        id="short-slots",
        name="Short slots",
        description="Four consecutive 30-minute slots",
        presets=_slots(("09:00", "09:30"), ("09:30", "10:00"), ("10:00", "10:30"), ("10:30", "11:00")),
    ),
]

_TEMPLATES_BY_ID: Dict[str, Template] = {t.id: t for t in DEFAULT_TEMPLATES}


def get_template(template_id: str) -> Template:
    """Looks up a catalog template by id. Raises KeyError for unknown ids."""
    return _TEMPLATES_BY_ID[template_id]
