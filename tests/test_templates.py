import pytest

from slot_composer import templates
from slot_composer.models import TimeSlot


def test_catalog_ids():
    assert [t.id for t in templates.DEFAULT_TEMPLATES] == [
        "multiple-times",
        "weekday",
        "morning-afternoon",
        "short-slots",
    ]


def test_weekday_template_has_no_presets():
    weekday = templates.get_template("weekday")
    assert weekday.is_weekday_template is True
    assert weekday.presets == []


def test_slot_templates():
    morning = templates.get_template("morning-afternoon")
    assert morning.is_weekday_template is False
    assert morning.presets == [
        TimeSlot(start_time="09:00", end_time="12:00"),
        TimeSlot(start_time="14:00", end_time="17:00"),
    ]
    assert len(templates.get_template("short-slots").presets) == 4
    assert len(templates.get_template("multiple-times").presets) == 3


def test_get_template_unknown_id():
    with pytest.raises(KeyError):
        templates.get_template("every-hour")
