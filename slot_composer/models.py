from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

SlotField = Literal["start_time", "end_time"]


class Mode(str, Enum):
    SHARED = "shared"
    INDIVIDUAL = "individual"


class Phase(str, Enum):
    IDLE = "idle"
    SINGLE_SLOT = "single_slot"
    MULTI_DATE = "multi_date"
    WEEKDAY = "weekday"


class TimeSlot(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_time: str  # HH:MM format, local time
    end_time: str  # HH:MM format, local time


class Template(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    presets: List[TimeSlot] = Field(default_factory=list)
    is_weekday_template: bool = False


class ExistingOption(BaseModel):
    """An option the poll already has. Read-only input from the caller."""

    text: str = ""
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None


class TimeSlotOption(BaseModel):
    day: date
    start_time: str
    end_time: str


class TextOption(BaseModel):
    text: str


class CommitResult(BaseModel):
    time_slots: List[TimeSlotOption] = Field(default_factory=list)
    text_options: List[TextOption] = Field(default_factory=list)
    skipped: int = 0  # duplicates
    rejected: int = 0  # refused by the slot validator

    @property
    def added(self) -> int:
        return len(self.time_slots) + len(self.text_options)


class SessionState(BaseModel):
    phase: Phase = Phase.IDLE
    mode: Mode = Mode.SHARED
    template: Optional[Template] = None
    dates: List[date] = Field(default_factory=list)  # ascending, one entry per calendar day
    shared_slots: List[TimeSlot] = Field(default_factory=list)
    per_date_slots: Dict[date, List[TimeSlot]] = Field(default_factory=dict)
    weekdays: List[str] = Field(default_factory=list)  # selection order, not canonical order
    single_date: Optional[date] = None
    single_slot: Optional[TimeSlot] = None


class Action(BaseModel):
    """One scripted user action, as read by the replay driver."""

    action: str
    day: Optional[date] = Field(default=None, alias="date")
    template: Optional[str] = None
    index: Optional[int] = None
    field: Optional[SlotField] = None
    value: Optional[str] = None
    name: Optional[str] = None


class ReplayScript(BaseModel):
    existing_options: List[ExistingOption] = Field(default_factory=list)
    actions: List[Action] = Field(default_factory=list)
