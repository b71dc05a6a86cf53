from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from clinic_scheduling.services.timezone import WEEKDAY_NAMES, parse_instant


class TimeBlock(BaseModel):
    """Local wall-clock working window ("HH:MM"), no date or timezone attached."""

    start: str
    end: str


class ScheduleGrid(BaseModel):
    """Weekly working hours: one field per weekday, an empty list means closed."""

    model_config = ConfigDict(extra="ignore")

    monday: list[TimeBlock] = Field(default_factory=list)
    tuesday: list[TimeBlock] = Field(default_factory=list)
    wednesday: list[TimeBlock] = Field(default_factory=list)
    thursday: list[TimeBlock] = Field(default_factory=list)
    friday: list[TimeBlock] = Field(default_factory=list)
    saturday: list[TimeBlock] = Field(default_factory=list)
    sunday: list[TimeBlock] = Field(default_factory=list)

    @field_validator(*WEEKDAY_NAMES, mode="before")
    @classmethod
    def _none_is_closed(cls, v: object) -> object:
        return [] if v is None else v

    def blocks_for(self, weekday: str) -> list[TimeBlock]:
        return getattr(self, weekday)


class BusyInterval(BaseModel):
    """Time that must not be offered: a booking or an external calendar block."""

    start: datetime
    end: datetime

    @field_validator("start", "end", mode="before")
    @classmethod
    def _to_utc(cls, v: object) -> datetime:
        return parse_instant(v)


class ExistingAppointment(BaseModel):
    starts_at: datetime
    ends_at: datetime

    @field_validator("starts_at", "ends_at", mode="before")
    @classmethod
    def _to_utc(cls, v: object) -> datetime:
        return parse_instant(v)

    def as_busy(self) -> BusyInterval:
        return BusyInterval(start=self.starts_at, end=self.ends_at)


class AvailableSlot(BaseModel):
    start: datetime
    end: datetime

    @field_validator("start", "end", mode="before")
    @classmethod
    def _to_utc(cls, v: object) -> datetime:
        return parse_instant(v)
