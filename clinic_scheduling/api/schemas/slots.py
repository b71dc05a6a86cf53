import re
from datetime import date, datetime
from typing import Annotated

import pytz
from babel import UnknownLocaleError
from pydantic import AfterValidator, BaseModel, Field, field_validator, model_validator

from clinic_scheduling.core.config import settings
from clinic_scheduling.models.schedule import (
    AvailableSlot,
    BusyInterval,
    ExistingAppointment,
    ScheduleGrid,
)
from clinic_scheduling.services.slot_service import parse_locale
from clinic_scheduling.services.timezone import END_OF_DAY, WEEKDAY_NAMES, parse_instant

_HHMM = re.compile(r"^(?:[01]\d|2[0-3]):[0-5]\d$")


def _minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def check_schedule_grid(grid: ScheduleGrid) -> ScheduleGrid:
    """
    Reject malformed working hours before they reach the slot walk.

    Each block must be HH:MM (24h, "24:00" allowed as an end), start before
    end, and blocks of one day must not overlap each other.
    """
    for day in WEEKDAY_NAMES:
        spans = []
        for block in grid.blocks_for(day):
            if not _HHMM.match(block.start):
                raise ValueError(f"{day}: invalid start time {block.start!r}, expected HH:MM")
            if block.end != END_OF_DAY and not _HHMM.match(block.end):
                raise ValueError(f"{day}: invalid end time {block.end!r}, expected HH:MM")
            start, end = _minutes(block.start), _minutes(block.end)
            if start >= end:
                raise ValueError(f"{day}: block {block.start}-{block.end} must start before it ends")
            spans.append((start, end, block))
        spans.sort(key=lambda s: s[0])
        for (_, prev_end, prev), (start, _, block) in zip(spans, spans[1:]):
            if start < prev_end:
                raise ValueError(
                    f"{day}: block {block.start}-{block.end} overlaps {prev.start}-{prev.end}"
                )
    return grid


def check_timezone(v: str) -> str:
    if v not in pytz.all_timezones_set:
        raise ValueError(f"Unknown timezone {v!r}")
    return v


def check_locale(v: str) -> str:
    try:
        parse_locale(v)
    except (UnknownLocaleError, ValueError) as e:
        raise ValueError(f"Unknown locale {v!r}") from e
    return v


TimezoneName = Annotated[str, AfterValidator(check_timezone)]
LocaleName = Annotated[str, AfterValidator(check_locale)]
WorkingHours = Annotated[ScheduleGrid, AfterValidator(check_schedule_grid)]


class AvailableSlotsRequest(BaseModel):
    date: date
    schedule_grid: WorkingHours
    duration_minutes: int = Field(
        default_factory=lambda: settings.default_duration_minutes,
        ge=settings.min_duration_minutes,
        le=settings.max_duration_minutes,
    )
    existing_appointments: list[ExistingAppointment] = Field(default_factory=list)
    busy_blocks: list[BusyInterval] | None = None
    timezone: TimezoneName = Field(default_factory=lambda: settings.default_timezone)
    locale: LocaleName = Field(default_factory=lambda: settings.default_locale)

    @field_validator("existing_appointments")
    @classmethod
    def _appointments_ordered(cls, v: list[ExistingAppointment]) -> list[ExistingAppointment]:
        for appt in v:
            if appt.ends_at <= appt.starts_at:
                raise ValueError(f"appointment starting {appt.starts_at.isoformat()} must end after it starts")
        return v

    @field_validator("busy_blocks")
    @classmethod
    def _busy_ordered(cls, v: list[BusyInterval] | None) -> list[BusyInterval] | None:
        for block in v or ():
            if block.end <= block.start:
                raise ValueError(f"busy block starting {block.start.isoformat()} must end after it starts")
        return v


class AvailableSlotsResponse(BaseModel):
    date: str  # YYYY-MM-DD
    timezone: str
    duration_minutes: int
    slots: list[AvailableSlot]
    digest: str


class SlotDigestRequest(BaseModel):
    slots: list[AvailableSlot]
    timezone: TimezoneName = Field(default_factory=lambda: settings.default_timezone)
    locale: LocaleName = Field(default_factory=lambda: settings.default_locale)


class SlotDigestResponse(BaseModel):
    digest: str
    options: str


class ConflictCheckRequest(BaseModel):
    start: datetime
    end: datetime
    busy: list[BusyInterval] = Field(default_factory=list)

    @field_validator("start", "end", mode="before")
    @classmethod
    def _to_utc(cls, v: object) -> datetime:
        return parse_instant(v)

    @model_validator(mode="after")
    def _ordered(self) -> "ConflictCheckRequest":
        if self.end <= self.start:
            raise ValueError("end must be after start")
        return self


class ConflictCheckResponse(BaseModel):
    has_conflict: bool
    conflicts: list[BusyInterval]
