import logging
import re
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta

from babel import Locale
from babel.dates import format_date, format_time, match_skeleton

from clinic_scheduling.models.schedule import (
    AvailableSlot,
    BusyInterval,
    ExistingAppointment,
    ScheduleGrid,
)
from clinic_scheduling.services.overlap import ranges_overlap
from clinic_scheduling.services.timezone import (
    get_timezone,
    local_to_utc,
    parse_day,
    parse_instant,
    utc_now,
    weekday_name,
)

logger = logging.getLogger(__name__)

NO_SLOTS_MESSAGES = {
    "en": "No available slots.",
    "pt": "Nenhum horário disponível.",
    "es": "No hay horarios disponibles.",
}

TIME_PATTERN = "HH:mm"

# Weekday, day and month; the year is left out
DATE_SKELETON = "MMMMEd"
_ABBREVIATED_WEEKDAY = re.compile(r"(?<!E)E{1,3}(?!E)")


def _collect_busy(
    existing_appointments: Iterable[ExistingAppointment | BusyInterval | dict],
    busy_blocks: Iterable[BusyInterval | dict] | None,
) -> list[BusyInterval]:
    """Bookings and external busy blocks are equally exclusionary; no precedence."""
    busy: list[BusyInterval] = []
    for appt in existing_appointments:
        if isinstance(appt, BusyInterval):
            busy.append(appt)
        elif isinstance(appt, ExistingAppointment):
            busy.append(appt.as_busy())
        else:
            busy.append(ExistingAppointment.model_validate(appt).as_busy())
    for block in busy_blocks or ():
        busy.append(block if isinstance(block, BusyInterval) else BusyInterval.model_validate(block))
    return busy


def get_available_slots(
    day: date | str,
    schedule_grid: ScheduleGrid | dict,
    duration_minutes: int,
    existing_appointments: Iterable[ExistingAppointment | BusyInterval | dict],
    timezone: str,
    busy_blocks: Iterable[BusyInterval | dict] | None = None,
    *,
    now: datetime | None = None,
) -> list[AvailableSlot]:
    """
    Bookable slots for one professional on one calendar date.

    Args:
        day: calendar date in the clinic's timezone (date or "YYYY-MM-DD")
        schedule_grid: weekly working hours
        duration_minutes: slot length, also the walk step
        existing_appointments: bookings ({starts_at, ends_at})
        timezone: IANA name of the clinic's zone
        busy_blocks: externally reported busy time ({start, end})
        now: clock reading; slots starting before it are dropped

    Returns:
        list[AvailableSlot] in block order, then chronological within a block

    Algorithm:
        1. Resolve the weekday of `day` and its working blocks (none -> [])
        2. Merge bookings and busy blocks into one busy list
        3. For each block, convert both ends to UTC and walk a cursor in
           `duration` steps while cursor + duration <= block end
        4. Emit [cursor, cursor + duration) unless it overlaps a busy
           interval or starts before `now`; always advance by `duration`
    """
    if duration_minutes <= 0:
        raise ValueError(f"duration_minutes must be positive, got {duration_minutes}")

    day = parse_day(day)
    if not isinstance(schedule_grid, ScheduleGrid):
        schedule_grid = ScheduleGrid.model_validate(schedule_grid)

    working_blocks = schedule_grid.blocks_for(weekday_name(day))
    if not working_blocks:
        return []

    busy = _collect_busy(existing_appointments, busy_blocks)
    tz = get_timezone(timezone)
    duration = timedelta(minutes=duration_minutes)
    current_time = parse_instant(now) if now is not None else utc_now()

    slots: list[AvailableSlot] = []
    for block in working_blocks:
        block_start = local_to_utc(day, block.start, tz)
        block_end = local_to_utc(day, block.end, tz)

        cursor = block_start
        while cursor + duration <= block_end:
            slot_end = cursor + duration
            overlaps = any(ranges_overlap(cursor, slot_end, b.start, b.end) for b in busy)
            if not overlaps and cursor >= current_time:
                slots.append(AvailableSlot(start=cursor, end=slot_end))
            cursor = slot_end

    logger.debug(
        "Availability %s (%s, %d min): %d block(s), %d busy, %d slot(s)",
        day.isoformat(),
        timezone,
        duration_minutes,
        len(working_blocks),
        len(busy),
        len(slots),
    )
    return slots


def parse_locale(locale: str | Locale) -> Locale:
    if isinstance(locale, Locale):
        return locale
    return Locale.parse(locale.replace("_", "-"), sep="-")


def no_slots_message(locale: str | Locale) -> str:
    return NO_SLOTS_MESSAGES.get(parse_locale(locale).language, NO_SLOTS_MESSAGES["en"])


def date_label_pattern(loc: Locale) -> str:
    """
    Locale pattern for the digest date label, e.g. "EEEE, d 'de' MMMM" in pt.

    CLDR skeleton patterns abbreviate the weekday ("qua."); it is widened to
    the full name so the label reads "quarta-feira, 18 de fevereiro".
    """
    skeletons = loc.datetime_skeletons
    key = DATE_SKELETON if DATE_SKELETON in skeletons else match_skeleton(DATE_SKELETON, skeletons)
    if key is None:
        return loc.date_formats["full"].pattern
    return _ABBREVIATED_WEEKDAY.sub("EEEE", skeletons[key].pattern)


def format_slots_for_llm(
    slots: Sequence[AvailableSlot],
    timezone: str,
    locale: str | Locale,
) -> str:
    """
    Human-readable digest, one line per local date.

    Example (pt-BR):
        quarta-feira, 18 de fevereiro: 09:00, 09:30, 10:00
        quinta-feira, 19 de fevereiro: 14:00, 14:30

    Dates appear in the order first encountered, not re-sorted.
    """
    loc = parse_locale(locale)
    if not slots:
        return no_slots_message(loc)

    tz = get_timezone(timezone)
    label_pattern = date_label_pattern(loc)
    grouped: dict[str, list[str]] = {}
    for slot in slots:
        local_start = slot.start.astimezone(tz)
        date_label = format_date(local_start, label_pattern, locale=loc)
        grouped.setdefault(date_label, []).append(format_time(local_start, TIME_PATTERN, locale=loc))

    return "\n".join(f"{label}: {', '.join(times)}" for label, times in grouped.items())


def format_slot_options(
    slots: Sequence[AvailableSlot],
    timezone: str,
    locale: str | Locale,
) -> str:
    """Numbered lines carrying the exact instants, so an agent books without guessing."""
    loc = parse_locale(locale)
    if not slots:
        return no_slots_message(loc)

    tz = get_timezone(timezone)
    lines = []
    for i, slot in enumerate(slots, start=1):
        local_time = format_time(slot.start.astimezone(tz), TIME_PATTERN, locale=loc)
        lines.append(
            f"{i}. {local_time} - starts_at: {_iso_z(slot.start)}, ends_at: {_iso_z(slot.end)}"
        )
    return "\n".join(lines)


def _iso_z(dt: datetime) -> str:
    return dt.isoformat().replace("+00:00", "Z")
