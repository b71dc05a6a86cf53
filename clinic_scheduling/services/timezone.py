"""
Timezone helpers

Converts clinic wall-clock times into UTC instants. Every conversion goes
through an explicit IANA zone, never through the host process's local
timezone.

Gap and overlap policy: local times that do not exist (spring-forward) or
exist twice (fall-back) are resolved with the zone's standard offset
(pytz ``is_dst=False``). A time inside a gap therefore lands one DST delta
later in wall-clock terms; an ambiguous time maps to the standard-time
(later) instant.
"""

from datetime import UTC, date, datetime, timedelta

import pytz

WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

# Allowed as a block end: midnight at the close of the day
END_OF_DAY = "24:00"


def utc_now() -> datetime:
    return datetime.now(UTC)


def get_timezone(name: str) -> pytz.BaseTzInfo:
    """Resolve an IANA name. Unknown names raise pytz.UnknownTimeZoneError."""
    return pytz.timezone(name)


def parse_day(value: date | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def weekday_name(day: date | str) -> str:
    """Lower-case English weekday of a calendar date, e.g. "monday"."""
    return WEEKDAY_NAMES[parse_day(day).weekday()]


def parse_instant(value: datetime | str) -> datetime:
    """
    Parse an ISO-8601 instant into an aware UTC datetime.

    Accepts a "Z" suffix or any numeric offset. Naive values are taken as
    UTC. Raises ValueError for anything unparsable.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip())
    elif not isinstance(value, datetime):
        raise ValueError(f"Cannot interpret {type(value).__name__} as an instant")
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _wall_clock(day: date, hhmm: str) -> datetime:
    if hhmm == END_OF_DAY:
        return datetime.combine(day + timedelta(days=1), datetime.min.time())
    return datetime.combine(day, datetime.strptime(hhmm, "%H:%M").time())


def local_to_utc(
    day: date | str,
    hhmm: str,
    timezone: str | pytz.BaseTzInfo,
) -> datetime:
    """
    Convert a local "HH:MM" on a calendar date in a named zone to UTC.

    The zone's offset is the one in force on that date, so the same
    wall-clock time maps to different instants either side of a DST
    change.

    Args:
        day: calendar date (date or "YYYY-MM-DD")
        hhmm: local wall-clock time, "00:00" to "23:59", or "24:00"
        timezone: IANA name (e.g. "America/Sao_Paulo") or a pytz zone

    Returns:
        aware datetime in UTC
    """
    tz = get_timezone(timezone) if isinstance(timezone, str) else timezone
    naive = _wall_clock(parse_day(day), hhmm)
    return tz.localize(naive, is_dst=False).astimezone(UTC)
