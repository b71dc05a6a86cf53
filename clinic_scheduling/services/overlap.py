"""
Overlap Detection

Half-open interval collision test shared by slot generation and the
booking-time conflict re-check.
"""

from collections.abc import Iterable
from datetime import datetime

from clinic_scheduling.models.schedule import BusyInterval


def ranges_overlap(
    a_start: datetime,
    a_end: datetime,
    b_start: datetime,
    b_end: datetime,
) -> bool:
    """
    [a_start, a_end) and [b_start, b_end) overlap iff a_start < b_end and b_start < a_end.

    Touching ranges do not overlap, so a slot ending exactly when a busy
    interval begins is free. Zero-length ranges never overlap anything.
    """
    return a_start < b_end and b_start < a_end and a_start < a_end and b_start < b_end


def find_overlapping(
    start: datetime,
    end: datetime,
    busy: Iterable[BusyInterval],
) -> list[BusyInterval]:
    """
    Busy intervals colliding with [start, end).

    Slot lists go stale between computation and commit; a booking handler
    calls this right before insert with freshly loaded bookings.
    """
    return [b for b in busy if ranges_overlap(start, end, b.start, b.end)]
