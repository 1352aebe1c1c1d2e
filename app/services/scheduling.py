"""
Time-slot arithmetic for bookings.

Times are ``HH:MM`` strings on a single calendar day; intervals are
half-open ``[start, start + duration)`` in minutes since midnight.
"""

from __future__ import annotations

import datetime as dt
from typing import Iterable


def to_minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def to_hhmm(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def end_time(start_time: str, duration: int) -> str:
    return to_hhmm(to_minutes(start_time) + duration)


def overlaps(start_a: int, duration_a: int, start_b: int, duration_b: int) -> bool:
    return start_a < start_b + duration_b and start_b < start_a + duration_a


def conflicts(start_time: str, duration: int, busy: Iterable[tuple[str, int]]) -> bool:
    """True if ``[start_time, +duration)`` overlaps any busy (start, duration)."""
    start = to_minutes(start_time)
    return any(overlaps(start, duration, to_minutes(s), d) for s, d in busy)


def within_hours(start_time: str, duration: int, open_hour: int, close_hour: int) -> bool:
    start = to_minutes(start_time)
    return start >= open_hour * 60 and start + duration <= close_hour * 60


def candidate_starts(duration: int, open_hour: int, close_hour: int, step: int) -> list[str]:
    """Every start on the ``step`` grid whose interval fits in opening hours."""
    last_start = close_hour * 60 - duration
    return [to_hhmm(m) for m in range(open_hour * 60, last_start + 1, step)]


def free_starts(
    busy: Iterable[tuple[str, int]],
    duration: int,
    open_hour: int,
    close_hour: int,
    step: int,
) -> list[str]:
    busy = list(busy)
    return [
        start
        for start in candidate_starts(duration, open_hour, close_hour, step)
        if not conflicts(start, duration, busy)
    ]


def start_datetime(date: dt.date, start_time: str) -> dt.datetime:
    """Local wall-clock start of a booking (naive)."""
    hours, minutes = start_time.split(":")
    return dt.datetime.combine(date, dt.time(int(hours), int(minutes)))
