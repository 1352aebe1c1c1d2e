"""Time-slot arithmetic."""

from __future__ import annotations

import datetime as dt

import pytest

from app.services import scheduling


def test_minutes_round_trip():
    assert scheduling.to_minutes("09:30") == 570
    assert scheduling.to_hhmm(570) == "09:30"
    assert scheduling.end_time("21:30", 30) == "22:00"


@pytest.mark.parametrize(
    "a,b,expected",
    [
        ((600, 60), (660, 60), False),  # back to back
        ((600, 60), (630, 60), True),
        ((600, 120), (630, 30), True),  # contained
        ((660, 60), (600, 60), False),
        ((600, 30), (570, 30), False),
    ],
)
def test_overlaps_is_half_open(a, b, expected):
    assert scheduling.overlaps(*a, *b) is expected
    assert scheduling.overlaps(*b, *a) is expected


def test_conflicts():
    busy = [("10:00", 60), ("14:00", 90)]
    assert scheduling.conflicts("10:30", 30, busy)
    assert scheduling.conflicts("15:00", 60, busy)
    assert not scheduling.conflicts("11:00", 180, busy)
    assert not scheduling.conflicts("09:00", 60, [])


def test_within_hours():
    assert scheduling.within_hours("08:00", 60, 8, 22)
    assert scheduling.within_hours("21:00", 60, 8, 22)
    assert not scheduling.within_hours("07:30", 60, 8, 22)
    assert not scheduling.within_hours("21:30", 60, 8, 22)


def test_candidate_starts():
    starts = scheduling.candidate_starts(60, 8, 22, 30)
    assert starts[0] == "08:00"
    assert starts[-1] == "21:00"
    assert len(starts) == 27
    assert scheduling.candidate_starts(15 * 60, 8, 22, 30) == []


def test_free_starts():
    free = scheduling.free_starts([("09:00", 60)], 60, 8, 11, 30)
    assert free == ["08:00", "10:00"]


def test_start_datetime():
    start = scheduling.start_datetime(dt.date(2030, 5, 17), "13:30")
    assert start == dt.datetime(2030, 5, 17, 13, 30)
