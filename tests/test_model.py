from __future__ import annotations

from datetime import date, datetime, time

import pytest
from dateutil import tz

from health_togo.model import (
    EARLIEST_DAY,
    BloodPressurePoint,
    DateRange,
    round_half_away,
)


def test_bounded_rejects_start_after_end() -> None:
    with pytest.raises(ValueError, match="after end date"):
        DateRange.bounded(date(2026, 1, 5), date(2026, 1, 4))


def test_bounded_single_day() -> None:
    r = DateRange.bounded(date(2026, 1, 5), date(2026, 1, 5))
    assert r.start == r.end
    assert not r.is_all_time


def test_last_days() -> None:
    r = DateRange.last_days(7, today=date(2026, 1, 31))
    assert r.start == date(2026, 1, 24)
    assert r.end == date(2026, 1, 31)


def test_all_time_uses_sentinel_start() -> None:
    r = DateRange.all_time(today=date(2026, 1, 31))
    assert r.is_all_time
    assert r.start == EARLIEST_DAY
    assert r.end == date(2026, 1, 31)


def test_window_covers_whole_days_in_zone() -> None:
    zone = tz.tzoffset(None, 3600)
    start, end = DateRange.bounded(date(2026, 1, 1), date(2026, 1, 3)).window(zone)
    assert start == datetime.combine(date(2026, 1, 1), time.min, tzinfo=zone)
    assert end == datetime(2026, 1, 3, 23, 59, 59, tzinfo=zone)


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0.5, 1), (1.5, 2), (2.5, 3), (119.6, 120), (79.4, 79), (-0.5, -1), (0.0, 0)],
)
def test_round_half_away(value: float, expected: int) -> None:
    assert round_half_away(value) == expected


def test_last_days_rejects_negative_count() -> None:
    with pytest.raises(ValueError, match="after end date"):
        DateRange.last_days(-3, today=date(2026, 1, 31))


def test_formatted_reading() -> None:
    day = date(2026, 1, 1)
    assert BloodPressurePoint(day, 120, 80).formatted_reading == "120/80"
    assert BloodPressurePoint(day, 120, None).formatted_reading == "120/??"
    assert BloodPressurePoint(day, None, 75).formatted_reading == "??/75"
    assert BloodPressurePoint(day, 0, 0).formatted_reading == "No data"


def test_has_data_requires_a_positive_side() -> None:
    day = date(2026, 1, 1)
    assert BloodPressurePoint(day, 0, 75).has_data
    assert not BloodPressurePoint(day, 0, 0).has_data
    assert not BloodPressurePoint(day).has_data
