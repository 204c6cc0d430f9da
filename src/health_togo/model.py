"""Modelos tipados para muestras, series diarias, rangos y resúmenes."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo

# Sentinel start of an all-time request.
EARLIEST_DAY = date.min


@dataclass(frozen=True)
class RawSample:
    """One raw measurement as returned by the health store."""

    timestamp: datetime
    value: float


@dataclass(frozen=True)
class DailyPoint:
    """Aggregated value for one local calendar day."""

    day: date
    value: float


@dataclass(frozen=True)
class DateRange:
    """Requested window of days.

    When ``is_all_time`` is set, ``start``/``end`` are sentinels and the fetch
    reads every raw sample instead of bounded daily statistics.
    """

    start: date
    end: date
    is_all_time: bool = False

    @classmethod
    def bounded(cls, start: date, end: date) -> DateRange:
        """Build an inclusive range of days.

        Raises:
            ValueError: If ``start`` is after ``end``.
        """
        if start > end:
            raise ValueError(f"Start date {start} is after end date {end}")
        return cls(start=start, end=end)

    @classmethod
    def last_days(cls, days: int, today: date | None = None) -> DateRange:
        """Range from ``days`` days ago through today.

        Raises:
            ValueError: If ``days`` is negative.
        """
        end = today or date.today()
        return cls.bounded(end - timedelta(days=days), end)

    @classmethod
    def all_time(cls, today: date | None = None) -> DateRange:
        return cls(start=EARLIEST_DAY, end=today or date.today(), is_all_time=True)

    def window(self, zone: tzinfo) -> tuple[datetime, datetime]:
        """Return start-of-day(start) and end-of-day(end) in ``zone``."""
        start = datetime.combine(self.start, time.min).replace(tzinfo=zone)
        end = datetime.combine(self.end, time(23, 59, 59)).replace(tzinfo=zone)
        return start, end


@dataclass(frozen=True)
class Summary:
    """Derived figures for one daily series."""

    total_value: float | None
    average_daily_value: float
    active_days: int
    min_value: float | None
    max_value: float | None
    date_range_label: str
    is_cumulative: bool


@dataclass(frozen=True)
class BloodPressurePoint:
    """Systolic/diastolic pair for one day; either side may be missing."""

    day: date
    systolic: int | None = None
    diastolic: int | None = None

    @property
    def has_data(self) -> bool:
        return _positive(self.systolic) or _positive(self.diastolic)

    @property
    def formatted_reading(self) -> str:
        sys_ok = _positive(self.systolic)
        dia_ok = _positive(self.diastolic)
        if sys_ok and dia_ok:
            return f"{self.systolic}/{self.diastolic}"
        if sys_ok:
            return f"{self.systolic}/??"
        if dia_ok:
            return f"??/{self.diastolic}"
        return "No data"


@dataclass(frozen=True)
class BloodPressureSummary:
    """Averages and ranges over the days that have a reading."""

    average_systolic: int | None
    average_diastolic: int | None
    min_systolic: int | None
    max_systolic: int | None
    min_diastolic: int | None
    max_diastolic: int | None
    total_readings: int
    date_range_label: str


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _positive(value: int | None) -> bool:
    return value is not None and value > 0
