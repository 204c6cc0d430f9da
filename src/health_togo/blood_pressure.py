"""Emparejado de series diarias sistólica/diastólica por día."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from health_togo.model import BloodPressurePoint, DailyPoint, round_half_away


def pair(
    systolic: Sequence[DailyPoint], diastolic: Sequence[DailyPoint]
) -> list[BloodPressurePoint]:
    """Outer-join two daily series on the day.

    Values are rounded to the nearest integer. A day present in only one
    series keeps the other side as ``None``. Points without data are kept;
    consumers filter them with :func:`visible_readings`.
    """
    by_day: dict[date, dict[str, int | None]] = {}
    for point in systolic:
        by_day.setdefault(point.day, {"systolic": None, "diastolic": None})
        by_day[point.day]["systolic"] = round_half_away(point.value)
    for point in diastolic:
        by_day.setdefault(point.day, {"systolic": None, "diastolic": None})
        by_day[point.day]["diastolic"] = round_half_away(point.value)
    return [
        BloodPressurePoint(day=day, **values) for day, values in sorted(by_day.items())
    ]


def visible_readings(
    readings: Sequence[BloodPressurePoint],
) -> list[BloodPressurePoint]:
    """Readings shown and exported: those with at least one positive side."""
    return [r for r in readings if r.has_data]
