from __future__ import annotations

from datetime import date

import pytest

from health_togo.metrics import MetricId, MetricKind, descriptor
from health_togo.model import BloodPressurePoint, DailyPoint, DateRange
from health_togo.summary import (
    ALL_TIME_LABEL,
    blood_pressure_summary_lines,
    date_range_label,
    format_value,
    medium_date,
    summarize,
    summarize_blood_pressure,
    summary_lines,
)


def _series(*values: float) -> list[DailyPoint]:
    return [DailyPoint(date(2026, 1, i + 1), v) for i, v in enumerate(values)]


def test_cumulative_summary_ignores_zero_days_in_average() -> None:
    summary = summarize(_series(1000, 0, 2000), MetricKind.CUMULATIVE, "label")
    assert summary.is_cumulative
    assert summary.total_value == 3000
    assert summary.active_days == 2
    assert summary.average_daily_value == 1500
    assert summary.min_value is None
    assert summary.max_value is None
    assert summary.date_range_label == "label"


def test_discrete_summary_min_max_over_active_days() -> None:
    summary = summarize(_series(0, 60, 80), MetricKind.DISCRETE, "label")
    assert not summary.is_cumulative
    assert summary.total_value is None
    assert summary.average_daily_value == 70
    assert summary.min_value == 60
    assert summary.max_value == 80
    assert summary.active_days == 2


@pytest.mark.parametrize("kind", list(MetricKind))
def test_empty_series_summary(kind: MetricKind) -> None:
    summary = summarize([], kind, "label")
    assert summary.average_daily_value == 0
    assert summary.active_days == 0
    assert summary.min_value is None
    assert summary.max_value is None


def test_all_zero_cumulative_series() -> None:
    summary = summarize(_series(0, 0), MetricKind.CUMULATIVE, "label")
    assert summary.total_value == 0
    assert summary.average_daily_value == 0
    assert summary.active_days == 0


def test_medium_date() -> None:
    assert medium_date(date(2026, 1, 5)) == "Jan 5, 2026"


def test_date_range_label() -> None:
    bounded = DateRange.bounded(date(2026, 1, 1), date(2026, 1, 7))
    assert date_range_label(bounded) == "Jan 1, 2026 to Jan 7, 2026"
    assert date_range_label(DateRange.all_time()) == ALL_TIME_LABEL


def test_format_value_uses_metric_decimals() -> None:
    assert format_value(12345.6, descriptor(MetricId.STEP_COUNT)) == "12,346"
    assert format_value(80.26, descriptor(MetricId.BODY_MASS)) == "80.3"


def test_summary_lines_cumulative() -> None:
    metric = descriptor(MetricId.STEP_COUNT)
    summary = summarize(_series(1000, 0, 2000), MetricKind.CUMULATIVE, "Some days")
    assert summary_lines(summary, metric) == [
        "Total Steps: 3,000 steps",
        "Average Daily Steps: 1,500 steps",
        "Days with Data: 2",
        "Date Range: Some days",
    ]


def test_summary_lines_discrete() -> None:
    metric = descriptor(MetricId.HEART_RATE)
    summary = summarize(_series(60, 80), MetricKind.DISCRETE, "Some days")
    lines = summary_lines(summary, metric)
    assert lines[0] == "Average Heart Rate: 70 BPM"
    assert lines[1] == "Range: 60 - 80 BPM"


def test_blood_pressure_summary_truncates_averages() -> None:
    day = date(2026, 1, 1)
    readings = [
        BloodPressurePoint(day, 120, 80),
        BloodPressurePoint(date(2026, 1, 2), 125, None),
        BloodPressurePoint(date(2026, 1, 3), 0, 0),
    ]
    summary = summarize_blood_pressure(readings, "label")
    assert summary.average_systolic == 122
    assert summary.average_diastolic == 80
    assert summary.min_systolic == 120
    assert summary.max_systolic == 125
    assert summary.total_readings == 2
    assert blood_pressure_summary_lines(summary) == [
        "Average: 122/80 mmHg",
        "Systolic Range: 120 - 125 mmHg",
        "Diastolic Range: 80 - 80 mmHg",
        "Readings: 2",
        "Date Range: label",
    ]


def test_blood_pressure_summary_without_readings() -> None:
    summary = summarize_blood_pressure([], "label")
    assert summary.average_systolic is None
    assert summary.total_readings == 0
    assert blood_pressure_summary_lines(summary) == ["Readings: 0", "Date Range: label"]
