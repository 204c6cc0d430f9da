"""Resúmenes por métrica: total, promedio, mínimo/máximo y días activos."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from health_togo.metrics import MetricDescriptor, MetricKind
from health_togo.model import (
    BloodPressurePoint,
    BloodPressureSummary,
    DailyPoint,
    DateRange,
    Summary,
)

ALL_TIME_LABEL = "All available data"


def medium_date(day: date) -> str:
    """Medium date style without time, e.g. ``Jan 31, 2026``."""
    return f"{day:%b} {day.day}, {day.year}"


def date_range_label(date_range: DateRange) -> str:
    if date_range.is_all_time:
        return ALL_TIME_LABEL
    return f"{medium_date(date_range.start)} to {medium_date(date_range.end)}"


def summarize(
    series: Sequence[DailyPoint], kind: MetricKind, range_label: str
) -> Summary:
    """Compute the summary of a daily series.

    Zero-valued days count towards the cumulative total but are ignored by
    the average, min/max and active-day count.

    Args:
        series: Daily points of one metric.
        kind: Aggregation kind of the metric.
        range_label: Text describing the requested range.

    Returns:
        Summary; ``total_value`` only for cumulative metrics, min/max only for
        discrete metrics with at least one active day.
    """
    active = [p.value for p in series if p.value > 0]
    average = sum(active) / len(active) if active else 0.0

    if kind is MetricKind.CUMULATIVE:
        return Summary(
            total_value=sum(p.value for p in series),
            average_daily_value=average,
            active_days=len(active),
            min_value=None,
            max_value=None,
            date_range_label=range_label,
            is_cumulative=True,
        )
    return Summary(
        total_value=None,
        average_daily_value=average,
        active_days=len(active),
        min_value=min(active) if active else None,
        max_value=max(active) if active else None,
        date_range_label=range_label,
        is_cumulative=False,
    )


def summarize_blood_pressure(
    readings: Sequence[BloodPressurePoint], range_label: str
) -> BloodPressureSummary:
    """Summary over the readings that have data.

    Zero sides count as missing. Averages are truncated to integers.
    """
    valid = [r for r in readings if r.has_data]
    systolic = [r.systolic for r in valid if (r.systolic or 0) > 0]
    diastolic = [r.diastolic for r in valid if (r.diastolic or 0) > 0]
    return BloodPressureSummary(
        average_systolic=int(sum(systolic) / len(systolic)) if systolic else None,
        average_diastolic=int(sum(diastolic) / len(diastolic)) if diastolic else None,
        min_systolic=min(systolic) if systolic else None,
        max_systolic=max(systolic) if systolic else None,
        min_diastolic=min(diastolic) if diastolic else None,
        max_diastolic=max(diastolic) if diastolic else None,
        total_readings=len(valid),
        date_range_label=range_label,
    )


def format_value(value: float, metric: MetricDescriptor) -> str:
    """Format with the metric's decimals; whole numbers get thousands separators."""
    if metric.decimals:
        return f"{value:.{metric.decimals}f}"
    return f"{value:,.0f}"


def summary_lines(summary: Summary, metric: MetricDescriptor) -> list[str]:
    """Text lines of the summary card."""
    unit = metric.unit.display

    def fmt(value: float) -> str:
        return f"{format_value(value, metric)} {unit}".rstrip()

    lines: list[str] = []
    if summary.is_cumulative:
        if summary.total_value is not None:
            lines.append(f"Total {metric.label}: {fmt(summary.total_value)}")
        lines.append(
            f"Average Daily {metric.label}: {fmt(summary.average_daily_value)}"
        )
    else:
        lines.append(f"Average {metric.label}: {fmt(summary.average_daily_value)}")
        if summary.min_value is not None and summary.max_value is not None:
            low = format_value(summary.min_value, metric)
            lines.append(f"Range: {low} - {fmt(summary.max_value)}")
    lines.append(f"Days with Data: {summary.active_days:,}")
    lines.append(f"Date Range: {summary.date_range_label}")
    return lines


def blood_pressure_summary_lines(summary: BloodPressureSummary) -> list[str]:
    lines: list[str] = []
    if summary.average_systolic is not None and summary.average_diastolic is not None:
        lines.append(
            f"Average: {summary.average_systolic}/{summary.average_diastolic} mmHg"
        )
    ranges = (
        summary.min_systolic,
        summary.max_systolic,
        summary.min_diastolic,
        summary.max_diastolic,
    )
    if all(v is not None for v in ranges):
        lines.append(
            f"Systolic Range: {summary.min_systolic} - {summary.max_systolic} mmHg"
        )
        lines.append(
            f"Diastolic Range: {summary.min_diastolic} - {summary.max_diastolic} mmHg"
        )
    lines.append(f"Readings: {summary.total_readings}")
    lines.append(f"Date Range: {summary.date_range_label}")
    return lines
