"""Texto de una pantalla de métrica: resumen y filas diarias."""

from __future__ import annotations

from health_togo.controller import BloodPressureController, MetricController
from health_togo.metrics import descriptor
from health_togo.summary import (
    blood_pressure_summary_lines,
    format_value,
    medium_date,
    summary_lines,
)

MAX_ROWS = 120


def render_lines(controller: MetricController, max_rows: int = MAX_ROWS) -> list[str]:
    """Title, summary and daily rows of a screen (first ``max_rows`` days)."""
    state = controller.state
    lines = [controller.title, ""]
    if state.loading or state.error is not None or state.is_empty:
        lines.append(state.status_text)
        return lines

    if isinstance(controller, BloodPressureController):
        if state.pressure_summary is not None:
            lines.extend(blood_pressure_summary_lines(state.pressure_summary))
        lines.append("")
        for reading in state.visible_readings[:max_rows]:
            lines.append(f"{medium_date(reading.day):<14} {reading.formatted_reading}")
        return lines

    metric = descriptor(state.metric_id)
    if state.summary is not None:
        lines.extend(summary_lines(state.summary, metric))
    lines.append("")
    unit = metric.unit.display
    for point in state.series[:max_rows]:
        value = f"{format_value(point.value, metric)} {unit}".rstrip()
        marker = "  x" if point.value == 0 else ""
        lines.append(f"{medium_date(point.day):<14} {value}{marker}")
    return lines
