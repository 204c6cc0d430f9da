from __future__ import annotations

import asyncio
from datetime import date, datetime

from dateutil import tz

from health_togo.controller import BLOOD_PRESSURE, controller_for
from health_togo.fetch import RangeFetcher
from health_togo.metrics import MetricId
from health_togo.model import DateRange, RawSample
from health_togo.render import render_lines
from health_togo.sources.memory import InMemoryHealthStore
from health_togo.state import NO_DATA_TEXT
from health_togo.storage import AppConfig

UTC = tz.tzutc()
RANGE = DateRange.bounded(date(2026, 1, 1), date(2026, 1, 3))


def _store() -> InMemoryHealthStore:
    def at(day: int) -> datetime:
        return datetime(2026, 1, day, 9, tzinfo=UTC)

    return InMemoryHealthStore(
        {
            MetricId.STEP_COUNT: [RawSample(at(1), 1000), RawSample(at(3), 2000)],
            MetricId.BODY_MASS: [RawSample(at(2), 80.3)],
            MetricId.BLOOD_PRESSURE_DIASTOLIC: [RawSample(at(2), 75)],
            MetricId.BLOOD_PRESSURE_SYSTOLIC: [],
        }
    )


def _rendered(screen: str, max_rows: int = 120) -> list[str]:
    controller = controller_for(screen, RangeFetcher(_store(), UTC), AppConfig())
    asyncio.run(controller.change_range(RANGE))
    return render_lines(controller, max_rows)


def test_render_cumulative_metric_marks_empty_days() -> None:
    assert _rendered(MetricId.STEP_COUNT.value) == [
        "Steps",
        "",
        "Total Steps: 3,000 steps",
        "Average Daily Steps: 1,500 steps",
        "Days with Data: 2",
        "Date Range: Jan 1, 2026 to Jan 3, 2026",
        "",
        "Jan 1, 2026    1,000 steps",
        "Jan 2, 2026    0 steps  x",
        "Jan 3, 2026    2,000 steps",
    ]


def test_render_weight_hides_zero_days() -> None:
    lines = _rendered(MetricId.BODY_MASS.value)
    assert lines[0] == "Weight"
    assert lines[2] == "Average Weight: 80.3 Kg"
    assert lines[-1] == "Jan 2, 2026    80.3 Kg"


def test_render_blood_pressure_rows() -> None:
    lines = _rendered(BLOOD_PRESSURE)
    assert lines[0] == "Blood Pressure"
    assert lines[-1] == "Jan 2, 2026    ??/75"
    assert "Readings: 1" in lines
    assert "Average: 0/75 mmHg" not in lines


def test_render_limits_rows() -> None:
    lines = _rendered(MetricId.STEP_COUNT.value, max_rows=1)
    assert lines[-1] == "Jan 1, 2026    1,000 steps"


def test_render_no_data_state() -> None:
    controller = controller_for(
        MetricId.BODY_MASS_INDEX.value, RangeFetcher(_store(), UTC), AppConfig()
    )
    asyncio.run(controller.change_range(RANGE))
    assert render_lines(controller) == ["Body Mass Index", "", NO_DATA_TEXT]
