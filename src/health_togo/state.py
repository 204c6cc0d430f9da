"""Estado de una pantalla de métrica y reductor de eventos de carga."""

from __future__ import annotations

from dataclasses import dataclass, replace

from health_togo.blood_pressure import pair, visible_readings
from health_togo.metrics import MetricId, descriptor
from health_togo.model import (
    BloodPressurePoint,
    BloodPressureSummary,
    DailyPoint,
    DateRange,
    Summary,
)
from health_togo.normalize import visible_points
from health_togo.summary import date_range_label, summarize, summarize_blood_pressure

NO_DATA_TEXT = "No data available for the selected period"


@dataclass(frozen=True)
class ViewState:
    """Display state of one metric screen, replaced wholesale on each event."""

    metric_id: MetricId
    date_range: DateRange
    loading: bool = False
    error: str | None = None
    series: tuple[DailyPoint, ...] = ()
    summary: Summary | None = None
    readings: tuple[BloodPressurePoint, ...] = ()
    pressure_summary: BloodPressureSummary | None = None

    @property
    def visible_readings(self) -> list[BloodPressurePoint]:
        return visible_readings(self.readings)

    @property
    def is_empty(self) -> bool:
        return not self.series and not self.visible_readings

    @property
    def status_text(self) -> str:
        if self.loading:
            return "Loading..."
        if self.error is not None:
            return f"Error: {self.error}"
        if self.is_empty:
            return NO_DATA_TEXT
        return date_range_label(self.date_range)


@dataclass(frozen=True)
class FetchStarted:
    date_range: DateRange


@dataclass(frozen=True)
class SeriesLoaded:
    points: tuple[DailyPoint, ...]


@dataclass(frozen=True)
class ReadingsLoaded:
    systolic: tuple[DailyPoint, ...]
    diastolic: tuple[DailyPoint, ...]


@dataclass(frozen=True)
class FetchFailed:
    message: str


Event = FetchStarted | SeriesLoaded | ReadingsLoaded | FetchFailed


def reduce(state: ViewState, event: Event) -> ViewState:
    """Return the state that follows ``event``.

    Summaries are derived here from the series they describe, so both always
    change together.
    """
    if isinstance(event, FetchStarted):
        return ViewState(
            metric_id=state.metric_id,
            date_range=event.date_range,
            loading=True,
        )
    if isinstance(event, FetchFailed):
        return replace(state, loading=False, error=event.message)
    label = date_range_label(state.date_range)
    if isinstance(event, SeriesLoaded):
        series = tuple(visible_points(event.points, state.metric_id))
        return replace(
            state,
            loading=False,
            error=None,
            series=series,
            summary=summarize(series, descriptor(state.metric_id).kind, label),
        )
    if isinstance(event, ReadingsLoaded):
        readings = tuple(pair(event.systolic, event.diastolic))
        return replace(
            state,
            loading=False,
            error=None,
            readings=readings,
            pressure_summary=summarize_blood_pressure(readings, label),
        )
    raise TypeError(f"Unknown event: {event!r}")
