"""Tabla de métricas: tipo de agregación, unidades y etiquetas por métrica."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum


class MetricKind(Enum):
    """How a metric is reduced to one value per day."""

    CUMULATIVE = "cumulative"
    DISCRETE = "discrete"


class MetricId(str, Enum):
    """Metric identifiers understood by the health store."""

    STEP_COUNT = "step_count"
    DISTANCE_WALKING_RUNNING = "distance_walking_running"
    ACTIVE_ENERGY_BURNED = "active_energy_burned"
    BASAL_ENERGY_BURNED = "basal_energy_burned"
    FLIGHTS_CLIMBED = "flights_climbed"
    HEART_RATE = "heart_rate"
    BODY_MASS = "body_mass"
    HEIGHT = "height"
    BODY_MASS_INDEX = "body_mass_index"
    BODY_FAT_PERCENTAGE = "body_fat_percentage"
    BLOOD_PRESSURE_SYSTOLIC = "blood_pressure_systolic"
    BLOOD_PRESSURE_DIASTOLIC = "blood_pressure_diastolic"


@dataclass(frozen=True)
class UnitDescriptor:
    """Store unit and the unit shown next to values."""

    store_unit: str
    display: str


@dataclass(frozen=True)
class MetricDescriptor:
    """Everything a metric screen needs to know about one metric.

    Attributes:
        metric_id: Store identifier.
        kind: Sum or average per day.
        unit: Store and display units.
        title: Screen title.
        label: Name used in summary text.
        csv_label: Column header and filename prefix for CSV export.
        scale: Multiplier applied once to each aggregated daily value.
        drop_zero_days: Whether value 0 means "no measurement" for display/export.
        decimals: Decimals used when formatting values for display.
    """

    metric_id: MetricId
    kind: MetricKind
    unit: UnitDescriptor
    title: str
    label: str
    csv_label: str
    scale: float = 1.0
    drop_zero_days: bool = False
    decimals: int = 0

    @property
    def is_cumulative(self) -> bool:
        return self.kind is MetricKind.CUMULATIVE


_COUNT = UnitDescriptor("count", "")
_MMHG = UnitDescriptor("mmHg", "mmHg")

METRICS: dict[MetricId, MetricDescriptor] = {
    d.metric_id: d
    for d in (
        MetricDescriptor(
            MetricId.STEP_COUNT,
            MetricKind.CUMULATIVE,
            UnitDescriptor("count", "steps"),
            title="Steps",
            label="Steps",
            csv_label="Steps",
        ),
        MetricDescriptor(
            MetricId.DISTANCE_WALKING_RUNNING,
            MetricKind.CUMULATIVE,
            UnitDescriptor("m", "meters"),
            title="Walk/Run distance",
            label="Distance",
            csv_label="Distance",
        ),
        MetricDescriptor(
            MetricId.ACTIVE_ENERGY_BURNED,
            MetricKind.CUMULATIVE,
            UnitDescriptor("kcal", "kcal"),
            title="Active Energy",
            label="Active Energy",
            csv_label="ActiveEnergy",
        ),
        MetricDescriptor(
            MetricId.BASAL_ENERGY_BURNED,
            MetricKind.CUMULATIVE,
            UnitDescriptor("kcal", "kcal"),
            title="Resting Energy",
            label="Resting Energy",
            csv_label="BasalEnergy",
        ),
        MetricDescriptor(
            MetricId.FLIGHTS_CLIMBED,
            MetricKind.CUMULATIVE,
            UnitDescriptor("count", "flights"),
            title="Flights Climbed",
            label="Flights",
            csv_label="Flights",
        ),
        MetricDescriptor(
            MetricId.HEART_RATE,
            MetricKind.DISCRETE,
            UnitDescriptor("count/min", "BPM"),
            title="Heart Rate",
            label="Heart Rate",
            csv_label="HeartRate",
        ),
        MetricDescriptor(
            MetricId.BODY_MASS,
            MetricKind.DISCRETE,
            UnitDescriptor("kg", "Kg"),
            title="Weight",
            label="Weight",
            csv_label="Weight",
            drop_zero_days=True,
            decimals=1,
        ),
        MetricDescriptor(
            MetricId.HEIGHT,
            MetricKind.DISCRETE,
            UnitDescriptor("m", "m"),
            title="Height",
            label="Height",
            csv_label="Height",
            drop_zero_days=True,
            decimals=2,
        ),
        MetricDescriptor(
            MetricId.BODY_MASS_INDEX,
            MetricKind.DISCRETE,
            _COUNT,
            title="Body Mass Index",
            label="BMI",
            csv_label="BMI",
            drop_zero_days=True,
        ),
        MetricDescriptor(
            MetricId.BODY_FAT_PERCENTAGE,
            MetricKind.DISCRETE,
            UnitDescriptor("count", "%"),
            title="Body Fat Rate",
            label="FatPct",
            csv_label="FatPct",
            scale=100.0,
            drop_zero_days=True,
        ),
        MetricDescriptor(
            MetricId.BLOOD_PRESSURE_SYSTOLIC,
            MetricKind.DISCRETE,
            _MMHG,
            title="Systolic Pressure",
            label="Systolic",
            csv_label="Systolic",
        ),
        MetricDescriptor(
            MetricId.BLOOD_PRESSURE_DIASTOLIC,
            MetricKind.DISCRETE,
            _MMHG,
            title="Diastolic Pressure",
            label="Diastolic",
            csv_label="Diastolic",
        ),
    )
}


def descriptor(metric_id: MetricId | str) -> MetricDescriptor:
    """Return the descriptor of a metric.

    Raises:
        KeyError: If the identifier is not a supported metric.
    """
    try:
        return METRICS[MetricId(metric_id)]
    except ValueError:
        raise KeyError(metric_id) from None


def classify(metric_id: MetricId | str) -> MetricKind:
    """Return whether a metric is summed or averaged per day."""
    return descriptor(metric_id).kind


def unit(metric_id: MetricId | str) -> UnitDescriptor:
    """Return the units of a metric."""
    return descriptor(metric_id).unit


def value_transform(metric_id: MetricId | str) -> Callable[[float], float]:
    """Return the function applied to each aggregated daily value."""
    scale = descriptor(metric_id).scale
    if scale == 1.0:
        return _identity
    return lambda raw: raw * scale


def drops_zero_days(metric_id: MetricId | str) -> bool:
    """Whether value 0 is the "no data" sentinel for this metric."""
    return descriptor(metric_id).drop_zero_days


def _identity(raw: float) -> float:
    return raw
