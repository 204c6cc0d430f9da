"""Controladores de pantalla: autorización, carga protegida y exportación CSV."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from datetime import date
from pathlib import Path

from health_togo.csv_export import (
    BLOOD_PRESSURE_LABEL,
    export_filename,
    serialize,
    serialize_blood_pressure,
    write_export,
)
from health_togo.errors import HealthStoreError, PremiumRequired
from health_togo.fetch import RangeFetcher
from health_togo.metrics import MetricId, descriptor
from health_togo.model import DateRange
from health_togo.state import (
    Event,
    FetchFailed,
    FetchStarted,
    ReadingsLoaded,
    SeriesLoaded,
    ViewState,
    reduce,
)
from health_togo.storage import AppConfig

logger = logging.getLogger(__name__)

BLOOD_PRESSURE = "blood_pressure"
TIMEOUT_TEXT = "The health store did not answer in time"
CANCELLED_TEXT = "Loading was cancelled"

# Screens offered by the app, in menu order.
SCREENS: tuple[str, ...] = (
    MetricId.BODY_MASS.value,
    MetricId.BODY_MASS_INDEX.value,
    MetricId.BODY_FAT_PERCENTAGE.value,
    MetricId.HEART_RATE.value,
    BLOOD_PRESSURE,
    MetricId.STEP_COUNT.value,
    MetricId.DISTANCE_WALKING_RUNNING.value,
)


class MetricController:
    """Owns the state of one metric screen.

    Only one fetch runs at a time: a refresh requested while another is in
    flight is dropped, not queued. All state changes go through
    :func:`health_togo.state.reduce`.
    """

    def __init__(
        self,
        fetcher: RangeFetcher,
        metric_id: MetricId,
        config: AppConfig,
        *,
        today: date | None = None,
        timeout: float | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._config = config
        self._today = today
        self._timeout = timeout
        self._authorized = False
        self.state = ViewState(
            metric_id=MetricId(metric_id),
            date_range=DateRange.last_days(config.default_days, today=today),
        )

    @property
    def metric_ids(self) -> tuple[MetricId, ...]:
        return (self.state.metric_id,)

    @property
    def title(self) -> str:
        return descriptor(self.state.metric_id).title

    @property
    def csv_label(self) -> str:
        return descriptor(self.state.metric_id).csv_label

    def dispatch(self, event: Event) -> ViewState:
        self.state = reduce(self.state, event)
        return self.state

    async def refresh(self) -> bool:
        """Fetch the current range; return ``False`` if dropped as re-entrant."""
        if self.state.loading:
            logger.debug("Fetch for %s dropped: one is in flight", self.title)
            return False
        date_range = self.state.date_range
        self.dispatch(FetchStarted(date_range))
        try:
            event = await asyncio.wait_for(
                self._authorize_and_load(date_range), self._timeout
            )
        except HealthStoreError as exc:
            logger.warning("Fetch for %s failed: %s", self.title, exc.message)
            event = FetchFailed(exc.message)
        except asyncio.TimeoutError:
            logger.warning("Fetch for %s timed out", self.title)
            event = FetchFailed(TIMEOUT_TEXT)
        except asyncio.CancelledError:
            logger.debug("Fetch for %s cancelled", self.title)
            self.dispatch(FetchFailed(CANCELLED_TEXT))
            raise
        except Exception as exc:
            self.dispatch(FetchFailed(str(exc)))
            raise
        self.dispatch(event)
        return True

    async def change_range(self, date_range: DateRange) -> bool:
        """Switch to ``date_range`` and fetch it.

        Raises:
            PremiumRequired: All-time ranges without the premium entitlement.
        """
        if date_range.is_all_time and not self._config.is_premium:
            raise PremiumRequired(PremiumRequired.ALL_DATA)
        if self.state.loading:
            logger.debug("Range change for %s dropped: fetch in flight", self.title)
            return False
        self.state = replace(self.state, date_range=date_range)
        return await self.refresh()

    async def set_all_time(self, enabled: bool) -> bool:
        if enabled:
            return await self.change_range(DateRange.all_time(today=self._today))
        return await self.change_range(
            DateRange.last_days(self._config.default_days, today=self._today)
        )

    def export_csv(self, out_dir: Path | None = None) -> Path:
        """Write the displayed series as CSV and return the file path.

        Raises:
            PremiumRequired: Without the premium entitlement.
        """
        if not self._config.is_premium:
            raise PremiumRequired(PremiumRequired.CSV_EXPORT)
        if out_dir is None and self._config.export_dir:
            out_dir = Path(self._config.export_dir).expanduser()
        filename = export_filename(self.csv_label, self.state.date_range)
        out_path = write_export(self._csv_text(), filename, out_dir)
        logger.info("Exported %s to %s", self.title, out_path)
        return out_path

    async def _authorize_and_load(self, date_range: DateRange) -> Event:
        if not self._authorized:
            await self._fetcher.authorize(self.metric_ids)
            self._authorized = True
        return await self._load(date_range)

    async def _load(self, date_range: DateRange) -> Event:
        points = await self._fetcher.fetch(self.state.metric_id, date_range)
        return SeriesLoaded(tuple(points))

    def _csv_text(self) -> str:
        return serialize(self.state.series, self.csv_label)


class BloodPressureController(MetricController):
    """Screen that joins the systolic and diastolic series by day."""

    def __init__(
        self,
        fetcher: RangeFetcher,
        config: AppConfig,
        *,
        today: date | None = None,
        timeout: float | None = None,
    ) -> None:
        super().__init__(
            fetcher,
            MetricId.BLOOD_PRESSURE_SYSTOLIC,
            config,
            today=today,
            timeout=timeout,
        )

    @property
    def metric_ids(self) -> tuple[MetricId, ...]:
        return (MetricId.BLOOD_PRESSURE_SYSTOLIC, MetricId.BLOOD_PRESSURE_DIASTOLIC)

    @property
    def title(self) -> str:
        return "Blood Pressure"

    @property
    def csv_label(self) -> str:
        return BLOOD_PRESSURE_LABEL

    async def _load(self, date_range: DateRange) -> Event:
        systolic, diastolic = await self._fetcher.fetch_pair(
            MetricId.BLOOD_PRESSURE_SYSTOLIC,
            MetricId.BLOOD_PRESSURE_DIASTOLIC,
            date_range,
        )
        return ReadingsLoaded(tuple(systolic), tuple(diastolic))

    def _csv_text(self) -> str:
        return serialize_blood_pressure(self.state.readings)


def controller_for(
    screen: str,
    fetcher: RangeFetcher,
    config: AppConfig,
    *,
    today: date | None = None,
    timeout: float | None = None,
) -> MetricController:
    """Build the controller for a screen key (metric id or ``blood_pressure``).

    Raises:
        KeyError: If ``screen`` is not a known metric.
    """
    if screen == BLOOD_PRESSURE:
        return BloodPressureController(fetcher, config, today=today, timeout=timeout)
    metric = descriptor(screen)
    return MetricController(
        fetcher, metric.metric_id, config, today=today, timeout=timeout
    )
