"""Adaptador de consultas por rango: estadísticas diarias o muestras crudas."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from datetime import tzinfo

from health_togo.errors import (
    AuthorizationDenied,
    EmptyResultSet,
    MetricUnsupported,
    NoSamplesFound,
    StoreUnavailable,
)
from health_togo.metrics import MetricId, descriptor, value_transform
from health_togo.model import DailyPoint, DateRange
from health_togo.normalize import local_tz, normalize_samples
from health_togo.sources.base import HealthStore

logger = logging.getLogger(__name__)


class RangeFetcher:
    """Reads one metric over a date range and returns its daily series.

    Bounded ranges use the store's per-day statistics (every day in range
    gets a point, 0 when empty). All-time ranges read every raw sample and
    normalize locally (days without samples are absent). Store failures
    propagate unchanged; nothing is retried.
    """

    def __init__(self, store: HealthStore, zone: tzinfo | None = None) -> None:
        self._store = store
        self._zone = zone

    def _tz(self) -> tzinfo:
        return self._zone or local_tz()

    def _check_metric(self, metric_id: MetricId) -> None:
        if not self._store.is_available():
            raise StoreUnavailable()
        if not self._store.supports(metric_id):
            raise MetricUnsupported(f"Data type not available: {metric_id.value}")

    async def authorize(self, metric_ids: Sequence[MetricId]) -> None:
        """Request read access for ``metric_ids``.

        Raises:
            StoreUnavailable: Health data is not available on this device.
            MetricUnsupported: None of the metrics is known to the store.
            AuthorizationDenied: The user did not grant access.
        """
        if not self._store.is_available():
            raise StoreUnavailable()
        supported = [m for m in metric_ids if self._store.supports(m)]
        if not supported:
            raise MetricUnsupported()
        if not await self._store.request_authorization(supported):
            raise AuthorizationDenied()

    async def fetch(
        self, metric_id: MetricId, date_range: DateRange
    ) -> list[DailyPoint]:
        """Fetch the daily series of ``metric_id`` for ``date_range``."""
        self._check_metric(metric_id)
        if date_range.is_all_time:
            return await self._fetch_all(metric_id)
        return await self._fetch_bounded(metric_id, date_range)

    async def fetch_pair(
        self,
        first: MetricId,
        second: MetricId,
        date_range: DateRange,
    ) -> tuple[list[DailyPoint], list[DailyPoint]]:
        """Fetch two metrics concurrently; both must succeed.

        When both fail, the error of ``first`` is raised.
        """
        results = await asyncio.gather(
            self.fetch(first, date_range),
            self.fetch(second, date_range),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        first_series, second_series = results
        return first_series, second_series

    async def _fetch_bounded(
        self, metric_id: MetricId, date_range: DateRange
    ) -> list[DailyPoint]:
        metric = descriptor(metric_id)
        start, end = date_range.window(self._tz())
        logger.debug("Statistics query %s from %s to %s", metric_id.value, start, end)
        buckets = await self._store.statistics(metric_id, start, end, metric.kind)
        if buckets is None:
            raise EmptyResultSet()
        transform = value_transform(metric_id)
        points = [DailyPoint(day=b.day, value=transform(b.value)) for b in buckets]
        return sorted(points, key=lambda p: p.day)

    async def _fetch_all(self, metric_id: MetricId) -> list[DailyPoint]:
        logger.debug("Raw sample query %s (all time)", metric_id.value)
        samples = await self._store.samples(metric_id)
        if samples is None:
            raise NoSamplesFound()
        return normalize_samples(samples, metric_id, self._tz())
