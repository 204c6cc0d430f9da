"""Almacén de salud en memoria (muestras cargadas por la app o los tests)."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime

from health_togo.errors import AuthorizationDenied
from health_togo.metrics import METRICS, MetricId, MetricKind
from health_togo.model import DailyPoint, RawSample
from health_togo.normalize import bucket_daily, local_day
from health_togo.sources.base import HealthStore

logger = logging.getLogger(__name__)


class InMemoryHealthStore(HealthStore):
    """Health store backed by in-memory sample lists."""

    def __init__(
        self,
        samples: Mapping[MetricId, Iterable[RawSample]] | None = None,
        *,
        available: bool = True,
        supported: Iterable[MetricId] | None = None,
        grant_authorization: bool = True,
        authorized: Iterable[MetricId] = (),
    ) -> None:
        """Create a store.

        Args:
            samples: Initial samples per metric.
            available: Whether the store reports health data as available.
            supported: Metric types the store knows (default: all).
            grant_authorization: Answer given to authorization requests.
            authorized: Metrics readable without asking first.
        """
        self._samples: dict[MetricId, list[RawSample]] = {}
        self._available = available
        self._supported = set(supported) if supported is not None else set(METRICS)
        self._grant = grant_authorization
        self._authorized: set[MetricId] = set(authorized)
        for metric_id, items in (samples or {}).items():
            self.add_samples(metric_id, items)

    def add_samples(self, metric_id: MetricId, samples: Iterable[RawSample]) -> None:
        bucket = self._samples.setdefault(MetricId(metric_id), [])
        bucket.extend(samples)
        bucket.sort(key=lambda s: s.timestamp)

    def is_available(self) -> bool:
        return self._available

    def supports(self, metric_id: MetricId) -> bool:
        return metric_id in self._supported

    async def request_authorization(self, metric_ids: Sequence[MetricId]) -> bool:
        if self._grant:
            self._authorized.update(metric_ids)
        logger.debug("Authorization for %s granted=%s", list(metric_ids), self._grant)
        return self._grant

    async def statistics(
        self,
        metric_id: MetricId,
        start: datetime,
        end: datetime,
        kind: MetricKind,
    ) -> list[DailyPoint] | None:
        self._check_authorized(metric_id)
        zone = start.tzinfo
        in_window = [
            s
            for s in self._samples.get(metric_id, [])
            if start <= _aware(s.timestamp, start) <= end
        ]
        return bucket_daily(
            in_window,
            kind,
            local_day(start, zone),
            local_day(end, zone),
            zone,
        )

    async def samples(self, metric_id: MetricId) -> list[RawSample] | None:
        self._check_authorized(metric_id)
        return list(self._samples.get(metric_id, []))

    def _check_authorized(self, metric_id: MetricId) -> None:
        if metric_id not in self._authorized:
            raise AuthorizationDenied(
                f"Authorization not granted for {MetricId(metric_id).value}"
            )


def _aware(timestamp: datetime, reference: datetime) -> datetime:
    # Naive sample timestamps are read in the window's zone.
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=reference.tzinfo)
    return timestamp
