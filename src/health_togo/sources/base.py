"""Clases base para almacenes de datos de salud."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from health_togo.metrics import MetricId, MetricKind
from health_togo.model import DailyPoint, RawSample


@dataclass(frozen=True)
class SourcePaths:
    """Container for source directories."""

    root: Path


class HealthStore(ABC):
    """Read-only health data store queried by the fetch adapter.

    Query methods may raise :class:`health_togo.errors.HealthStoreError`
    subclasses (for example ``AuthorizationDenied``).
    """

    @abstractmethod
    def is_available(self) -> bool:
        """Whether health data can be read on this device."""

    @abstractmethod
    def supports(self, metric_id: MetricId) -> bool:
        """Whether the store knows this metric type."""

    @abstractmethod
    async def request_authorization(self, metric_ids: Sequence[MetricId]) -> bool:
        """Ask read access for ``metric_ids``; return ``True`` when granted."""

    @abstractmethod
    async def statistics(
        self,
        metric_id: MetricId,
        start: datetime,
        end: datetime,
        kind: MetricKind,
    ) -> list[DailyPoint] | None:
        """Return one bucket per calendar day between ``start`` and ``end``.

        Buckets hold the raw (untransformed) sum or average of the day's
        samples, 0 for days without samples. ``None`` means the query produced
        no result collection.
        """

    @abstractmethod
    async def samples(self, metric_id: MetricId) -> list[RawSample] | None:
        """Return every raw sample of the metric sorted by timestamp.

        ``None`` means the query produced no sample list.
        """
