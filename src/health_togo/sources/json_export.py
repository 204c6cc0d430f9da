"""Lectura de exportaciones JSON de muestras de salud."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from dateutil import parser as date_parser

from health_togo.metrics import MetricId
from health_togo.model import RawSample
from health_togo.normalize import local_tz
from health_togo.sources.base import SourcePaths
from health_togo.sources.memory import InMemoryHealthStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportPaths(SourcePaths):
    """Paths for health sample JSON exports."""

    # root: folder containing health_export_*.json


class JsonExportStore(InMemoryHealthStore):
    """Health store filled from a JSON list of samples.

    Each item looks like ``{"type": "step_count", "timestamp":
    "2026-01-31T11:57:00+01:00", "value": 1200}``; ``epoch`` seconds may
    replace ``timestamp``.
    """

    def __init__(self, paths: ExportPaths, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._paths = paths

    def validate(self) -> None:
        """Validate that the export directory exists."""
        if not self._paths.root.exists():
            raise FileNotFoundError(str(self._paths.root))

    def newest_export(self) -> Path:
        """Return newest health_export_*.json by mtime."""
        files = sorted(
            self._paths.root.glob("health_export_*.json"),
            key=lambda p: p.stat().st_mtime,
            reverse=True,
        )
        if not files:
            raise FileNotFoundError(f"No health_export_*.json in {self._paths.root}")
        return files[0]

    def load_export(self, path: Path) -> int:
        """Load samples from a JSON export into the store.

        Args:
            path: Path to JSON file.

        Returns:
            Number of samples loaded.

        Raises:
            ValueError: If JSON shape is invalid or an item has no timestamp.
        """
        text = path.read_text(encoding="utf-8")
        raw = _extract_json_list(text)
        if not isinstance(raw, list):
            raise ValueError("Health export JSON must be a list")

        loaded: dict[MetricId, list[RawSample]] = {}
        for item in raw:
            parsed = _item_to_sample(item)
            if parsed is None:
                continue
            metric_id, sample = parsed
            loaded.setdefault(metric_id, []).append(sample)

        for metric_id, samples in loaded.items():
            self.add_samples(metric_id, samples)
        count = sum(len(s) for s in loaded.values())
        logger.info("Loaded %d samples from %s", count, path)
        return count


def _item_to_sample(item: Any) -> tuple[MetricId, RawSample] | None:
    """Convierte un ítem en muestra; None si falta tipo o valor."""
    if not isinstance(item, dict):
        return None
    value = item.get("value")
    if value is None:
        return None
    try:
        metric_id = MetricId(str(item.get("type")))
    except ValueError:
        logger.debug("Skipping sample of unknown type %r", item.get("type"))
        return None
    ts = _parse_timestamp(item.get("timestamp"), item.get("epoch"))
    return metric_id, RawSample(timestamp=ts, value=float(value))


def _extract_json_list(text: str) -> Any:
    """Extract JSON array from text, tolerating leading non-JSON (e.g. log lines)."""
    start = text.find("[")
    if start >= 0:
        return json.loads(text[start:])
    return json.loads(text)


def _parse_timestamp(ts_str: Any, epoch: Any) -> datetime:
    """Parse an ISO timestamp (naive means local time) or epoch seconds."""
    if isinstance(ts_str, str) and ts_str.strip():
        dt = date_parser.isoparse(ts_str.strip())
        if dt.tzinfo is None:
            return dt.replace(tzinfo=local_tz())
        return dt

    if epoch is not None:
        return datetime.fromtimestamp(float(epoch), tz=local_tz())

    raise ValueError("Missing timestamp and epoch")
