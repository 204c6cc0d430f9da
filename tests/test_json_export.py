from __future__ import annotations

import asyncio
import json
from datetime import date, datetime, timezone
from pathlib import Path

import pytest
from dateutil import tz

from health_togo.fetch import RangeFetcher
from health_togo.metrics import MetricId
from health_togo.model import DateRange
from health_togo.sources.json_export import (
    ExportPaths,
    JsonExportStore,
    _extract_json_list,
    _parse_timestamp,
)


def _write(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_load_export_groups_samples_by_type(tmp_path: Path) -> None:
    p = _write(
        tmp_path / "health_export_2026-01-31.json",
        [
            {"type": "step_count", "timestamp": "2026-01-01T08:00:00Z", "value": 500},
            {"type": "step_count", "timestamp": "2026-01-01T18:00:00Z", "value": 700},
            {"type": "body_mass", "epoch": 1767268800, "value": 80.5},
        ],
    )
    store = JsonExportStore(ExportPaths(root=tmp_path))
    assert store.load_export(p) == 3

    fetcher = RangeFetcher(store, tz.tzutc())
    asyncio.run(fetcher.authorize([MetricId.STEP_COUNT]))
    series = asyncio.run(
        fetcher.fetch(MetricId.STEP_COUNT, DateRange.all_time(date(2026, 1, 31)))
    )
    assert [(p.day, p.value) for p in series] == [(date(2026, 1, 1), 1200.0)]


def test_load_export_skips_unusable_items(tmp_path: Path) -> None:
    p = _write(
        tmp_path / "mixed.json",
        [
            {"type": "heart_rate", "timestamp": "2026-01-01T08:00:00", "value": 61},
            {"type": "glucose", "timestamp": "2026-01-01T08:00:00", "value": 100},
            {"type": "heart_rate", "timestamp": "2026-01-01T09:00:00"},
            "string",
            42,
            None,
        ],
    )
    store = JsonExportStore(ExportPaths(root=tmp_path))
    assert store.load_export(p) == 1


def test_load_export_tolerates_leading_log_lines(tmp_path: Path) -> None:
    p = tmp_path / "health_export_log.json"
    p.write_text(
        'INFO exporting\n[{"type": "step_count", "epoch": 0, "value": 1}]',
        encoding="utf-8",
    )
    assert JsonExportStore(ExportPaths(root=tmp_path)).load_export(p) == 1


def test_load_export_not_list_raises(tmp_path: Path) -> None:
    p = tmp_path / "obj.json"
    p.write_text('{"a": 1}', encoding="utf-8")
    with pytest.raises(ValueError, match="must be a list"):
        JsonExportStore(ExportPaths(root=tmp_path)).load_export(p)


def test_load_export_invalid_json_raises(tmp_path: Path) -> None:
    p = tmp_path / "bad.json"
    p.write_text("not json", encoding="utf-8")
    with pytest.raises(json.JSONDecodeError):
        JsonExportStore(ExportPaths(root=tmp_path)).load_export(p)


def test_load_export_missing_timestamp_and_epoch_raises(tmp_path: Path) -> None:
    p = _write(tmp_path / "no_ts.json", [{"type": "step_count", "value": 1}])
    with pytest.raises(ValueError, match="Missing timestamp"):
        JsonExportStore(ExportPaths(root=tmp_path)).load_export(p)


def test_validate_raises_when_root_missing(tmp_path: Path) -> None:
    missing = tmp_path / "noexiste"
    with pytest.raises(FileNotFoundError, match=str(missing)):
        JsonExportStore(ExportPaths(root=missing)).validate()


def test_newest_export_raises_when_no_files(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="No health_export_"):
        JsonExportStore(ExportPaths(root=tmp_path)).newest_export()


def test_newest_export_ignores_other_files(tmp_path: Path) -> None:
    (tmp_path / "other.json").write_text("[]", encoding="utf-8")
    p = _write(tmp_path / "health_export_1.json", [])
    assert JsonExportStore(ExportPaths(root=tmp_path)).newest_export() == p


def test_extract_json_list() -> None:
    assert _extract_json_list("noise [1, 2]") == [1, 2]
    assert _extract_json_list('{"a": 1}') == {"a": 1}


def test_parse_timestamp_variants() -> None:
    aware = _parse_timestamp("2026-01-31T11:57:00+01:00", None)
    assert aware.utcoffset() is not None
    assert aware.astimezone(timezone.utc) == datetime(
        2026, 1, 31, 10, 57, tzinfo=timezone.utc
    )
    assert _parse_timestamp("2026-01-31T11:57:00", None).tzinfo is not None
    from_epoch = _parse_timestamp("", 0)
    assert from_epoch.astimezone(timezone.utc).year == 1970
    fractional = _parse_timestamp(None, 1767268800.5)
    assert fractional.microsecond == 500000
    with pytest.raises(ValueError, match="Missing timestamp"):
        _parse_timestamp(None, None)
