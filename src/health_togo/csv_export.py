"""Generación de CSV para exportar series diarias."""

from __future__ import annotations

import tempfile
from collections.abc import Sequence
from pathlib import Path

import pandas as pd

from health_togo.blood_pressure import visible_readings
from health_togo.model import BloodPressurePoint, DailyPoint, DateRange

BLOOD_PRESSURE_LABEL = "BloodPressure"

# strftime drops zero padding for years < 1000 on some platforms.
_FILE_DATE_FORMAT = "{0.year:04d}{0.month:02d}{0.day:02d}"


def serialize(series: Sequence[DailyPoint], metric_label: str) -> str:
    """Render ``Date,<metric_label>`` CSV, one row per point.

    Args:
        series: Daily points to export (already filtered for display).
        metric_label: Header of the value column.

    Returns:
        CSV text with ``\\n`` line endings.
    """
    frame = pd.DataFrame(
        {
            "Date": [p.day.isoformat() for p in series],
            metric_label: pd.Series([p.value for p in series], dtype="float64"),
        }
    )
    return frame.to_csv(index=False, lineterminator="\n")


def serialize_blood_pressure(readings: Sequence[BloodPressurePoint]) -> str:
    """Render ``Date,Systolic,Diastolic`` CSV; missing or zero sides are empty."""
    rows = visible_readings(readings)
    frame = pd.DataFrame(
        {
            "Date": [r.day.isoformat() for r in rows],
            "Systolic": pd.array([_field(r.systolic) for r in rows], dtype="Int64"),
            "Diastolic": pd.array([_field(r.diastolic) for r in rows], dtype="Int64"),
        }
    )
    return frame.to_csv(index=False, lineterminator="\n")


def _field(value: int | None) -> int | None:
    # 0 is a zero-filled bucket, shown as "??" and exported as an empty field.
    return value if value is not None and value > 0 else None


def export_filename(metric_label: str, date_range: DateRange) -> str:
    """``<Label>_<yyyyMMdd>_to_<yyyyMMdd>.csv``."""
    start = _FILE_DATE_FORMAT.format(date_range.start)
    end = _FILE_DATE_FORMAT.format(date_range.end)
    return f"{metric_label}_{start}_to_{end}.csv"


def write_export(text: str, filename: str, out_dir: Path | None = None) -> Path:
    """Write CSV text as UTF-8 and return the file path.

    Args:
        text: CSV document.
        filename: Target file name.
        out_dir: Destination folder (default: system temp directory).
    """
    target_dir = out_dir if out_dir is not None else Path(tempfile.gettempdir())
    target_dir.mkdir(parents=True, exist_ok=True)
    out_path = target_dir / filename
    out_path.write_text(text, encoding="utf-8")
    return out_path
