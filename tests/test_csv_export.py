from __future__ import annotations

import io
from datetime import date
from pathlib import Path

import pandas as pd

from health_togo.csv_export import (
    export_filename,
    serialize,
    serialize_blood_pressure,
    write_export,
)
from health_togo.model import BloodPressurePoint, DailyPoint, DateRange


def test_serialize_header_and_rows() -> None:
    text = serialize(
        [DailyPoint(date(2026, 1, 1), 1000.0), DailyPoint(date(2026, 1, 2), 22.3)],
        "Steps",
    )
    assert text.splitlines() == ["Date,Steps", "2026-01-01,1000.0", "2026-01-02,22.3"]
    assert "\r" not in text


def test_serialize_empty_series_has_header_only() -> None:
    assert serialize([], "Weight") == "Date,Weight\n"


def test_serialize_reads_back_to_same_points() -> None:
    points = [DailyPoint(date(2026, 1, 1), 80.5), DailyPoint(date(2026, 1, 3), 79.9)]
    frame = pd.read_csv(io.StringIO(serialize(points, "Weight")))
    back = [
        DailyPoint(date.fromisoformat(row.Date), row.Weight)
        for row in frame.itertuples(index=False)
    ]
    assert back == points


def test_serialize_blood_pressure_missing_side_is_empty() -> None:
    readings = [
        BloodPressurePoint(date(2026, 1, 1), 120, 80),
        BloodPressurePoint(date(2026, 1, 2), None, 75),
        BloodPressurePoint(date(2026, 1, 3), 0, 0),
    ]
    assert serialize_blood_pressure(readings).splitlines() == [
        "Date,Systolic,Diastolic",
        "2026-01-01,120,80",
        "2026-01-02,,75",
    ]


def test_export_filename_bounded() -> None:
    r = DateRange.bounded(date(2026, 1, 1), date(2026, 1, 31))
    assert export_filename("Steps", r) == "Steps_20260101_to_20260131.csv"


def test_export_filename_all_time_keeps_padded_sentinel_year() -> None:
    r = DateRange.all_time(today=date(2026, 1, 31))
    assert export_filename("FatPct", r) == "FatPct_00010101_to_20260131.csv"


def test_write_export_creates_folder(tmp_path: Path) -> None:
    out = write_export("Date,Steps\n", "Steps.csv", tmp_path / "nested")
    assert out == tmp_path / "nested" / "Steps.csv"
    assert out.read_text(encoding="utf-8") == "Date,Steps\n"
