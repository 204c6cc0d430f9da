"""Agrupación de muestras por día calendario local (suma o promedio)."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime, tzinfo

import pandas as pd
from dateutil import tz

from health_togo.metrics import MetricId, MetricKind, descriptor, value_transform
from health_togo.model import DailyPoint, RawSample


def local_tz() -> tzinfo:
    """Return the device timezone, resolved on every call."""
    return tz.tzlocal()


def local_day(timestamp: datetime, zone: tzinfo | None = None) -> date:
    """Calendar day of ``timestamp`` in ``zone`` (naive values are local)."""
    zone = zone or local_tz()
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=zone).date()
    return timestamp.astimezone(zone).date()


def samples_to_frame(
    samples: Sequence[RawSample], zone: tzinfo | None = None
) -> pd.DataFrame:
    """Convert raw samples to a DataFrame with their local day."""
    zone = zone or local_tz()
    rows = [
        {"day": local_day(s.timestamp, zone), "value": float(s.value)}
        for s in samples
    ]
    return pd.DataFrame(rows, columns=["day", "value"])


def aggregate_daily(frame: pd.DataFrame, kind: MetricKind) -> pd.DataFrame:
    """Reduce a sample frame to one row per day (sum or mean)."""
    how = "sum" if kind is MetricKind.CUMULATIVE else "mean"
    daily = frame.groupby("day", as_index=False).agg(value=("value", how))
    return daily.sort_values("day").reset_index(drop=True)


def normalize_samples(
    samples: Sequence[RawSample],
    metric_id: MetricId,
    zone: tzinfo | None = None,
) -> list[DailyPoint]:
    """Turn raw samples into a sparse daily series.

    Days without samples produce no point. The metric transform is applied
    once, after aggregation.

    Args:
        samples: Raw samples of one metric.
        metric_id: Metric the samples belong to.
        zone: Timezone used for the day boundaries (default: local).

    Returns:
        Daily points sorted by day.
    """
    frame = samples_to_frame(samples, zone)
    if frame.empty:
        return []
    daily = aggregate_daily(frame, descriptor(metric_id).kind)
    transform = value_transform(metric_id)
    return [
        DailyPoint(day=row.day, value=transform(float(row.value)))
        for row in daily.itertuples(index=False)
    ]


def build_calendar(min_day: date, max_day: date) -> pd.DataFrame:
    """Build inclusive day calendar DataFrame."""
    days = pd.date_range(start=min_day, end=max_day, freq="D")
    return pd.DataFrame({"day": days.date})


def bucket_daily(
    samples: Sequence[RawSample],
    kind: MetricKind,
    start: date,
    end: date,
    zone: tzinfo | None = None,
) -> list[DailyPoint]:
    """One untransformed bucket per day in ``[start, end]``.

    Days without samples yield value 0, as a bucketed statistics query does.
    """
    calendar = build_calendar(start, end)
    frame = samples_to_frame(samples, zone)
    if frame.empty:
        merged = calendar.assign(value=0.0)
    else:
        merged = calendar.merge(aggregate_daily(frame, kind), on="day", how="left")
        merged["value"] = merged["value"].fillna(0.0)
    return [
        DailyPoint(day=row.day, value=float(row.value))
        for row in merged.itertuples(index=False)
    ]


def visible_points(
    points: Sequence[DailyPoint], metric_id: MetricId
) -> list[DailyPoint]:
    """Drop "no measurement" days for metrics where 0 is that sentinel."""
    if not descriptor(metric_id).drop_zero_days:
        return list(points)
    return [p for p in points if p.value > 0]
