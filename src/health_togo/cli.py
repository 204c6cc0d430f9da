"""CLI para resumir y exportar a CSV métricas diarias de salud."""

from __future__ import annotations

import argparse
import asyncio
import logging
from dataclasses import replace
from datetime import date
from pathlib import Path

from health_togo.controller import SCREENS, MetricController, controller_for
from health_togo.errors import PremiumRequired
from health_togo.fetch import RangeFetcher
from health_togo.metrics import MetricId
from health_togo.model import DateRange
from health_togo.render import render_lines
from health_togo.sources.json_export import ExportPaths, JsonExportStore
from health_togo.storage import AppConfig, SQLiteConfigStore

_METRIC_CHOICES = list(dict.fromkeys([*SCREENS, *(m.value for m in MetricId)]))


def _positive_days(raw: str) -> int:
    days = int(raw)
    if days <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive number of days: {raw}")
    return days


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description="Daily health metrics: summary and CSV export."
    )
    parser.add_argument(
        "--base-dir",
        default=None,
        help="Folder with health_export_*.json (default: configured source_dir).",
    )
    parser.add_argument(
        "--metric",
        default=MetricId.STEP_COUNT.value,
        choices=_METRIC_CHOICES,
        help="Metric to show (default: step_count).",
    )
    parser.add_argument("--start", type=date.fromisoformat, help="YYYY-MM-DD.")
    parser.add_argument("--end", type=date.fromisoformat, help="YYYY-MM-DD.")
    parser.add_argument(
        "--days",
        type=_positive_days,
        default=None,
        help="Days back from today when --start is not given.",
    )
    parser.add_argument(
        "--all-time",
        action="store_true",
        help="Read every sample ever recorded (premium).",
    )
    parser.add_argument("--export", action="store_true", help="Write CSV (premium).")
    parser.add_argument("--out-dir", default=None, help="CSV output folder.")
    parser.add_argument(
        "--config",
        default=str(Path.cwd() / "health_togo.sqlite3"),
        help="Preferences database.",
    )
    parser.add_argument(
        "--set-premium",
        choices=["on", "off"],
        default=None,
        help="Store the premium entitlement before running.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logs.")
    return parser.parse_args(argv)


def requested_range(ns: argparse.Namespace, config: AppConfig) -> DateRange:
    """Date range asked on the command line."""
    if ns.all_time:
        return DateRange.all_time()
    end = ns.end or date.today()
    if ns.start is not None:
        return DateRange.bounded(ns.start, end)
    days = ns.days if ns.days is not None else config.default_days
    return DateRange.last_days(days, today=end)


async def _load(controller: MetricController, date_range: DateRange) -> None:
    await controller.change_range(date_range)


def main() -> int:
    """Run the summary/export CLI.

    Returns:
        Exit code (0 on success).
    """
    ns = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config_store = SQLiteConfigStore(Path(ns.config).expanduser())
    config = config_store.load_config()
    if ns.set_premium is not None:
        config = replace(config, is_premium=ns.set_premium == "on")
        config_store.save_config(config)

    base_dir = ns.base_dir or config.source_dir or str(Path.home() / "health_togo")
    store = JsonExportStore(ExportPaths(root=Path(base_dir).expanduser().resolve()))
    store.validate()
    export_file = store.newest_export()
    count = store.load_export(export_file)

    controller = controller_for(ns.metric, RangeFetcher(store), config)
    try:
        asyncio.run(_load(controller, requested_range(ns, config)))
    except PremiumRequired as exc:
        print(f"Premium: {exc}")
        return 2

    print(f"OK: Export file: {export_file} ({count} samples)")
    for line in render_lines(controller):
        print(line)
    if controller.state.error is not None:
        return 1

    if ns.export:
        out_dir = Path(ns.out_dir).expanduser() if ns.out_dir else None
        try:
            out_path = controller.export_csv(out_dir)
        except PremiumRequired as exc:
            print(f"Premium: {exc}")
            return 2
        print(f"OK: Output: {out_path}")
    return 0
