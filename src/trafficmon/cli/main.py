"""
Command-line interface for the trafficmon network and disk traffic collector.

This module provides the main CLI entry point, handling command-line
arguments, configuration loading and dispatch to the collector and the
aggregation store's query operations.
"""

import argparse
import json
import logging
import sys
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config import get_config, set_config_path
from ..formatting import format_speed, format_traffic_size
from ..models.buckets import DayBucket, MonthRollup, WeekRollup
from ..orchestration import SignalHandler, TrafficCollector
from ..storage import RecordExporter, TrafficStore, to_date
from ..validation import (
    StorageIOError,
    ValidationError,
    handle_cli_error,
    validate_positive_integer,
)

# --- Logging Setup ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)


# --- Rendering ---

def _summary_lines(summary: Dict[str, int], indent: str = "  ") -> List[str]:
    names = sorted({key.rsplit("_", 1)[0] for key in summary})
    return [
        f"{indent}{name:<16} in {format_traffic_size(summary.get(f'{name}_in', 0)):>12}"
        f"   out {format_traffic_size(summary.get(f'{name}_out', 0)):>12}"
        for name in names
    ]


def render_day(bucket: DayBucket) -> str:
    lines = [
        f"{bucket.date}: {len(bucket.records)} records",
        f"  total    in {format_traffic_size(bucket.total_bytes_in)}"
        f"   out {format_traffic_size(bucket.total_bytes_out)}",
        f"  peak     in {format_speed(bucket.peak_speed_in)}"
        f"   out {format_speed(bucket.peak_speed_out)}",
        f"  average  in {format_speed(bucket.avg_speed_in)}"
        f"   out {format_speed(bucket.avg_speed_out)}",
    ]
    lines.extend(_summary_lines(bucket.summary))
    return "\n".join(lines)


def render_rollup(rollup: Any, label: str) -> str:
    lines = [
        f"{label}: {len(rollup.days)} days with data",
        f"  total    in {format_traffic_size(rollup.total_bytes_in)}"
        f"   out {format_traffic_size(rollup.total_bytes_out)}",
    ]
    lines.extend(_summary_lines(rollup.class_summary))
    lines.extend(_summary_lines(rollup.summary))
    if isinstance(rollup, MonthRollup):
        for week in rollup.weeks:
            lines.append(
                f"  {week.week} ({week.start_date}..{week.end_date})"
                f"  in {format_traffic_size(week.total_bytes_in)}"
                f"  out {format_traffic_size(week.total_bytes_out)}"
            )
    return "\n".join(lines)


def _emit(obj: Any, as_json: bool, text: str) -> None:
    if as_json:
        print(json.dumps(obj, indent=2, ensure_ascii=False))
    else:
        print(text)


# --- Commands ---

def cmd_run(args: argparse.Namespace, collector: TrafficCollector) -> None:
    """Run the collector until a signal arrives or the duration elapses."""
    collector.start()
    try:
        with SignalHandler(collector):
            logger.info(
                f"Collecting every {collector.config.interval_seconds}s into "
                f"{collector.store.data_dir}. Press Ctrl+C to stop."
            )
            collector.wait(timeout=args.duration)
    finally:
        collector.stop()


def cmd_sample(args: argparse.Namespace, collector: TrafficCollector) -> None:
    """Take a few synchronous ticks and print the resulting rates."""
    count = validate_positive_integer(args.count, min_value=1, field_name="--count")
    for i in range(count):
        if i:
            collector.wait(timeout=collector.config.interval_seconds)
        results = collector.run_once()
        for resource_class, result in results.items():
            if result.discarded:
                print(f"[{resource_class}] tick discarded (elapsed {result.elapsed})")
                continue
            for s in result.samples:
                print(
                    f"[{resource_class}] {s.resource:<16} "
                    f"in {format_speed(s.speed_in):>12}  out {format_speed(s.speed_out):>12}"
                )


def cmd_day(args: argparse.Namespace, store: TrafficStore) -> None:
    day = to_date(args.date) if args.date else store.today()
    bucket = store.get_day(day)
    if bucket is None:
        print(f"No traffic data for {day.isoformat()}")
        return
    _emit(bucket.to_dict(), args.json, render_day(bucket))


def cmd_week(args: argparse.Namespace, store: TrafficStore) -> None:
    iso = store.today().isocalendar()
    rollup: WeekRollup = store.get_week(args.year or iso[0], args.week or iso[1])
    _emit(rollup.to_dict(), args.json, render_rollup(rollup, rollup.week))


def cmd_month(args: argparse.Namespace, store: TrafficStore) -> None:
    today = store.today()
    rollup = store.get_month(args.year or today.year, args.month or today.month)
    _emit(rollup.to_dict(), args.json, render_rollup(rollup, rollup.month))


def cmd_recent(args: argparse.Namespace, store: TrafficStore) -> None:
    buckets = store.get_recent(args.days)
    if not buckets:
        print(f"No traffic data in the last {args.days} days")
        return
    _emit(
        [b.to_dict() for b in buckets],
        args.json,
        "\n\n".join(render_day(b) for b in buckets),
    )


def cmd_prune(args: argparse.Namespace, store: TrafficStore, retention_days: int) -> None:
    days = retention_days if args.days is None else args.days
    removed = store.prune(days)
    print(f"Removed {len(removed)} day buckets older than {days} days")
    for day in removed:
        print(f"  {day.isoformat()}")


def cmd_export(args: argparse.Namespace, exporter: RecordExporter) -> None:
    end = to_date(args.end) if args.end else exporter.store.today()
    start = to_date(args.start) if args.start else end - timedelta(days=6)
    path = exporter.export(start, end, Path(args.output))
    if path is None:
        print(f"No records between {start} and {end}")
    else:
        print(f"Exported records to {path}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trafficmon",
        description="Collect network and disk traffic rates and query daily, weekly and monthly totals.",
    )
    parser.add_argument(
        "-c", "--config", type=Path, help="Path to config.toml (defaults to conf/config.toml)."
    )
    parser.add_argument(
        "--data-dir", type=Path, help="Override the configured data directory."
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("run", help="Run the collector in the foreground.")
    p.add_argument(
        "--duration", type=float, default=None,
        help="Stop after this many seconds instead of waiting for a signal.",
    )

    p = sub.add_parser("sample", help="Take synchronous samples and print current rates.")
    p.add_argument("-n", "--count", type=int, default=2, help="Number of ticks (first one primes).")

    p = sub.add_parser("day", help="Show one day's bucket.")
    p.add_argument("date", nargs="?", help="Date as YYYY-MM-DD (defaults to today).")
    p.add_argument("--json", action="store_true", help="Print raw JSON.")

    p = sub.add_parser("week", help="Show an ISO week rollup.")
    p.add_argument("--year", type=int, help="ISO year (defaults to current).")
    p.add_argument("--week", type=int, help="ISO week number (defaults to current).")
    p.add_argument("--json", action="store_true", help="Print raw JSON.")

    p = sub.add_parser("month", help="Show a calendar month rollup.")
    p.add_argument("--year", type=int, help="Year (defaults to current).")
    p.add_argument("--month", type=int, help="Month 1-12 (defaults to current).")
    p.add_argument("--json", action="store_true", help="Print raw JSON.")

    p = sub.add_parser("recent", help="Show the most recent day buckets.")
    p.add_argument("days", nargs="?", type=int, default=7, help="Number of days (default 7).")
    p.add_argument("--json", action="store_true", help="Print raw JSON.")

    p = sub.add_parser("prune", help="Delete day buckets past the retention horizon.")
    p.add_argument("--days", type=int, help="Retention in days (defaults to config).")

    p = sub.add_parser("export", help="Export records to Parquet or CSV.")
    p.add_argument("--start", help="First date, YYYY-MM-DD (defaults to end - 6 days).")
    p.add_argument("--end", help="Last date, YYYY-MM-DD (defaults to today).")
    p.add_argument("-o", "--output", default="traffic_export", help="Output path without extension.")

    return parser


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line interface for trafficmon.

    Loads the configuration, builds the store (and the collector for the
    ``run`` and ``sample`` commands) and dispatches to the chosen command.

    Raises:
        SystemExit: On configuration errors, invalid arguments or storage failures.
    """
    args = build_parser().parse_args(argv)
    logging.getLogger().setLevel(args.log_level)

    if args.config:
        set_config_path(args.config)

    try:
        app_config = get_config()
    except (FileNotFoundError, ValidationError, ValueError) as e:
        handle_cli_error(
            error=e,
            context="configuration loading",
            exit_code=1,
            logger=logger,
        )

    collector_config = app_config.collector
    if args.data_dir:
        collector_config.data_dir = args.data_dir

    store = TrafficStore(collector_config.data_dir)

    try:
        if args.command in ("run", "sample"):
            collector = TrafficCollector(collector_config, store=store)
            if args.command == "run":
                cmd_run(args, collector)
            else:
                cmd_sample(args, collector)
        elif args.command == "day":
            cmd_day(args, store)
        elif args.command == "week":
            cmd_week(args, store)
        elif args.command == "month":
            cmd_month(args, store)
        elif args.command == "recent":
            cmd_recent(args, store)
        elif args.command == "prune":
            cmd_prune(args, store, collector_config.retention_days)
        elif args.command == "export":
            cmd_export(args, RecordExporter(store, app_config.storage))
    except (ValidationError, ValueError) as e:
        handle_cli_error(error=e, context=f"{args.command} arguments", exit_code=2, logger=logger)
    except StorageIOError as e:
        handle_cli_error(error=e, context=f"{args.command} storage access", exit_code=1, logger=logger)


if __name__ == "__main__":
    main_cli()
