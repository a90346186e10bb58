"""Standalone Command-Line Tool for Generating Plots from trafficmon Data.

This script reads the day bucket files written by the trafficmon collector
and renders interactive Plotly charts.

The tool can be executed in two main modes:
1.  **Detailed Plot Mode (Default)**: For each day found, it generates a
    time-series plot of in/out throughput per resource, resampled to a
    readable interval.
2.  **Summary Plot Mode (`--summary-plot`)**: It builds a single chart of
    daily transferred bytes (bars) against the average throughput (line)
    across all days in the data directory.

Usage examples:
  # Plot every day in the data directory
  python tools/plotter.py --data-dir data/traffic

  # Plot one day, network interfaces only, averaged per minute
  python tools/plotter.py --data-dir data/traffic --date 2025-01-15 \
    --resource-class network --resample-interval 1m

  # Daily totals across all stored days
  python tools/plotter.py --data-dir data/traffic --summary-plot
"""

import argparse
import logging
import re
import sys
from pathlib import Path
from typing import List, Optional

# Third-party library imports
import pandas as pd
import plotly.graph_objects as go
import polars as pl

from trafficmon.formatting import format_traffic_size
from trafficmon.models.buckets import DayBucket
from trafficmon.storage import TrafficStore, daily_frame, records_frame
from trafficmon.validation import StorageIOError

# --- Logging Setup ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger("PlotterTool")

# --- Module Constants ---

# Resources that never exceed this rate (bytes/s) over a day are left out of
# the detailed plots to keep idle interfaces from cluttering the legend.
MIN_PEAK_SPEED_FOR_PLOT = 1.0


# --- Helper Functions ---


def _load_buckets(store: TrafficStore, day: Optional[str]) -> List[DayBucket]:
    """Load one day or every stored day, skipping unreadable files."""
    days = [day] if day else [d.isoformat() for d in store.list_dates()]
    buckets = []
    for d in days:
        try:
            bucket = store.get_day(d)
        except StorageIOError as e:
            logger.error(f"Could not read day bucket for {d}: {e}")
            continue
        if bucket is not None and bucket.records:
            buckets.append(bucket)
    return buckets


def _auto_resample_interval(df: pl.DataFrame) -> str:
    """Pick an interval that keeps a day's plot to a few hundred points."""
    span = (df["Timestamp"].max() - df["Timestamp"].min()).total_seconds()
    if span <= 600:
        return "5s"
    if span <= 3 * 3600:
        return "1m"
    return "5m"


def _prepare_speed_frame(bucket: DayBucket, args: argparse.Namespace) -> pd.DataFrame:
    """Records of one bucket as a resampled pandas frame of per-resource rates."""
    df = records_frame([bucket])
    if args.resource_class:
        df = df.filter(pl.col("resource_class") == args.resource_class)
    if df.is_empty():
        return pd.DataFrame()

    active = (
        df.group_by("resource")
        .agg(
            pl.col("speed_in").max().alias("peak_in"),
            pl.col("speed_out").max().alias("peak_out"),
        )
        .filter(
            (pl.col("peak_in") >= MIN_PEAK_SPEED_FOR_PLOT)
            | (pl.col("peak_out") >= MIN_PEAK_SPEED_FOR_PLOT)
        )
        .get_column("resource")
        .to_list()
    )
    df = df.filter(pl.col("resource").is_in(active))
    if df.is_empty():
        return pd.DataFrame()

    df = df.with_columns(pl.col("timestamp").alias("Timestamp")).sort("Timestamp")
    interval = args.resample_interval or _auto_resample_interval(df)
    resampled = (
        df.group_by_dynamic(index_column="Timestamp", every=interval, group_by="resource")
        .agg(
            pl.col("speed_in").mean().alias("speed_in"),
            pl.col("speed_out").mean().alias("speed_out"),
        )
        .fill_null(0)
    )
    return resampled.to_pandas()


def _save_plotly_figure(fig: go.Figure, base_filename: str, output_dir: Path):
    """Saves a Plotly figure to HTML and, if kaleido is available, PNG."""
    plot_filename_html = output_dir / f"{base_filename}.html"
    try:
        fig.write_html(plot_filename_html)
        logger.info(f"Interactive plot saved to: {plot_filename_html}")

        try:
            plot_filename_png = output_dir / f"{base_filename}.png"
            fig.write_image(plot_filename_png, width=1200, height=600)
            logger.info(f"Static plot saved to: {plot_filename_png}")
        except Exception:
            logger.warning(
                "Failed to save static plot to PNG. To enable this feature, "
                "install the optional 'export' dependencies: "
                "`pip install trafficmon[export]`"
            )
    except OSError as e:
        logger.error(
            f"Failed to save plot {plot_filename_html} using Plotly: {e}",
            exc_info=True,
        )


# --- Plot Builders ---


def _create_speed_figure(pdf: pd.DataFrame, day: str) -> go.Figure:
    """One line per resource and direction; out-rates drawn dashed."""
    fig = go.Figure()
    for resource, group in pdf.groupby("resource"):
        fig.add_trace(
            go.Scatter(
                x=group["Timestamp"],
                y=group["speed_in"],
                mode="lines",
                name=f"{resource} in",
            )
        )
        fig.add_trace(
            go.Scatter(
                x=group["Timestamp"],
                y=group["speed_out"],
                mode="lines",
                name=f"{resource} out",
                line={"dash": "dash"},
            )
        )
    fig.update_layout(
        title_text=f"Throughput on {day}",
        xaxis=dict(title_text="Time"),
        yaxis=dict(title_text="Bytes per second"),
        legend=dict(x=0.01, y=0.98, bordercolor="Black", borderwidth=1),
    )
    return fig


def _create_summary_figure(summary_df: pd.DataFrame) -> go.Figure:
    """Daily bytes in/out as grouped bars with the average total rate on a second axis."""
    summary_df = summary_df.sort_values("date")

    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            x=summary_df["date"],
            y=summary_df["total_bytes_in"],
            name="Bytes in",
            marker_color="cornflowerblue",
            text=[format_traffic_size(v) for v in summary_df["total_bytes_in"]],
            textposition="auto",
        )
    )
    fig.add_trace(
        go.Bar(
            x=summary_df["date"],
            y=summary_df["total_bytes_out"],
            name="Bytes out",
            marker_color="indianred",
            text=[format_traffic_size(v) for v in summary_df["total_bytes_out"]],
            textposition="auto",
        )
    )
    fig.add_trace(
        go.Scatter(
            x=summary_df["date"],
            y=summary_df["avg_speed_in"] + summary_df["avg_speed_out"],
            name="Average rate (B/s)",
            marker_color="black",
            yaxis="y2",
            mode="lines+markers",
        )
    )
    fig.update_layout(
        title_text="Daily Traffic Summary",
        xaxis=dict(title_text="Date", type="category"),
        yaxis=dict(title_text="Bytes transferred"),
        yaxis2=dict(title_text="Average rate (bytes/s)", overlaying="y", side="right"),
        legend=dict(x=0.01, y=0.98, bordercolor="Black", borderwidth=1),
        barmode="group",
    )
    return fig


def generate_summary_plot(store: TrafficStore, args: argparse.Namespace):
    """Render the daily totals chart over every stored day."""
    logger.info("--- Generating Daily Summary Plot ---")
    buckets = _load_buckets(store, None)
    if not buckets:
        logger.warning("No day buckets found. Cannot generate summary plot.")
        return

    summary_df = daily_frame(buckets).to_pandas()
    fig = _create_summary_figure(summary_df)
    _save_plotly_figure(fig, "traffic_daily_summary_plot", args.output_dir or args.data_dir)


def plot_day(bucket: DayBucket, args: argparse.Namespace):
    """Render the throughput chart for one day bucket."""
    pdf = _prepare_speed_frame(bucket, args)
    if pdf.empty:
        logger.info(f"No active resources to plot for {bucket.date}.")
        return
    fig = _create_speed_figure(pdf, bucket.date)
    suffix = f"_{args.resource_class}" if args.resource_class else ""
    _save_plotly_figure(
        fig, f"traffic_{bucket.date}{suffix}_speed_plot", args.output_dir or args.data_dir
    )


def main():
    """Main command-line interface function for the plotter tool."""
    parser = argparse.ArgumentParser(
        description="Generate plots from trafficmon day bucket files.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        required=True,
        help="Required. Directory containing traffic_<YYYY-MM-DD>.json files.",
    )
    parser.add_argument(
        "--date",
        type=str,
        help="Only plot this day (YYYY-MM-DD).",
    )
    parser.add_argument(
        "--resource-class",
        choices=["network", "disk"],
        help="Only plot resources of this class.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory to save plots. Defaults to --data-dir.",
    )
    parser.add_argument(
        "--resample-interval",
        type=str,
        help="Override automatic resampling. Use Polars interval string (e.g., '10s', '1m').",
    )
    parser.add_argument(
        "--summary-plot",
        action="store_true",
        help="Generate a single chart of daily totals across all stored days.",
    )

    args = parser.parse_args()

    if not args.data_dir.is_dir():
        logger.error(f"Data directory not found: {args.data_dir}")
        sys.exit(1)

    if args.date is not None and not re.match(r"^\d{4}-\d{2}-\d{2}$", args.date):
        logger.error(f"Invalid --date value '{args.date}'. Expected YYYY-MM-DD.")
        sys.exit(1)

    if args.resample_interval is not None and not re.match(r"^\d+[smhd]$", args.resample_interval):
        logger.error(
            f"Invalid resample interval format '{args.resample_interval}'. "
            "Expected format: number followed by s/m/h/d (e.g., '10s', '1m')."
        )
        sys.exit(1)

    if args.output_dir is not None:
        try:
            args.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Cannot create output directory '{args.output_dir}': {e}")
            sys.exit(1)

    store = TrafficStore(args.data_dir)

    if args.summary_plot:
        generate_summary_plot(store, args)
        return

    logger.info(f"Searching for day buckets in: {args.data_dir}")
    buckets = _load_buckets(store, args.date)
    if not buckets:
        logger.info(f"No traffic data files found in {args.data_dir}.")
        return

    logger.info(f"Found {len(buckets)} day bucket(s) to plot.")
    for bucket in buckets:
        logger.info(f"--- Generating plot for {bucket.date} ---")
        plot_day(bucket, args)


if __name__ == "__main__":
    main()
