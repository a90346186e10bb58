"""
Tabular export of day bucket records.

This module turns persisted day buckets into Polars DataFrames and writes
them out as Parquet or CSV, using the configured export format and
compression.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Iterable, List, Optional

import polars as pl

from ..config.storage_config import StorageConfig
from ..models.buckets import DayBucket
from ..validation import StorageIOError
from .traffic_store import TrafficStore

logger = logging.getLogger(__name__)

RECORD_SCHEMA = {
    "date": pl.Utf8,
    "timestamp": pl.Datetime("us"),
    "resource": pl.Utf8,
    "resource_class": pl.Utf8,
    "speed_in": pl.Float64,
    "speed_out": pl.Float64,
    "ops_in_rate": pl.Float64,
    "ops_out_rate": pl.Float64,
    "bytes_in": pl.Int64,
    "bytes_out": pl.Int64,
    "ops_in": pl.Int64,
    "ops_out": pl.Int64,
    "utilization": pl.Float64,
    "latency_in_ms": pl.Float64,
    "latency_out_ms": pl.Float64,
}

DAILY_SCHEMA = {
    "date": pl.Utf8,
    "records": pl.Int64,
    "total_bytes_in": pl.Int64,
    "total_bytes_out": pl.Int64,
    "peak_speed_in": pl.Float64,
    "peak_speed_out": pl.Float64,
    "avg_speed_in": pl.Float64,
    "avg_speed_out": pl.Float64,
}


def records_frame(buckets: Iterable[DayBucket]) -> pl.DataFrame:
    """
    Flatten the records of the given buckets into one DataFrame.

    Each row is one RateSample with its bucket date prepended. The column
    set is fixed, so an empty input yields an empty frame with the full
    schema.
    """
    rows = []
    for bucket in buckets:
        for record in bucket.records:
            row = record.to_dict()
            row["timestamp"] = record.timestamp
            row["date"] = bucket.date
            rows.append(row)
    return pl.DataFrame(rows, schema=RECORD_SCHEMA)


def daily_frame(buckets: Iterable[DayBucket]) -> pl.DataFrame:
    """One row of aggregates per bucket."""
    rows = [
        {
            "date": b.date,
            "records": len(b.records),
            "total_bytes_in": b.total_bytes_in,
            "total_bytes_out": b.total_bytes_out,
            "peak_speed_in": b.peak_speed_in,
            "peak_speed_out": b.peak_speed_out,
            "avg_speed_in": b.avg_speed_in,
            "avg_speed_out": b.avg_speed_out,
        }
        for b in buckets
    ]
    return pl.DataFrame(rows, schema=DAILY_SCHEMA)


class RecordExporter:
    """
    Exports records from a TrafficStore to Parquet or CSV files.

    Args:
        store: Store to read day buckets from
        storage_config: Export format and compression settings
    """

    def __init__(self, store: TrafficStore, storage_config: Optional[StorageConfig] = None):
        self.store = store
        self.storage_config = storage_config or StorageConfig()
        logger.debug(
            f"Initialized RecordExporter with format: {self.storage_config.export_format}"
        )

    def collect(self, start: date, end: date) -> List[DayBucket]:
        """Existing buckets from ``start`` to ``end`` inclusive, ascending."""
        if end < start:
            start, end = end, start
        return [
            b
            for b in (self.store.get_day(d) for d in self.store.list_dates() if start <= d <= end)
            if b is not None
        ]

    def export(self, start: date, end: date, output: Path) -> Optional[Path]:
        """
        Write every record between ``start`` and ``end`` to ``output``.

        The configured format's extension is applied to ``output``.

        Returns:
            The written path, or None when the range holds no records

        Raises:
            StorageIOError: If the file cannot be written
        """
        df = records_frame(self.collect(start, end))
        if df.is_empty():
            logger.warning(f"No records between {start} and {end}; nothing exported")
            return None

        fmt = self.storage_config.export_format
        path = Path(output).with_suffix(f".{fmt}")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            if fmt == "parquet":
                df.write_parquet(path, compression=self.storage_config.compression)
            else:
                df.write_csv(path)
        except OSError as e:
            raise StorageIOError(f"Cannot export records to {path}: {e}", path=str(path)) from e

        logger.info(f"Exported {len(df)} records to: {path}")
        return path
