"""
Storage module for traffic day buckets.

This module provides:
- A storage backend interface with an atomic JSON implementation
- The aggregation store that keeps one bucket per calendar day and derives
  week and month rollups from them on demand
- Retention pruning of old day buckets
- Polars-based export of records to Parquet or CSV
"""

from .aggregation import merge_summaries, recompute
from .base import DataStorage
from .data_manager import RecordExporter, daily_frame, records_frame
from .json_storage import JsonStorage
from .traffic_store import TrafficStore, to_date

__all__ = [
    "DataStorage",
    "JsonStorage",
    "RecordExporter",
    "TrafficStore",
    "daily_frame",
    "merge_summaries",
    "recompute",
    "records_frame",
    "to_date",
]
