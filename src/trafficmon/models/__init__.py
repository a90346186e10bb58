"""
Data models for the traffic monitor.

Counter models:
- Resource classes, per-resource cumulative counters and snapshots

Sample and bucket models:
- Per-tick rate samples, persisted day buckets and on-demand rollups

Configuration and runtime models:
- Collector/app configuration and the collector's process-wide state
"""

from .buckets import DayBucket, MonthRollup, WeekRollup
from .config import AppConfig, CollectorConfig
from .counters import CounterSnapshot, ResourceClass, ResourceCounters
from .runtime import CollectorState, TickResult
from .samples import RateSample

__all__ = [
    # Counters
    "CounterSnapshot",
    "ResourceClass",
    "ResourceCounters",
    # Samples and buckets
    "RateSample",
    "DayBucket",
    "WeekRollup",
    "MonthRollup",
    # Configuration
    "AppConfig",
    "CollectorConfig",
    # Runtime
    "CollectorState",
    "TickResult",
]
