"""
trafficmon: Network and disk traffic collector with daily, weekly and monthly rollups.

This package periodically samples cumulative OS counters, converts them into
rates, and stores the samples in per-day buckets that can be queried by day,
ISO week, calendar month or recent days, subject to a retention policy.

The package is organized into specialized modules:
- config: Configuration management and validation
- models: Data structures and type definitions
- validation: Input validation and error handling
- collectors: Counter snapshot sources
- monitoring: Rate estimation
- storage: Day bucket persistence, rollups, retention and export
- orchestration: Sampling and retention loops, signal handling
- cli: Command-line interface

Usage:
    From command line:
        trafficmon run
        trafficmon week --json

    Programmatically:
        from trafficmon import TrafficCollector, get_config
        config = get_config()
        collector = TrafficCollector(config.collector)
        collector.start()
        ...
        collector.stop()
"""

# Configuration must be imported before models (models.config depends on it)
from .config import clear_config_cache, get_config, set_config_path

# Model classes for external use
from .models import (
    AppConfig,
    CollectorConfig,
    CounterSnapshot,
    DayBucket,
    MonthRollup,
    RateSample,
    ResourceClass,
    ResourceCounters,
    TickResult,
    WeekRollup,
)

# Core components
from .collectors import AbstractCounterSource, PsutilCounterSource
from .monitoring import estimate, estimate_tick
from .storage import RecordExporter, TrafficStore
from .orchestration import TrafficCollector
from .formatting import format_speed, format_traffic_size
from .cli import main_cli

# Error taxonomy
from .validation import (
    AlreadyRunningError,
    NotRunningError,
    SourceUnavailableError,
    StorageIOError,
    TrafficMonitorError,
    ValidationError,
)

__version__ = "1.0.0"

__all__ = [
    # Configuration
    "get_config",
    "clear_config_cache",
    "set_config_path",
    # Models
    "AppConfig",
    "CollectorConfig",
    "CounterSnapshot",
    "DayBucket",
    "MonthRollup",
    "RateSample",
    "ResourceClass",
    "ResourceCounters",
    "TickResult",
    "WeekRollup",
    # Components
    "AbstractCounterSource",
    "PsutilCounterSource",
    "estimate",
    "estimate_tick",
    "RecordExporter",
    "TrafficStore",
    "TrafficCollector",
    "format_speed",
    "format_traffic_size",
    "main_cli",
    # Errors
    "TrafficMonitorError",
    "SourceUnavailableError",
    "StorageIOError",
    "AlreadyRunningError",
    "NotRunningError",
    "ValidationError",
]
