"""
Configuration data models.

This module contains the configuration structures for the collector and the
data store, loaded from `config.toml`.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from ..config.storage_config import StorageConfig

DEFAULT_NETWORK_EXCLUDE_PREFIXES: List[str] = [
    "lo", "docker", "veth", "br-", "virbr", "tap", "tun",
]
DEFAULT_DISK_EXCLUDE_PREFIXES: List[str] = ["loop", "ram"]


@dataclass
class CollectorConfig:
    """
    Configuration for the collector's sampling and retention loops.
    """

    # Directory holding one traffic_<date>.json file per day.
    data_dir: Path = Path("data/traffic")
    # Seconds between sampling ticks.
    interval_seconds: float = 5.0
    # Day buckets older than this many days are pruned.
    retention_days: int = 30
    # Hours between retention passes.
    cleanup_interval_hours: float = 24.0
    # Ticks whose elapsed time reaches this many seconds are discarded.
    max_elapsed_seconds: float = 60.0
    # Resource classes sampled on every tick ("network", "disk").
    resource_classes: List[str] = field(default_factory=lambda: ["network", "disk"])
    # Interfaces whose name starts with one of these are not recorded.
    network_exclude_prefixes: List[str] = field(
        default_factory=lambda: list(DEFAULT_NETWORK_EXCLUDE_PREFIXES)
    )
    # Disk devices whose name starts with one of these are not recorded.
    disk_exclude_prefixes: List[str] = field(
        default_factory=lambda: list(DEFAULT_DISK_EXCLUDE_PREFIXES)
    )
    # Seconds stop() waits for each loop thread to exit.
    shutdown_timeout: float = 5.0


@dataclass
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    collector: CollectorConfig = field(default_factory=CollectorConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
