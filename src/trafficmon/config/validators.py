"""
Configuration validation utilities.

This module provides specialized validation functions for the collector and
storage sections of the configuration file.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ..models.config import (
    AppConfig,
    CollectorConfig,
    DEFAULT_DISK_EXCLUDE_PREFIXES,
    DEFAULT_NETWORK_EXCLUDE_PREFIXES,
)
from ..models.counters import ResourceClass
from ..validation import (
    ValidationError,
    validate_enum_choice,
    validate_positive_float,
    validate_positive_integer,
    validate_string_list,
)
from .loader import resolve_data_dir
from .storage_config import StorageConfig

logger = logging.getLogger(__name__)

VALID_RESOURCE_CLASSES = [rc.value for rc in ResourceClass]


def validate_collector_config(
    collector_data: Dict[str, Any], config_dir: Optional[Path] = None
) -> CollectorConfig:
    """
    Validate and create a CollectorConfig from raw configuration data.

    Args:
        collector_data: Raw [collector] table from TOML
        config_dir: Directory of the config file, for relative data_dir values

    Returns:
        Validated CollectorConfig instance

    Raises:
        ValidationError: If validation fails
    """
    interval_seconds = validate_positive_float(
        collector_data.get("interval_seconds", 5.0),
        min_value=0.1,
        max_value=3600.0,
        field_name="collector.interval_seconds",
    )

    retention_days = validate_positive_integer(
        collector_data.get("retention_days", 30),
        min_value=0,
        max_value=3650,
        field_name="collector.retention_days",
    )

    cleanup_interval_hours = validate_positive_float(
        collector_data.get("cleanup_interval_hours", 24.0),
        min_value=0.001,
        max_value=24.0 * 30,
        field_name="collector.cleanup_interval_hours",
    )

    max_elapsed_seconds = validate_positive_float(
        collector_data.get("max_elapsed_seconds", 60.0),
        min_value=1.0,
        max_value=3600.0,
        field_name="collector.max_elapsed_seconds",
    )
    if interval_seconds >= max_elapsed_seconds:
        # Every tick would be discarded by the elapsed-time guard.
        raise ValidationError(
            "collector.interval_seconds must be smaller than "
            f"collector.max_elapsed_seconds ({interval_seconds} >= {max_elapsed_seconds})",
            field_name="collector.interval_seconds",
            value=interval_seconds,
        )

    shutdown_timeout = validate_positive_float(
        collector_data.get("shutdown_timeout", 5.0),
        min_value=0.1,
        max_value=60.0,
        field_name="collector.shutdown_timeout",
    )

    resource_classes = validate_string_list(
        collector_data.get("resource_classes", list(VALID_RESOURCE_CLASSES)),
        field_name="collector.resource_classes",
    )
    if not resource_classes:
        raise ValidationError(
            "collector.resource_classes must name at least one resource class",
            field_name="collector.resource_classes",
            value=resource_classes,
        )
    for i, rc in enumerate(resource_classes):
        validate_enum_choice(
            rc, VALID_RESOURCE_CLASSES, field_name=f"collector.resource_classes[{i}]"
        )

    network_exclude_prefixes = validate_string_list(
        collector_data.get("network_exclude_prefixes", list(DEFAULT_NETWORK_EXCLUDE_PREFIXES)),
        field_name="collector.network_exclude_prefixes",
    )
    disk_exclude_prefixes = validate_string_list(
        collector_data.get("disk_exclude_prefixes", list(DEFAULT_DISK_EXCLUDE_PREFIXES)),
        field_name="collector.disk_exclude_prefixes",
    )

    raw_data_dir = collector_data.get("data_dir", "data/traffic")
    if not isinstance(raw_data_dir, str) or not raw_data_dir.strip():
        raise ValidationError(
            "collector.data_dir must be a non-empty string",
            field_name="collector.data_dir",
            value=raw_data_dir,
        )
    data_dir = resolve_data_dir(raw_data_dir, config_dir or Path.cwd())

    return CollectorConfig(
        data_dir=data_dir,
        interval_seconds=interval_seconds,
        retention_days=retention_days,
        cleanup_interval_hours=cleanup_interval_hours,
        max_elapsed_seconds=max_elapsed_seconds,
        resource_classes=resource_classes,
        network_exclude_prefixes=network_exclude_prefixes,
        disk_exclude_prefixes=disk_exclude_prefixes,
        shutdown_timeout=shutdown_timeout,
    )


def validate_storage_config(storage_data: Dict[str, Any]) -> StorageConfig:
    """
    Validate the [storage] table.

    Raises:
        ValidationError: If the export format or compression is unsupported
    """
    try:
        return StorageConfig.from_dict(storage_data)
    except ValueError as e:
        raise ValidationError(str(e), field_name="storage", value=storage_data)


def validate_app_config(main_data: Dict[str, Any], config_dir: Optional[Path] = None) -> AppConfig:
    """Validate a whole parsed config.toml and assemble the AppConfig."""
    collector = validate_collector_config(main_data.get("collector", {}), config_dir)
    storage = validate_storage_config(main_data.get("storage", {}))
    logger.debug(
        f"Validated configuration: data_dir={collector.data_dir}, "
        f"interval={collector.interval_seconds}s, retention={collector.retention_days}d"
    )
    return AppConfig(collector=collector, storage=storage)
