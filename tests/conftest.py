"""
Pytest configuration and shared fixtures for the trafficmon test suite.

This module provides common fixtures, test utilities, and configuration
for all test modules in the trafficmon project.
"""

import shutil
import sys
import tempfile
from datetime import date, datetime
from pathlib import Path
from typing import Dict, List, Optional

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from trafficmon.collectors.base import AbstractCounterSource  # noqa: E402
from trafficmon.models.counters import (  # noqa: E402
    CounterSnapshot,
    ResourceClass,
    ResourceCounters,
)
from trafficmon.models.samples import RateSample  # noqa: E402
from trafficmon.validation import SourceUnavailableError  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def sample_config_data(temp_dir):
    """Sample configuration data for testing."""
    return {
        "collector": {
            "data_dir": str(temp_dir / "traffic"),
            "interval_seconds": 1.0,
            "retention_days": 7,
            "cleanup_interval_hours": 1.0,
            "max_elapsed_seconds": 30.0,
            "resource_classes": ["network", "disk"],
            "network_exclude_prefixes": ["lo", "docker"],
            "disk_exclude_prefixes": ["loop"],
            "shutdown_timeout": 2.0,
        },
        "storage": {
            "export_format": "parquet",
            "compression": "snappy",
        },
    }


@pytest.fixture
def config_files(temp_dir, sample_config_data):
    """Create a temporary config.toml for testing."""
    import toml

    config_file = temp_dir / "config.toml"
    with open(config_file, "w") as f:
        toml.dump(sample_config_data, f)

    return {"config": config_file, "dir": temp_dir}


# ============================================================================
# Test Utilities
# ============================================================================


class FakeCounterSource(AbstractCounterSource):
    """
    Scripted counter source.

    Each call for a resource class pops the next queued snapshot for it. A
    queued exception is raised instead of returned. When the queue runs dry
    the last snapshot is repeated with its timestamp advanced by one second.
    """

    def __init__(self):
        self.queues: Dict[str, List[object]] = {"network": [], "disk": []}
        self.last: Dict[str, CounterSnapshot] = {}
        self.calls: List[str] = []

    def push(self, resource_class, item) -> None:
        self.queues[ResourceClass(resource_class).value].append(item)

    def get_current_counters(self, resource_class) -> CounterSnapshot:
        key = ResourceClass(resource_class).value
        self.calls.append(key)
        queue = self.queues[key]
        if queue:
            item = queue.pop(0)
        elif key in self.last:
            prev = self.last[key]
            item = CounterSnapshot(prev.resource_class, prev.timestamp + 1.0, dict(prev.counters))
        else:
            raise SourceUnavailableError(key, "no snapshot scripted")
        if isinstance(item, Exception):
            raise item
        self.last[key] = item
        return item


class TestUtils:
    """Utility functions for testing."""

    @staticmethod
    def snapshot(
        resource_class,
        timestamp: float,
        **resources: ResourceCounters,
    ) -> CounterSnapshot:
        return CounterSnapshot(ResourceClass(resource_class), timestamp, dict(resources))

    @staticmethod
    def net(bytes_in: int = 0, bytes_out: int = 0, ops_in: int = 0, ops_out: int = 0):
        return ResourceCounters(bytes_in=bytes_in, bytes_out=bytes_out, ops_in=ops_in, ops_out=ops_out)

    @staticmethod
    def sample(
        timestamp: datetime,
        resource: str = "eth0",
        resource_class: str = "network",
        speed_in: float = 0.0,
        speed_out: float = 0.0,
        bytes_in: int = 0,
        bytes_out: int = 0,
    ) -> RateSample:
        return RateSample(
            timestamp=timestamp,
            resource=resource,
            resource_class=resource_class,
            speed_in=speed_in,
            speed_out=speed_out,
            bytes_in=bytes_in,
            bytes_out=bytes_out,
        )

    @staticmethod
    def epoch(year: int, month: int, day: int, hour: int = 12, minute: int = 0, second: int = 0) -> float:
        """Local wall-clock time as epoch seconds."""
        return datetime(year, month, day, hour, minute, second).timestamp()


@pytest.fixture
def test_utils():
    """Provide test utility functions."""
    return TestUtils


@pytest.fixture
def fake_source():
    return FakeCounterSource()


@pytest.fixture
def fixed_today():
    """Factory for a 'today' callable pinned to a date."""

    def _make(day: Optional[date] = None):
        pinned = day or date(2025, 1, 15)
        return lambda: pinned

    return _make


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Automatically clear configuration cache after each test."""
    original_config_path = Path(__file__).parent.parent / "conf" / "config.toml"

    yield  # Run the test

    from trafficmon.config import clear_config_cache, set_config_path

    clear_config_cache()
    set_config_path(original_config_path)
