"""
Unit tests for record export.
"""

from datetime import date, datetime
from unittest.mock import patch

import polars as pl
import pytest

from trafficmon.config.storage_config import StorageConfig
from trafficmon.models.samples import RateSample
from trafficmon.storage.data_manager import RecordExporter, daily_frame, records_frame
from trafficmon.storage.traffic_store import TrafficStore
from trafficmon.validation import StorageIOError


@pytest.fixture
def populated_store(temp_dir, fixed_today):
    store = TrafficStore(temp_dir / "traffic", today=fixed_today(date(2025, 1, 15)))
    for day in (13, 14, 15):
        store.append_many(
            [
                RateSample(
                    timestamp=datetime(2025, 1, day, 12, 0, 0),
                    resource="eth0",
                    resource_class="network",
                    speed_in=100.0 * day,
                    bytes_in=1000 * day,
                ),
                RateSample(
                    timestamp=datetime(2025, 1, day, 12, 0, 0),
                    resource="sda",
                    resource_class="disk",
                    speed_out=50.0,
                    bytes_out=2048,
                    utilization=12.5,
                ),
            ]
        )
    return store


@pytest.mark.unit
class TestFrames:
    """Test cases for DataFrame construction."""

    def test_records_frame(self, populated_store):
        buckets = [populated_store.get_day(date(2025, 1, 13))]

        df = records_frame(buckets)

        assert len(df) == 2
        assert df["date"].to_list() == ["2025-01-13", "2025-01-13"]
        assert df["resource"].to_list() == ["eth0", "sda"]
        assert df["timestamp"].dtype == pl.Datetime("us")
        assert df["utilization"].to_list() == [0.0, 12.5]

    def test_records_frame_empty_has_schema(self):
        df = records_frame([])

        assert df.is_empty()
        assert "speed_in" in df.columns
        assert "latency_out_ms" in df.columns

    def test_daily_frame(self, populated_store):
        df = daily_frame(populated_store.get_recent(3))

        assert df["date"].to_list() == ["2025-01-13", "2025-01-14", "2025-01-15"]
        assert df["records"].to_list() == [2, 2, 2]
        assert df["total_bytes_in"].to_list() == [13000, 14000, 15000]


@pytest.mark.unit
class TestRecordExporter:
    """Test cases for RecordExporter."""

    def test_export_parquet(self, populated_store, temp_dir):
        exporter = RecordExporter(populated_store, StorageConfig(export_format="parquet", compression="zstd"))

        path = exporter.export(date(2025, 1, 14), date(2025, 1, 15), temp_dir / "out" / "traffic")

        assert path == temp_dir / "out" / "traffic.parquet"
        df = pl.read_parquet(path)
        assert len(df) == 4
        assert sorted(set(df["date"].to_list())) == ["2025-01-14", "2025-01-15"]

    def test_export_csv(self, populated_store, temp_dir):
        exporter = RecordExporter(populated_store, StorageConfig(export_format="csv"))

        path = exporter.export(date(2025, 1, 13), date(2025, 1, 13), temp_dir / "traffic")

        assert path.suffix == ".csv"
        df = pl.read_csv(path)
        assert len(df) == 2

    def test_export_swapped_range(self, populated_store, temp_dir):
        exporter = RecordExporter(populated_store)

        buckets = exporter.collect(date(2025, 1, 15), date(2025, 1, 14))

        assert [b.date for b in buckets] == ["2025-01-14", "2025-01-15"]

    def test_export_empty_range(self, populated_store, temp_dir):
        exporter = RecordExporter(populated_store)

        assert exporter.export(date(2024, 1, 1), date(2024, 1, 31), temp_dir / "none") is None
        assert not (temp_dir / "none.parquet").exists()

    def test_export_write_failure(self, populated_store, temp_dir):
        exporter = RecordExporter(populated_store, StorageConfig(export_format="csv"))

        with patch.object(pl.DataFrame, "write_csv", side_effect=OSError("read-only")):
            with pytest.raises(StorageIOError):
                exporter.export(date(2025, 1, 13), date(2025, 1, 15), temp_dir / "traffic")
