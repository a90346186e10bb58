"""
Unit tests for storage configuration.
"""

import pytest

from trafficmon.config.storage_config import StorageConfig


@pytest.mark.unit
class TestStorageConfig:
    """Test cases for StorageConfig class."""

    def test_default_values(self):
        config = StorageConfig()
        assert config.export_format == "parquet"
        assert config.compression == "snappy"

    def test_from_dict(self):
        config = StorageConfig.from_dict({"export_format": "parquet", "compression": "gzip"})

        assert config.export_format == "parquet"
        assert config.compression == "gzip"

    def test_from_dict_defaults(self):
        config = StorageConfig.from_dict({})

        assert config.export_format == "parquet"
        assert config.compression == "snappy"

    def test_from_dict_csv_ignores_compression(self):
        config = StorageConfig.from_dict({"export_format": "csv", "compression": "whatever"})

        assert config.export_format == "csv"

    def test_from_dict_invalid_format(self):
        with pytest.raises(ValueError) as excinfo:
            StorageConfig.from_dict({"export_format": "xlsx"})

        assert "Unsupported export format" in str(excinfo.value)

    def test_from_dict_invalid_compression(self):
        with pytest.raises(ValueError) as excinfo:
            StorageConfig.from_dict({"export_format": "parquet", "compression": "invalid"})

        assert "Unsupported compression algorithm" in str(excinfo.value)

    def test_to_dict(self):
        config = StorageConfig(export_format="csv", compression="lz4")

        assert config.to_dict() == {"export_format": "csv", "compression": "lz4"}
