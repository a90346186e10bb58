"""
Storage configuration model and validation.

This module defines the StorageConfig dataclass which encapsulates the
settings for exporting day bucket records to tabular files. Day buckets
themselves are always stored as JSON so they stay human-inspectable.
"""

from typing import Literal, Dict, Any
from dataclasses import dataclass

SUPPORTED_EXPORT_FORMATS = ("parquet", "csv")
SUPPORTED_COMPRESSIONS = ("snappy", "gzip", "brotli", "lz4", "zstd")


@dataclass
class StorageConfig:
    """
    Configuration model for record export settings.

    Attributes:
        export_format: File format used by the export command
            - 'parquet': Columnar format with compression (default)
            - 'csv': Plain text, one row per sample
        compression: Compression algorithm for Parquet exports
            - 'snappy': Fast compression/decompression (default)
            - 'gzip': Higher compression ratio, slower
            - 'brotli': Very high compression ratio
            - 'lz4': Very fast compression
            - 'zstd': Modern balanced compression

    Note:
        Compression setting only applies to Parquet exports.
    """

    export_format: Literal["parquet", "csv"] = "parquet"
    compression: Literal["snappy", "gzip", "brotli", "lz4", "zstd"] = "snappy"

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "StorageConfig":
        """
        Create a StorageConfig instance from a dictionary.

        Raises:
            ValueError: If invalid configuration values are provided
        """
        export_format = config_dict.get("export_format", "parquet")
        compression = config_dict.get("compression", "snappy")

        if export_format not in SUPPORTED_EXPORT_FORMATS:
            raise ValueError(f"Unsupported export format: {export_format}")

        if export_format == "parquet" and compression not in SUPPORTED_COMPRESSIONS:
            raise ValueError(f"Unsupported compression algorithm: {compression}")

        return cls(export_format=export_format, compression=compression)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "export_format": self.export_format,
            "compression": self.compression,
        }
