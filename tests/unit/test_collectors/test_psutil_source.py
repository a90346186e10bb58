"""
Unit tests for the psutil-backed counter source.
"""

from collections import namedtuple
from unittest.mock import patch

import pytest

from trafficmon.collectors.base import is_included
from trafficmon.collectors.psutil_source import PsutilCounterSource
from trafficmon.models.counters import ResourceClass
from trafficmon.validation import SourceUnavailableError

snetio = namedtuple(
    "snetio",
    ["bytes_sent", "bytes_recv", "packets_sent", "packets_recv", "errin", "errout", "dropin", "dropout"],
)
sdiskio_linux = namedtuple(
    "sdiskio",
    ["read_count", "write_count", "read_bytes", "write_bytes", "read_time", "write_time",
     "read_merged_count", "write_merged_count", "busy_time"],
)
sdiskio_minimal = namedtuple(
    "sdiskio", ["read_count", "write_count", "read_bytes", "write_bytes"]
)


@pytest.mark.unit
class TestPsutilCounterSource:
    """Test cases for PsutilCounterSource."""

    def test_network_counters(self):
        raw = {
            "eth0": snetio(500, 1000, 5, 10, 0, 0, 0, 0),
            "lo": snetio(42, 42, 1, 1, 0, 0, 0, 0),
        }
        source = PsutilCounterSource(clock=lambda: 1234.5)

        with patch("trafficmon.collectors.psutil_source.psutil.net_io_counters", return_value=raw) as net:
            snapshot = source.get_current_counters(ResourceClass.NETWORK)

        net.assert_called_once_with(pernic=True, nowrap=True)
        assert snapshot.resource_class is ResourceClass.NETWORK
        assert snapshot.timestamp == 1234.5
        assert set(snapshot) == {"eth0", "lo"}
        eth0 = snapshot.get("eth0")
        assert eth0.bytes_in == 1000
        assert eth0.bytes_out == 500
        assert eth0.ops_in == 10
        assert eth0.ops_out == 5

    def test_disk_counters(self):
        raw = {"sda": sdiskio_linux(10, 20, 4096, 8192, 30, 40, 0, 0, 55)}
        source = PsutilCounterSource(clock=lambda: 1.0)

        with patch("trafficmon.collectors.psutil_source.psutil.disk_io_counters", return_value=raw) as disk:
            snapshot = source.get_current_counters("disk")

        disk.assert_called_once_with(perdisk=True, nowrap=True)
        sda = snapshot.get("sda")
        assert sda.bytes_in == 4096
        assert sda.bytes_out == 8192
        assert sda.ops_in == 10
        assert sda.ops_out == 20
        assert sda.time_in_ms == 30
        assert sda.time_out_ms == 40
        assert sda.busy_time_ms == 55

    def test_disk_counters_without_timings(self):
        raw = {"disk0": sdiskio_minimal(1, 2, 3, 4)}

        with patch("trafficmon.collectors.psutil_source.psutil.disk_io_counters", return_value=raw):
            snapshot = PsutilCounterSource().get_current_counters(ResourceClass.DISK)

        assert snapshot.get("disk0").busy_time_ms == 0
        assert snapshot.get("disk0").time_in_ms == 0

    def test_no_disks_reported(self):
        with patch("trafficmon.collectors.psutil_source.psutil.disk_io_counters", return_value=None):
            with pytest.raises(SourceUnavailableError) as exc_info:
                PsutilCounterSource().get_current_counters(ResourceClass.DISK)

        assert exc_info.value.resource_class == "disk"

    def test_psutil_error_wrapped(self):
        with patch(
            "trafficmon.collectors.psutil_source.psutil.net_io_counters",
            side_effect=PermissionError("denied"),
        ):
            with pytest.raises(SourceUnavailableError) as exc_info:
                PsutilCounterSource().get_current_counters(ResourceClass.NETWORK)

        assert "denied" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, PermissionError)

    def test_unknown_resource_class(self):
        with pytest.raises(ValueError):
            PsutilCounterSource().get_current_counters("gpu")


@pytest.mark.unit
class TestIsIncluded:
    """Test cases for the exclude-prefix filter."""

    @pytest.mark.parametrize(
        "name,included",
        [
            ("eth0", True),
            ("lo", False),
            ("docker0", False),
            ("veth1a2b", False),
            ("br-1234", False),
            ("bridge0", True),
        ],
    )
    def test_network_defaults(self, name, included):
        prefixes = ["lo", "docker", "veth", "br-", "virbr", "tap", "tun"]
        assert is_included(name, prefixes) is included

    def test_empty_prefix_ignored(self):
        assert is_included("eth0", ["", "lo"]) is True
