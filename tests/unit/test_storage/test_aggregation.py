"""
Unit tests for day bucket aggregate computation.
"""

from datetime import datetime

import pytest

from trafficmon.models.buckets import DayBucket
from trafficmon.models.samples import RateSample
from trafficmon.storage.aggregation import merge_summaries, recompute


def make_sample(ts, resource, speed_in=0.0, speed_out=0.0, bytes_in=0, bytes_out=0, resource_class="network"):
    return RateSample(
        timestamp=ts,
        resource=resource,
        resource_class=resource_class,
        speed_in=speed_in,
        speed_out=speed_out,
        bytes_in=bytes_in,
        bytes_out=bytes_out,
    )


@pytest.mark.unit
class TestRecompute:
    """Test cases for recompute()."""

    def test_cumulative_max_and_peak_per_resource(self):
        """Cumulative 100, 300, 250 for disk0 gives a day total of 300."""
        bucket = DayBucket(
            date="2025-01-15",
            records=[
                make_sample(datetime(2025, 1, 15, 10, 0, 0), "disk0", speed_in=10.0, bytes_in=100, resource_class="disk"),
                make_sample(datetime(2025, 1, 15, 10, 0, 5), "disk0", speed_in=40.0, bytes_in=300, resource_class="disk"),
                make_sample(datetime(2025, 1, 15, 10, 0, 10), "disk0", speed_in=25.0, bytes_in=250, resource_class="disk"),
            ],
        )

        recompute(bucket)

        assert bucket.summary["disk0_in"] == 300
        assert bucket.summary["disk0_out"] == 0
        assert bucket.total_bytes_in == 300
        assert bucket.peak_speed_in == 40.0
        assert bucket.class_summary == {"disk_in": 300, "disk_out": 0}

    def test_totals_sum_over_resources(self):
        ts = datetime(2025, 1, 15, 9, 0, 0)
        bucket = DayBucket(
            date="2025-01-15",
            records=[
                make_sample(ts, "eth0", bytes_in=1000, bytes_out=500),
                make_sample(ts, "wlan0", bytes_in=200, bytes_out=700),
                make_sample(ts, "sda", bytes_in=4096, bytes_out=8192, resource_class="disk"),
            ],
        )

        recompute(bucket)

        assert bucket.total_bytes_in == 1000 + 200 + 4096
        assert bucket.total_bytes_out == 500 + 700 + 8192
        assert bucket.class_summary == {
            "network_in": 1200,
            "network_out": 1200,
            "disk_in": 4096,
            "disk_out": 8192,
        }
        assert list(bucket.summary) == [
            "eth0_in", "eth0_out", "sda_in", "sda_out", "wlan0_in", "wlan0_out",
        ]

    def test_peak_is_max_single_resource(self):
        ts = datetime(2025, 1, 15, 9, 0, 0)
        bucket = DayBucket(
            date="2025-01-15",
            records=[
                make_sample(ts, "eth0", speed_in=100.0, speed_out=5.0),
                make_sample(ts, "eth1", speed_in=300.0, speed_out=1.0),
            ],
        )

        recompute(bucket)

        assert bucket.peak_speed_in == 300.0
        assert bucket.peak_speed_out == 5.0

    def test_average_over_ticks(self):
        """Rates are summed across resources per tick, then averaged over ticks."""
        t1 = datetime(2025, 1, 15, 9, 0, 0)
        t2 = datetime(2025, 1, 15, 9, 0, 5)
        bucket = DayBucket(
            date="2025-01-15",
            records=[
                make_sample(t1, "eth0", speed_in=100.0, speed_out=10.0),
                make_sample(t1, "eth1", speed_in=300.0, speed_out=30.0),
                make_sample(t2, "eth0", speed_in=200.0, speed_out=0.0),
                make_sample(t2, "eth1", speed_in=0.0, speed_out=0.0),
            ],
        )

        recompute(bucket)

        assert bucket.avg_speed_in == pytest.approx(300.0)
        assert bucket.avg_speed_out == pytest.approx(20.0)

    def test_empty_bucket(self):
        bucket = recompute(DayBucket(date="2025-01-15"))

        assert bucket.total_bytes_in == 0
        assert bucket.peak_speed_in == 0.0
        assert bucket.avg_speed_in == 0.0
        assert bucket.summary == {}
        assert bucket.class_summary == {}

    def test_idempotent(self):
        ts = datetime(2025, 1, 15, 9, 0, 0)
        bucket = DayBucket(
            date="2025-01-15",
            records=[
                make_sample(ts, "eth0", speed_in=12.5, speed_out=3.0, bytes_in=10, bytes_out=20),
                make_sample(ts, "sda", speed_in=7.0, bytes_in=99, resource_class="disk"),
            ],
        )

        first = recompute(bucket).to_dict()
        second = recompute(bucket).to_dict()

        assert first == second

    def test_overwrites_stale_aggregates(self):
        bucket = DayBucket(
            date="2025-01-15",
            records=[make_sample(datetime(2025, 1, 15), "eth0", bytes_in=5)],
            total_bytes_in=999_999,
            summary={"gone_in": 1},
        )

        recompute(bucket)

        assert bucket.total_bytes_in == 5
        assert "gone_in" not in bucket.summary


@pytest.mark.unit
def test_merge_summaries():
    target = {"eth0_in": 10}
    merge_summaries(target, {"eth0_in": 5, "eth0_out": 7})

    assert target == {"eth0_in": 15, "eth0_out": 7}
