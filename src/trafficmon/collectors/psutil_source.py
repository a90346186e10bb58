"""
Counter source implementation using the 'psutil' library.

This module provides the PsutilCounterSource class, which reads per-interface
network counters and per-device disk I/O counters through psutil and
converts them into CounterSnapshot objects.
"""

import logging
import time
from typing import Callable, Dict, Union

import psutil

from ..models.counters import CounterSnapshot, ResourceClass, ResourceCounters
from ..validation import SourceUnavailableError
from .base import AbstractCounterSource

logger = logging.getLogger(__name__)


class PsutilCounterSource(AbstractCounterSource):
    """
    Reads cumulative network and disk counters with psutil.

    Network interfaces map received/sent bytes and packets to the in/out
    counters. Disks map read/write bytes, counts and times; ``busy_time`` is
    only reported on Linux and FreeBSD and is 0 elsewhere.

    Attributes:
        clock: Callable returning the capture timestamp in epoch seconds.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self.clock = clock
        logger.debug("Initialized PsutilCounterSource")

    def get_current_counters(
        self, resource_class: Union[ResourceClass, str]
    ) -> CounterSnapshot:
        resource_class = ResourceClass(resource_class)
        try:
            if resource_class is ResourceClass.NETWORK:
                counters = self._read_network()
            else:
                counters = self._read_disk()
        except SourceUnavailableError:
            raise
        except Exception as e:
            # psutil raises OSError/RuntimeError subclasses depending on platform.
            raise SourceUnavailableError(resource_class.value, str(e)) from e

        snapshot = CounterSnapshot(
            resource_class=resource_class,
            timestamp=self.clock(),
            counters=counters,
        )
        logger.debug(
            f"Captured {resource_class.value} snapshot with {len(counters)} resources"
        )
        return snapshot

    def _read_network(self) -> Dict[str, ResourceCounters]:
        raw = psutil.net_io_counters(pernic=True, nowrap=True)
        if raw is None:
            raise SourceUnavailableError("network", "no network counters reported")
        return {
            name: ResourceCounters(
                bytes_in=stats.bytes_recv,
                bytes_out=stats.bytes_sent,
                ops_in=stats.packets_recv,
                ops_out=stats.packets_sent,
            )
            for name, stats in raw.items()
        }

    def _read_disk(self) -> Dict[str, ResourceCounters]:
        raw = psutil.disk_io_counters(perdisk=True, nowrap=True)
        if raw is None:
            # psutil returns None on systems without disks (e.g. some containers).
            raise SourceUnavailableError("disk", "no disk counters reported")
        return {
            name: ResourceCounters(
                bytes_in=stats.read_bytes,
                bytes_out=stats.write_bytes,
                ops_in=stats.read_count,
                ops_out=stats.write_count,
                busy_time_ms=getattr(stats, "busy_time", 0),
                time_in_ms=getattr(stats, "read_time", 0),
                time_out_ms=getattr(stats, "write_time", 0),
            )
            for name, stats in raw.items()
        }
