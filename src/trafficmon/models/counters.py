"""
Counter snapshot data models.

A snapshot captures the cumulative counters the operating system reports for
every resource of one class (network interfaces or disk devices) at a single
wall-clock instant. Snapshots are never persisted; only the rate samples
derived from pairs of them are.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, Optional


class ResourceClass(str, Enum):
    """Kinds of countable resources the collector samples."""

    NETWORK = "network"
    DISK = "disk"


@dataclass(frozen=True)
class ResourceCounters:
    """
    Cumulative counters for a single resource.

    For network interfaces "in" is received and "out" is sent, and the op
    counters are packet counts. For disks "in" is read and "out" is written,
    the op counters are read/write counts and the time fields are the
    milliseconds spent reading, writing and busy.
    """

    bytes_in: int = 0
    bytes_out: int = 0
    ops_in: int = 0
    ops_out: int = 0
    busy_time_ms: int = 0
    time_in_ms: int = 0
    time_out_ms: int = 0


@dataclass
class CounterSnapshot:
    """
    Cumulative counters for all resources of one class at one instant.

    Attributes:
        resource_class: Which kind of resources the snapshot covers.
        timestamp: Capture time as seconds since the epoch.
        counters: Mapping of resource name to its cumulative counters.
    """

    resource_class: ResourceClass
    timestamp: float
    counters: Dict[str, ResourceCounters] = field(default_factory=dict)

    def __contains__(self, resource: object) -> bool:
        return resource in self.counters

    def __iter__(self) -> Iterator[str]:
        return iter(self.counters)

    def __len__(self) -> int:
        return len(self.counters)

    def get(self, resource: str) -> Optional[ResourceCounters]:
        return self.counters.get(resource)
