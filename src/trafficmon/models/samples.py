"""
Rate sample data model.

A RateSample is one resource's computed throughput for one sampling tick. It
is the record type persisted inside day buckets.
"""

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict


@dataclass(frozen=True)
class RateSample:
    """
    Throughput of one resource over one tick.

    Rate fields are per second; ``bytes_*`` and ``ops_*`` are the cumulative
    counter values at the time of the sample. ``utilization`` and the latency
    fields are only meaningful for disks and stay 0 for network interfaces.
    """

    timestamp: datetime
    resource: str
    resource_class: str
    speed_in: float = 0.0
    speed_out: float = 0.0
    ops_in_rate: float = 0.0
    ops_out_rate: float = 0.0
    bytes_in: int = 0
    bytes_out: int = 0
    ops_in: int = 0
    ops_out: int = 0
    utilization: float = 0.0
    latency_in_ms: float = 0.0
    latency_out_ms: float = 0.0

    @property
    def date_key(self) -> str:
        """Calendar date (YYYY-MM-DD) of the day bucket this sample belongs to."""
        return self.timestamp.date().isoformat()

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RateSample":
        """
        Build a RateSample from its JSON form.

        Unknown keys are ignored and missing numeric fields default to 0, so
        buckets written by older versions remain readable.
        """
        return cls(
            timestamp=datetime.fromisoformat(data["timestamp"]),
            resource=data["resource"],
            resource_class=data.get("resource_class", "network"),
            speed_in=float(data.get("speed_in", 0.0)),
            speed_out=float(data.get("speed_out", 0.0)),
            ops_in_rate=float(data.get("ops_in_rate", 0.0)),
            ops_out_rate=float(data.get("ops_out_rate", 0.0)),
            bytes_in=int(data.get("bytes_in", 0)),
            bytes_out=int(data.get("bytes_out", 0)),
            ops_in=int(data.get("ops_in", 0)),
            ops_out=int(data.get("ops_out", 0)),
            utilization=float(data.get("utilization", 0.0)),
            latency_in_ms=float(data.get("latency_in_ms", 0.0)),
            latency_out_ms=float(data.get("latency_out_ms", 0.0)),
        )
