"""
Day bucket and rollup data models.

DayBucket is the unit of persistence: one calendar day's ordered sample list
plus aggregates derived from it. WeekRollup and MonthRollup are read-only
views computed on demand from the day buckets they cover and are never
written to disk.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .samples import RateSample


@dataclass
class DayBucket:
    """
    All samples captured on one calendar date and their aggregates.

    The aggregate fields are owned by ``storage.aggregation.recompute`` and
    must only ever be set from the full record list.

    Attributes:
        date: ISO date string (YYYY-MM-DD) keying the bucket.
        records: Samples in the order they were appended (chronological).
        total_bytes_in: Sum over resources of each resource's largest
            cumulative bytes-in value seen that day.
        total_bytes_out: Same for bytes-out.
        peak_speed_in: Highest in-rate of any single resource.
        peak_speed_out: Highest out-rate of any single resource.
        avg_speed_in: Mean over ticks of the in-rate summed across resources.
        avg_speed_out: Same for the out-rate.
        summary: ``<resource>_in`` / ``<resource>_out`` -> cumulative bytes.
        class_summary: ``<class>_in`` / ``<class>_out`` -> summed bytes.
    """

    date: str
    records: List[RateSample] = field(default_factory=list)
    total_bytes_in: int = 0
    total_bytes_out: int = 0
    peak_speed_in: float = 0.0
    peak_speed_out: float = 0.0
    avg_speed_in: float = 0.0
    avg_speed_out: float = 0.0
    summary: Dict[str, int] = field(default_factory=dict)
    class_summary: Dict[str, int] = field(default_factory=dict)

    @property
    def resources(self) -> List[str]:
        """Sorted names of every resource that has at least one record."""
        return sorted({r.resource for r in self.records})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "total_bytes_in": self.total_bytes_in,
            "total_bytes_out": self.total_bytes_out,
            "peak_speed_in": self.peak_speed_in,
            "peak_speed_out": self.peak_speed_out,
            "avg_speed_in": self.avg_speed_in,
            "avg_speed_out": self.avg_speed_out,
            "summary": dict(self.summary),
            "class_summary": dict(self.class_summary),
            "records": [r.to_dict() for r in self.records],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DayBucket":
        return cls(
            date=data["date"],
            records=[RateSample.from_dict(r) for r in data.get("records") or []],
            total_bytes_in=int(data.get("total_bytes_in", 0)),
            total_bytes_out=int(data.get("total_bytes_out", 0)),
            peak_speed_in=float(data.get("peak_speed_in", 0.0)),
            peak_speed_out=float(data.get("peak_speed_out", 0.0)),
            avg_speed_in=float(data.get("avg_speed_in", 0.0)),
            avg_speed_out=float(data.get("avg_speed_out", 0.0)),
            summary={k: int(v) for k, v in (data.get("summary") or {}).items()},
            class_summary={k: int(v) for k, v in (data.get("class_summary") or {}).items()},
        )


@dataclass
class WeekRollup:
    """Totals for one ISO-8601 week (Monday to Sunday)."""

    week: str
    start_date: str
    end_date: str
    total_bytes_in: int = 0
    total_bytes_out: int = 0
    days: List[DayBucket] = field(default_factory=list)
    summary: Dict[str, int] = field(default_factory=dict)
    class_summary: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "week": self.week,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "total_bytes_in": self.total_bytes_in,
            "total_bytes_out": self.total_bytes_out,
            "summary": dict(self.summary),
            "class_summary": dict(self.class_summary),
            "days": [d.to_dict() for d in self.days],
        }


@dataclass
class MonthRollup:
    """
    Totals for one calendar month.

    ``weeks`` lists every ISO week that overlaps the month, so a week that
    straddles a month boundary appears in both months.
    """

    month: str
    total_bytes_in: int = 0
    total_bytes_out: int = 0
    days: List[DayBucket] = field(default_factory=list)
    weeks: List[WeekRollup] = field(default_factory=list)
    summary: Dict[str, int] = field(default_factory=dict)
    class_summary: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "total_bytes_in": self.total_bytes_in,
            "total_bytes_out": self.total_bytes_out,
            "summary": dict(self.summary),
            "class_summary": dict(self.class_summary),
            "weeks": [w.to_dict() for w in self.weeks],
            "days": [d.to_dict() for d in self.days],
        }
