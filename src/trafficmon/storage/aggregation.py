"""
Aggregate computation for day buckets and rollups.

Day aggregates are a pure function of a bucket's record list and are always
recomputed from scratch; there is no incremental update path that could
drift. Records carry cumulative counter values, so the largest value seen
for a resource during the day stands in for that resource's total.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Tuple

from ..models.buckets import DayBucket
from ..models.samples import RateSample


@dataclass
class _ResourceStats:
    resource_class: str
    max_bytes_in: int = 0
    max_bytes_out: int = 0
    peak_speed_in: float = 0.0
    peak_speed_out: float = 0.0


def _resource_stats(records: Iterable[RateSample]) -> Dict[str, _ResourceStats]:
    stats: Dict[str, _ResourceStats] = {}
    for record in records:
        entry = stats.get(record.resource)
        if entry is None:
            entry = stats[record.resource] = _ResourceStats(record.resource_class)
        entry.max_bytes_in = max(entry.max_bytes_in, record.bytes_in)
        entry.max_bytes_out = max(entry.max_bytes_out, record.bytes_out)
        entry.peak_speed_in = max(entry.peak_speed_in, record.speed_in)
        entry.peak_speed_out = max(entry.peak_speed_out, record.speed_out)
    return stats


def _tick_averages(records: Iterable[RateSample]) -> Tuple[float, float]:
    """
    Mean over ticks of the rate summed across resources.

    Records sharing a timestamp belong to the same tick. With a fixed
    sampling interval this is the time-weighted average throughput.
    """
    ticks: Dict[datetime, List[float]] = defaultdict(lambda: [0.0, 0.0])
    for record in records:
        tick = ticks[record.timestamp]
        tick[0] += record.speed_in
        tick[1] += record.speed_out
    if not ticks:
        return 0.0, 0.0
    count = len(ticks)
    return (
        sum(t[0] for t in ticks.values()) / count,
        sum(t[1] for t in ticks.values()) / count,
    )


def recompute(bucket: DayBucket) -> DayBucket:
    """
    Recompute every aggregate of a bucket from its record list, in place.

    Returns:
        The same bucket, for chaining.
    """
    stats = _resource_stats(bucket.records)

    summary: Dict[str, int] = {}
    class_summary: Dict[str, int] = defaultdict(int)
    total_in = total_out = 0
    peak_in = peak_out = 0.0

    for name in sorted(stats):
        entry = stats[name]
        total_in += entry.max_bytes_in
        total_out += entry.max_bytes_out
        peak_in = max(peak_in, entry.peak_speed_in)
        peak_out = max(peak_out, entry.peak_speed_out)
        summary[f"{name}_in"] = entry.max_bytes_in
        summary[f"{name}_out"] = entry.max_bytes_out
        class_summary[f"{entry.resource_class}_in"] += entry.max_bytes_in
        class_summary[f"{entry.resource_class}_out"] += entry.max_bytes_out

    bucket.total_bytes_in = total_in
    bucket.total_bytes_out = total_out
    bucket.peak_speed_in = peak_in
    bucket.peak_speed_out = peak_out
    bucket.avg_speed_in, bucket.avg_speed_out = _tick_averages(bucket.records)
    bucket.summary = summary
    bucket.class_summary = dict(class_summary)
    return bucket


def merge_summaries(target: Dict[str, int], source: Dict[str, int]) -> None:
    """Add every value of ``source`` into ``target`` key by key."""
    for key, value in source.items():
        target[key] = target.get(key, 0) + value
