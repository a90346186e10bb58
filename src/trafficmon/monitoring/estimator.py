"""
Rate estimation from pairs of counter snapshots.

The estimator is stateless: the caller keeps the previous snapshot and passes
it in together with the current one. Three guards keep the output sane:

- Elapsed-time guard: a tick whose elapsed time is not strictly between 0 and
  ``max_elapsed`` seconds is discarded for every resource. Clock steps,
  suspended processes and badly delayed ticks would otherwise produce
  nonsensical rates.
- Monotonicity guard: a counter that went backwards (interface reset, driver
  reload) reports a rate of 0 for that field only, never a negative rate.
- First-call semantics: a resource with no previous counters gets a sample
  with zero rates and its current cumulative values, so it shows up in the
  store from the first successful scan.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from ..models.counters import CounterSnapshot, ResourceClass, ResourceCounters
from ..models.runtime import TickResult
from ..models.samples import RateSample

logger = logging.getLogger(__name__)

DEFAULT_MAX_ELAPSED_SECONDS = 60.0


def counter_delta(previous: int, current: int) -> int:
    """Increase of a cumulative counter, 0 if it went backwards."""
    if current < previous:
        return 0
    return current - previous


def elapsed_is_valid(elapsed: float, max_elapsed: float = DEFAULT_MAX_ELAPSED_SECONDS) -> bool:
    """True when a tick's elapsed time can produce a meaningful rate."""
    return 0 < elapsed < max_elapsed


def _utilization(busy_delta_ms: int, elapsed: float) -> float:
    utilization = busy_delta_ms / (elapsed * 1000) * 100
    return max(0.0, min(100.0, utilization))


def _latency(time_delta_ms: int, ops_delta: int) -> float:
    if ops_delta <= 0:
        return 0.0
    return time_delta_ms / ops_delta


def _primed_sample(
    snapshot: CounterSnapshot, resource: str, counters: ResourceCounters
) -> RateSample:
    return RateSample(
        timestamp=datetime.fromtimestamp(snapshot.timestamp),
        resource=resource,
        resource_class=ResourceClass(snapshot.resource_class).value,
        bytes_in=counters.bytes_in,
        bytes_out=counters.bytes_out,
        ops_in=counters.ops_in,
        ops_out=counters.ops_out,
    )


def estimate(
    previous: Optional[CounterSnapshot],
    current: CounterSnapshot,
    resource: str,
    max_elapsed: float = DEFAULT_MAX_ELAPSED_SECONDS,
) -> Optional[RateSample]:
    """
    Compute one resource's throughput between two snapshots.

    Args:
        previous: Snapshot from the previous tick, or None on the first tick.
        current: Snapshot from this tick.
        resource: Name of the interface or disk device.
        max_elapsed: Upper bound (exclusive) on the elapsed seconds.

    Returns:
        The RateSample, or None when the resource is missing from ``current``
        or the elapsed-time guard rejects the pair.
    """
    now = current.get(resource)
    if now is None:
        return None

    if previous is None:
        return _primed_sample(current, resource, now)

    # A rejected pair yields nothing, not even for resources new in this tick.
    elapsed = current.timestamp - previous.timestamp
    if not elapsed_is_valid(elapsed, max_elapsed):
        return None

    before = previous.get(resource)
    if before is None:
        return _primed_sample(current, resource, now)

    is_disk = ResourceClass(current.resource_class) is ResourceClass.DISK
    ops_in_delta = counter_delta(before.ops_in, now.ops_in)
    ops_out_delta = counter_delta(before.ops_out, now.ops_out)

    return RateSample(
        timestamp=datetime.fromtimestamp(current.timestamp),
        resource=resource,
        resource_class=ResourceClass(current.resource_class).value,
        speed_in=counter_delta(before.bytes_in, now.bytes_in) / elapsed,
        speed_out=counter_delta(before.bytes_out, now.bytes_out) / elapsed,
        ops_in_rate=ops_in_delta / elapsed,
        ops_out_rate=ops_out_delta / elapsed,
        bytes_in=now.bytes_in,
        bytes_out=now.bytes_out,
        ops_in=now.ops_in,
        ops_out=now.ops_out,
        utilization=(
            _utilization(counter_delta(before.busy_time_ms, now.busy_time_ms), elapsed)
            if is_disk else 0.0
        ),
        latency_in_ms=(
            _latency(counter_delta(before.time_in_ms, now.time_in_ms), ops_in_delta)
            if is_disk else 0.0
        ),
        latency_out_ms=(
            _latency(counter_delta(before.time_out_ms, now.time_out_ms), ops_out_delta)
            if is_disk else 0.0
        ),
    )


def estimate_tick(
    previous: Optional[CounterSnapshot],
    current: CounterSnapshot,
    include: Optional[Callable[[str], bool]] = None,
    max_elapsed: float = DEFAULT_MAX_ELAPSED_SECONDS,
) -> TickResult:
    """
    Estimate every resource of one class for one tick.

    Resources present in ``previous`` but not in ``current`` are skipped.
    When the elapsed-time guard fires the result is marked discarded and
    carries no samples. Samples are ordered by resource name.

    Args:
        previous: Baseline snapshot held by the caller, None on the first tick.
        current: Snapshot just captured.
        include: Optional predicate selecting which resource names to keep.
        max_elapsed: Upper bound (exclusive) on the elapsed seconds.
    """
    names = sorted(n for n in current if include is None or include(n))

    if previous is None:
        return TickResult(samples=[_primed_sample(current, n, current.get(n)) for n in names])

    elapsed = current.timestamp - previous.timestamp
    if not elapsed_is_valid(elapsed, max_elapsed):
        logger.info(
            f"Discarding {ResourceClass(current.resource_class).value} tick: "
            f"elapsed {elapsed:.3f}s outside (0, {max_elapsed}s)"
        )
        return TickResult(discarded=True, elapsed=elapsed)

    samples = []
    for name in names:
        sample = estimate(previous, current, name, max_elapsed=max_elapsed)
        if sample is not None:
            samples.append(sample)
    return TickResult(samples=samples, elapsed=elapsed)
