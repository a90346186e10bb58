"""
Rate estimation from cumulative counter snapshots.
"""

from .estimator import (
    DEFAULT_MAX_ELAPSED_SECONDS,
    counter_delta,
    elapsed_is_valid,
    estimate,
    estimate_tick,
)

__all__ = [
    "DEFAULT_MAX_ELAPSED_SECONDS",
    "counter_delta",
    "elapsed_is_valid",
    "estimate",
    "estimate_tick",
]
