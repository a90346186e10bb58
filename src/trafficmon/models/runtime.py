"""
Runtime data models.

This module contains the state held by a running collector and the result
type produced by one rate estimation pass.
"""

import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .counters import CounterSnapshot
from .samples import RateSample


@dataclass
class TickResult:
    """
    Outcome of estimating one resource class for one tick.

    ``discarded`` is set when the elapsed-time guard rejected the tick; in
    that case ``samples`` is empty and the caller still adopts the new
    snapshot as its baseline.
    """

    samples: List[RateSample] = field(default_factory=list)
    discarded: bool = False
    elapsed: Optional[float] = None


@dataclass
class CollectorState:
    """
    Process-wide state of one collector instance.

    The previous snapshots are owned by the sampling loop; the retention loop
    and readers never touch them.
    """

    previous: Dict[str, CounterSnapshot] = field(default_factory=dict)
    running: bool = False
    stop_event: threading.Event = field(default_factory=threading.Event)
    ticks_completed: int = 0
    ticks_discarded: int = 0
    source_failures: int = 0
    storage_failures: int = 0
    samples_written: int = 0

