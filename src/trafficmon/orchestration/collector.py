"""
Collector scheduler.

The TrafficCollector owns two background threads that share one stop event:

- the sampling loop reads counters for every configured resource class,
  estimates rates against the previous snapshot and appends the samples to
  the store, once per interval;
- the retention loop prunes day buckets past the retention horizon once at
  start and then every ``cleanup_interval_hours``.

Neither loop lets a failure escape: source failures skip one class for one
tick, storage failures lose one tick's samples, and retention failures are
retried on the next pass.
"""

import logging
import threading
import time
from typing import Callable, Dict, List, Optional

from ..collectors.base import AbstractCounterSource, is_included
from ..collectors.psutil_source import PsutilCounterSource
from ..models.config import CollectorConfig
from ..models.counters import ResourceClass
from ..models.runtime import CollectorState, TickResult
from ..monitoring.estimator import estimate_tick
from ..storage.traffic_store import TrafficStore
from ..validation import (
    AlreadyRunningError,
    ErrorSeverity,
    NotRunningError,
    SourceUnavailableError,
    StorageIOError,
    handle_error,
)

logger = logging.getLogger(__name__)


class TrafficCollector:
    """
    Runs the sampling and retention loops for one data directory.

    Args:
        config: Collector settings
        source: Counter source, psutil-backed by default
        store: Aggregation store, created on ``config.data_dir`` by default
    """

    def __init__(
        self,
        config: CollectorConfig,
        source: Optional[AbstractCounterSource] = None,
        store: Optional[TrafficStore] = None,
    ):
        self.config = config
        self.source = source or PsutilCounterSource()
        self.store = store or TrafficStore(config.data_dir)
        self.resource_classes: List[ResourceClass] = [
            ResourceClass(rc) for rc in config.resource_classes
        ]
        self._filters: Dict[ResourceClass, Callable[[str], bool]] = {
            ResourceClass.NETWORK: self._prefix_filter(config.network_exclude_prefixes),
            ResourceClass.DISK: self._prefix_filter(config.disk_exclude_prefixes),
        }

        self._state = CollectorState()
        self._lock = threading.Lock()
        self._sampling_thread: Optional[threading.Thread] = None
        self._retention_thread: Optional[threading.Thread] = None

        logger.debug(
            f"TrafficCollector initialized for {[rc.value for rc in self.resource_classes]} "
            f"every {config.interval_seconds}s, data dir {self.store.data_dir}"
        )

    @staticmethod
    def _prefix_filter(prefixes: List[str]) -> Callable[[str], bool]:
        excluded = tuple(prefixes)
        return lambda name: is_included(name, excluded)

    @property
    def state(self) -> CollectorState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state.running

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """
        Start the sampling and retention loops.

        Raises:
            AlreadyRunningError: If the collector is already running, or a loop
                thread of the previous run outlived its stop timeout
            StorageIOError: If the data directory cannot be created
        """
        with self._lock:
            if self._state.running:
                raise AlreadyRunningError("TrafficCollector is already running")
            lingering = [
                t.name for t in (self._sampling_thread, self._retention_thread)
                if t is not None and t.is_alive()
            ]
            if lingering:
                raise AlreadyRunningError(
                    f"{', '.join(lingering)} thread from the previous run has not exited yet"
                )

            self.store.ensure_data_dir()

            logger.info("Starting TrafficCollector...")
            self._state = state = CollectorState(running=True)

            self._sampling_thread = threading.Thread(
                target=self._sampling_loop,
                args=(state,),
                name="TrafficSampling",
                daemon=True,
            )
            self._retention_thread = threading.Thread(
                target=self._retention_loop,
                args=(state,),
                name="TrafficRetention",
                daemon=True,
            )
            self._sampling_thread.start()
            self._retention_thread.start()
            logger.info("TrafficCollector started")

    def request_stop(self) -> None:
        """Signal both loops to exit without waiting for them."""
        self._state.stop_event.set()

    def stop(self, strict: bool = False) -> None:
        """
        Stop both loops and wait up to ``shutdown_timeout`` for each.

        Calling stop on a stopped collector does nothing unless ``strict``.

        Raises:
            NotRunningError: If ``strict`` and the collector is not running
        """
        with self._lock:
            if not self._state.running:
                if strict:
                    raise NotRunningError("TrafficCollector is not running")
                return

            logger.info("Stopping TrafficCollector...")
            self._state.running = False
            self._state.stop_event.set()

            for thread in (self._sampling_thread, self._retention_thread):
                if thread is None or not thread.is_alive():
                    continue
                if thread is threading.current_thread():
                    continue
                thread.join(timeout=self.config.shutdown_timeout)
                if thread.is_alive():
                    logger.warning(f"{thread.name} thread did not stop within timeout")

            if self._sampling_thread is not None and not self._sampling_thread.is_alive():
                self._sampling_thread = None
            if self._retention_thread is not None and not self._retention_thread.is_alive():
                self._retention_thread = None
            logger.info(
                f"TrafficCollector stopped after {self._state.ticks_completed} ticks, "
                f"{self._state.samples_written} samples written"
            )

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until a stop is requested. Returns True if it was."""
        return self._state.stop_event.wait(timeout)

    # ------------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------------

    def _tick_class(
        self, resource_class: ResourceClass, state: CollectorState
    ) -> Optional[TickResult]:
        try:
            current = self.source.get_current_counters(resource_class)
        except SourceUnavailableError as e:
            state.source_failures += 1
            handle_error(
                error=e,
                context=f"reading {resource_class.value} counters",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=logger,
            )
            return None

        result = estimate_tick(
            state.previous.get(resource_class.value),
            current,
            include=self._filters[resource_class],
            max_elapsed=self.config.max_elapsed_seconds,
        )
        state.previous[resource_class.value] = current

        if result.discarded:
            state.ticks_discarded += 1
            return result

        try:
            self.store.append_many(result.samples)
        except StorageIOError as e:
            state.storage_failures += 1
            handle_error(
                error=e,
                context=f"storing {len(result.samples)} {resource_class.value} samples",
                severity=ErrorSeverity.ERROR,
                reraise=False,
                logger=logger,
            )
        else:
            state.samples_written += len(result.samples)
        return result

    def run_once(self, state: Optional[CollectorState] = None) -> Dict[str, TickResult]:
        """
        Perform one sampling tick synchronously.

        Must not be called while the sampling loop is running, since both
        would update the same baseline snapshots.

        Args:
            state: Run state to update; the loops pass the state of the run
                that started them so a late tick never lands in a newer run.

        Returns:
            Tick results keyed by resource class; classes whose source
            failed are absent.
        """
        if state is None:
            state = self._state
        results = {}
        for resource_class in self.resource_classes:
            result = self._tick_class(resource_class, state)
            if result is not None:
                results[resource_class.value] = result
        state.ticks_completed += 1
        return results

    def _sampling_loop(self, state: CollectorState) -> None:
        logger.info("Sampling loop started")
        stop_event = state.stop_event
        interval = self.config.interval_seconds
        while not stop_event.is_set():
            loop_start = time.monotonic()
            try:
                self.run_once(state)
            except Exception as e:
                logger.error(f"Unexpected error in sampling tick: {e}", exc_info=True)

            elapsed = time.monotonic() - loop_start
            sleep_time = max(0.0, interval - elapsed)
            if sleep_time == 0.0:
                logger.warning(
                    f"Sampling tick took {elapsed:.3f}s, longer than interval {interval:.3f}s"
                )
            if stop_event.wait(timeout=sleep_time):
                break
        logger.info("Sampling loop finished")

    # ------------------------------------------------------------------
    # Retention
    # ------------------------------------------------------------------

    def prune_once(self) -> None:
        """Run one retention pass, logging instead of raising on failure."""
        try:
            removed = self.store.prune(self.config.retention_days)
        except StorageIOError as e:
            handle_error(
                error=e,
                context="pruning old day buckets",
                severity=ErrorSeverity.ERROR,
                reraise=False,
                logger=logger,
            )
            return
        logger.debug(f"Retention pass removed {len(removed)} day buckets")

    def _retention_loop(self, state: CollectorState) -> None:
        logger.info("Retention loop started")
        stop_event = state.stop_event
        interval = self.config.cleanup_interval_hours * 3600
        while not stop_event.is_set():
            try:
                self.prune_once()
            except Exception as e:
                logger.error(f"Unexpected error in retention pass: {e}", exc_info=True)
            if stop_event.wait(timeout=interval):
                break
        logger.info("Retention loop finished")
