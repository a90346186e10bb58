"""
Signal handling for running collectors.

This module manages SIGINT/SIGTERM registration and delegates to active
TrafficCollector instances using a global registry pattern.
"""

import logging
import signal
import threading
from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:
    from .collector import TrafficCollector

logger = logging.getLogger(__name__)

# Signal handlers cannot be bound to instances, so active collectors are
# kept in a registry the module-level handler walks.
_active_collectors: Dict[int, "TrafficCollector"] = {}
_active_collectors_lock = threading.Lock()


class SignalHandler:
    """
    Installs SIGINT/SIGTERM handlers that request a collector shutdown.

    Use as a context manager around the blocking part of a run; the original
    handlers are restored on exit.
    """

    def __init__(self, collector: "TrafficCollector"):
        self.collector = collector
        self._original_sigint_handler = None
        self._original_sigterm_handler = None
        self._signal_handlers_set = False

    def __enter__(self) -> "SignalHandler":
        register_collector(self.collector)
        self.setup_signal_handlers()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup_signal_handlers()
        unregister_collector(self.collector)

    def setup_signal_handlers(self) -> None:
        try:
            self._original_sigint_handler = signal.signal(signal.SIGINT, _global_signal_handler)
            self._original_sigterm_handler = signal.signal(signal.SIGTERM, _global_signal_handler)
            self._signal_handlers_set = True
            logger.debug("Signal handlers set up for TrafficCollector")
        except ValueError as e:
            # signal.signal only works from the main thread
            logger.warning(f"Failed to set up signal handlers: {e}")

    def cleanup_signal_handlers(self) -> None:
        """Restore original signal handlers."""
        if not self._signal_handlers_set:
            return

        try:
            if self._original_sigint_handler is not None:
                signal.signal(signal.SIGINT, self._original_sigint_handler)
            if self._original_sigterm_handler is not None:
                signal.signal(signal.SIGTERM, self._original_sigterm_handler)
            logger.debug("Signal handlers restored")
        except ValueError as e:
            logger.warning(f"Failed to restore signal handlers: {e}")
        finally:
            self._signal_handlers_set = False


def register_collector(collector: "TrafficCollector") -> None:
    with _active_collectors_lock:
        _active_collectors[id(collector)] = collector
        logger.debug(f"Registered TrafficCollector {id(collector)} for signal handling")


def unregister_collector(collector: "TrafficCollector") -> None:
    with _active_collectors_lock:
        if _active_collectors.pop(id(collector), None) is not None:
            logger.debug(f"Unregistered TrafficCollector {id(collector)} from signal handling")


def _global_signal_handler(signum: int, frame: Any) -> None:
    """
    Request shutdown of every registered collector.

    Only sets the stop events; joining the loop threads is left to the code
    blocked in ``TrafficCollector.wait``.
    """
    logger.warning(f"Signal {signum} received. Stopping all active collectors.")
    with _active_collectors_lock:
        for collector_id, collector in _active_collectors.items():
            logger.info(f"Requesting shutdown for TrafficCollector {collector_id}")
            collector.request_stop()
