"""
Orchestration module for the traffic collector.

Components:
- TrafficCollector: Sampling and retention loops sharing one stop signal
- SignalHandler: SIGINT/SIGTERM delegation to running collectors
"""

from .collector import TrafficCollector
from .signal_handler import SignalHandler, register_collector, unregister_collector

__all__ = [
    "SignalHandler",
    "TrafficCollector",
    "register_collector",
    "unregister_collector",
]
