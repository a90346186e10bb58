"""
Counter snapshot sources.

This package provides the interface the collector uses to read cumulative
OS counters, the psutil-backed implementation, and the resource name filter
that keeps loopback and virtual devices out of the store.
"""

from .base import AbstractCounterSource, is_included
from .psutil_source import PsutilCounterSource

__all__ = [
    "AbstractCounterSource",
    "PsutilCounterSource",
    "is_included",
]
