"""
Defines the abstract interface for counter snapshot sources.

A counter source is the collector's only window onto the operating system:
one synchronous call returns the cumulative counters of every resource in a
resource class, or raises SourceUnavailableError.
"""

import logging
from abc import ABC, abstractmethod
from typing import Sequence, Union

from ..models.counters import CounterSnapshot, ResourceClass

logger = logging.getLogger(__name__)


class AbstractCounterSource(ABC):
    """
    Abstract base class for counter snapshot sources.

    Implementations must return a complete snapshot or raise
    SourceUnavailableError; they never return partial results on purpose.
    """

    @abstractmethod
    def get_current_counters(
        self, resource_class: Union[ResourceClass, str]
    ) -> CounterSnapshot:
        """
        Capture the current cumulative counters for a resource class.

        Args:
            resource_class: ResourceClass.NETWORK or ResourceClass.DISK.

        Returns:
            A CounterSnapshot stamped with the capture time.

        Raises:
            SourceUnavailableError: If the counters cannot be read.
        """
        pass


def is_included(name: str, exclude_prefixes: Sequence[str]) -> bool:
    """
    Check whether a resource should be recorded.

    Returns False for names starting with any of the excluded prefixes, such
    as loopback, container bridges and virtual tunnel interfaces.
    """
    return not any(name.startswith(prefix) for prefix in exclude_prefixes if prefix)
