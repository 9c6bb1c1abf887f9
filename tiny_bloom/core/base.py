"""
Base class and interface for tiny-bloom membership filters.

This module defines the abstract base class that every filter implements so
that plain and scalable filters can be used interchangeably. It also provides
the statistics hooks used for monitoring and benchmarking a configuration.
"""

import abc
import sys
from typing import Any, Dict, Generic, TypeVar

T = TypeVar("T")  # Type for the keys being inserted


class MembershipFilter(Generic[T], abc.ABC):
    """
    Abstract base class for probabilistic set-membership filters.

    A filter answers "possibly in the set" or "definitely not in the set".
    Keys can only be added: there is no removal operation, so an answer of
    "possibly in the set" never turns back into "definitely not".
    """

    def __init__(self) -> None:
        self._items_processed = 0

    @abc.abstractmethod
    def insert(self, item: T) -> bool:
        """
        Add an item to the filter.

        Derived classes call ``super().insert(item)`` to count the call.

        Args:
            item: The item to add.

        Returns:
            True if the item was possibly present before this call.
        """
        self._items_processed += 1
        return False

    @abc.abstractmethod
    def contains(self, item: T) -> bool:
        """
        Test if an item might be in the set.

        Args:
            item: The item to test.

        Returns:
            True if the item might be in the set, False if definitely not.
        """

    def update(self, item: T) -> None:
        """Add an item, discarding the membership answer."""
        self.insert(item)

    def query(self, item: T, *args: Any, **kwargs: Any) -> bool:
        """
        Query the filter for an item.

        This is a convenience method that calls contains().
        """
        return self.contains(item)

    def __contains__(self, item: object) -> bool:
        return self.contains(item)  # type: ignore[arg-type]

    def estimate_size(self) -> int:
        """
        Estimate the current memory usage of this filter in bytes.

        Derived classes should override this method to account for their
        bit arrays.

        Returns:
            Estimated memory usage in bytes.
        """
        size = sys.getsizeof(self)
        if hasattr(self, "__dict__"):
            size += sys.getsizeof(self.__dict__)
        return size

    def error_bounds(self) -> Dict[str, Any]:
        """
        Get the theoretical error bounds for this filter.

        The base implementation returns an empty dictionary.
        """
        return {}

    def get_stats(self) -> Dict[str, Any]:
        """
        Get detailed statistics about the current state of the filter.

        Derived classes should override this method to include their specific
        statistics while calling super().get_stats() to include base metrics.

        Returns:
            A dictionary containing various statistics about the filter.
        """
        stats: Dict[str, Any] = {
            "type": self.__class__.__name__,
            "items_processed": self._items_processed,
            "memory_bytes": self.estimate_size(),
        }

        error_bounds = self.error_bounds()
        if error_bounds:
            stats.update(error_bounds)

        return stats

    @property
    def items_processed(self) -> int:
        """Get the total number of insert calls made on this filter."""
        return self._items_processed
