"""
Scalable Bloom Filter implementation for tiny-bloom.

A plain Bloom filter degrades once more items than its design capacity are
added. The scalable variant keeps a target false positive rate for an unknown
number of items by chaining plain filters ("slices"): whenever the newest slice
fills up, a larger slice with a tighter false positive target is appended.

References:
    - Almeida, P. S., Baquero, C., Preguica, N., Hutchison, D. (2007).
      Scalable Bloom Filters. Information Processing Letters, 101(6), 255-261.
"""

import logging
import sys
from typing import Any, Dict, List, Optional, Tuple, TypeVar

from tiny_bloom.algorithms.bloom.base import BloomFilter, validate_fpp_parameters
from tiny_bloom.core.base import MembershipFilter
from tiny_bloom.core.errors import InvalidParameterError

T = TypeVar("T")  # Type for the items being processed

logger = logging.getLogger(__name__)

# Capacity multiplier of each new slice (typical values: 2, 4)
DEFAULT_GROWTH_RATIO = 2
# Multiplier applied to the false positive target of each new slice
DEFAULT_TIGHTENING_RATIO = 0.9
# Fraction of a slice's capacity that triggers the next slice
DEFAULT_FILL_RATIO = 0.5


class ScalableBloomFilter(MembershipFilter[T]):
    """
    Bloom filter that grows as items are added.

    Slice ``i`` is sized for ``initial_n * growth_ratio**i`` items at a false
    positive rate of ``initial_p * tightening_ratio**i``. Since the targets
    shrink geometrically, the overall false positive rate stays below
    ``initial_p / (1 - tightening_ratio)`` however many slices are added.

    Example:
        sbf = ScalableBloomFilter(0.001, 100)
        for i in range(10000):
            sbf.insert(f"user-{i}")

        sbf.contains("user-42")  # True
        sbf.slice_count          # several slices
    """

    def __init__(
        self,
        p: float,
        n: int,
        growth_ratio: int = DEFAULT_GROWTH_RATIO,
        tightening_ratio: float = DEFAULT_TIGHTENING_RATIO,
        fill_ratio: float = DEFAULT_FILL_RATIO,
        seed: Optional[int] = None,
    ):
        """
        Initialize a scalable Bloom filter with a single slice.

        Args:
            p: False positive rate of the first slice (between 0 and 1).
            n: Expected number of items of the first slice.
            growth_ratio: Capacity multiplier per new slice, at least 2.
            tightening_ratio: False positive multiplier per new slice,
                              between 0 and 1.
            fill_ratio: Fraction of a slice's expected capacity that triggers
                        the next slice, between 0 and 1.
            seed: Optional seed for the hash functions of every slice.

        Raises:
            InvalidParameterError: If any parameter is out of range.
        """
        super().__init__()

        validate_fpp_parameters(p, n)
        if (
            isinstance(growth_ratio, bool)
            or not isinstance(growth_ratio, int)
            or growth_ratio < 2
        ):
            raise InvalidParameterError("Growth ratio must be an integer of at least 2")
        if not (0 < tightening_ratio < 1):
            raise InvalidParameterError("Tightening ratio must be between 0 and 1")
        if not (0 < fill_ratio < 1):
            raise InvalidParameterError("Fill ratio must be between 0 and 1")

        self._initial_p = p
        self._initial_n = n
        self._growth_ratio = growth_ratio
        self._tightening_ratio = tightening_ratio
        self._fill_ratio = fill_ratio
        self._seed = seed

        # Oldest first; only ever appended to
        self._slices: List[BloomFilter[T]] = []
        self._add_slice()

    def _slice_parameters(self, index: int) -> Tuple[float, int]:
        """Return the (false positive rate, capacity) of slice ``index``."""
        p = self._initial_p * self._tightening_ratio**index
        n = self._initial_n * self._growth_ratio**index
        return p, n

    def _add_slice(self) -> BloomFilter[T]:
        index = len(self._slices)
        p, n = self._slice_parameters(index)
        new_slice: BloomFilter[T] = BloomFilter.from_fpp(p, n, seed=self._seed)
        self._slices.append(new_slice)

        if index > 0:
            logger.debug(
                "Added slice %d: capacity=%d fpp=%.3g bits=%d hashes=%d",
                index,
                n,
                p,
                new_slice.bit_size,
                new_slice.hash_count,
            )
        return new_slice

    def _is_saturated(self) -> bool:
        """Whether the newest slice reached its share of its design capacity."""
        index = len(self._slices) - 1
        _, capacity = self._slice_parameters(index)
        return len(self._slices[index]) >= self._fill_ratio * capacity

    def contains(self, item: T) -> bool:
        """
        Test if an item might be in the set.

        Slices are checked newest first since recently inserted items live
        in the most recent slices.

        Args:
            item: The item to test.

        Returns:
            True if any slice might contain the item, False if definitely not.
        """
        for bloom in reversed(self._slices):
            if bloom.contains(item):
                return True
        return False

    def insert(self, item: T) -> bool:
        """
        Add an item to the filter.

        Items that are already possibly present are not inserted again, so
        the active slice only fills with novel items.

        After a novel item lands, a new slice is appended as soon as the
        newest slice holds fill_ratio * its capacity items, so the next novel
        item goes to the new slice.

        Args:
            item: The item to add.

        Returns:
            True if the item was possibly present already, False if it was new.
        """
        super().insert(item)

        if self.contains(item):
            return True

        active = self._slices[-1]
        active.insert(item)

        if self._is_saturated():
            self._add_slice()

        return False

    @property
    def slices(self) -> Tuple[BloomFilter[T], ...]:
        """The slices, oldest first."""
        return tuple(self._slices)

    @property
    def slice_count(self) -> int:
        return len(self._slices)

    @property
    def initial_p(self) -> float:
        return self._initial_p

    @property
    def initial_n(self) -> int:
        return self._initial_n

    @property
    def growth_ratio(self) -> int:
        return self._growth_ratio

    @property
    def tightening_ratio(self) -> float:
        return self._tightening_ratio

    @property
    def fill_ratio(self) -> float:
        return self._fill_ratio

    def capacity(self) -> int:
        """Return the summed design capacity of all slices."""
        return sum(self._slice_parameters(i)[1] for i in range(len(self._slices)))

    def __len__(self) -> int:
        """Return the number of distinct items inserted."""
        return sum(len(bloom) for bloom in self._slices)

    def is_empty(self) -> bool:
        return all(bloom.is_empty() for bloom in self._slices)

    def compounded_error(self) -> float:
        """
        Return the false positive probability of the slice targets combined.

        A query is a series of queries over all slices, so it is a false
        positive unless every slice answers correctly: 1 - prod(1 - p_i).
        """
        cum_error = 1.0
        for i in range(len(self._slices)):
            cum_error *= 1.0 - self._slice_parameters(i)[0]
        return 1.0 - cum_error

    def max_false_positive_rate(self) -> float:
        """
        Upper bound of the combined false positive rate for any number of slices.

        The slice targets form a geometric series whose sum converges to
        initial_p / (1 - tightening_ratio).
        """
        return self._initial_p / (1.0 - self._tightening_ratio)

    def false_positive_probability(self) -> float:
        """Estimate the current false positive probability from each slice's fill."""
        cum = 1.0
        for bloom in self._slices:
            cum *= 1.0 - bloom.false_positive_probability()
        return 1.0 - cum

    def estimate_size(self) -> int:
        size = sys.getsizeof(self)
        if hasattr(self, "__dict__"):
            size += sys.getsizeof(self.__dict__)
        size += sys.getsizeof(self._slices)
        size += sum(bloom.estimate_size() for bloom in self._slices)
        return size

    def error_bounds(self) -> Dict[str, Any]:
        bounds = super().error_bounds()
        bounds["compounded_error"] = self.compounded_error()
        bounds["max_false_positive_rate"] = self.max_false_positive_rate()
        return bounds

    def get_stats(self) -> Dict[str, Any]:
        """
        Get detailed statistics about the filter and each of its slices.

        Returns:
            A dictionary containing various statistics about the filter state.
        """
        stats = super().get_stats()
        stats.update(
            {
                "initial_p": self._initial_p,
                "initial_n": self._initial_n,
                "growth_ratio": self._growth_ratio,
                "tightening_ratio": self._tightening_ratio,
                "fill_ratio": self._fill_ratio,
                "slice_count": len(self._slices),
                "capacity": self.capacity(),
                "unique_items": len(self),
                "current_fpp": self.false_positive_probability(),
                "slices": [
                    {
                        "expected_items": bloom.expected_items,
                        "false_positive_rate": bloom.false_positive_rate,
                        "bit_size": bloom.bit_size,
                        "hash_count": bloom.hash_count,
                        "items": len(bloom),
                        "fill_ratio": bloom.bits.count_ones() / bloom.bit_size,
                    }
                    for bloom in self._slices
                ],
            }
        )
        return stats

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(initial_p={self._initial_p}, "
            f"initial_n={self._initial_n}, slices={len(self._slices)}, "
            f"items={len(self)})"
        )
