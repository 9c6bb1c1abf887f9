"""
Bloom Filter implementation for tiny-bloom.

This module provides an implementation of the Bloom Filter, a space-efficient
probabilistic data structure used for testing set membership with tunable
false positive rates and no false negatives.

The implementation includes statistics hooks to help users understand the
memory usage and accuracy of their Bloom Filter configuration.

References:
    - Bloom, B. H. (1970). Space/time trade-offs in hash coding with allowable errors.
      Communications of the ACM, 13(7), 422-426.
"""

import math
import sys
from typing import Any, Dict, List, Optional, TypeVar

from tiny_bloom.core.base import MembershipFilter
from tiny_bloom.core.bitvector import BitVector
from tiny_bloom.core.errors import InvalidParameterError
from tiny_bloom.core.hash import HashPair

T = TypeVar("T")  # Type for the items being processed

DEFAULT_SEED = 0


def optimal_bit_size(n: int, p: float) -> int:
    """
    Calculate the optimal bit array size for the given parameters.

    Optimal bit size formula: m = -(n * ln(p)) / (ln(2)^2)

    Args:
        n: Expected number of items.
        p: Target false positive rate.

    Returns:
        Optimal bit array size, at least 1.
    """
    m = -(n * math.log(p)) / (math.log(2) ** 2)
    return max(1, math.ceil(m))


def optimal_hash_count(m: int, n: int) -> int:
    """
    Calculate the optimal number of hash functions.

    Optimal hash count formula: k = (m/n) * ln(2), rounded half away from zero.

    Args:
        m: Bit array size.
        n: Expected number of items.

    Returns:
        Optimal number of hash functions, at least 1.
    """
    k = (m / n) * math.log(2)
    return max(1, math.floor(k + 0.5))


def validate_fpp_parameters(p: float, n: int) -> None:
    """
    Check a (false positive rate, expected items) pair.

    Raises:
        InvalidParameterError: If p is not strictly between 0 and 1,
                               or n is not a positive integer.
    """
    if isinstance(n, bool) or not isinstance(n, int):
        raise InvalidParameterError(
            f"Expected number of items must be an integer, got {n!r}"
        )
    if n < 1:
        raise InvalidParameterError("Expected number of items must be at least 1")
    if not isinstance(p, (int, float)) or not (0 < p < 1):
        raise InvalidParameterError("False positive rate must be between 0 and 1")


class BloomFilter(MembershipFilter[T]):
    """
    Bloom Filter for efficient set membership testing.

    A Bloom filter is a space-efficient probabilistic data structure used to test
    whether an element is a member of a set. False positives are possible, but
    false negatives are not: a query returns either "possibly in set"
    or "definitely not in set".

    The bit array size ``m`` and hash count ``k`` are fixed when the filter is
    built. Bit positions come from two base hashes combined by double hashing.

    Example:
        # Create a filter with 0.01% false positive rate for 64 items
        bloom = BloomFilter.from_fpp(0.0001, 64)

        # Add some items
        bloom.insert("apple")
        bloom.insert("banana")

        # Check for membership
        contains_apple = bloom.contains("apple")  # Returns True
        contains_orange = bloom.contains("orange")  # Returns False

        stats = bloom.get_stats()
    """

    def __init__(self, bit_size: int, hash_count: int, seed: Optional[int] = None):
        """
        Initialize a Bloom filter with a predetermined size and hash count.

        Use from_fpp() to size the filter from a target false positive rate.

        Args:
            bit_size: Size of the bit array (m).
            hash_count: Number of hash functions (k).
            seed: Optional seed for the hash functions.

        Raises:
            InvalidSizeError: If bit_size is less than 1.
            InvalidParameterError: If hash_count is less than 1.
        """
        super().__init__()

        if isinstance(hash_count, bool) or not isinstance(hash_count, int) or hash_count < 1:
            raise InvalidParameterError("Number of hash functions must be at least 1")

        self._bits = BitVector(bit_size)
        self._bit_size = bit_size
        self._hash_count = hash_count
        self._seed = seed if seed is not None else DEFAULT_SEED

        # Design parameters, only known when sized by from_fpp()
        self._expected_items: Optional[int] = None
        self._false_positive_rate: Optional[float] = None

        # Track the number of inserts that set at least one new bit
        self._approximate_count = 0

    @classmethod
    def from_fpp(
        cls, p: float, n: int, seed: Optional[int] = None
    ) -> "BloomFilter[T]":
        """
        Create a filter targeting false positive rate ``p`` for ``n`` items.

        The optimal bit array size and number of hash functions are calculated
        automatically.

        Args:
            p: Target false positive rate (between 0 and 1).
            n: Expected number of unique items to be added to the filter.
            seed: Optional seed for the hash functions.

        Returns:
            A new, empty BloomFilter.

        Raises:
            InvalidParameterError: If n is less than 1.
                                   If p is not between 0 and 1.
        """
        validate_fpp_parameters(p, n)

        bit_size = optimal_bit_size(n, p)
        hash_count = optimal_hash_count(bit_size, n)

        instance = cls(bit_size, hash_count, seed=seed)
        instance._expected_items = n
        instance._false_positive_rate = p
        return instance

    def _get_bit_positions(self, item: T) -> List[int]:
        """
        Generate the bit positions for an item.

        Args:
            item: The item to hash.

        Returns:
            List of bit positions to set or check.
        """
        pair = HashPair.derive(item, seed=self._seed)
        return list(pair.indices(self._hash_count, self._bit_size))

    def insert(self, item: T) -> bool:
        """
        Add an item to the Bloom filter.

        Args:
            item: The item to add to the filter.

        Returns:
            True if every bit for the item was already set, meaning the item
            was possibly present before this call.
        """
        super().insert(item)

        all_bits_set = True
        for position in self._get_bit_positions(item):
            if not self._bits.test_and_set(position):
                all_bits_set = False

        if not all_bits_set:
            self._approximate_count += 1

        return all_bits_set

    def contains(self, item: T) -> bool:
        """
        Test if an item might be in the set.

        Args:
            item: The item to test.

        Returns:
            True if the item might be in the set, False if definitely not in the set.
        """
        for position in self._get_bit_positions(item):
            if not self._bits.get(position):
                return False

        # All bits are set, item might be in the set
        return True

    def capacity(self) -> int:
        """Return the size of the bit array (m)."""
        return self._bit_size

    @property
    def bit_size(self) -> int:
        return self._bit_size

    @property
    def hash_count(self) -> int:
        return self._hash_count

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def expected_items(self) -> Optional[int]:
        """Design capacity (n), or None for a filter built from (m, k)."""
        return self._expected_items

    @property
    def false_positive_rate(self) -> Optional[float]:
        """Target false positive rate (p), or None for a filter built from (m, k)."""
        return self._false_positive_rate

    @property
    def approximate_count(self) -> int:
        return self._approximate_count

    @property
    def bits(self) -> BitVector:
        return self._bits

    def __len__(self) -> int:
        """Return the number of insert calls made on this filter."""
        return self._items_processed

    def is_empty(self) -> bool:
        """
        Check if the filter is empty (all bits are zero).

        Returns:
            True if the filter is empty, False otherwise.
        """
        return self._bits.is_empty()

    def estimate_cardinality(self) -> int:
        """
        Estimate the number of unique items in the filter.

        This is an approximation based on the fill ratio of the bit array.
        The estimate becomes less accurate as the filter becomes more saturated.

        Returns:
            Estimated number of unique items.
        """
        set_bits = self._bits.count_ones()
        if set_bits == 0:
            return 0
        if set_bits >= self._bit_size:
            # Saturated: the formula diverges, cap at items processed
            return self._items_processed

        # n ≈ -m * ln(1 - X/m) / k, X being the number of bits set
        estimate = -self._bit_size * math.log(1.0 - set_bits / self._bit_size)
        estimate /= self._hash_count

        # Cannot have more unique items than total items processed
        return min(max(0, int(round(estimate))), self._items_processed)

    def false_positive_probability(self) -> float:
        """
        Calculate the current false positive probability based on the fill ratio.

        The false positive probability increases as more items are added to the filter.
        This is an estimate based on the current state, not the initial target rate.

        Returns:
            Current estimated false positive probability.
        """
        fraction_bits_set = self._bits.count_ones() / self._bit_size
        # FPP ≈ (fraction_bits_set)^k
        fpp = fraction_bits_set**self._hash_count
        return max(0.0, min(fpp, 1.0))

    def estimate_size(self) -> int:
        """
        Estimate the current memory usage of this filter in bytes.

        Returns:
            Estimated memory usage in bytes.
        """
        size = sys.getsizeof(self)
        if hasattr(self, "__dict__"):
            size += sys.getsizeof(self.__dict__)
        size += self._bits.estimate_size()
        return size

    def error_bounds(self) -> Dict[str, Any]:
        """
        Calculate the theoretical error bounds for this Bloom filter.

        Returns:
            A dictionary with error bound information specific to the filter.
        """
        bounds = super().error_bounds()

        bit_size = self._bit_size
        hash_count = self._hash_count
        items = self._items_processed

        if self._expected_items is not None:
            # FPP once the filter holds its design capacity
            bounds["fpp_at_capacity"] = (
                1 - math.exp(-(hash_count * self._expected_items) / bit_size)
            ) ** hash_count

        if items > 0:
            # Formula: (1 - e^(-k*n/m))^k
            fill_ratio = 1 - math.exp(-(hash_count * items) / bit_size)
            bounds["current_theoretical_fpp"] = min(fill_ratio**hash_count, 1.0)
            bounds["theoretical_fill_ratio"] = fill_ratio

            if fill_ratio < 0.5:
                bounds["error_margin"] = "low"
            elif fill_ratio < 0.8:
                bounds["error_margin"] = "moderate"
            else:
                bounds["error_margin"] = "high"

        return bounds

    def get_stats(self) -> Dict[str, Any]:
        """
        Get detailed statistics about the current state of the Bloom filter.

        Extends the base implementation with the bit fill ratio and the
        estimated false positive rate.

        Returns:
            A dictionary containing various statistics about the filter state.
        """
        stats = super().get_stats()

        set_bits = self._bits.count_ones()
        stats.update(
            {
                "expected_items": self._expected_items,
                "false_positive_rate": self._false_positive_rate,
                "bit_size": self._bit_size,
                "hash_count": self._hash_count,
                "seed": self._seed,
                "approximate_count": self._approximate_count,
                "set_bits": set_bits,
                "fill_ratio": set_bits / self._bit_size,
                "estimated_unique_items": self.estimate_cardinality(),
                "current_fpp": self.false_positive_probability(),
            }
        )

        if self._expected_items is not None:
            stats["items_ratio"] = self._approximate_count / self._expected_items

        return stats

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(bit_size={self._bit_size}, "
            f"hash_count={self._hash_count}, items={self._items_processed})"
        )
