"""
Fixed-length bit array used as the storage of a Bloom filter.
"""

import array
import sys

from tiny_bloom.core.errors import InvalidSizeError

# Population count of every byte value, used by count_ones()
_POPCOUNT = bytes(bin(i).count("1") for i in range(256))


class BitVector:
    """
    A fixed number of bits, all initially cleared.

    Bits are packed 8 per byte in an ``array.array("B")``. Bits can only be
    set, never cleared, which keeps every filter built on top of it monotonic.

    Example:
        bits = BitVector(100)
        bits.set(42)
        bits.get(42)  # True
    """

    def __init__(self, size: int):
        """
        Initialize a bit vector.

        Args:
            size: Number of bits.

        Raises:
            InvalidSizeError: If size is not a positive integer.
        """
        if isinstance(size, bool) or not isinstance(size, int) or size < 1:
            raise InvalidSizeError(f"Bit vector size must be a positive integer, got {size!r}")

        self._size = size
        num_bytes = (size + 7) // 8
        self._bytes = array.array("B", bytes(num_bytes))

    def _check_index(self, position: int) -> None:
        if not 0 <= position < self._size:
            raise IndexError(
                f"Bit position {position} out of range for {self._size} bits"
            )

    def set(self, position: int) -> None:
        """Set the bit at the given position to 1."""
        self._check_index(position)
        self._bytes[position >> 3] |= 1 << (position & 7)

    def get(self, position: int) -> bool:
        """Return whether the bit at the given position is set."""
        self._check_index(position)
        return bool(self._bytes[position >> 3] & (1 << (position & 7)))

    def test_and_set(self, position: int) -> bool:
        """
        Set a bit and report its previous value.

        Returns:
            True if the bit was already set before this call.
        """
        self._check_index(position)
        byte_index = position >> 3
        mask = 1 << (position & 7)
        was_set = bool(self._bytes[byte_index] & mask)
        self._bytes[byte_index] |= mask
        return was_set

    def count_ones(self) -> int:
        """Count the bits that are set."""
        return sum(_POPCOUNT[byte] for byte in self._bytes)

    def is_empty(self) -> bool:
        return not any(self._bytes)

    @property
    def nbytes(self) -> int:
        """Number of bytes backing the bits."""
        return len(self._bytes)

    def estimate_size(self) -> int:
        return sys.getsizeof(self) + sys.getsizeof(self._bytes)

    def tobytes(self) -> bytes:
        return self._bytes.tobytes()

    def __len__(self) -> int:
        return self._size

    def __getitem__(self, position: int) -> bool:
        return self.get(position)

    def __repr__(self) -> str:
        return f"BitVector(size={self._size}, ones={self.count_ones()})"
