"""
Hashing functions for tiny-bloom.

This module provides the two 64-bit hash functions used by the filters and
the double hashing helpers that turn their outputs into any number of bit
positions. The functions require no external dependencies and are optimized
for distribution quality, not cryptographic security.

References:
    - Kirsch, A., Mitzenmacher, M. (2006). Less Hashing, Same Performance:
      Building a Better Bloom Filter. ESA 2006, LNCS 4168, 456-467.
"""

from typing import Any, Iterator, Tuple

MASK_64 = 0xFFFFFFFFFFFFFFFF


def _to_bytes(key: Any) -> bytes:
    """Convert a key to the bytes that get hashed."""
    if isinstance(key, bytes):
        return key
    if isinstance(key, (bytearray, memoryview)):
        return bytes(key)
    if isinstance(key, str):
        return key.encode("utf-8")
    # For other types use repr() to get a more unique string
    return repr(key).encode("utf-8")


def _rotl64(x: int, r: int) -> int:
    return ((x << r) | (x >> (64 - r))) & MASK_64


def _fmix64(k: int) -> int:
    k ^= k >> 33
    k = (k * 0xFF51AFD7ED558CCD) & MASK_64
    k ^= k >> 33
    k = (k * 0xC4CEB9FE1A85EC53) & MASK_64
    k ^= k >> 33
    return k


def murmurhash3_64(key: Any, seed: int = 0) -> int:
    """
    Pure Python implementation of MurmurHash3 (x64, 128-bit variant).

    Only the first 64 bits of the 128-bit digest are returned. MurmurHash is
    fast, has good avalanche behavior and is well suited to hash-based lookup.

    Args:
        key: The key to hash (will be converted to bytes if not already)
        seed: Optional seed for the hash

    Returns:
        64-bit hash value
    """
    data = _to_bytes(key)
    length = len(data)

    c1 = 0x87C37B91114253D5
    c2 = 0x4CF5AD432745937F

    h1 = seed & MASK_64
    h2 = seed & MASK_64

    # Process 16 bytes at a time
    nblocks = length // 16
    for i in range(nblocks):
        offset = i * 16
        k1 = int.from_bytes(data[offset : offset + 8], "little")
        k2 = int.from_bytes(data[offset + 8 : offset + 16], "little")

        k1 = (k1 * c1) & MASK_64
        k1 = _rotl64(k1, 31)
        k1 = (k1 * c2) & MASK_64
        h1 ^= k1

        h1 = _rotl64(h1, 27)
        h1 = (h1 + h2) & MASK_64
        h1 = (h1 * 5 + 0x52DCE729) & MASK_64

        k2 = (k2 * c2) & MASK_64
        k2 = _rotl64(k2, 33)
        k2 = (k2 * c1) & MASK_64
        h2 ^= k2

        h2 = _rotl64(h2, 31)
        h2 = (h2 + h1) & MASK_64
        h2 = (h2 * 5 + 0x38495AB5) & MASK_64

    # Tail (0-15 remaining bytes)
    tail = data[nblocks * 16 :]
    remaining = len(tail)

    if remaining > 8:
        k2 = int.from_bytes(tail[8:], "little")
        k2 = (k2 * c2) & MASK_64
        k2 = _rotl64(k2, 33)
        k2 = (k2 * c1) & MASK_64
        h2 ^= k2

    if remaining > 0:
        k1 = int.from_bytes(tail[:8], "little")
        k1 = (k1 * c1) & MASK_64
        k1 = _rotl64(k1, 31)
        k1 = (k1 * c2) & MASK_64
        h1 ^= k1

    # Finalization mixing
    h1 ^= length
    h2 ^= length

    h1 = (h1 + h2) & MASK_64
    h2 = (h2 + h1) & MASK_64

    h1 = _fmix64(h1)
    h2 = _fmix64(h2)

    h1 = (h1 + h2) & MASK_64

    return h1


def fnv1a_64(key: Any, seed: int = 0) -> int:
    """
    Pure Python implementation of FNV-1a hash (64-bit variant).

    Args:
        key: The key to hash (will be converted to bytes if not already)
        seed: Optional seed value (modifies the initial hash value)

    Returns:
        64-bit hash value
    """
    data = _to_bytes(key)

    FNV_PRIME = 0x100000001B3
    FNV_OFFSET_BASIS = 0xCBF29CE484222325

    h = (FNV_OFFSET_BASIS ^ seed) & MASK_64

    for byte in data:
        h ^= byte
        h = (h * FNV_PRIME) & MASK_64

    return h


def nth_index(h1: int, h2: int, round: int, m: int) -> int:
    """
    Bit position for hash round ``round`` out of a table of ``m`` bits.

    Computes ``(h1 + round * h2) mod m`` in unsigned 64-bit arithmetic: the
    sum wraps at 2**64 before the reduction, as the base hashes are u64.
    Two base hashes are enough to simulate any number of independent hash
    functions this way.
    """
    return ((h1 + round * h2) & MASK_64) % m


class HashPair:
    """
    The two base hash values of a key.

    Example:
        pair = HashPair.derive(b"apple")
        positions = list(pair.indices(k=7, m=1024))
    """

    __slots__ = ("h1", "h2")

    def __init__(self, h1: int, h2: int):
        self.h1 = h1
        self.h2 = h2

    @classmethod
    def derive(cls, key: Any, seed: int = 0) -> "HashPair":
        """
        Hash a key with MurmurHash3 and FNV-1a.

        Args:
            key: The key to hash.
            seed: Seed shared by both hash functions.

        Returns:
            A HashPair holding the two 64-bit hash values.
        """
        data = _to_bytes(key)
        return cls(murmurhash3_64(data, seed=seed), fnv1a_64(data, seed=seed))

    def nth_index(self, round: int, m: int) -> int:
        return nth_index(self.h1, self.h2, round, m)

    def indices(self, k: int, m: int) -> Iterator[int]:
        """Yield the ``k`` bit positions of this key in a table of ``m`` bits."""
        for i in range(k):
            yield nth_index(self.h1, self.h2, i, m)

    def as_tuple(self) -> Tuple[int, int]:
        return self.h1, self.h2

    def __iter__(self) -> Iterator[int]:
        return iter(self.as_tuple())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HashPair):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __hash__(self) -> int:
        return hash(self.as_tuple())

    def __repr__(self) -> str:
        return f"HashPair(h1={self.h1:#018x}, h2={self.h2:#018x})"
