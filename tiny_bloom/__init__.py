"""
tiny-bloom - Bloom filters for set membership testing

tiny-bloom is a Python library providing a fixed-capacity Bloom filter and a
scalable Bloom filter that grows while keeping its false positive rate
bounded, plus a handle-based interface for foreign-function wrappers.
"""

__version__ = "0.1.0"

# Import main classes to make them available at the top level
from tiny_bloom.algorithms.bloom import BloomFilter, ScalableBloomFilter
from tiny_bloom.core.base import MembershipFilter
from tiny_bloom.core.bitvector import BitVector
from tiny_bloom.core.errors import (
    InvalidHandleError,
    InvalidParameterError,
    InvalidSizeError,
)
from tiny_bloom.core.hash import HashPair

__all__ = [
    # Core classes
    "MembershipFilter",
    "BitVector",
    "HashPair",
    # Errors
    "InvalidParameterError",
    "InvalidSizeError",
    "InvalidHandleError",
    # Algorithm implementations
    "BloomFilter",
    "ScalableBloomFilter",
]
