"""
Core functionality for tiny-bloom.
"""

from tiny_bloom.core.base import MembershipFilter
from tiny_bloom.core.bitvector import BitVector
from tiny_bloom.core.errors import (
    InvalidHandleError,
    InvalidParameterError,
    InvalidSizeError,
)
from tiny_bloom.core.hash import HashPair, fnv1a_64, murmurhash3_64, nth_index

__all__ = [
    # Base classes
    "MembershipFilter",
    "BitVector",
    # Errors
    "InvalidParameterError",
    "InvalidSizeError",
    "InvalidHandleError",
    # Utility functions
    "HashPair",
    "murmurhash3_64",
    "fnv1a_64",
    "nth_index",
]
