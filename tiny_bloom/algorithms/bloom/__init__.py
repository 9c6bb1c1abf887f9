"""
Bloom Filter implementations for tiny-bloom.

This module provides Bloom Filter implementations for efficient set membership testing
with bounded memory usage.

This includes:
- BloomFilter: Standard Bloom filter sized for a known number of items
- ScalableBloomFilter: Bloom filter variant that grows with the number of items
"""

from tiny_bloom.algorithms.bloom.base import BloomFilter
from tiny_bloom.algorithms.bloom.scalable import ScalableBloomFilter

__all__ = [
    "BloomFilter",
    "ScalableBloomFilter",
]
