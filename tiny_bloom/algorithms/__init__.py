"""
Algorithm implementations for tiny-bloom.
"""

from tiny_bloom.algorithms.bloom import BloomFilter, ScalableBloomFilter

__all__ = [
    "BloomFilter",
    "ScalableBloomFilter",
]
