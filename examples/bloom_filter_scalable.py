"""
Scalable Bloom Filter Demo for tiny-bloom.

Compares a fixed-size Bloom filter with a scalable one when far more items
are inserted than either was sized for, then shows the handle interface.
"""

import logging

from tiny_bloom import BloomFilter, ScalableBloomFilter
from tiny_bloom.handle import FilterHandle


def measure_fpp(bf, n_tests=20000):
    false_positives = sum(1 for i in range(n_tests) if bf.contains(f"absent_{i}"))
    return false_positives / n_tests


def demonstrate_growth():
    print("\n=== Fixed vs. Scalable Bloom Filter ===")

    p = 0.01
    n = 500
    fixed = BloomFilter.from_fpp(p, n)
    scalable = ScalableBloomFilter(p, n)

    for total in (n, n * 4, n * 16):
        for i in range(len(fixed), total):
            fixed.insert(f"item_{i}")
            scalable.insert(f"item_{i}")

        print(f"\nAfter {total} items:")
        print(f"  Fixed filter observed FPP:    {measure_fpp(fixed):.4f}")
        print(f"  Scalable filter observed FPP: {measure_fpp(scalable):.4f}")
        print(f"  Scalable filter slices:       {scalable.slice_count}")

    print(f"\nUpper bound for the scalable filter: {scalable.max_false_positive_rate():.4f}")
    for i, bloom in enumerate(scalable.slices):
        print(
            f"  slice {i}: capacity={bloom.expected_items:,} "
            f"fpp={bloom.false_positive_rate:.5f} items={len(bloom):,}"
        )


def demonstrate_handles():
    print("\n=== Handle Interface ===")
    with FilterHandle.scalable(0.001, 100) as fh:
        print(f"  Opened {fh!r}")
        for word in (b"alpha\0", b"beta\0"):
            fh.insert(word)
        print(f"  contains(b'alpha')? {fh.contains(b'alpha')}")
        print(f"  contains(b'gamma')? {fh.contains(b'gamma')}")
    print(f"  After the block: {fh!r}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    demonstrate_growth()
    demonstrate_handles()
