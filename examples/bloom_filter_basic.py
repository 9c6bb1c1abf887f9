"""
Basic Bloom Filter Demo for tiny-bloom.

This example demonstrates how to use the standard Bloom Filter
for space-efficient set membership testing. It highlights its probabilistic
nature (false positives) and its guarantee of no false negatives.
"""

from tiny_bloom import BloomFilter


def demonstrate_basic_usage():
    """Demonstrate Bloom Filter sizing, inserting, and checking."""
    print("\n=== Basic Bloom Filter Demo ===")

    # Expecting ~10,000 items with a 1% (0.01) false positive rate
    bf = BloomFilter.from_fpp(0.01, 10000, seed=42)

    print("Bloom Filter parameters:")
    print(f"  Expected items: {bf.expected_items:,}")
    print(f"  Target false positive rate: {bf.false_positive_rate:.1%}")
    print(f"  Calculated filter size (bits): {bf.bit_size:,} bits")
    print(f"  Calculated number of hashes: {bf.hash_count}")
    print(f"  Estimated memory usage: {bf.estimate_size():,} bytes")

    items_to_add = ["apple", "banana", "cherry", "date", "fig", "grape"]
    print("\nAdding items to the filter...")
    for item in items_to_add:
        already = bf.insert(item)
        print(f"  Added '{item}' (possibly present before: {already})")

    print("\nChecking membership:")
    print("  (Note: 'False' means DEFINITELY NOT present)")
    print("  (Note: 'True' means POSSIBLY present - could be a false positive)")
    for item in items_to_add + ["orange", "pear", "plum"]:
        print(f"  '{item}' in filter? {bf.contains(item)}")


def demonstrate_fpp_and_fill_ratio():
    """Show how fill ratio affects the actual False Positive Probability."""
    print("\n=== FPP vs. Fill Ratio Demo ===")

    n = 1000
    bf = BloomFilter.from_fpp(0.05, n, seed=123)
    print(f"Filter initialized for {n} items, target FPP: {bf.false_positive_rate:.1%}")

    added = 0
    for step_target in [int(n * 0.1), int(n * 0.5), n, int(n * 1.5), n * 2]:
        while added < step_target:
            bf.insert(f"item_{added}")
            added += 1

        stats = bf.get_stats()
        print(f"\nAfter adding {added} items:")
        print(f"  Filter fill ratio: {stats['fill_ratio']:.2%}")
        print(f"  Estimated current FPP: {stats['current_fpp']:.4f}")
        print(f"  Estimated cardinality: {stats['estimated_unique_items']}")

    print("\nNote: As the filter fills (especially beyond expected capacity),")
    print("the actual false positive probability increases above the target rate.")
    print("See bloom_filter_scalable.py for a filter that grows instead.")


if __name__ == "__main__":
    demonstrate_basic_usage()
    demonstrate_fpp_and_fill_ratio()
