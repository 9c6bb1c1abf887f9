"""
Unit tests for hashing functions.
"""

import unittest
from collections import Counter

from tiny_bloom.core.hash import MASK_64, HashPair, fnv1a_64, murmurhash3_64, nth_index


class TestHashFunctions(unittest.TestCase):
    """Test cases for hash functions in tiny_bloom.core.hash."""

    def test_reproducibility(self):
        """Test that both hashes produce consistent results for the same input."""
        test_cases = [
            "hello world",
            "python",
            "",  # Empty string
            "a" * 100,  # Long string, several 16-byte blocks
            b"\x00\xff\x10",
            123,  # Integer
            (1, 2, 3),  # Tuple
        ]

        for hash_fn in (murmurhash3_64, fnv1a_64):
            for input_value in test_cases:
                self.assertEqual(
                    hash_fn(input_value),
                    hash_fn(input_value),
                    f"{hash_fn.__name__} gave different results for {input_value!r}",
                )

    def test_str_and_bytes_agree(self):
        """A str key hashes like its UTF-8 encoding."""
        self.assertEqual(murmurhash3_64("héllo"), murmurhash3_64("héllo".encode("utf-8")))
        self.assertEqual(fnv1a_64("héllo"), fnv1a_64("héllo".encode("utf-8")))
        self.assertEqual(fnv1a_64(bytearray(b"abc")), fnv1a_64(b"abc"))

    def test_different_inputs(self):
        """Test that different inputs produce different hashes."""
        inputs = [
            "hello",
            "Hello",  # Case sensitive
            "hello ",  # Extra space
            "world",
            "a" * 15,  # Tail only
            "a" * 16,  # Exactly one block
            "a" * 17,  # Block plus tail
            123,
            123.0,  # Different type but same value
        ]

        for hash_fn in (murmurhash3_64, fnv1a_64):
            hashes = [hash_fn(x) for x in inputs]
            self.assertEqual(
                len(set(hashes)), len(inputs), f"{hash_fn.__name__} collision"
            )

    def test_seed(self):
        """Test that different seeds produce different outputs."""
        input_value = "test seed"

        for hash_fn in (murmurhash3_64, fnv1a_64):
            hashes = {hash_fn(input_value, seed=s) for s in (0, 1, 42)}
            self.assertEqual(
                len(hashes), 3, f"{hash_fn.__name__} ignored the seed"
            )

    def test_range(self):
        """Test that hashes are unsigned 64-bit integers."""
        inputs = ["test", 123, (1, 2, 3), "a" * 1000, b""]

        for hash_fn in (murmurhash3_64, fnv1a_64):
            for input_value in inputs:
                hash_value = hash_fn(input_value)
                self.assertIsInstance(hash_value, int)
                self.assertGreaterEqual(hash_value, 0)
                self.assertLessEqual(hash_value, 0xFFFFFFFFFFFFFFFF)

    def test_known_values(self):
        """Test against reference values of the published algorithms."""
        # MurmurHash3 of the empty input with seed 0 mixes only zeros
        self.assertEqual(murmurhash3_64(b""), 0)
        # FNV-1a 64 test vectors
        self.assertEqual(fnv1a_64(b""), 0xCBF29CE484222325)
        self.assertEqual(fnv1a_64(b"a"), 0xAF63DC4C8601EC8C)
        # mmh3.hash64(b"foo")[0] as unsigned, the low half of x64_128
        self.assertEqual(murmurhash3_64(b"foo"), 16316970633193145697)

    def test_murmurhash3_block_and_tail_paths(self):
        """Every byte of a block or either tail word feeds into the hash."""
        seed = 42
        inputs = [bytes(range(1, length + 1)) for length in (1, 8, 9, 16, 17, 33)]

        hashes = [murmurhash3_64(data, seed=seed) for data in inputs]
        self.assertEqual(len(set(hashes)), len(inputs))

        for data, base in zip(inputs, hashes):
            for i in range(len(data)):
                flipped = bytearray(data)
                flipped[i] ^= 0x80
                self.assertNotEqual(
                    murmurhash3_64(bytes(flipped), seed=seed),
                    base,
                    f"byte {i} of a {len(data)}-byte key did not change the hash",
                )

    def test_murmurhash3_zero_padding_is_not_ignored(self):
        """Trailing zero bytes change the hash through the length mix."""
        self.assertNotEqual(murmurhash3_64(b"abc", seed=7), murmurhash3_64(b"abc\0", seed=7))
        self.assertNotEqual(murmurhash3_64(b"x" * 8, seed=7), murmurhash3_64(b"x" * 8 + b"\0", seed=7))

    def test_murmurhash3_avalanche(self):
        """Test the avalanche effect of MurmurHash3."""
        base_hash = murmurhash3_64("test_avalanche")
        mod_hash = murmurhash3_64("test_avalanchf")

        # Roughly half of the 64 bits should flip
        diff_bits = bin(base_hash ^ mod_hash).count("1")
        self.assertGreaterEqual(
            diff_bits,
            16,
            f"MurmurHash3 changed only {diff_bits} bits with small input change",
        )

    def test_murmurhash3_distribution(self):
        """Test that MurmurHash3 has reasonably uniform distribution."""
        num_samples = 10000
        num_buckets = 10

        counter = Counter(murmurhash3_64(x) % num_buckets for x in range(num_samples))
        expected = num_samples / num_buckets

        self.assertEqual(len(counter), num_buckets)
        for bucket, count in counter.items():
            self.assertGreaterEqual(
                count, expected * 0.8, f"MurmurHash3 bucket {bucket} has too few items"
            )
            self.assertLessEqual(
                count, expected * 1.2, f"MurmurHash3 bucket {bucket} has too many items"
            )

    def test_different_hash_functions(self):
        """Test that the two hash functions produce different outputs."""
        for input_value in ["test", 123, (1, 2, 3)]:
            self.assertNotEqual(
                murmurhash3_64(input_value),
                fnv1a_64(input_value),
                f"MurmurHash3 and FNV-1a produced the same hash for {input_value}",
            )


class TestDoubleHashing(unittest.TestCase):
    """Test cases for HashPair and nth_index."""

    def test_nth_index_formula(self):
        self.assertEqual(nth_index(10, 3, 0, 7), 10 % 7)
        self.assertEqual(nth_index(10, 3, 4, 7), (10 + 4 * 3) % 7)
        # Large 64-bit inputs stay in range
        h1, h2 = 0xFFFFFFFFFFFFFFFF, 0xFFFFFFFFFFFFFFFE
        for i in range(20):
            self.assertTrue(0 <= nth_index(h1, h2, i, 1227) < 1227)

    def test_nth_index_wraps(self):
        """The sum wraps at 2**64 before it is reduced modulo m."""
        self.assertEqual(nth_index(MASK_64, 1, 1, 1227), 0)
        self.assertEqual(nth_index(MASK_64, 2, 1, 1000), 1)
        # 3 * (2**64 - 1) wraps to 2**64 - 3
        self.assertEqual(nth_index(MASK_64, MASK_64, 2, 1000), (MASK_64 - 2) % 1000)

        pair = HashPair(MASK_64, MASK_64)
        for i, position in enumerate(pair.indices(13, 1227)):
            self.assertEqual(position, ((MASK_64 + i * MASK_64) & MASK_64) % 1227)

    def test_derive(self):
        pair = HashPair.derive(b"apple")
        self.assertEqual(pair.h1, murmurhash3_64(b"apple"))
        self.assertEqual(pair.h2, fnv1a_64(b"apple"))
        self.assertEqual(pair, HashPair.derive("apple"))

        h1, h2 = pair
        self.assertEqual((h1, h2), pair.as_tuple())

    def test_derive_seed(self):
        self.assertNotEqual(HashPair.derive(b"apple", seed=0), HashPair.derive(b"apple", seed=7))

    def test_indices(self):
        pair = HashPair.derive("banana")
        positions = list(pair.indices(13, 1227))
        self.assertEqual(len(positions), 13)
        self.assertEqual(positions[0], pair.h1 % 1227)
        self.assertEqual(positions, [pair.nth_index(i, 1227) for i in range(13)])
        for position in positions:
            self.assertTrue(0 <= position < 1227)

    def test_index_distribution(self):
        """Double hashed positions spread evenly over the table."""
        m = 50
        counter = Counter()
        for i in range(2000):
            counter.update(HashPair.derive(f"item-{i}").indices(5, m))

        expected = 2000 * 5 / m
        self.assertEqual(len(counter), m)
        for position, count in counter.items():
            self.assertGreaterEqual(count, expected * 0.6, f"Position {position} underused")
            self.assertLessEqual(count, expected * 1.4, f"Position {position} overused")


if __name__ == "__main__":
    unittest.main()
