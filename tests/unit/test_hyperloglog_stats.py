"""
Unit tests for HyperLogLog statistics and diagnostics.
"""

import json
import math
import unittest

from simple_hll.algorithms.hyperloglog import HyperLogLog


class TestHyperLogLogStats(unittest.TestCase):
    """Test cases for HyperLogLog diagnostic hooks."""

    def test_get_register_values(self):
        """Test getting register values for analysis."""
        hll = HyperLogLog(register_count=256)

        registers = hll.get_register_values()
        self.assertEqual(len(registers), 256)
        self.assertEqual(sum(registers), 0)

        for i in range(100):
            hll.add(f"item-{i}")

        registers_after = hll.get_register_values()
        self.assertEqual(len(registers_after), 256)
        self.assertGreater(sum(registers_after), 0)

        # The returned list is a copy, not a reference
        registers_copy = hll.get_register_values()
        registers_copy[0] = 200
        self.assertNotEqual(registers_copy[0], hll.get_register_values()[0])

    def test_get_stats_empty(self):
        """Test getting stats for an empty HyperLogLog."""
        hll = HyperLogLog(register_count=1024)

        stats = hll.get_stats()

        self.assertEqual(stats["type"], "HyperLogLog")
        self.assertEqual(stats["items_processed"], 0)
        self.assertEqual(stats["estimated_cardinality"], 0)
        self.assertEqual(stats["register_count"], 1024)
        self.assertEqual(stats["bucket_bits"], 10)
        self.assertEqual(stats["hash"], "md5")
        self.assertEqual(stats["max_rank"], 119)
        self.assertAlmostEqual(stats["alpha_value"], hll.alpha)

        # Empty HLL should not have register stats
        self.assertNotIn("empty_registers", stats)
        self.assertNotIn("max_register_value", stats)

    def test_get_stats_with_data(self):
        """Test getting stats for a HyperLogLog with data."""
        hll = HyperLogLog(register_count=256)

        for i in range(1000):
            hll.add(f"item-{i}")

        stats = hll.get_stats()

        self.assertEqual(stats["items_processed"], 1000)
        self.assertEqual(stats["estimated_cardinality"], hll.count())

        self.assertIn("empty_registers", stats)
        self.assertIn("max_register_value", stats)
        self.assertIn("avg_register_value", stats)
        self.assertEqual(
            stats["empty_registers_pct"], stats["empty_registers"] / 256 * 100
        )

        # Distribution covers every register
        distribution = stats["register_value_distribution"]
        self.assertEqual(sum(distribution.values()), 256)
        self.assertTrue(all(isinstance(k, str) for k in distribution))
        self.assertEqual(max(int(k) for k in distribution), stats["max_register_value"])
        self.assertEqual(distribution.get("0", 0), stats["empty_registers"])
        ranks = [int(k) for k in distribution]
        self.assertEqual(ranks, sorted(ranks))

        # Stats are JSON-serializable
        json.dumps(stats)

    def test_error_bounds(self):
        """Test the error bound calculations."""
        for m in [16, 256, 4096, 65536]:
            hll = HyperLogLog(register_count=m)
            bounds = hll.error_bounds()

            expected_std_error = 1.04 / math.sqrt(m)
            self.assertAlmostEqual(bounds["relative_error"], expected_std_error, places=10)
            self.assertAlmostEqual(bounds["confidence_68pct"], expected_std_error)
            self.assertAlmostEqual(bounds["confidence_95pct"], expected_std_error * 1.96)
            self.assertAlmostEqual(bounds["confidence_99pct"], expected_std_error * 2.58)

    def test_estimate_size(self):
        """Memory usage grows with the register count and not with the stream."""
        small = HyperLogLog(register_count=16)
        large = HyperLogLog(register_count=4096)

        self.assertGreater(large.estimate_size(), small.estimate_size())
        self.assertGreaterEqual(large.estimate_size(), 4096)

        before = large.estimate_size()
        for i in range(5000):
            large.add(f"item-{i}")
        self.assertEqual(large.estimate_size(), before)

    def test_custom_hashfunc_name(self):
        """A custom hash function is reported by name."""

        def constant_hash(item):
            return 1

        hll = HyperLogLog(register_count=16, hashfunc=constant_hash)
        self.assertEqual(hll.get_stats()["hash"], "constant_hash")
        self.assertEqual(
            repr(hll), "HyperLogLog(register_count=16, hash='constant_hash')"
        )

    def test_repr(self):
        hll = HyperLogLog(register_count=64, hash_name="murmur3")
        self.assertEqual(repr(hll), "HyperLogLog(register_count=64, hash='murmur3')")


if __name__ == "__main__":
    unittest.main()
