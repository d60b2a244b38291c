"""
HyperLogLog Example for simple-hll.

This example demonstrates how to use the HyperLogLog algorithm
for cardinality estimation on data streams.
"""

import logging
import random
import sys
import time

from simple_hll import HyperLogLog


def demonstrate_basic_hyperloglog():
    """Demonstrate basic HyperLogLog cardinality estimation on a simulated data stream."""
    print("\n=== Basic HyperLogLog Demo ===")

    hll = HyperLogLog(register_count=1024)

    print(
        f"Using {hll.register_count} registers "
        f"(error ~{hll.error_bounds()['relative_error']:.2%})"
    )
    print(f"Memory usage: ~{hll.estimate_size()} bytes")

    print("\nProcessing 100,000 distinct strings...")
    unique_count = 0

    for i in range(100000):
        hll.add(f"item-{i}")
        unique_count += 1

        if i % 20000 == 0:
            print(f"  Processed {i} items, current estimate: {hll.count()}")

    final_estimate = hll.count()
    print(f"\nFinal cardinality estimate: {final_estimate} (true: {unique_count})")
    print(f"Relative error: {abs(final_estimate - unique_count) / unique_count:.2%}")

    stats = hll.get_stats()
    print("\nEstimator statistics:")
    print(f"  Number of registers: {stats['register_count']}")
    print(
        f"  Empty registers: {stats['empty_registers']} "
        f"({stats['empty_registers_pct']:.2f}%)"
    )
    print(f"  Maximum register value: {stats['max_register_value']}")
    print(f"  Theoretical standard error: {stats['relative_error']:.2%}")


def demonstrate_zipf_distribution():
    """Demonstrate HyperLogLog on a skewed stream full of duplicates."""
    print("\n=== Zipf Distribution Demo ===")

    hll = HyperLogLog.create_from_error_rate(0.01)
    print(
        f"Using {hll.register_count} registers "
        f"(error ~{hll.error_bounds()['relative_error']:.2%})"
    )

    n_unique = 50000
    zipf_exponent = 1.2
    stream_size = 500000

    weights = [1.0 / (i + 1) ** zipf_exponent for i in range(n_unique)]

    rng = random.Random(42)
    stream = rng.choices(range(n_unique), weights=weights, k=stream_size)

    true_uniques = set()
    start_time = time.time()

    for value in stream:
        hll.add(f"value-{value}")
        true_uniques.add(value)

    elapsed = time.time() - start_time
    final_estimate = hll.count()
    true_count = len(true_uniques)
    rel_error = abs(final_estimate - true_count) / true_count

    print("\nFinal results:")
    print(f"  Stream size: {stream_size:,} items in {elapsed:.1f}s")
    print(f"  True unique count: {true_count:,}")
    print(f"  HyperLogLog estimate: {final_estimate:,}")
    print(f"  Relative error: {rel_error:.4%}")
    print(f"  Memory usage: {hll.estimate_size():,} bytes")

    # For comparison, the memory an exact count would need
    exact_bytes = sys.getsizeof(true_uniques)
    print(f"  Memory for exact storage (set): {exact_bytes:,} bytes")


def demonstrate_register_count_comparison():
    """Compare different register counts and hash backends."""
    print("\n=== Register Count Comparison Demo ===")

    n_unique = 100000
    results = []

    for hash_name in ["md5", "murmur3"]:
        for m in [16, 64, 256, 1024, 4096, 16384]:
            hll = HyperLogLog(register_count=m, hash_name=hash_name)
            hll.add_all(f"item-{i}" for i in range(n_unique))

            estimate = hll.count()
            rel_error = abs(estimate - n_unique) / n_unique
            theoretical_error = hll.error_bounds()["relative_error"]
            results.append((hash_name, m, estimate, rel_error, theoretical_error))

    print("\nHash     Registers  Estimate  Actual Error  Theoretical Error")
    print("---------------------------------------------------------------")
    for hash_name, m, est, err, t_err in results:
        print(f"{hash_name:8} {m:9,}  {est:8,}    {err:.4%}      {t_err:.4%}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)

    demonstrate_basic_hyperloglog()
    demonstrate_zipf_distribution()
    demonstrate_register_count_comparison()
