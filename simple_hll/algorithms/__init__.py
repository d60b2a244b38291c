"""
Algorithm implementations for simple-hll.
"""

from simple_hll.algorithms.hyperloglog import HyperLogLog

__all__ = [
    "HyperLogLog",
]
