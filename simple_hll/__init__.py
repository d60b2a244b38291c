"""
simple-hll - Lightweight Distinct Counting

simple-hll is a Python library for estimating the number of distinct items in a
data stream with a fixed, small memory footprint using HyperLogLog.
"""

__version__ = "0.1.0"

# Import main classes to make them available at the top level
from simple_hll.algorithms.hyperloglog import HyperLogLog
from simple_hll.core.errors import (
    HashUnavailableError,
    HLLError,
    InvalidConfigurationError,
)

__all__ = [
    # Estimator
    "HyperLogLog",
    # Errors
    "HLLError",
    "InvalidConfigurationError",
    "HashUnavailableError",
]
