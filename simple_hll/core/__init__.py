"""
Core functionality for simple-hll.
"""

from simple_hll.core.errors import (
    HashUnavailableError,
    HLLError,
    InvalidConfigurationError,
)
from simple_hll.core.hash import get_hash_function, md5_128, murmurhash3_128

__all__ = [
    # Errors
    "HLLError",
    "InvalidConfigurationError",
    "HashUnavailableError",
    # Utility functions
    "md5_128",
    "murmurhash3_128",
    "get_hash_function",
]
