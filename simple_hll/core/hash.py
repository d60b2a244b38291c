"""
128-bit hashing functions for simple-hll.

These functions are chosen for distribution quality, not cryptographic security.
The MD5 backend relies on hashlib; the MurmurHash3 backend is pure Python and
needs nothing beyond the interpreter.
"""

import hashlib
import logging
from typing import Any, Callable, Dict

from simple_hll.core.errors import HashUnavailableError, InvalidConfigurationError

logger = logging.getLogger(__name__)

HASH_BITS = 128
HASH_MASK = (1 << HASH_BITS) - 1

_MASK64 = 0xFFFFFFFFFFFFFFFF


def _to_bytes(key: Any) -> bytes:
    """Convert a key to the bytes that get hashed."""
    if isinstance(key, str):
        return key.encode("utf-8")
    if isinstance(key, (bytes, bytearray, memoryview)):
        return bytes(key)
    # Use repr() to get a stable string for other objects
    return repr(key).encode("utf-8")


def md5_128(key: Any) -> int:
    """
    Hash a key to a 128-bit unsigned integer using MD5.

    The digest is interpreted as a big-endian unsigned integer.

    Args:
        key: The key to hash (str, bytes or any object with a stable repr)

    Returns:
        128-bit hash value

    Raises:
        HashUnavailableError: If the runtime does not provide MD5.
    """
    try:
        # hashlib.new raises ValueError both on builds without MD5 (where
        # hashlib.md5 is not defined at all) and under FIPS restrictions
        digest = hashlib.new("md5", _to_bytes(key), usedforsecurity=False).digest()
    except ValueError as exc:
        raise HashUnavailableError("MD5 algorithm not available") from exc
    return int.from_bytes(digest, "big")


def _rotl64(x: int, r: int) -> int:
    return ((x << r) | (x >> (64 - r))) & _MASK64


def _fmix64(k: int) -> int:
    k ^= k >> 33
    k = (k * 0xFF51AFD7ED558CCD) & _MASK64
    k ^= k >> 33
    k = (k * 0xC4CEB9FE1A85EC53) & _MASK64
    k ^= k >> 33
    return k


def murmurhash3_128(key: Any, seed: int = 0) -> int:
    """
    Pure Python implementation of MurmurHash3 (x64 128-bit variant).

    Args:
        key: The key to hash (will be converted to bytes if not already)
        seed: Optional seed for the hash

    Returns:
        128-bit hash value, laid out as ``(h2 << 64) | h1``
    """
    key_bytes = _to_bytes(key)
    length = len(key_bytes)

    # MurmurHash3 x64 constants
    c1 = 0x87C37B91114253D5
    c2 = 0x4CF5AD432745937F

    h1 = seed & _MASK64
    h2 = seed & _MASK64

    # Process 16 bytes at a time
    nblocks = length // 16
    for i in range(nblocks):
        k1 = int.from_bytes(key_bytes[i * 16 : i * 16 + 8], "little")
        k2 = int.from_bytes(key_bytes[i * 16 + 8 : i * 16 + 16], "little")

        k1 = (k1 * c1) & _MASK64
        k1 = _rotl64(k1, 31)
        k1 = (k1 * c2) & _MASK64
        h1 ^= k1

        h1 = _rotl64(h1, 27)
        h1 = (h1 + h2) & _MASK64
        h1 = (h1 * 5 + 0x52DCE729) & _MASK64

        k2 = (k2 * c2) & _MASK64
        k2 = _rotl64(k2, 33)
        k2 = (k2 * c1) & _MASK64
        h2 ^= k2

        h2 = _rotl64(h2, 31)
        h2 = (h2 + h1) & _MASK64
        h2 = (h2 * 5 + 0x38495AB5) & _MASK64

    # Tail (0-15 bytes)
    tail = key_bytes[nblocks * 16 :]
    tail_len = len(tail)

    if tail_len > 8:
        k2 = int.from_bytes(tail[8:], "little")
        k2 = (k2 * c2) & _MASK64
        k2 = _rotl64(k2, 33)
        k2 = (k2 * c1) & _MASK64
        h2 ^= k2

    if tail_len > 0:
        k1 = int.from_bytes(tail[:8], "little")
        k1 = (k1 * c1) & _MASK64
        k1 = _rotl64(k1, 31)
        k1 = (k1 * c2) & _MASK64
        h1 ^= k1

    # Finalization mixing
    h1 ^= length
    h2 ^= length

    h1 = (h1 + h2) & _MASK64
    h2 = (h2 + h1) & _MASK64

    h1 = _fmix64(h1)
    h2 = _fmix64(h2)

    h1 = (h1 + h2) & _MASK64
    h2 = (h2 + h1) & _MASK64

    return (h2 << 64) | h1


_HASH_FUNCTIONS: Dict[str, Callable[[Any], int]] = {
    "md5": md5_128,
    "murmur3": murmurhash3_128,
}


def get_hash_function(name: str) -> Callable[[Any], int]:
    """
    Look up a 128-bit hash backend by name.

    The backend is probed once so that a missing primitive surfaces here
    rather than on the first insertion.

    Args:
        name: Backend name, one of ``"md5"`` or ``"murmur3"``

    Returns:
        A callable mapping a key to a 128-bit unsigned integer

    Raises:
        InvalidConfigurationError: If the name is unknown.
        HashUnavailableError: If the backend cannot run in this environment.
    """
    try:
        hashfunc = _HASH_FUNCTIONS[name]
    except KeyError:
        raise InvalidConfigurationError(
            f"Unknown hash function {name!r}, expected one of "
            f"{sorted(_HASH_FUNCTIONS)}"
        ) from None

    try:
        hashfunc(b"")
    except HashUnavailableError:
        logger.warning("Hash backend %r is not available in this runtime", name)
        raise

    return hashfunc
