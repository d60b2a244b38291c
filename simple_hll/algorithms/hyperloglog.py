"""
HyperLogLog cardinality estimator over a 128-bit hash.

The low-order bits of each hash select a register and the remaining high-order
bits determine the rank recorded in it. A query turns the register state into
a cardinality estimate with a bias-correction constant and a small-range
(linear counting) correction.
"""

import array
import logging
import math
import sys
from collections import Counter
from typing import Any, Callable, Dict, Iterable, List, Optional

from simple_hll.core.errors import InvalidConfigurationError
from simple_hll.core.hash import HASH_BITS, HASH_MASK, get_hash_function

logger = logging.getLogger(__name__)


def _alpha(m: int) -> float:
    """Bias-correction constant for m registers."""
    if m >= 128:
        return 0.7213 / (1.0 + 1.079 / m)
    if m >= 64:
        return 0.709
    if m >= 32:
        return 0.697
    if m >= 16:
        return 0.673
    return 0.5


def _is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


class HyperLogLog:
    """
    HyperLogLog for cardinality estimation in data streams.

    Memory is one small counter per register regardless of how many distinct
    items the stream holds. The register count (m) must be a power of two and
    determines the accuracy: the standard error is roughly 1.04/sqrt(m).

    For common sizes:
    - m=1024: ~1KB memory, ~3.25% error
    - m=4096: ~4KB memory, ~1.62% error (default)
    - m=16384: ~16KB memory, ~0.81% error

    Instances are not thread-safe; serialize access externally when sharing one.

    References:
        - Flajolet, P., Fusy, E., Gandouet, O., & Meunier, F. (2007).
          HyperLogLog: the analysis of a near-optimal cardinality estimation algorithm.
    """

    # For small cardinality correction
    _THRESHOLD_SMALL = 2.5

    def __init__(
        self,
        register_count: int = 4096,
        hash_name: str = "md5",
        hashfunc: Optional[Callable[[Any], int]] = None,
    ):
        """
        Initialize a new HyperLogLog estimator.

        Args:
            register_count: Number of registers (m). Must be a positive power of two.
            hash_name: Name of the built-in 128-bit hash backend ("md5" or "murmur3").
            hashfunc: Optional callable mapping an item to a 128-bit unsigned
                      integer. Takes precedence over hash_name.

        Raises:
            InvalidConfigurationError: If register_count is not a positive power
                of two or hashfunc is not callable.
            HashUnavailableError: If the selected hash backend cannot run.
        """
        if (
            not isinstance(register_count, int)
            or isinstance(register_count, bool)
            or not _is_power_of_two(register_count)
        ):
            raise InvalidConfigurationError(
                f"register_count must be a positive power of two, got {register_count!r}"
            )

        if hashfunc is None:
            self._hash_name = hash_name
            self._hashfunc = get_hash_function(hash_name)
        elif callable(hashfunc):
            self._hash_name = getattr(hashfunc, "__name__", repr(hashfunc))
            self._hashfunc = hashfunc
        else:
            raise InvalidConfigurationError("hashfunc must be callable")

        self._m = register_count
        self._bucket_bits = register_count.bit_length() - 1
        self._index_mask = register_count - 1
        self._alpha = _alpha(register_count)

        # Rank counts from the top of the (128 - bucket_bits)-bit remainder
        self._rank_bits = HASH_BITS - self._bucket_bits
        self._max_rank = self._rank_bits + 1

        # 'B' (0-255) holds any rank up to 129
        self._registers = array.array("B", bytes(self._m))
        self._items_processed = 0

        logger.debug(
            "Created HyperLogLog with %d registers (%d index bits, hash=%s)",
            self._m,
            self._bucket_bits,
            self._hash_name,
        )

    def add(self, item: Any) -> None:
        """
        Add an item to the estimator.

        Adding the same item again leaves the registers unchanged.

        Args:
            item: The item to add (str or bytes; other objects are hashed by repr).
        """
        self._items_processed += 1

        hash_value = self._hashfunc(item) & HASH_MASK

        register_index = hash_value & self._index_mask
        remaining_hash = hash_value >> self._bucket_bits

        if remaining_hash == 0:
            rank = self._max_rank
        else:
            rank = self._rank_bits - remaining_hash.bit_length() + 1

        if rank > self._registers[register_index]:
            self._registers[register_index] = rank

    def add_all(self, items: Iterable[Any]) -> None:
        """Add every item of an iterable, in order."""
        for item in items:
            self.add(item)

    def count(self) -> int:
        """
        Estimate the number of distinct items added so far.

        Reads the registers without modifying them. An empty estimator
        returns 0 through the small-range correction.

        Returns:
            The estimated cardinality, a non-negative integer.
        """
        sum_of_inverses = 0.0
        zero_registers = 0

        for register_value in self._registers:
            sum_of_inverses += math.pow(2.0, -register_value)
            if register_value == 0:
                zero_registers += 1

        # alpha * m^2 / sum(2^(-M[j]))
        estimate = self._alpha * self._m * self._m / sum_of_inverses

        # Linear counting: m * ln(m / V), V = number of empty registers.
        # With no empty registers the raw estimate is kept even in the low range.
        if estimate <= self._THRESHOLD_SMALL * self._m and zero_registers > 0:
            estimate = self._m * math.log(self._m / zero_registers)

        return int(round(estimate))

    @classmethod
    def create_from_error_rate(
        cls,
        relative_error: float,
        hash_name: str = "md5",
        hashfunc: Optional[Callable[[Any], int]] = None,
    ) -> "HyperLogLog":
        """
        Create a HyperLogLog estimator with the desired error guarantees.

        Args:
            relative_error: The target relative (standard) error.
                            For example, 0.01 means a target error of 1%.
            hash_name: Name of the hash backend.
            hashfunc: Optional custom 128-bit hash, passed to the constructor.

        Returns:
            A new HyperLogLog estimator with the smallest register count
            meeting the target, and at least 16 registers.

        Raises:
            InvalidConfigurationError: If relative_error is not between 0 and 1,
                or needs more than 2^16 registers.
        """
        if not (0 < relative_error < 1):
            raise InvalidConfigurationError("Relative error must be between 0 and 1")

        # Standard error = 1.04/sqrt(2^p), so p = log2((1.04/relative_error)^2)
        bucket_bits = max(4, math.ceil(math.log2((1.04 / relative_error) ** 2)))

        if bucket_bits > 16:
            raise InvalidConfigurationError(
                f"Relative error of {relative_error} is too small to achieve "
                f"with at most 65536 registers. Minimum achievable error is approximately 0.41%."
            )

        logger.debug(
            "Relative error %s needs %d registers", relative_error, 1 << bucket_bits
        )
        return cls(
            register_count=1 << bucket_bits, hash_name=hash_name, hashfunc=hashfunc
        )

    @property
    def register_count(self) -> int:
        """Number of registers (m)."""
        return self._m

    @property
    def bucket_bits(self) -> int:
        """Number of low-order hash bits used as the register index."""
        return self._bucket_bits

    @property
    def alpha(self) -> float:
        """Bias-correction constant in use."""
        return self._alpha

    @property
    def max_rank(self) -> int:
        """Largest value any register can hold."""
        return self._max_rank

    @property
    def is_empty(self) -> bool:
        """True while every register is still zero."""
        return not any(self._registers)

    @property
    def items_processed(self) -> int:
        """Total number of add() calls, duplicates included."""
        return self._items_processed

    def get_register_values(self) -> List[int]:
        """
        Get the current values of all registers.

        Returns:
            A list copy of the register values.
        """
        return list(self._registers)

    # z-scores for the confidence levels reported by error_bounds()
    _CONFIDENCE_Z = {"68pct": 1.0, "95pct": 1.96, "99pct": 2.58}

    def error_bounds(self) -> Dict[str, float]:
        """
        Relative error expected from the register count alone.

        The standard error 1.04/sqrt(m) does not depend on how many items were
        added, so the bounds are fixed at construction. Each ``confidence_*``
        entry scales it by the z-score of that confidence level.
        """
        std_error = 1.04 / math.sqrt(self._m)

        bounds = {"relative_error": std_error}
        for level, z in self._CONFIDENCE_Z.items():
            bounds[f"confidence_{level}"] = std_error * z
        return bounds

    def estimate_size(self) -> int:
        """
        Estimate the current memory usage of the estimator in bytes.

        Returns:
            Estimated size in bytes.
        """
        size = sys.getsizeof(self)
        size += sys.getsizeof(self.__dict__)

        # getsizeof on array.array already includes its buffer
        size += sys.getsizeof(self._registers)
        return size

    def get_stats(self) -> Dict[str, Any]:
        """
        Snapshot of the configuration, current estimate and register occupancy.

        Occupancy keys (``empty_registers``, ``max_register_value`` and the
        rank histogram) appear only once some register holds a non-zero rank.
        """
        stats: Dict[str, Any] = {
            "type": self.__class__.__name__,
            "register_count": self._m,
            "bucket_bits": self._bucket_bits,
            "alpha_value": self._alpha,
            "hash": self._hash_name,
            "items_processed": self._items_processed,
            "estimated_cardinality": self.count(),
            "memory_bytes": self.estimate_size(),
            "max_rank": self._max_rank,
        }
        stats.update(self.error_bounds())

        if not self.is_empty:
            ranks = Counter(self._registers)
            empty_registers = ranks[0]

            stats.update(
                {
                    "empty_registers": empty_registers,
                    "empty_registers_pct": (empty_registers / self._m) * 100,
                    "max_register_value": max(ranks),
                    "avg_register_value": sum(self._registers) / self._m,
                    # rank -> number of registers holding it; str keys for JSON
                    "register_value_distribution": {
                        str(rank): ranks[rank] for rank in sorted(ranks)
                    },
                }
            )

        return stats

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(register_count={self._m}, "
            f"hash={self._hash_name!r})"
        )
