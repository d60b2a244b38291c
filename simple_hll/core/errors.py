"""
Exceptions raised by simple-hll.
"""


class HLLError(Exception):
    """Base class for all simple-hll errors."""


class InvalidConfigurationError(HLLError, ValueError):
    """
    Raised when an estimator is configured with invalid parameters.

    Examples are a register count that is not a positive power of two,
    an unknown hash backend name or an unreachable target error rate.
    """


class HashUnavailableError(HLLError, RuntimeError):
    """
    Raised when the hashing primitive cannot be provided by the runtime.

    This is an environment defect rather than a data error, so callers
    should not retry.
    """
