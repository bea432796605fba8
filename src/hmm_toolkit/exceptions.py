"""
Exception hierarchy for HMM Toolkit.
"""

from typing import Optional


class HMMError(Exception):
    """Base exception for HMM Toolkit."""
    pass


class DimensionMismatchError(HMMError, ValueError):
    """Model matrices or observation symbols have inconsistent dimensions."""
    pass


class InvalidDistributionError(HMMError, ValueError):
    """A probability vector or matrix row is negative or does not sum to one."""
    pass


class DegenerateDistributionError(HMMError, ArithmeticError):
    """A required normalizing denominator is zero.

    The model assigns zero probability to the observed data under its
    current parameters. ``step`` and ``state`` locate the failure when known.
    """

    def __init__(self, message: str, step: Optional[int] = None,
                 state: Optional[int] = None):
        self.step = step
        self.state = state
        super().__init__(message)


class DecodingError(HMMError):
    """No state path has non-zero probability for the observations."""
    pass


class ParseError(HMMError, ValueError):
    """Malformed matrix or sequence text."""
    pass
