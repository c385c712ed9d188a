"""
Exception Types for the Set Accumulator

Non-membership is not an error: ``get_witness`` returns ``None`` for it.
Everything here is fatal for the operation that raised it.
"""

from typing import Optional


class AccumulatorError(Exception):
    """Base class for accumulator failures."""


class PrimeSearchExhaustedError(AccumulatorError, ValueError):
    """
    A prime search ran past its iteration cap without finding a prime.

    Attributes:
        attempts: Number of candidates tested before giving up
        search: Short description of the search that failed
    """

    def __init__(self, search: str, attempts: int, detail: Optional[str] = None):
        self.search = search
        self.attempts = attempts
        message = f"Could not find prime for {search} within {attempts} attempts"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class InvalidParametersError(AccumulatorError, ValueError):
    """Accumulator parameters (modulus, generator) are malformed."""
