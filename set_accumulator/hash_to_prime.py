"""
Hash-to-Prime Conversion for the Set Accumulator

Maps a (value, nonce) pair to a prime exponent. The mapping is
deterministic, so a verifier holding only the value and the nonce can
recompute the exact prime the prover used.
"""

import hashlib
import logging
import random
from typing import Optional

from .config import get_settings
from .errors import PrimeSearchExhaustedError
from .primality import is_prime

logger = logging.getLogger(__name__)

_UNSET = object()


def digest(data: bytes, hash_name: Optional[str] = None) -> bytes:
    """
    Hash bytes with the configured fixed-size hash.

    Args:
        data: Bytes to hash
        hash_name: hashlib algorithm name (default: settings.hash_algorithm)

    Returns:
        bytes: The digest
    """
    return hashlib.new(hash_name or get_settings().hash_algorithm, data).digest()


def hash_to_prime(
    value: bytes,
    nonce: bytes,
    *,
    hash_name: Optional[str] = None,
    max_attempts=_UNSET,
    trials: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> int:
    """
    Convert a value and its nonce to a prime number.

    The start candidate is H(value || nonce) read as a big-endian integer.
    The candidate itself is tested first, then candidate + 1, candidate + 2,
    and so on until the primality test accepts.

    Args:
        value: Member value (any bytes, may be empty)
        nonce: Nonce bound to the value when it was added
        hash_name: hashlib algorithm name (default: settings.hash_algorithm)
        max_attempts: Candidates to test before giving up; None for no limit
            (default: settings.max_search_attempts)
        trials: Miller-Rabin trials (default: settings.miller_rabin_trials)
        rng: Witness source for the primality test

    Returns:
        int: The first prime at or above the hash of value || nonce

    Raises:
        TypeError: If value or nonce is not bytes
        PrimeSearchExhaustedError: If no prime is found within max_attempts

    Example:
        >>> p = hash_to_prime(b"Hello World!", b"\\x00" * 32)
        >>> assert p == hash_to_prime(b"Hello World!", b"\\x00" * 32)
    """
    if not isinstance(value, (bytes, bytearray)):
        raise TypeError("value must be bytes")
    if not isinstance(nonce, (bytes, bytearray)):
        raise TypeError("nonce must be bytes")
    if max_attempts is _UNSET:
        max_attempts = get_settings().max_search_attempts
    if max_attempts is not None and max_attempts <= 0:
        raise ValueError("max_attempts must be positive")

    candidate = int.from_bytes(digest(bytes(value) + bytes(nonce), hash_name), "big")

    attempts = 0
    while max_attempts is None or attempts < max_attempts:
        attempts += 1
        if is_prime(candidate, trials=trials, rng=rng):
            return candidate
        candidate += 1

    logger.error(f"hash_to_prime gave up after {attempts} candidates")
    raise PrimeSearchExhaustedError("hash-to-prime", attempts)
