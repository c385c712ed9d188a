"""
Random Prime Generation

Generates the secret primes behind an RSA accumulator modulus.
"""

import logging
import random
import secrets
from concurrent.futures import ProcessPoolExecutor
from typing import Optional, Tuple

from .config import get_settings
from .errors import PrimeSearchExhaustedError
from .primality import is_prime

logger = logging.getLogger(__name__)

_UNSET = object()


def random_prime(
    bits: int,
    *,
    rng: Optional[random.Random] = None,
    trials: Optional[int] = None,
    max_attempts=_UNSET,
) -> int:
    """
    Sample uniformly random `bits`-bit integers until one is prime.

    The top bit of every sample is set, so the result has exactly `bits` bits.

    Args:
        bits: Bit length of the prime (>= 2)
        rng: Random source (default: a fresh secrets.SystemRandom)
        trials: Miller-Rabin trials (default: settings.miller_rabin_trials)
        max_attempts: Samples to try before giving up; None for no limit
            (default: settings.max_search_attempts)

    Returns:
        int: A prime with bit_length() == bits

    Raises:
        ValueError: If bits < 2
        PrimeSearchExhaustedError: If max_attempts samples were all composite
    """
    if bits < 2:
        raise ValueError("bits must be at least 2")
    if max_attempts is _UNSET:
        max_attempts = get_settings().max_search_attempts
    if max_attempts is not None and max_attempts <= 0:
        raise ValueError("max_attempts must be positive")
    if rng is None:
        rng = secrets.SystemRandom()

    top_bit = 1 << (bits - 1)
    attempts = 0
    while max_attempts is None or attempts < max_attempts:
        attempts += 1
        candidate = rng.getrandbits(bits) | top_bit
        if is_prime(candidate, trials=trials, rng=rng):
            logger.debug(f"Found {bits}-bit prime after {attempts} samples")
            return candidate

    logger.error(f"No {bits}-bit prime found in {attempts} samples")
    raise PrimeSearchExhaustedError(f"random {bits}-bit prime", attempts)


def _search_prime(bits: int, trials: Optional[int], max_attempts: Optional[int]) -> int:
    # Runs in a worker process with its own system-seeded generator
    return random_prime(bits, trials=trials, max_attempts=max_attempts)


def distinct_prime_pair(
    bits: int,
    *,
    rng: Optional[random.Random] = None,
    parallel: Optional[bool] = None,
    trials: Optional[int] = None,
    max_attempts=_UNSET,
) -> Tuple[int, int]:
    """
    Generate two distinct random primes of the same bit length.

    Without an injected rng the two searches run concurrently in a process
    pool and are joined before returning. With an injected rng they run one
    after the other so that a seeded generator gives reproducible output.
    If the searches collide, the second prime is resampled until distinct.

    Args:
        bits: Bit length of each prime
        rng: Random source; forces sequential search when given
        parallel: Use a process pool (default: settings.parallel_prime_search)
        trials: Miller-Rabin trials (default: settings.miller_rabin_trials)
        max_attempts: Per-search sample cap (default: settings.max_search_attempts)

    Returns:
        Tuple[int, int]: Two distinct primes (order unspecified)

    Example:
        >>> p, q = distinct_prime_pair(512)
        >>> N = p * q
    """
    settings = get_settings()
    if bits < 2:
        raise ValueError("bits must be at least 2")
    if max_attempts is _UNSET:
        max_attempts = settings.max_search_attempts
    if parallel is None:
        parallel = settings.parallel_prime_search

    if rng is None and parallel:
        with ProcessPoolExecutor(max_workers=2) as executor:
            futures = [
                executor.submit(_search_prime, bits, trials, max_attempts)
                for _ in range(2)
            ]
            a, b = [future.result() for future in futures]
    else:
        a = random_prime(bits, rng=rng, trials=trials, max_attempts=max_attempts)
        b = random_prime(bits, rng=rng, trials=trials, max_attempts=max_attempts)

    while a == b:
        logger.warning(f"Prime pair collided at {bits} bits, resampling")
        b = random_prime(bits, rng=rng, trials=trials, max_attempts=max_attempts)

    return a, b
