"""
Primality Testing for the Set Accumulator

Trial division against the primes below 1000 followed by a Miller-Rabin
test with random witnesses. Used both to generate the RSA primes of the
modulus and to map accumulator members to prime exponents.
"""

import random
import secrets
from typing import Optional

from .config import get_settings

SMALL_PRIMES = (
    2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47, 53, 59, 61,
    67, 71, 73, 79, 83, 89, 97, 101, 103, 107, 109, 113, 127, 131, 137,
    139, 149, 151, 157, 163, 167, 173, 179, 181, 191, 193, 197, 199, 211,
    223, 227, 229, 233, 239, 241, 251, 257, 263, 269, 271, 277, 281, 283,
    293, 307, 311, 313, 317, 331, 337, 347, 349, 353, 359, 367, 373, 379,
    383, 389, 397, 401, 409, 419, 421, 431, 433, 439, 443, 449, 457, 461,
    463, 467, 479, 487, 491, 499, 503, 509, 521, 523, 541, 547, 557, 563,
    569, 571, 577, 587, 593, 599, 601, 607, 613, 617, 619, 631, 641, 643,
    647, 653, 659, 661, 673, 677, 683, 691, 701, 709, 719, 727, 733, 739,
    743, 751, 757, 761, 769, 773, 787, 797, 809, 811, 821, 823, 827, 829,
    839, 853, 857, 859, 863, 877, 881, 883, 887, 907, 911, 919, 929, 937,
    941, 947, 953, 967, 971, 977, 983, 991, 997,
)


def miller_rabin(candidate: int, trials: int, rng: random.Random) -> bool:
    """
    Miller-Rabin probable-prime test with random witnesses.

    Writes candidate - 1 = 2^t * d with d odd, then for each trial picks a
    witness a in [2, candidate - 2] and checks the strong pseudoprime pattern
    on a^d and its t - 1 successive squarings. A composite survives all
    trials with probability at most 4^(-trials).

    Args:
        candidate: Odd integer >= 5 to test
        trials: Number of independent random witnesses
        rng: Source of witnesses

    Returns:
        bool: False if candidate is certainly composite, True if probably prime

    Raises:
        ValueError: If candidate is even or below 5, or trials < 1
    """
    if candidate < 5 or candidate % 2 == 0:
        raise ValueError("miller_rabin requires an odd candidate >= 5")
    if trials < 1:
        raise ValueError("trials must be positive")

    d, t = candidate - 1, 0
    while d % 2 == 0:
        d //= 2
        t += 1

    for _ in range(trials):
        a = rng.randrange(2, candidate - 1)
        x = pow(a, d, candidate)
        if x in (1, candidate - 1):
            continue
        for _ in range(t - 1):
            x = pow(x, 2, candidate)
            if x == candidate - 1:
                break
        else:
            return False
    return True


def is_prime(candidate: int, *, trials: Optional[int] = None, rng: Optional[random.Random] = None) -> bool:
    """
    Decide whether a non-negative integer is (probably) prime.

    Candidates equal to a table prime are prime; candidates divisible by a
    table prime are composite. Anything left goes to Miller-Rabin.

    Args:
        candidate: Non-negative integer to test
        trials: Miller-Rabin trials (default: settings.miller_rabin_trials)
        rng: Witness source (default: a fresh secrets.SystemRandom)

    Returns:
        bool: True if candidate is prime (with error at most 4^-trials)

    Raises:
        TypeError: If candidate is not an int
        ValueError: If candidate is negative

    Example:
        >>> is_prime(29)
        True
        >>> is_prime(29 * 3)
        False
    """
    if isinstance(candidate, bool) or not isinstance(candidate, int):
        raise TypeError("candidate must be an int")
    if candidate < 0:
        raise ValueError("candidate must be non-negative")
    if candidate < 2:
        return False

    for p in SMALL_PRIMES:
        if candidate == p:
            return True
        if candidate % p == 0:
            return False

    if trials is None:
        trials = get_settings().miller_rabin_trials
    if rng is None:
        rng = secrets.SystemRandom()
    return miller_rabin(candidate, trials, rng)
