"""
RSA Set Accumulator Core Operations

Adds byte-string members to an RSA accumulator and produces membership
witnesses that anyone holding the public parameters can check.

Each member is bound to a fresh random nonce and mapped to a prime
exponent with hash_to_prime(value, nonce). The accumulator state is the
generator raised to the product of all member exponents, mod N.
"""

import logging
import random
import secrets
from typing import Callable, Iterable, List, Optional, Tuple

from .config import get_settings
from .hash_to_prime import hash_to_prime
from .rsa_params import generate_params
from .store import MemoryStore, Store

logger = logging.getLogger(__name__)

_UNSET = object()

Witness = Tuple[int, bytes]


def verify_exponent(witness: int, exponent: int, state: int, modulus: int) -> bool:
    """
    Check the witness equation w^p ≡ A (mod N).

    Args:
        witness: Membership witness
        exponent: Prime the member maps to
        state: Current accumulator value
        modulus: RSA modulus

    Returns:
        bool: True if witness^exponent mod modulus == state, False otherwise
    """
    if witness <= 0 or exponent <= 0 or state <= 0 or modulus <= 0:
        return False

    if witness >= modulus or state >= modulus:
        return False

    return pow(witness, exponent, modulus) == state


def verify_membership(
    value: bytes,
    witness: int,
    nonce: bytes,
    modulus: int,
    state: int,
    *,
    hash_name: Optional[str] = None,
    max_attempts=_UNSET,
    trials: Optional[int] = None,
) -> bool:
    """
    Verify that value is a member of the accumulator with the given state.

    The verifier recomputes the member's prime from (value, nonce) and
    checks one modular exponentiation. No other member is needed.

    Args:
        value: Claimed member
        witness: Witness returned by SetAccumulator.get_witness
        nonce: Nonce returned alongside the witness
        modulus: RSA modulus
        state: Accumulator value to verify against
        hash_name: hashlib algorithm the accumulator was built with

    Returns:
        bool: True if the witness proves membership

    Example:
        >>> witness, nonce = acc.get_witness(b"Hello World!")
        >>> assert verify_membership(b"Hello World!", witness, nonce, acc.modulus, acc.state)
    """
    kwargs = {"hash_name": hash_name, "trials": trials}
    if max_attempts is not _UNSET:
        kwargs["max_attempts"] = max_attempts
    exponent = hash_to_prime(value, nonce, **kwargs)
    return verify_exponent(witness, exponent, state, modulus)


class SetAccumulator:
    """
    Accumulator engine over a Store.

    The engine keeps no copy of the store's data between calls. It is not
    safe for concurrent use: callers sharing one accumulator across threads
    must serialize add() themselves.

    Args:
        store: Backend holding parameters, state and members
        nonce_size: Bytes per nonce (default: settings.nonce_size)
        rng: Random source for nonces and primality witnesses; inject a
            seeded random.Random for reproducible tests (default: system
            randomness drawn fresh on every call)
        hash_name: hashlib algorithm (default: settings.hash_algorithm)
        max_attempts: Cap on each hash-to-prime search; None for no limit
        trials: Miller-Rabin trials (default: settings.miller_rabin_trials)
    """

    def __init__(
        self,
        store: Store,
        *,
        nonce_size: Optional[int] = None,
        rng: Optional[random.Random] = None,
        hash_name: Optional[str] = None,
        max_attempts=_UNSET,
        trials: Optional[int] = None,
    ):
        settings = get_settings()
        self.store = store
        self.nonce_size = settings.nonce_size if nonce_size is None else nonce_size
        self.hash_name = hash_name or settings.hash_algorithm
        self.max_attempts = settings.max_search_attempts if max_attempts is _UNSET else max_attempts
        self.trials = settings.miller_rabin_trials if trials is None else trials
        self._rng = rng

        if self.nonce_size <= 0:
            raise ValueError("nonce_size must be positive")

    def __repr__(self) -> str:
        return f"SetAccumulator({self.store!r})"

    def __len__(self) -> int:
        return self.store.member_count()

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, (bytes, bytearray)):
            return False
        return self.store.has_member(value)

    @classmethod
    def generate(
        cls,
        bits: Optional[int] = None,
        *,
        rng: Optional[random.Random] = None,
        store_factory: Callable[[int, int], Store] = MemoryStore,
        **kwargs,
    ) -> "SetAccumulator":
        """
        Build an empty accumulator over freshly generated parameters.

        The trapdoor primes are discarded; only N and g are kept.

        Args:
            bits: Bit length of each secret prime (default: settings.prime_bits)
            rng: Random source for parameter generation and the engine
            store_factory: Called as store_factory(generator, modulus)
            **kwargs: Passed through to SetAccumulator()

        Returns:
            SetAccumulator: Accumulator whose state equals its generator
        """
        params, _ = generate_params(bits, rng=rng)
        store = store_factory(params.generator, params.modulus)
        return cls(store, rng=rng, **kwargs)

    @property
    def generator(self) -> int:
        return self.store.get_generator()

    @property
    def modulus(self) -> int:
        return self.store.get_modulus()

    @property
    def state(self) -> int:
        return self.store.get_state()

    def _new_nonce(self) -> bytes:
        if self._rng is None:
            return secrets.token_bytes(self.nonce_size)
        return self._rng.getrandbits(self.nonce_size * 8).to_bytes(self.nonce_size, "big")

    def map_to_prime(self, value: bytes, nonce: bytes) -> int:
        """Map (value, nonce) to its prime exponent with this accumulator's settings."""
        return hash_to_prime(
            value,
            nonce,
            hash_name=self.hash_name,
            max_attempts=self.max_attempts,
            trials=self.trials,
            rng=self._rng,
        )

    def add(self, value: bytes) -> bytes:
        """
        Add a member to the accumulator.

        Draws a fresh nonce, maps (value, nonce) to a prime p and replaces the
        state A with A^p mod N. Adding a value that is already a member
        overwrites its nonce and raises the state to a second prime, after
        which no witness for that value verifies. Avoiding this is the
        caller's job.

        Args:
            value: Member to add (any bytes)

        Returns:
            bytes: The nonce bound to value

        Raises:
            TypeError: If value is not bytes
            PrimeSearchExhaustedError: If the prime search hit its cap; the
                accumulator is left unchanged
        """
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError("value must be bytes")
        value = bytes(value)

        nonce = self._new_nonce()
        exponent = self.map_to_prime(value, nonce)

        if self.store.has_member(value):
            logger.warning(f"Re-adding existing member {value[:16]!r}; previous nonce is overwritten")

        modulus = self.store.get_modulus()
        state = self.store.get_state()
        self.store.record_addition(pow(state, exponent, modulus), value, nonce)

        logger.debug(f"Added member {value[:16]!r} with {exponent.bit_length()}-bit prime")
        return nonce

    def add_many(self, values: Iterable[bytes]) -> List[bytes]:
        """Add several members in order, returning their nonces."""
        return [self.add(value) for value in values]

    def get_exponent(self, value: bytes) -> Optional[int]:
        """Return the prime a member currently maps to, or None for non-members."""
        nonce = self.store.get_nonce(value)
        if nonce is None:
            return None
        return self.map_to_prime(value, nonce)

    def get_witness(self, value: bytes) -> Optional[Witness]:
        """
        Compute the membership witness for value.

        The witness is the generator raised to the primes of every other
        member: w = g^(product of p_j for j != value) mod N, so that
        w^p_value ≡ A (mod N). Cost is one hash-to-prime search and one
        modular exponentiation per other member.

        Args:
            value: Member to prove

        Returns:
            Optional[Tuple[int, bytes]]: (witness, nonce) for a member, None
            if value was never added
        """
        nonce = self.store.get_nonce(value)
        if nonce is None:
            return None

        value = bytes(value)
        modulus = self.store.get_modulus()
        witness = self.store.get_generator() % modulus

        for member, member_nonce in self.store.iter_members():
            if member == value:
                continue
            witness = pow(witness, self.map_to_prime(member, member_nonce), modulus)

        logger.debug(f"Computed witness for {value[:16]!r} over {len(self) - 1} other members")
        return witness, nonce

    def verify(self, value: bytes, witness: int, nonce: bytes) -> bool:
        """Verify a witness for value against the current state."""
        return verify_membership(
            value,
            witness,
            nonce,
            self.modulus,
            self.state,
            hash_name=self.hash_name,
            max_attempts=self.max_attempts,
            trials=self.trials,
        )

    def recompute_state(self) -> int:
        """
        Recompute the accumulator from the generator and recorded members.

        Matches ``state`` unless some value was added more than once, in
        which case the overwritten exponents are no longer recoverable.

        Returns:
            int: g^(product of all member primes) mod N
        """
        modulus = self.store.get_modulus()
        result = self.store.get_generator()
        for member, nonce in self.store.iter_members():
            result = pow(result, self.map_to_prime(member, nonce), modulus)
        return result
