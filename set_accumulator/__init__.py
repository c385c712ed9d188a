"""
RSA Set Accumulator Package

This package provides an RSA accumulator over arbitrary byte-string
members, with hash-to-prime member binding and membership witnesses that
can be verified against the public parameters alone.
"""

from .accumulator import (
    SetAccumulator,
    verify_exponent,
    verify_membership,
)
from .config import AccumulatorSettings, get_settings, reset_settings
from .errors import (
    AccumulatorError,
    InvalidParametersError,
    PrimeSearchExhaustedError,
)
from .hash_to_prime import digest, hash_to_prime
from .primality import SMALL_PRIMES, is_prime, miller_rabin
from .prime_generator import distinct_prime_pair, random_prime
from .rsa_params import (
    AccumulatorParams,
    generate_params,
    load_params,
    save_params,
    validate_params,
)
from .sqlite_store import SQLiteStore
from .store import MemoryStore, Store
from .witness_refresh import batch_witnesses, update_witness_on_addition

__version__ = "0.1.0"
__all__ = [
    "SetAccumulator",
    "verify_exponent",
    "verify_membership",
    "AccumulatorSettings",
    "get_settings",
    "reset_settings",
    "AccumulatorError",
    "InvalidParametersError",
    "PrimeSearchExhaustedError",
    "digest",
    "hash_to_prime",
    "SMALL_PRIMES",
    "is_prime",
    "miller_rabin",
    "distinct_prime_pair",
    "random_prime",
    "AccumulatorParams",
    "generate_params",
    "load_params",
    "save_params",
    "validate_params",
    "SQLiteStore",
    "MemoryStore",
    "Store",
    "batch_witnesses",
    "update_witness_on_addition",
]
