"""
RSA Parameters for the Set Accumulator

Generates, validates, saves and loads the public accumulator parameters
(modulus N and generator g). Keeping the factorization of N secret, and
destroying it afterwards, is the caller's responsibility.
"""

import argparse
import json
import logging
import math
import random
import secrets
import sys
from pathlib import Path
from typing import List, NamedTuple, Optional, Tuple, Union

from .config import get_settings
from .errors import InvalidParametersError
from .prime_generator import distinct_prime_pair

logger = logging.getLogger(__name__)

# 2048-bit demo modulus for tests and demos, not for production
DEMO_MODULUS_HEX = (
    "0xc09f09d858a2037ca76e7b1c52543a002213c8f1086a587f41f9616ac4fd8d6ecbec8852fd95adaec50c34cde7f0e676059896c2be9f2e479297a7507f1d1e58afe26be99489b798a704f1627b8e6b09b9a88b01ce697c4197bbeec134bb41aac0579c8026deec542c6965b0b8d39e77405a65110af3774f88cd463c6c304483c6f0a802f288c8ba4f071b6afcefa2b9395e2fe71aaea8e277c06b5d2724153c4a20209c06f2e0f523fb96b576a37937fb340478e86bbbfa8914c50f0f33a8948836caf99ca5f7f6983787a25e091d9591204dbb8c14e473d172f4e7a0b5164cf9ee97f838ded82fd2357a51a6f495850ef268009e7ecc19047f8e99a91a4d9b"
)


class AccumulatorParams(NamedTuple):
    """Public accumulator parameters."""

    modulus: int
    generator: int


def validate_params(modulus: int, generator: int, *, min_bits: int = 0) -> None:
    """
    Validate accumulator parameters.

    Args:
        modulus: RSA modulus N
        generator: Generator g
        min_bits: Minimum bit length required of N

    Raises:
        InvalidParametersError: If parameters are invalid
    """
    if modulus <= 1:
        raise InvalidParametersError("RSA modulus N must be greater than 1")

    if generator <= 0:
        raise InvalidParametersError("Generator g must be positive")

    if generator >= modulus:
        raise InvalidParametersError("Generator g must be less than modulus N")

    if modulus.bit_length() < min_bits:
        raise InvalidParametersError(f"RSA modulus N must be at least {min_bits} bits")

    if math.gcd(modulus, generator) != 1:
        raise InvalidParametersError("RSA modulus N and generator g must be coprime")


def _quadratic_residue_generator(modulus: int, rng: random.Random) -> int:
    # g = h^2 mod N lies in the quadratic residue subgroup
    while True:
        h = rng.randrange(2, modulus - 1)
        if math.gcd(h, modulus) != 1:
            continue
        g = pow(h, 2, modulus)
        if g > 1:
            return g


def generate_params(
    bits: Optional[int] = None,
    *,
    rng: Optional[random.Random] = None,
    parallel: Optional[bool] = None,
) -> Tuple[AccumulatorParams, Tuple[int, int]]:
    """
    Generate fresh accumulator parameters.

    Args:
        bits: Bit length of each secret prime (default: settings.prime_bits)
        rng: Random source (default: system randomness, parallel prime search)
        parallel: Run the two prime searches in separate processes

    Returns:
        Tuple[AccumulatorParams, Tuple[int, int]]: the public parameters and
        the trapdoor primes (p, q) with N = p * q

    Raises:
        ValueError: If bits < 8
    """
    if bits is None:
        bits = get_settings().prime_bits
    if bits < 8:
        raise ValueError("bits must be at least 8")

    p, q = distinct_prime_pair(bits, rng=rng, parallel=parallel)
    modulus = p * q
    generator = _quadratic_residue_generator(modulus, rng or secrets.SystemRandom())

    logger.info(f"Generated accumulator parameters: N={modulus.bit_length()} bits")
    return AccumulatorParams(modulus, generator), (p, q)


def generate_demo_params() -> AccumulatorParams:
    """
    Demo 2048-bit parameters.

    Note: Demo modulus, not for production.
    """
    modulus = int(DEMO_MODULUS_HEX, 16)
    return AccumulatorParams(modulus, pow(2, 2, modulus))


def generate_toy_params() -> AccumulatorParams:
    """Small toy parameters for unit testing: N = 11 * 19 = 209, g = 4."""
    return AccumulatorParams(209, 4)


def save_params(params: AccumulatorParams, path: Union[str, Path]) -> Path:
    """
    Write parameters to a JSON file as hex strings.

    Args:
        params: Parameters to save
        path: Destination file

    Returns:
        Path: The written file
    """
    validate_params(params.modulus, params.generator)
    path = Path(path)
    data = {
        "N": hex(params.modulus),
        "g": hex(params.generator),
        "bits": params.modulus.bit_length(),
    }
    with open(path, "w") as f:
        json.dump(data, f, indent=2)

    logger.info(f"Saved accumulator parameters to {path}")
    return path


def load_params(path: Union[str, Path], *, min_bits: int = 0) -> AccumulatorParams:
    """
    Load parameters from a JSON file written by save_params.

    Args:
        path: Parameter file
        min_bits: Minimum bit length required of N

    Returns:
        AccumulatorParams: The loaded (N, g)

    Raises:
        FileNotFoundError: If the file does not exist
        InvalidParametersError: If the file is malformed or the parameters are invalid
    """
    path = Path(path)
    try:
        with open(path, "r") as f:
            data = json.load(f)
        modulus = int(data["N"], 16)
        generator = int(data["g"], 16)
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        raise InvalidParametersError(f"Invalid parameters file format: {e}")

    validate_params(modulus, generator, min_bits=min_bits)
    logger.info(f"Loaded accumulator parameters from {path}: N={modulus.bit_length()} bits")
    return AccumulatorParams(modulus, generator)


def main(argv: Optional[List[str]] = None) -> int:
    """Generate a parameter file from the command line."""
    from .logging_config import setup_logging

    parser = argparse.ArgumentParser(description="Generate RSA accumulator parameters")
    parser.add_argument("--bits", type=int, default=None, help="Bit length of each secret prime")
    parser.add_argument("--output", "-o", default="params.json", help="Output JSON file")
    parser.add_argument(
        "--sequential",
        action="store_true",
        help="Search for the two primes in this process instead of a process pool",
    )
    args = parser.parse_args(argv)

    setup_logging()
    try:
        params, _ = generate_params(args.bits, parallel=not args.sequential)
    except ValueError as e:
        logger.error(f"Parameter generation failed: {e}")
        return 1

    path = save_params(params, args.output)
    print(f"Wrote {params.modulus.bit_length()}-bit parameters to {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
