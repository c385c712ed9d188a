"""
Witness Refresh for the Set Accumulator

Keeps membership witnesses valid as the accumulator grows, without
recomputing each one from scratch.
"""

from typing import Dict, List, Tuple

from .accumulator import SetAccumulator, Witness


def update_witness_on_addition(old_witness: int, added_exponent: int, modulus: int) -> int:
    """
    Update an existing witness after another member is added.

    If w^p ≡ A and the accumulator becomes A' = A^q, then (w^q)^p ≡ A',
    so new_witness = old_witness^q mod N.

    Args:
        old_witness: Witness valid before the addition
        added_exponent: Prime of the member that was just added
        modulus: RSA modulus

    Returns:
        int: Witness valid after the addition

    Raises:
        ValueError: If any argument is non-positive
    """
    if old_witness <= 0 or added_exponent <= 0 or modulus <= 0:
        raise ValueError("All parameters must be positive")

    return pow(old_witness, added_exponent, modulus)


def _root_factor(base: int, exponents: List[int], modulus: int) -> List[int]:
    # Witness for exponents[i] is base raised to every other exponent
    if len(exponents) == 1:
        return [base]

    half = len(exponents) // 2
    left, right = exponents[:half], exponents[half:]

    base_left = base
    for e in left:
        base_left = pow(base_left, e, modulus)
    base_right = base
    for e in right:
        base_right = pow(base_right, e, modulus)

    return _root_factor(base_right, left, modulus) + _root_factor(base_left, right, modulus)


def batch_witnesses(accumulator: SetAccumulator) -> Dict[bytes, Witness]:
    """
    Compute witnesses for every member at once.

    Splits the member list in half, raises the generator to each half's
    exponents and recurses with the other half's result as base. This costs
    O(n log n) exponentiations instead of the O(n^2) of calling
    get_witness for each member.

    Args:
        accumulator: Accumulator whose members need witnesses

    Returns:
        Dict[bytes, Tuple[int, bytes]]: member -> (witness, nonce)

    Example:
        >>> witnesses = batch_witnesses(acc)
        >>> w, nonce = witnesses[b"device-1"]
        >>> assert acc.verify(b"device-1", w, nonce)
    """
    members: List[Tuple[bytes, bytes]] = list(accumulator.store.iter_members())
    if not members:
        return {}

    exponents = [accumulator.map_to_prime(value, nonce) for value, nonce in members]
    witnesses = _root_factor(accumulator.generator, exponents, accumulator.modulus)

    return {
        value: (witness, nonce)
        for (value, nonce), witness in zip(members, witnesses)
    }
