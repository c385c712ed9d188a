"""
Accumulator Storage Interface

The engine reads and writes accumulator state only through the Store
protocol, so any backend holding the generator, modulus, current state and
member-to-nonce mapping can be plugged in.
"""

from typing import Dict, Iterator, Mapping, Optional, Protocol, Tuple, runtime_checkable


@runtime_checkable
class Store(Protocol):
    """Protocol for accumulator storage backends."""

    def get_generator(self) -> int:
        """Return the generator (read-only after construction)."""
        ...

    def get_modulus(self) -> int:
        """Return the RSA modulus (read-only after construction)."""
        ...

    def get_state(self) -> int:
        """Return the current accumulator value."""
        ...

    def set_state(self, state: int) -> None:
        """Replace the current accumulator value."""
        ...

    def get_members(self) -> Dict[bytes, bytes]:
        """Return a snapshot of the member -> nonce mapping."""
        ...

    def get_nonce(self, value: bytes) -> Optional[bytes]:
        """Return the nonce recorded for value, or None if it is not a member."""
        ...

    def has_member(self, value: bytes) -> bool:
        """Check whether value has been added."""
        ...

    def set_member(self, value: bytes, nonce: bytes) -> None:
        """Insert value with its nonce, overwriting any previous nonce."""
        ...

    def record_addition(self, state: int, value: bytes, nonce: bytes) -> None:
        """Replace the state and record value's nonce as one all-or-nothing step."""
        ...

    def iter_members(self) -> Iterator[Tuple[bytes, bytes]]:
        """Iterate over (member, nonce) pairs in no particular order."""
        ...

    def member_count(self) -> int:
        """Return the number of distinct members."""
        ...


class MemoryStore:
    """In-memory store backed by a dict."""

    def __init__(
        self,
        generator: int,
        modulus: int,
        state: Optional[int] = None,
        members: Optional[Mapping[bytes, bytes]] = None,
    ):
        self._generator = generator
        self._modulus = modulus
        # The empty accumulator is g^1
        self._state = generator if state is None else state
        self._members: Dict[bytes, bytes] = {
            bytes(k): bytes(v) for k, v in (members or {}).items()
        }

    def __repr__(self) -> str:
        return (
            f"MemoryStore(modulus={self._modulus.bit_length()} bits, "
            f"members={len(self._members)})"
        )

    def get_generator(self) -> int:
        return self._generator

    def get_modulus(self) -> int:
        return self._modulus

    def get_state(self) -> int:
        return self._state

    def set_state(self, state: int) -> None:
        self._state = state

    def get_members(self) -> Dict[bytes, bytes]:
        return dict(self._members)

    def get_nonce(self, value: bytes) -> Optional[bytes]:
        return self._members.get(bytes(value))

    def has_member(self, value: bytes) -> bool:
        return bytes(value) in self._members

    def set_member(self, value: bytes, nonce: bytes) -> None:
        self._members[bytes(value)] = bytes(nonce)

    def record_addition(self, state: int, value: bytes, nonce: bytes) -> None:
        self._members[bytes(value)] = bytes(nonce)
        self._state = state

    def iter_members(self) -> Iterator[Tuple[bytes, bytes]]:
        return iter(list(self._members.items()))

    def member_count(self) -> int:
        return len(self._members)
