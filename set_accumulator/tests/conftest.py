"""
Test Configuration and Fixtures

Provides seeded random sources and accumulator parameters of several sizes.
"""

import random
from typing import Iterator, Tuple

import pytest

from set_accumulator.config import reset_settings
from set_accumulator.rsa_params import AccumulatorParams, generate_params


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: tests with large parameters")


class ScriptedRandom:
    """Random source whose getrandbits() replays fixed values."""

    def __init__(self, values, seed: int = 0):
        self._values = list(values)
        self._inner = random.Random(seed)

    def getrandbits(self, k: int) -> int:
        return self._values.pop(0)

    def randrange(self, *args) -> int:
        return self._inner.randrange(*args)


@pytest.fixture(autouse=True)
def fresh_settings() -> Iterator[None]:
    """Re-read settings from the environment for every test."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible tests."""
    return random.Random(20240601)


@pytest.fixture(scope="session")
def small_params() -> Tuple[AccumulatorParams, Tuple[int, int]]:
    """Parameters over two 64-bit primes (128-bit modulus)."""
    return generate_params(64, rng=random.Random(11))


@pytest.fixture(scope="session")
def params_512() -> Tuple[AccumulatorParams, Tuple[int, int]]:
    """Parameters over two 512-bit primes (1024-bit modulus)."""
    return generate_params(512, rng=random.Random(512))


@pytest.fixture
def scripted_random():
    """Factory for random sources with scripted getrandbits() output."""
    return ScriptedRandom
