"""
Unit Tests for Prime Generator Module

Tests random prime sampling and distinct prime pair generation.
"""

import logging
import random

import pytest

from set_accumulator.errors import PrimeSearchExhaustedError
from set_accumulator.primality import is_prime
from set_accumulator.prime_generator import distinct_prime_pair, random_prime


class TestRandomPrime:
    """Test random prime sampling."""

    @pytest.mark.parametrize("bits", [8, 32, 64, 128])
    def test_bit_length_and_primality(self, bits, rng):
        p = random_prime(bits, rng=rng)

        assert is_prime(p)
        assert p.bit_length() == bits

    def test_seeded_rng_is_reproducible(self):
        assert random_prime(64, rng=random.Random(3)) == random_prime(64, rng=random.Random(3))

    def test_system_randomness(self):
        """Without an injected rng the system source is used."""
        p = random_prime(48)
        assert is_prime(p)
        assert p.bit_length() == 48

    def test_two_bit_primes(self, rng):
        assert random_prime(2, rng=rng) in (2, 3)

    @pytest.mark.parametrize("bits", [0, 1, -5])
    def test_bits_validation(self, bits):
        with pytest.raises(ValueError, match="bits must be at least 2"):
            random_prime(bits)

    def test_search_exhausted(self, scripted_random):
        """Only composite samples: the cap is reported, not looped past."""
        source = scripted_random([0, 0, 0])  # each sample becomes 2^15

        with pytest.raises(PrimeSearchExhaustedError) as exc_info:
            random_prime(16, rng=source, max_attempts=3)

        assert exc_info.value.attempts == 3
        assert "random 16-bit prime" in str(exc_info.value)

    def test_search_exhausted_is_value_error(self, scripted_random):
        with pytest.raises(ValueError, match="Could not find prime"):
            random_prime(16, rng=scripted_random([0]), max_attempts=1)

    def test_max_attempts_validation(self):
        with pytest.raises(ValueError, match="max_attempts must be positive"):
            random_prime(16, max_attempts=0)

    def test_unbounded_search(self, rng):
        assert is_prime(random_prime(32, rng=rng, max_attempts=None))

    def test_first_prime_sample_wins(self, scripted_random):
        """Composite samples are skipped until a prime appears."""
        source = scripted_random([0, 65520, 65521])

        assert random_prime(16, rng=source) == 65521


class TestDistinctPrimePair:
    """Test generation of distinct prime pairs."""

    def test_pair_is_distinct_and_prime(self, rng):
        a, b = distinct_prime_pair(64, rng=rng)

        assert a != b
        assert is_prime(a) and is_prime(b)
        assert a.bit_length() == 64
        assert b.bit_length() == 64

    def test_collision_resamples_second_prime(self, scripted_random, caplog):
        """A colliding pair is repaired by resampling the second prime."""
        source = scripted_random([65521, 65521, 65519])

        with caplog.at_level(logging.WARNING, logger="set_accumulator.prime_generator"):
            a, b = distinct_prime_pair(16, rng=source)

        assert (a, b) == (65521, 65519)
        assert "collided" in caplog.text

    def test_tiny_bit_length_always_distinct(self):
        """With two-bit primes collisions are common; the pair stays distinct."""
        for seed in range(20):
            a, b = distinct_prime_pair(2, rng=random.Random(seed))
            assert {a, b} == {2, 3}

    def test_sequential_system_randomness(self):
        a, b = distinct_prime_pair(48, parallel=False)

        assert a != b
        assert is_prime(a) and is_prime(b)

    def test_parallel_search(self):
        """Two searches in a process pool are joined into one pair."""
        a, b = distinct_prime_pair(64, parallel=True)

        assert a != b
        assert is_prime(a) and is_prime(b)
        assert a.bit_length() == b.bit_length() == 64

    def test_parallel_setting_from_environment(self, monkeypatch):
        monkeypatch.setenv("SETACC_PARALLEL_PRIME_SEARCH", "false")

        a, b = distinct_prime_pair(32)

        assert a != b
        assert is_prime(a) and is_prime(b)

    def test_bits_validation(self):
        with pytest.raises(ValueError, match="bits must be at least 2"):
            distinct_prime_pair(1)
