"""
Accumulator Configuration

Environment-based configuration for the set accumulator. Every value can be
overridden with a ``SETACC_`` prefixed environment variable or a ``.env`` file.
"""

import hashlib
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AccumulatorSettings(BaseSettings):
    """Accumulator settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SETACC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Primality testing
    miller_rabin_trials: int = Field(
        default=5,
        ge=1,
        description="Random-witness trials per Miller-Rabin test",
    )

    # Hash-to-prime
    hash_algorithm: str = Field(
        default="sha256",
        description="hashlib algorithm used to map (value, nonce) to a start candidate",
    )

    nonce_size: int = Field(
        default=32,
        ge=1,
        description="Bytes of fresh randomness bound to each added member",
    )

    max_search_attempts: Optional[int] = Field(
        default=100_000,
        ge=1,
        description="Cap on candidates tested by any prime search; None means unbounded",
    )

    # Parameter generation
    prime_bits: int = Field(
        default=1024,
        ge=16,
        description="Bit length of each secret prime of the RSA modulus",
    )

    parallel_prime_search: bool = Field(
        default=True,
        description="Search for the two modulus primes in separate processes",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    log_format: str = Field(
        default="text",
        description="Log format: json or text",
    )

    app_version: str = Field(default="0.1.0")

    @field_validator("hash_algorithm")
    @classmethod
    def _check_hash_algorithm(cls, value: str) -> str:
        name = value.lower()
        if name not in hashlib.algorithms_available:
            raise ValueError(f"Unknown hash algorithm: {value}")
        if hashlib.new(name).digest_size == 0:
            raise ValueError(f"Hash algorithm {value} has no fixed digest size")
        return name

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        if value.lower() not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return value.lower()


_settings: Optional[AccumulatorSettings] = None


def get_settings() -> AccumulatorSettings:
    """Get accumulator settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = AccumulatorSettings()
    return _settings


def reset_settings() -> None:
    """Forget the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
