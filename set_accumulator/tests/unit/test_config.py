"""
Unit Tests for Configuration and Logging Modules

Tests settings loading from environment variables and logging setup.
"""

import json
import logging
import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from set_accumulator.config import AccumulatorSettings, get_settings, reset_settings
from set_accumulator.logging_config import CustomJsonFormatter, setup_logging


class TestSettings:
    """Test configuration settings and environment variable loading."""

    def test_default_settings(self):
        settings = AccumulatorSettings()

        assert settings.miller_rabin_trials == 5
        assert settings.hash_algorithm == "sha256"
        assert settings.nonce_size == 32
        assert settings.max_search_attempts == 100_000
        assert settings.prime_bits == 1024
        assert settings.parallel_prime_search is True
        assert settings.log_level == "INFO"
        assert settings.log_format == "text"

    @patch.dict(os.environ, {
        'SETACC_MILLER_RABIN_TRIALS': '12',
        'SETACC_HASH_ALGORITHM': 'SHA512',
        'SETACC_NONCE_SIZE': '16',
        'SETACC_LOG_LEVEL': 'DEBUG',
        'SETACC_LOG_FORMAT': 'JSON',
    })
    def test_environment_variable_override(self):
        settings = AccumulatorSettings()

        assert settings.miller_rabin_trials == 12
        assert settings.hash_algorithm == "sha512"
        assert settings.nonce_size == 16
        assert settings.log_level == "DEBUG"
        assert settings.log_format == "json"

    @patch.dict(os.environ, {'SETACC_PARALLEL_PRIME_SEARCH': 'false', 'SETACC_PRIME_BITS': '512'})
    def test_prime_generation_settings(self):
        settings = AccumulatorSettings()

        assert settings.parallel_prime_search is False
        assert settings.prime_bits == 512

    def test_unbounded_search(self):
        assert AccumulatorSettings(max_search_attempts=None).max_search_attempts is None

    @pytest.mark.parametrize("field,value", [
        ("miller_rabin_trials", 0),
        ("nonce_size", 0),
        ("max_search_attempts", 0),
        ("prime_bits", 8),
        ("hash_algorithm", "not-a-hash"),
        ("hash_algorithm", "shake_128"),
        ("log_format", "xml"),
    ])
    def test_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            AccumulatorSettings(**{field: value})

    def test_settings_immutability(self):
        settings = AccumulatorSettings()

        with pytest.raises(ValidationError):
            settings.nonce_size = 64

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_reset_settings_rereads_environment(self):
        assert get_settings().nonce_size == 32

        with patch.dict(os.environ, {'SETACC_NONCE_SIZE': '48'}):
            assert get_settings().nonce_size == 32
            reset_settings()
            assert get_settings().nonce_size == 48


class TestLoggingSetup:
    """Test logging configuration."""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_text_format(self, capsys):
        handler = setup_logging(AccumulatorSettings(log_level="DEBUG", log_format="text"))

        assert logging.getLogger().handlers == [handler]
        assert logging.getLogger().level == logging.DEBUG

        logging.getLogger("set_accumulator.test").debug("text message")
        out = capsys.readouterr().out
        assert "set_accumulator.test - DEBUG - text message" in out

    def test_json_format(self, capsys):
        handler = setup_logging(AccumulatorSettings(log_format="json"))

        assert isinstance(handler.formatter, CustomJsonFormatter)

        logging.getLogger("set_accumulator.test").info("json message")
        record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert record["message"] == "json message"
        assert record["level"] == "INFO"
        assert record["service"] == "set-accumulator"
        assert record["name"] == "set_accumulator.test"
        assert "timestamp" in record

    def test_unknown_level_falls_back_to_info(self):
        setup_logging(AccumulatorSettings(log_level="LOUD"))

        assert logging.getLogger().level == logging.INFO

    def test_replaces_existing_handlers(self):
        logging.getLogger().addHandler(logging.NullHandler())

        handler = setup_logging(AccumulatorSettings())

        assert logging.getLogger().handlers == [handler]
