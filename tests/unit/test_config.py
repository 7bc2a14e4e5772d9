"""
Unit tests for configuration profiles and environment parsing.
"""

from __future__ import annotations

import logging

import pytest

from loadcheck import config as config_module
from loadcheck.config import (
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    _env_flag,
    _env_int,
    configure_logging,
    get_config,
)

pytestmark = pytest.mark.unit


class TestGetConfig:
    """Tests for ``get_config``."""

    @pytest.mark.parametrize(
        ("env", "expected"),
        [
            ("development", DevelopmentConfig),
            ("testing", TestingConfig),
            ("production", ProductionConfig),
            ("unknown", DevelopmentConfig),
        ],
    )
    def test_named_environments(self, env, expected):
        assert get_config(env) is expected

    def test_reads_environment_variable(self, monkeypatch):
        monkeypatch.setenv("LOADCHECK_ENV", "production")

        assert get_config() is ProductionConfig

    def test_defaults_to_development(self, monkeypatch):
        monkeypatch.delenv("LOADCHECK_ENV", raising=False)

        assert get_config() is DevelopmentConfig

    def test_profiles_differ_where_expected(self):
        assert TestingConfig.DEBUG is False
        assert TestingConfig.MAX_VALIDATION_DEPTH == 64
        assert ProductionConfig.DEBUG is False


class TestEnvParsing:
    """Tests for the environment-variable helpers."""

    @pytest.mark.parametrize("raw", ["1", "true", "YES", " on "])
    def test_truthy_flags(self, monkeypatch, raw):
        monkeypatch.setenv("LOADCHECK_TEST_FLAG", raw)

        assert _env_flag("LOADCHECK_TEST_FLAG") is True

    def test_falsy_flag(self, monkeypatch):
        monkeypatch.setenv("LOADCHECK_TEST_FLAG", "no")

        assert _env_flag("LOADCHECK_TEST_FLAG", default=True) is False

    def test_unset_flag_uses_default(self, monkeypatch):
        monkeypatch.delenv("LOADCHECK_TEST_FLAG", raising=False)

        assert _env_flag("LOADCHECK_TEST_FLAG", default=True) is True

    def test_int_value(self, monkeypatch):
        monkeypatch.setenv("LOADCHECK_TEST_INT", "32")

        assert _env_int("LOADCHECK_TEST_INT", 128) == 32

    def test_blank_int_uses_default(self, monkeypatch):
        monkeypatch.setenv("LOADCHECK_TEST_INT", "  ")

        assert _env_int("LOADCHECK_TEST_INT", 128) == 128

    @pytest.mark.parametrize("raw", ["deep", "0", "-4"])
    def test_bad_int_raises(self, monkeypatch, raw):
        """Test that misconfiguration fails loudly instead of silently."""
        monkeypatch.setenv("LOADCHECK_TEST_INT", raw)

        with pytest.raises(RuntimeError, match="LOADCHECK_TEST_INT"):
            _env_int("LOADCHECK_TEST_INT", 128)


def test_configure_logging_uses_profile_level(monkeypatch):
    """Test that ``configure_logging`` passes the profile's level and format."""
    # Arrange
    captured = {}
    monkeypatch.setattr(config_module.logging, "basicConfig", lambda **kwargs: captured.update(kwargs))

    # Act
    configure_logging(ProductionConfig)

    # Assert
    assert captured["level"] == getattr(logging, ProductionConfig.LOG_LEVEL)
    assert captured["format"] == config_module.LOG_FORMAT
