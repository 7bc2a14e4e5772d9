"""
Configuration Classes for loadcheck.

Centralises the few environment-dependent settings of the assertion core
into a hierarchy of configuration classes.  The base ``Config`` class holds
defaults suitable for local runs, while subclasses override only what
differs per environment.

Key Concepts Demonstrated:
- Class-based configuration with inheritance
- Environment-variable overrides
- Separate profiles for development, testing, and production load runs
"""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean environment variable (``1/true/yes/on``)."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    """Read a positive integer environment variable, falling back to *default*."""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise RuntimeError(f"{name} must be positive, got {value}")
    return value


class Config:
    """Base configuration with defaults for local runs."""

    DEBUG: bool = _env_flag("LOADCHECK_DEBUG")
    LOG_LEVEL: str = os.environ.get("LOADCHECK_LOG_LEVEL", "INFO").upper()

    # Bounds recursion through schemas that refer back to themselves.
    MAX_VALIDATION_DEPTH: int = _env_int("LOADCHECK_MAX_DEPTH", 128)


class DevelopmentConfig(Config):
    """Development configuration: verbose check output."""

    DEBUG: bool = _env_flag("LOADCHECK_DEBUG", default=True)
    LOG_LEVEL: str = os.environ.get("LOADCHECK_LOG_LEVEL", "DEBUG").upper()


class TestingConfig(Config):
    """Configuration used by the unit test-suite."""

    DEBUG: bool = False
    MAX_VALIDATION_DEPTH: int = 64


class ProductionConfig(Config):
    """Configuration for real load runs, where check logging is noise."""

    DEBUG: bool = False
    LOG_LEVEL: str = os.environ.get("LOADCHECK_LOG_LEVEL", "WARNING").upper()


config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env: str | None = None) -> type[Config]:
    """
    Get the configuration class for the specified environment.

    Args:
        env: Environment name (development, testing, production).
             If None, uses the LOADCHECK_ENV environment variable.

    Returns:
        Configuration class for the specified environment.
    """
    if env is None:
        env = os.environ.get("LOADCHECK_ENV", "development")
    return config.get(env, config["default"])


def configure_logging(config_class: type[Config] | None = None) -> None:
    """Install the standard log format at the configured level."""
    config_class = config_class or get_config()
    logging.basicConfig(
        level=getattr(logging, config_class.LOG_LEVEL, logging.INFO),
        format=LOG_FORMAT,
    )
