"""
Tests for logging setup.
"""

import logging

import pytest

import expiring_cache
from expiring_cache.observability import setup_logging


@pytest.fixture
def package_logger():
    logger = logging.getLogger("expiring_cache")
    previous = logger.level
    yield logger
    logger.setLevel(previous)


def test_setup_logging_explicit_level(package_logger):
    """An explicit level is applied to the package loggers."""
    setup_logging("DEBUG")
    assert package_logger.level == logging.DEBUG


def test_setup_logging_reads_environment(monkeypatch, package_logger):
    """Without an argument the level comes from the environment."""
    monkeypatch.setenv("EXPIRING_CACHE_LOG_LEVEL", "WARNING")
    setup_logging()
    assert package_logger.level == logging.WARNING


def test_setup_logging_unknown_level_defaults_to_info(package_logger):
    """Unknown level names fall back to INFO."""
    setup_logging("chatty")
    assert package_logger.level == logging.INFO


def test_version_is_exposed():
    """The package exposes a version string."""
    assert isinstance(expiring_cache.__version__, str)
    assert expiring_cache.__version__
