"""
Tests for logging setup.
"""

import logging

import pytest
import structlog

from src.core.logger import level_from_env, setup_logging


class TestLevelFromEnv:
    """Tests for LOG_LEVEL resolution."""

    @pytest.mark.parametrize(
        "value,expected",
        [("DEBUG", logging.DEBUG), ("warning", logging.WARNING), ("ERROR", logging.ERROR)],
    )
    def test_known_levels(self, monkeypatch, value, expected):
        monkeypatch.setenv("LOG_LEVEL", value)
        assert level_from_env() == expected

    def test_unset_uses_default(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        assert level_from_env(default=logging.WARNING) == logging.WARNING

    def test_unknown_uses_default(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "LOUD")
        assert level_from_env() == logging.INFO


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_sets_root_level(self):
        root = logging.getLogger()
        previous = root.level
        try:
            setup_logging(level=logging.ERROR)

            assert root.level == logging.ERROR
            assert structlog.is_configured()
        finally:
            setup_logging(level=previous)
