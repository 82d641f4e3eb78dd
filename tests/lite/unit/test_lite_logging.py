"""Tests for scheduler_lite.lite_logging module."""

import logging
import os
from unittest.mock import patch

import pytest

from scheduler_lite.lite_logging import (
    LITE_MODULES,
    configure_lite_logging,
    get_logging_status,
    reset_logging_to_debug,
)

pytestmark = pytest.mark.unit


class TestConfigureLiteLogging:
    """Tests for configure_lite_logging function."""

    def test_configure_lite_logging_default_production_mode(self):
        """Test default production mode configuration."""
        configure_lite_logging()

        assert logging.getLogger().level == logging.INFO

        # Third-party loggers are held at WARNING
        assert logging.getLogger("dateutil").level == logging.WARNING
        assert logging.getLogger("yaml").level == logging.WARNING

        assert logging.getLogger("scheduler_lite").level == logging.INFO

    def test_configure_lite_logging_debug_mode(self):
        """Test debug mode configuration."""
        configure_lite_logging(debug_mode=True)

        assert logging.getLogger().level == logging.DEBUG
        for module in LITE_MODULES:
            assert logging.getLogger(module).level == logging.DEBUG

        # Third-party loggers should still be suppressed
        assert logging.getLogger("asyncio").level == logging.WARNING

    def test_configure_lite_logging_force_debug_override(self):
        """Test force_debug parameter overrides debug_mode."""
        configure_lite_logging(debug_mode=False, force_debug=True)

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("scheduler_lite").level == logging.DEBUG

    def test_configure_lite_logging_force_debug_false_beats_env(self):
        with patch.dict(os.environ, {"SCHEDULER_DEBUG": "1"}):
            configure_lite_logging(debug_mode=True, force_debug=False)

        assert logging.getLogger("scheduler_lite").level == logging.INFO

    @patch.dict(os.environ, {"SCHEDULER_DEBUG": "true"})
    def test_configure_lite_logging_env_debug_override(self):
        """Test SCHEDULER_DEBUG environment variable enables debug."""
        configure_lite_logging(debug_mode=False)

        assert logging.getLogger().level == logging.DEBUG

    @patch.dict(os.environ, {"SCHEDULER_LOG_LEVEL": "WARNING"})
    def test_configure_lite_logging_env_log_level_override(self):
        """Test SCHEDULER_LOG_LEVEL environment variable sets root level."""
        configure_lite_logging()

        assert logging.getLogger().level == logging.WARNING
        assert logging.getLogger("scheduler_lite.lite_store").level == logging.WARNING

    @patch.dict(os.environ, {"SCHEDULER_LOG_LEVEL": "ERROR"})
    def test_configure_lite_logging_explicit_level_beats_env(self):
        configure_lite_logging(log_level="warning")

        assert logging.getLogger().level == logging.WARNING
        for module in LITE_MODULES:
            assert logging.getLogger(module).level == logging.WARNING

    def test_configure_lite_logging_debug_ignores_quieter_level(self):
        configure_lite_logging(debug_mode=True, log_level="ERROR")

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("scheduler_lite").level == logging.DEBUG

    @patch.dict(os.environ, {"SCHEDULER_LOG_LEVEL": "chatty"})
    def test_configure_lite_logging_ignores_unknown_env_level(self):
        configure_lite_logging()

        assert logging.getLogger().level == logging.INFO


class TestResetLoggingToDebug:
    """Tests for reset_logging_to_debug function."""

    def test_reset_logging_to_debug_sets_all_loggers(self):
        configure_lite_logging()

        reset_logging_to_debug()

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("dateutil").level == logging.DEBUG
        assert logging.getLogger("scheduler_lite.lite_backup").level == logging.DEBUG


class TestGetLoggingStatus:
    """Tests for get_logging_status function."""

    def test_get_logging_status_reports_level_names(self):
        configure_lite_logging()

        status = get_logging_status()

        assert status["root"] == "INFO"
        assert status["scheduler_lite"] == "INFO"
        assert status["yaml"] == "WARNING"
        assert set(status) == {"root", "scheduler_lite", "asyncio", "yaml", "dateutil"}
