"""Tests for centralized logging configuration."""

import datetime as dt
import json
import logging
import os
import sys
from decimal import Decimal
from pathlib import Path
from unittest.mock import patch

import pytest

from careledger.config import CareLedgerConfig
from careledger.config.logging_config import (
    JSONFormatter,
    LoggingConfig,
    configure_logging,
    get_logger,
    reset_logging,
)
from careledger.utils.logging_utils import LogContext


def _flush():
    for handler in logging.getLogger().handlers:
        handler.flush()


class TestLoggingConfig:
    """Test LoggingConfig class."""

    def test_default_configuration(self):
        """Test default logging configuration."""
        config = LoggingConfig()

        assert config.log_level == "INFO"
        assert config.log_format == "standard"
        assert config.log_file is None
        assert config.enable_console is True
        assert config.enable_file is False
        assert config.max_file_size == 10 * 1024 * 1024
        assert config.backup_count == 5

    def test_environment_variable_override(self):
        """Test configuration from environment variables."""
        with patch.dict(
            os.environ,
            {
                "LOG_LEVEL": "debug",
                "LOG_FORMAT": "json",
                "LOG_FILE": "/tmp/careledger.log",
                "LOG_BACKUP_COUNT": "3",
            },
        ):
            config = LoggingConfig.from_env()

        assert config.log_level == "DEBUG"
        assert config.log_format == "json"
        assert config.log_file == "/tmp/careledger.log"
        assert config.backup_count == 3

    def test_from_settings_development(self):
        """Test development settings log in the standard format."""
        config = LoggingConfig.from_settings(
            CareLedgerConfig(ENVIRONMENT="development", LOG_LEVEL="warning")
        )

        assert config.log_level == "WARNING"
        assert config.log_format == "standard"

    def test_from_settings_production_and_debug(self):
        """Test production logs JSON and debug forces DEBUG."""
        config = LoggingConfig.from_settings(
            CareLedgerConfig(ENVIRONMENT="production", DEBUG=True)
        )

        assert config.log_level == "DEBUG"
        assert config.log_format == "json"

    def test_from_settings_overrides(self, tmp_path):
        """Test explicit arguments win over settings."""
        log_file = str(tmp_path / "billing.log")

        config = LoggingConfig.from_settings(
            CareLedgerConfig(), enable_file=True, log_file=log_file
        )

        assert config.enable_file is True
        assert config.log_file == log_file

    def test_invalid_log_level(self):
        """Test invalid log level raises error."""
        with pytest.raises(ValueError, match="Invalid log level"):
            LoggingConfig(log_level="LOUD")

    def test_invalid_log_format(self):
        """Test invalid log format raises error."""
        with pytest.raises(ValueError, match="Invalid log format"):
            LoggingConfig(log_format="xml")

    def test_file_logging_enabled_without_path(self):
        """Test file logging enabled without file path raises error."""
        with pytest.raises(ValueError, match="log_file must be specified"):
            LoggingConfig(enable_file=True, log_file=None)


class TestConfigureLogging:
    """Test configure_logging function."""

    def teardown_method(self):
        """Reset logging after each test."""
        reset_logging()

    def test_console_handler_configuration(self):
        """Test one console handler at the configured level."""
        configure_logging(LoggingConfig(log_level="DEBUG"))

        root_logger = logging.getLogger()
        stream_handlers = [
            h for h in root_logger.handlers if isinstance(h, logging.StreamHandler)
        ]
        assert len(stream_handlers) == 1
        assert root_logger.level == logging.DEBUG

    def test_file_handler_writes_messages(self, tmp_path):
        """Test messages reach the log file."""
        log_file = tmp_path / "logs" / "billing.log"
        configure_logging(
            LoggingConfig(enable_console=False, enable_file=True, log_file=str(log_file))
        )

        get_logger("careledger.ledger").info("Receipt r1 recorded")
        _flush()

        assert "Receipt r1 recorded" in log_file.read_text()

    def test_json_format_with_context(self, tmp_path):
        """Test JSON records carry context fields and encode amounts."""
        log_file = tmp_path / "billing.log"
        configure_logging(
            LoggingConfig(
                log_format="json",
                enable_console=False,
                enable_file=True,
                log_file=str(log_file),
            )
        )

        with LogContext(invoice_id="inv-1"):
            get_logger("careledger.ledger").info(
                "Outstanding balance",
                extra={"outstanding": Decimal("200.00"), "due": dt.date(2024, 3, 15)},
            )
        _flush()

        entry = json.loads(log_file.read_text().strip())
        assert entry["level"] == "INFO"
        assert entry["logger"] == "careledger.ledger"
        assert entry["message"] == "Outstanding balance"
        assert entry["invoice_id"] == "inv-1"
        assert entry["outstanding"] == "200.00"
        assert entry["due"] == "2024-03-15"

    def test_json_formatter_includes_exception(self):
        """Test exceptions are formatted into the record."""
        try:
            raise ValueError("bad amount")
        except ValueError:
            record = logging.getLogger("x").makeRecord(
                "x", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
            )

        entry = json.loads(JSONFormatter().format(record))

        assert "ValueError: bad amount" in entry["exception"]

    def test_rotating_file_handler(self, tmp_path):
        """Test the log file rotates at its size limit."""
        log_file = tmp_path / "billing.log"
        configure_logging(
            LoggingConfig(
                enable_console=False,
                enable_file=True,
                log_file=str(log_file),
                max_file_size=100,
                backup_count=2,
            )
        )

        logger = get_logger("careledger.timeline")
        for i in range(50):
            logger.info(f"Loaded page {i} with some padding to increase size")
        _flush()

        assert list(Path(tmp_path).glob("billing.log.*"))

    def test_reconfiguration(self):
        """Test reconfiguration replaces handlers."""
        configure_logging(LoggingConfig(log_level="INFO"))
        root_logger = logging.getLogger()
        initial_handler_count = len(root_logger.handlers)

        configure_logging(LoggingConfig(log_level="ERROR"))

        assert root_logger.level == logging.ERROR
        assert len(root_logger.handlers) == initial_handler_count


class TestResetLogging:
    """Test reset_logging function."""

    def test_reset_removes_handlers(self):
        """Test reset_logging removes all handlers and restores WARNING."""
        configure_logging(LoggingConfig(log_level="DEBUG"))

        reset_logging()

        root_logger = logging.getLogger()
        assert root_logger.handlers == []
        assert root_logger.level == logging.WARNING
