"""
Tests for secret-redacting logging.
"""

import io
import json
import logging

import pytest

from aesbridge import derive_schedule
from aesbridge.core.config import LoggingConfig
from aesbridge.core.logging import (
    SecureLogFilter,
    StructuredLogFormatter,
    configure_logging,
    get_secure_logger,
)


@pytest.fixture
def restore_logger():
    """Undo handler/propagation changes made to named loggers."""
    touched = []

    def track(name):
        touched.append(name)
        return name

    yield track

    for name in touched:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        logger.propagate = True
        logger.setLevel(logging.NOTSET)


def _record(msg, *args):
    return logging.LogRecord("aesbridge.test", logging.INFO, __file__, 1, msg, args, None)


class TestSecureLogFilter:
    """Test message sanitization."""

    def test_redacts_key_assignment(self):
        record = _record("key=YELLOWSUBMARINE")
        SecureLogFilter().filter(record)
        assert "YELLOWSUBMARINE" not in record.getMessage()
        assert "[REDACTED]" in record.getMessage()

    def test_redacts_hex_runs(self):
        record = _record("material %s", "000102030405060708090a0b0c0d0e0f")
        SecureLogFilter().filter(record)
        assert "000102030405060708090a0b0c0d0e0f" not in record.getMessage()

    def test_keeps_ordinary_messages(self):
        record = _record("Derived AES-%d key schedule (%d rounds)", 128, 10)
        SecureLogFilter().filter(record)
        assert record.getMessage() == "Derived AES-128 key schedule (10 rounds)"

    def test_never_drops_records(self):
        assert SecureLogFilter().filter(_record("secret=abc")) is True

    def test_additional_patterns(self):
        import re

        record = _record("session ticket T-12345")
        SecureLogFilter(additional_patterns=[re.compile(r"T-\d+")]).filter(record)
        assert record.getMessage() == "session ticket [REDACTED]"


class TestStructuredLogFormatter:
    """Test JSON output."""

    def test_json_fields(self):
        payload = json.loads(StructuredLogFormatter().format(_record("hello %s", "world")))
        assert payload["message"] == "hello world"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "aesbridge.test"


class TestGetSecureLogger:
    """Test logger construction."""

    def test_console_output_is_filtered(self, restore_logger):
        stream = io.StringIO()
        logger = get_secure_logger(
            restore_logger("aesbridge.tests.console"),
            level="INFO",
            config=LoggingConfig(),
            stream=stream,
        )
        logger.info("loaded key=%s", "YELLOWSUBMARINE")
        assert "YELLOWSUBMARINE" not in stream.getvalue()
        assert logger.propagate is False

    def test_handlers_added_once(self, restore_logger):
        name = restore_logger("aesbridge.tests.once")
        get_secure_logger(name, config=LoggingConfig())
        logger = get_secure_logger(name, config=LoggingConfig())
        assert len(logger.handlers) == 1

    def test_json_output(self, restore_logger):
        stream = io.StringIO()
        logger = get_secure_logger(
            restore_logger("aesbridge.tests.json"),
            level="INFO",
            config=LoggingConfig(enable_json=True),
            stream=stream,
        )
        logger.info("ready")
        assert json.loads(stream.getvalue())["message"] == "ready"

    def test_console_disabled(self, restore_logger):
        logger = get_secure_logger(
            restore_logger("aesbridge.tests.silent"),
            config=LoggingConfig(enable_console=False),
        )
        assert logger.handlers == []

    def test_configure_logging_routes_library_loggers(self, restore_logger):
        restore_logger("aesbridge")
        stream = io.StringIO()
        configure_logging(level="DEBUG", config=LoggingConfig(), stream=stream)
        derive_schedule(bytes(16)).wipe()
        assert "Derived AES-128 key schedule" in stream.getvalue()
