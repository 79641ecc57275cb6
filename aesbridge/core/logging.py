"""
Secure Logging Module
=====================

Provides security-aware logging with secret filtering.

Library modules log through plain named loggers ("aesbridge.crypto",
"aesbridge.memory") and never attach handlers. Applications that want
aesbridge output call get_secure_logger() or configure_logging().

Security Features:
- Automatic redaction of key assignments and long hex/base64 runs
- Structured (JSON) output support
- Key material is never passed to a logger in the first place
"""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Final, Optional, Pattern

from aesbridge.core.config import BridgeConfig, LoggingConfig


# Patterns for sensitive data detection
_SENSITIVE_PATTERNS: Final[list[tuple[str, Pattern[str]]]] = [
    ("key", re.compile(r'(?i)\b(key|cipher[_-]?key|round[_-]?keys?)\s*[=:]\s*["\']?[^\s"\']+["\']?')),
    ("secret", re.compile(r'(?i)\b(secret|private[_-]?key)\s*[=:]\s*["\']?[^\s"\']+["\']?')),
    ("plaintext", re.compile(r'(?i)\b(plaintext|block)\s*[=:]\s*["\']?[^\s"\']+["\']?')),
    # Base64 encoded secrets
    ("base64_secret", re.compile(r'[A-Za-z0-9+/]{40,}={0,2}')),
    # Hex encoded secrets (a 128-bit key is 32 hex digits)
    ("hex_secret", re.compile(r'(?i)\b(?:0x)?[a-f0-9]{32,}\b')),
]

_REDACTED_TEXT: Final[str] = "[REDACTED]"


class SecureLogFilter(logging.Filter):
    """
    Log filter that removes sensitive information from log messages.

    Scans the formatted message for key, secret and plaintext
    assignments and for long hex/base64 runs, replacing them with
    [REDACTED]. Records are never dropped, only sanitized.
    """

    def __init__(self, name: str = "", additional_patterns: Optional[list[Pattern[str]]] = None) -> None:
        super().__init__(name)
        self._additional_patterns = additional_patterns or []

    def filter(self, record: logging.LogRecord) -> bool:
        # Sanitize the merged message so a pattern can span msg and args
        record.msg = self._sanitize(record.getMessage())
        record.args = ()
        return True

    def _sanitize(self, text: str) -> str:
        """Remove sensitive data from text."""
        result = text

        for name, pattern in _SENSITIVE_PATTERNS:
            result = pattern.sub(f"{name}={_REDACTED_TEXT}", result)

        for pattern in self._additional_patterns:
            result = pattern.sub(_REDACTED_TEXT, result)

        return result


class StructuredLogFormatter(logging.Formatter):
    """Formatter that outputs one JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def _build_handler(config: LoggingConfig, stream=None) -> logging.Handler:
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(logging.DEBUG)
    if config.enable_json:
        handler.setFormatter(StructuredLogFormatter())
    else:
        handler.setFormatter(logging.Formatter(config.format, datefmt=config.date_format))
    handler.addFilter(SecureLogFilter())
    return handler


def get_secure_logger(
    name: str,
    level: Optional[str] = None,
    config: Optional[LoggingConfig] = None,
    stream=None,
) -> logging.Logger:
    """
    Create a logger with automatic secret filtering.

    Args:
        name: Logger name (typically __name__)
        level: Logging level; defaults to the configured level
        config: Logging configuration; defaults to BridgeConfig
        stream: Output stream for the console handler (default: stderr)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    config = config or BridgeConfig.get_instance().logging
    logger.setLevel(getattr(logging, (level or config.level).upper()))

    if config.enable_console:
        logger.addHandler(_build_handler(config, stream))

    logger.propagate = False

    return logger


def configure_logging(
    level: Optional[str] = None,
    config: Optional[LoggingConfig] = None,
    stream=None,
) -> logging.Logger:
    """
    Route all aesbridge loggers through one filtered handler.

    Call once at application startup. Child loggers such as
    "aesbridge.crypto" propagate to the returned "aesbridge" logger.
    """
    return get_secure_logger("aesbridge", level=level, config=config, stream=stream)
