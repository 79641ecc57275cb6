"""
Secure Configuration Module
===========================

Provides immutable, environment-aware configuration for the ambient
parts of aesbridge: sensitive-buffer handling and logging.

The cipher and erase primitives themselves take no configuration;
only SensitiveBuffer and get_secure_logger read these values.

Security Features:
- Immutable configuration after initialization
- Environment variable override support
- Sensitive-looking keys are never read from the environment
"""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass
from typing import Any, Final, Optional

from aesbridge.security.constants import MAX_WIPE_PASSES


# Security Constants
_SENSITIVE_KEYS: Final[frozenset[str]] = frozenset({
    "password", "secret", "key", "token", "private", "credential", "salt",
})

_TRUE_VALUES: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


def _is_sensitive_key(key: str) -> bool:
    """Check if a configuration key might contain sensitive data."""
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in _SENSITIVE_KEYS)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in _TRUE_VALUES


@dataclass(frozen=True, slots=True)
class MemoryConfig:
    """Immutable sensitive-memory configuration."""

    lock_memory: bool = True  # mlock/VirtualLock SensitiveBuffer pages
    wipe_passes: int = 1  # final pass is always zero

    def __post_init__(self) -> None:
        """Validate memory settings."""
        if not 1 <= self.wipe_passes <= MAX_WIPE_PASSES:
            raise ValueError(f"wipe_passes must be between 1 and {MAX_WIPE_PASSES}")


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Immutable logging configuration."""

    level: str = "WARNING"
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format: str = "%H:%M:%S"
    enable_console: bool = True
    enable_json: bool = False

    def __post_init__(self) -> None:
        """Validate logging settings."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.level.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {self.level}")


class BridgeConfig:
    """
    Centralized, immutable configuration loader with environment override support.

    Usage:
        config = BridgeConfig.load()
        passes = config.memory.wipe_passes

    Environment variables are prefixed with AESBRIDGE_ and use double
    underscores for nested values:

        AESBRIDGE_MEMORY__LOCK_MEMORY=false
        AESBRIDGE_MEMORY__WIPE_PASSES=3
        AESBRIDGE_LOGGING__LEVEL=DEBUG
        AESBRIDGE_LOGGING__ENABLE_JSON=true
    """

    __slots__ = ("_memory", "_logging", "_frozen")

    _instance: Optional[BridgeConfig] = None
    _instance_lock = threading.Lock()

    def __init__(
        self,
        memory: Optional[MemoryConfig] = None,
        logging: Optional[LoggingConfig] = None,
    ) -> None:
        """Initialize configuration. Use BridgeConfig.load() for standard initialization."""
        object.__setattr__(self, "_frozen", False)
        object.__setattr__(self, "_memory", memory or MemoryConfig())
        object.__setattr__(self, "_logging", logging or LoggingConfig())
        object.__setattr__(self, "_frozen", True)

    @property
    def memory(self) -> MemoryConfig:
        """Get memory configuration."""
        return self._memory

    @property
    def logging(self) -> LoggingConfig:
        """Get logging configuration."""
        return self._logging

    @classmethod
    def load(cls, env_prefix: str = "AESBRIDGE") -> BridgeConfig:
        """
        Load configuration with environment variable overrides.

        Args:
            env_prefix: Prefix for environment variables (default: AESBRIDGE)

        Returns:
            Configured BridgeConfig instance

        Raises:
            ValueError: If an override has an invalid value
        """
        env_overrides = cls._parse_env_overrides(env_prefix)

        memory_kwargs: dict[str, Any] = {}
        if "memory.lock_memory" in env_overrides:
            memory_kwargs["lock_memory"] = _parse_bool(env_overrides["memory.lock_memory"])
        if "memory.wipe_passes" in env_overrides:
            memory_kwargs["wipe_passes"] = int(env_overrides["memory.wipe_passes"])

        logging_kwargs: dict[str, Any] = {}
        if "logging.level" in env_overrides:
            logging_kwargs["level"] = env_overrides["logging.level"].upper()
        if "logging.enable_console" in env_overrides:
            logging_kwargs["enable_console"] = _parse_bool(env_overrides["logging.enable_console"])
        if "logging.enable_json" in env_overrides:
            logging_kwargs["enable_json"] = _parse_bool(env_overrides["logging.enable_json"])

        return cls(
            memory=MemoryConfig(**memory_kwargs) if memory_kwargs else None,
            logging=LoggingConfig(**logging_kwargs) if logging_kwargs else None,
        )

    @staticmethod
    def _parse_env_overrides(prefix: str) -> dict[str, str]:
        """Parse environment variables with the given prefix."""
        overrides: dict[str, str] = {}
        prefix_upper = f"{prefix.upper()}_"

        for key, value in os.environ.items():
            if key.startswith(prefix_upper):
                # AESBRIDGE_SECTION__KEY -> section.key
                config_key = key[len(prefix_upper):].lower().replace("__", ".")

                # SECURITY: Skip sensitive keys from environment
                if _is_sensitive_key(config_key):
                    continue

                overrides[config_key] = value

        return overrides

    @classmethod
    def get_instance(cls) -> BridgeConfig:
        """Get or create the process-wide configuration instance."""
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = cls.load()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance. Use only for testing."""
        cls._instance = None

    def __repr__(self) -> str:
        """String representation; configuration holds no secrets."""
        return f"BridgeConfig(memory={self._memory!r}, logging={self._logging!r})"

    def __setattr__(self, name: str, value: Any) -> None:
        """Prevent modification after initialization."""
        if hasattr(self, "_frozen") and self._frozen:
            raise AttributeError("BridgeConfig is immutable after initialization")
        super().__setattr__(name, value)
