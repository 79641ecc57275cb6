"""Core module - configuration, logging and errors."""

from aesbridge.core.config import BridgeConfig
from aesbridge.core.errors import (
    AesBridgeError,
    ErasedMaterialError,
    InvalidBlockSize,
    InvalidKeyLength,
)
from aesbridge.core.logging import SecureLogFilter, configure_logging, get_secure_logger

__all__ = [
    "AesBridgeError",
    "BridgeConfig",
    "ErasedMaterialError",
    "InvalidBlockSize",
    "InvalidKeyLength",
    "SecureLogFilter",
    "configure_logging",
    "get_secure_logger",
]
