"""
Security module - fixed cryptographic constants.
"""

from aesbridge.security.constants import (
    AES_BLOCK_SIZE,
    AES_ROUNDS,
    DEFAULT_WIPE_PASSES,
    ERASE_PATTERN,
    SUPPORTED_KEY_SIZES,
)

__all__ = [
    "AES_BLOCK_SIZE",
    "AES_ROUNDS",
    "DEFAULT_WIPE_PASSES",
    "ERASE_PATTERN",
    "SUPPORTED_KEY_SIZES",
]
