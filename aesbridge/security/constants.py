"""
Security Constants
==================

Defines the AES and erasure constants used throughout aesbridge.
These values are fixed by FIPS-197 and should not be modified.
"""

from typing import Final, Mapping

# Block cipher geometry (FIPS-197)
AES_BLOCK_SIZE: Final[int] = 16  # 128 bits
SUPPORTED_KEY_SIZES: Final[tuple[int, ...]] = (16, 24, 32)  # AES-128/192/256
AES_ROUNDS: Final[Mapping[int, int]] = {16: 10, 24: 12, 32: 14}

# Erasure
ERASE_PATTERN: Final[int] = 0x00
ALTERNATE_PATTERN: Final[int] = 0xFF
DEFAULT_WIPE_PASSES: Final[int] = 1
MAX_WIPE_PASSES: Final[int] = 7

# Sensitive buffers
MAX_BUFFER_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB
