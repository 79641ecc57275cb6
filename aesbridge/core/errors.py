"""
Error Taxonomy
==============

The primitive layer raises very few errors:

- InvalidKeyLength: unsupported key size at schedule derivation
- InvalidBlockSize: a Block built from the wrong number of bytes
- ErasedMaterialError: a read of key/block/buffer material after wipe()

Security Notice:
    Errors carry lengths only, never the offending bytes.
"""

from __future__ import annotations


class AesBridgeError(Exception):
    """Base class for all aesbridge errors."""


class InvalidKeyLength(AesBridgeError, ValueError):
    """Raised when a key is not 16, 24 or 32 bytes long."""

    def __init__(self, length: int, supported: tuple[int, ...]) -> None:
        self.length = length
        self.supported = supported
        sizes = ", ".join(str(size) for size in supported)
        super().__init__(
            f"Invalid AES key length: {length} bytes (supported: {sizes})"
        )


class InvalidBlockSize(AesBridgeError, ValueError):
    """Raised when a block is built from anything other than 16 bytes."""

    def __init__(self, length: int, expected: int) -> None:
        self.length = length
        self.expected = expected
        super().__init__(
            f"Invalid block size: {length} bytes (expected {expected})"
        )


class ErasedMaterialError(AesBridgeError, ValueError):
    """Raised when sensitive material is used after it has been wiped."""
