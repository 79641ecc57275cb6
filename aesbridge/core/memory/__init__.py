"""
aesbridge Memory Security Module
================================

Provides secure erasure and erasable containers.

Components:
- zeroization.py: secure_erase and scoped erasure helpers
- secure_memory.py: SensitiveBuffer and SealedBytes containers

WARNING:
- Python's memory model doesn't guarantee that no other copy exists
- secure_erase guarantees the write to the buffer it is given
"""

from aesbridge.core.memory.secure_memory import (
    SealedBytes,
    SensitiveBuffer,
)
from aesbridge.core.memory.zeroization import (
    ZeroizeContext,
    secure_erase,
    zeroize,
    zeroize_on_exception,
)

__all__ = [
    "SealedBytes",
    "SensitiveBuffer",
    "ZeroizeContext",
    "secure_erase",
    "zeroize",
    "zeroize_on_exception",
]
