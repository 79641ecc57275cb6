"""
aesbridge - AES Block Primitive with Secure Erasure
===================================================

Two independent primitives for higher-level cryptographic code:

- secure_erase: non-elidable zeroization of sensitive buffers
- derive_schedule / encrypt_block / decrypt_block: raw AES on
  single 16-byte blocks, no modes or padding

Security Notice:
- No key material is logged
- Every key, schedule and plaintext block must be wiped after use
"""

from aesbridge.core.crypto import (
    AesBlockCipher,
    Block,
    CipherKey,
    KeySchedule,
    decrypt_block,
    derive_schedule,
    encrypt_block,
    scoped_schedule,
)
from aesbridge.core.errors import (
    AesBridgeError,
    ErasedMaterialError,
    InvalidBlockSize,
    InvalidKeyLength,
)
from aesbridge.core.memory import (
    SensitiveBuffer,
    ZeroizeContext,
    secure_erase,
    zeroize,
    zeroize_on_exception,
)

__version__ = "0.1.0"

__all__ = [
    "AesBlockCipher",
    "AesBridgeError",
    "Block",
    "CipherKey",
    "ErasedMaterialError",
    "InvalidBlockSize",
    "InvalidKeyLength",
    "KeySchedule",
    "SensitiveBuffer",
    "ZeroizeContext",
    "decrypt_block",
    "derive_schedule",
    "encrypt_block",
    "scoped_schedule",
    "secure_erase",
    "zeroize",
    "zeroize_on_exception",
    "__version__",
]
