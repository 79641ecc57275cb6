"""
aesbridge Cryptographic Core
============================

Raw AES block primitive over the `cryptography` package.

Operations:
    derive_schedule(key) -> KeySchedule
    encrypt_block(schedule, block) -> Block
    decrypt_block(schedule, block) -> Block

WARNING: This module handles sensitive cryptographic material.
         It provides no mode of operation; callers build those on top.
"""

from aesbridge.core.crypto.block_cipher import (
    AesBlockCipher,
    Block,
    CipherKey,
    KeySchedule,
    decrypt_block,
    derive_schedule,
    encrypt_block,
    scoped_schedule,
)

__all__ = [
    "AesBlockCipher",
    "Block",
    "CipherKey",
    "KeySchedule",
    "decrypt_block",
    "derive_schedule",
    "encrypt_block",
    "scoped_schedule",
]
