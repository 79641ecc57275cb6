"""
AES Block Primitive
===================

Raw AES single-block transforms and key-schedule setup.

Architecture:
    CipherKey --derive_schedule--> KeySchedule
    KeySchedule + Block --encrypt_block / decrypt_block--> Block

No mode of operation, padding, IV handling or key management is
provided. The round math is delegated to the `cryptography` package
(OpenSSL); a single-block ECB context is exactly the raw block
transform, so one context per direction is held as the schedule.

Security Properties:
    - Key length validated before any backend object exists
    - Outputs are produced with update_into() into a scratch buffer
      that is erased before returning (no unerasable bytes copies)
    - Schedules, keys and blocks are wipeable and unpicklable

WARNING:
    - Wipe every CipherKey, KeySchedule and plaintext Block after use
    - Encrypting more than one block with the same key through
      this layer is ECB; build modes on top, never use it as-is
"""

from __future__ import annotations

import hmac
import logging
import threading
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from aesbridge.core.errors import ErasedMaterialError, InvalidBlockSize, InvalidKeyLength
from aesbridge.core.memory.secure_memory import SealedBytes
from aesbridge.core.memory.zeroization import secure_erase
from aesbridge.security.constants import AES_BLOCK_SIZE, AES_ROUNDS, SUPPORTED_KEY_SIZES


_log = logging.getLogger("aesbridge.crypto")

# update_into() requires room for len(data) + block_size - 1 bytes
_SCRATCH_SIZE = 2 * AES_BLOCK_SIZE - 1


class CipherKey(SealedBytes):
    """
    Raw AES key of 16, 24 or 32 bytes.

    Read-only once constructed, but wipeable: the key carries the same
    erasure obligation as any other sensitive buffer.

    Raises:
        InvalidKeyLength: On construction with any other length
    """

    __slots__ = ()

    @classmethod
    def _check_length(cls, length: int) -> None:
        if length not in SUPPORTED_KEY_SIZES:
            raise InvalidKeyLength(length, SUPPORTED_KEY_SIZES)

    @property
    def bits(self) -> int:
        return len(self) * 8


class Block(SealedBytes):
    """
    Exactly one 16-byte AES block.

    Raises:
        InvalidBlockSize: On construction with any other length
    """

    __slots__ = ()

    @classmethod
    def _check_length(cls, length: int) -> None:
        if length != AES_BLOCK_SIZE:
            raise InvalidBlockSize(length, AES_BLOCK_SIZE)

    @classmethod
    def zero(cls) -> "Block":
        """The all-zero block."""
        return cls(bytes(AES_BLOCK_SIZE))


class KeySchedule:
    """
    Opaque expanded key for one AES key, usable in both directions.

    Holds the backend's encrypt and decrypt contexts (which own the
    expanded round keys) and a private copy of the key for constant-time
    equality. Transforms are serialized by a lock, so a schedule may be
    shared read-only between threads; wipe() takes the same lock.

    Usage:
        with derive_schedule(key) as schedule:
            ciphertext = encrypt_block(schedule, block)
        # schedule is now wiped
    """

    __slots__ = ("_material", "_encryptor", "_decryptor", "_lock", "_wiped", "__weakref__")

    def __init__(self, key: CipherKey) -> None:
        """Use derive_schedule() rather than constructing directly."""
        self._wiped = True
        self._lock = threading.Lock()
        self._material = CipherKey(key.view())
        cipher = Cipher(algorithms.AES(self._material._buffer), modes.ECB())
        self._encryptor = cipher.encryptor()
        self._decryptor = cipher.decryptor()
        self._wiped = False

    @property
    def key_size(self) -> int:
        """Key size in bytes (16, 24 or 32)."""
        return len(self._material)

    @property
    def rounds(self) -> int:
        """Number of AES rounds (10, 12 or 14)."""
        return AES_ROUNDS[len(self._material)]

    @property
    def is_wiped(self) -> bool:
        return self._wiped

    def _require_live(self) -> None:
        if self._wiped:
            raise ErasedMaterialError("KeySchedule has been wiped")

    def _transform(self, forward: bool, block: Block) -> Block:
        scratch = bytearray(_SCRATCH_SIZE)
        try:
            with self._lock:
                self._require_live()
                context = self._encryptor if forward else self._decryptor
                written = context.update_into(block.view(), scratch)
            with memoryview(scratch) as view:
                return Block(view[:written])
        finally:
            secure_erase(scratch)

    def wipe(self) -> None:
        """
        Release the backend contexts and zero the key copy.

        Finalizing the contexts frees OpenSSL's cipher state, which
        cleanses the expanded round keys.
        """
        with self._lock:
            if self._wiped:
                return
            self._wiped = True
            try:
                self._encryptor.finalize()
                self._decryptor.finalize()
            finally:
                self._encryptor = None
                self._decryptor = None
                self._material.wipe()

    def __eq__(self, other: object) -> bool:
        """Schedules are equal when derived from equal keys."""
        if not isinstance(other, KeySchedule):
            return NotImplemented
        self._require_live()
        other._require_live()
        return hmac.compare_digest(self._material._buffer, other._material._buffer)

    __hash__ = None  # type: ignore[assignment]

    def __enter__(self) -> "KeySchedule":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.wipe()

    def __del__(self) -> None:
        try:
            self.wipe()
        except Exception:
            pass

    def __reduce__(self):
        raise TypeError("KeySchedule cannot be pickled")

    def __repr__(self) -> str:
        if self._wiped:
            return "KeySchedule(WIPED)"
        return f"KeySchedule(AES-{self.key_size * 8}, rounds={self.rounds})"


def _as_block(value: Any) -> tuple[Block, bool]:
    """Return (block, owned); owned blocks are temporaries the caller must wipe."""
    if isinstance(value, Block):
        return value, False
    return Block(value), True


def derive_schedule(key: Any) -> KeySchedule:
    """
    Expand a raw key into a KeySchedule.

    Args:
        key: CipherKey or bytes-like object of 16, 24 or 32 bytes

    Returns:
        A new KeySchedule; the caller owns it and must wipe it

    Raises:
        InvalidKeyLength: If the key size is unsupported (nothing is derived)
        TypeError: If key is not bytes-like

    The caller's key object is not wiped; a temporary copy made for a
    bytes-like key is.
    """
    if isinstance(key, CipherKey):
        schedule = KeySchedule(key)
    else:
        try:
            temporary = CipherKey(key)
        except InvalidKeyLength as e:
            _log.warning("Rejected AES key of %d bytes", e.length)
            raise
        try:
            schedule = KeySchedule(temporary)
        finally:
            temporary.wipe()

    _log.debug("Derived AES-%d key schedule (%d rounds)", schedule.key_size * 8, schedule.rounds)
    return schedule


def encrypt_block(schedule: KeySchedule, block: Any) -> Block:
    """
    Encrypt exactly one block.

    Args:
        schedule: KeySchedule from derive_schedule()
        block: Block or 16-byte bytes-like object

    Returns:
        New ciphertext Block

    Raises:
        InvalidBlockSize: If block is not 16 bytes
        ErasedMaterialError: If the schedule has been wiped
    """
    source, owned = _as_block(block)
    try:
        return schedule._transform(True, source)
    finally:
        if owned:
            source.wipe()


def decrypt_block(schedule: KeySchedule, block: Any) -> Block:
    """
    Decrypt exactly one block; the inverse of encrypt_block().

    Raises:
        InvalidBlockSize: If block is not 16 bytes
        ErasedMaterialError: If the schedule has been wiped
    """
    source, owned = _as_block(block)
    try:
        return schedule._transform(False, source)
    finally:
        if owned:
            source.wipe()


@contextmanager
def scoped_schedule(key: Any) -> Iterator[KeySchedule]:
    """
    Derive a schedule that is wiped on every exit path.

    Usage:
        with scoped_schedule(key) as schedule:
            out = encrypt_block(schedule, block)
    """
    schedule = derive_schedule(key)
    try:
        yield schedule
    finally:
        schedule.wipe()


class AesBlockCipher:
    """
    Single-key AES block cipher owning its schedule.

    A caller-controlled cache of one KeySchedule, for code that
    transforms many blocks under the same key.

    Usage:
        with AesBlockCipher(key) as aes:
            ct = aes.encrypt_block(pt)
            assert aes.decrypt_block(ct) == pt

    Security Notes:
        - The key passed in is not wiped; the schedule is, on wipe()/exit
        - No chaining, padding or IV handling is performed
    """

    __slots__ = ("_schedule",)

    def __init__(self, key: Any) -> None:
        """
        Args:
            key: CipherKey or bytes-like object of 16, 24 or 32 bytes

        Raises:
            InvalidKeyLength: If the key size is unsupported
        """
        self._schedule: Optional[KeySchedule] = derive_schedule(key)

    @property
    def block_size(self) -> int:
        return AES_BLOCK_SIZE

    @property
    def key_size(self) -> int:
        return self._live_schedule().key_size

    def _live_schedule(self) -> KeySchedule:
        if self._schedule is None:
            raise ErasedMaterialError("AesBlockCipher has been wiped")
        return self._schedule

    def encrypt_block(self, block: Any) -> Block:
        return encrypt_block(self._live_schedule(), block)

    def decrypt_block(self, block: Any) -> Block:
        return decrypt_block(self._live_schedule(), block)

    def wipe(self) -> None:
        """Wipe the owned schedule."""
        schedule, self._schedule = self._schedule, None
        if schedule is not None:
            schedule.wipe()

    @property
    def is_wiped(self) -> bool:
        return self._schedule is None

    def __enter__(self) -> "AesBlockCipher":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.wipe()

    def __repr__(self) -> str:
        if self._schedule is None:
            return "AesBlockCipher(WIPED)"
        return f"AesBlockCipher(AES-{self._schedule.key_size * 8})"
