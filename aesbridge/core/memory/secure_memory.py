"""
Secure Memory Buffers
=====================

Erasable containers for key, block and plaintext material.

Security Properties:
- Explicit zeroization via secure_erase (don't rely on Python GC)
- Memory locking where supported (prevent swapping)
- Reads after wipe() raise instead of returning stale data
- Automatic cleanup on context exit
- Constant-time equality

Limitations:
- Python's memory model copies data internally
- Objects passed in by the caller are not wiped; that stays the caller's job
- Best-effort security, not guaranteed
"""

from __future__ import annotations

import ctypes
import hmac
import logging
import platform
from typing import Any, Final, Optional

from aesbridge.core.config import BridgeConfig
from aesbridge.core.errors import ErasedMaterialError
from aesbridge.core.memory.zeroization import secure_erase
from aesbridge.security.constants import MAX_BUFFER_SIZE
from aesbridge.utils.validators import as_byte_view


# Platform detection
IS_WINDOWS: Final[bool] = platform.system() == "Windows"
IS_LINUX: Final[bool] = platform.system() == "Linux"
IS_MACOS: Final[bool] = platform.system() == "Darwin"

_log = logging.getLogger("aesbridge.memory")


def _libc() -> ctypes.CDLL:
    return ctypes.CDLL("libc.so.6" if IS_LINUX else "libc.dylib", use_errno=True)


def _mlock(address: int, size: int) -> bool:
    """
    Lock memory pages to prevent swapping.

    Returns True if successful, False otherwise.
    """
    try:
        if IS_WINDOWS:
            kernel32 = ctypes.windll.kernel32
            return bool(kernel32.VirtualLock(ctypes.c_void_p(address), ctypes.c_size_t(size)))
        elif IS_LINUX or IS_MACOS:
            result = _libc().mlock(ctypes.c_void_p(address), ctypes.c_size_t(size))
            return result == 0
    except (OSError, AttributeError) as e:
        _log.debug("Memory locking unavailable: %s", type(e).__name__)
    return False


def _munlock(address: int, size: int) -> bool:
    """Unlock memory pages."""
    try:
        if IS_WINDOWS:
            kernel32 = ctypes.windll.kernel32
            return bool(kernel32.VirtualUnlock(ctypes.c_void_p(address), ctypes.c_size_t(size)))
        elif IS_LINUX or IS_MACOS:
            result = _libc().munlock(ctypes.c_void_p(address), ctypes.c_size_t(size))
            return result == 0
    except (OSError, AttributeError) as e:
        _log.debug("Memory unlocking unavailable: %s", type(e).__name__)
    return False


def _address_of(buffer: bytearray) -> int:
    window = (ctypes.c_char * len(buffer)).from_buffer(buffer)
    try:
        return ctypes.addressof(window)
    finally:
        del window


class SensitiveBuffer:
    """
    Fixed-size mutable byte buffer with explicit zeroization.

    This is the workspace for plaintext and key bytes while they are
    being assembled. The buffer never grows, so its storage is never
    reallocated (and so never leaves an un-erased copy behind).

    Usage:
        with SensitiveBuffer(16) as buf:
            buf.write(key_bytes)
            schedule = derive_schedule(buf.view())
        # Buffer is now zeroed

        # Or manually
        buf = SensitiveBuffer(32)
        try:
            buf.write(key_material)
            use_key(buf.view())
        finally:
            buf.wipe()

    Security Notes:
        - Always use the context manager or call wipe() explicitly
        - view() aliases the storage; read() and bytes() make copies
    """

    __slots__ = ("_buffer", "_size", "_wiped", "_locked", "_write_pos", "_passes", "__weakref__")

    def __init__(
        self,
        size: int,
        lock_memory: Optional[bool] = None,
    ) -> None:
        """
        Initialize a zero-filled sensitive buffer.

        Args:
            size: Buffer size in bytes
            lock_memory: Try to lock memory; None uses the configured default

        Raises:
            ValueError: If size or the memory configuration is invalid
        """
        if size < 0:
            raise ValueError("Buffer size cannot be negative")
        if size > MAX_BUFFER_SIZE:
            raise ValueError(f"Buffer too large (max {MAX_BUFFER_SIZE})")

        # Pass count is fixed here; wipe() never reads configuration
        memory_config = BridgeConfig.get_instance().memory
        self._passes = memory_config.wipe_passes

        self._size = size
        self._buffer = bytearray(size)
        self._wiped = False
        self._locked = False
        self._write_pos = 0

        if lock_memory is None:
            lock_memory = memory_config.lock_memory
        if lock_memory and size > 0:
            self._locked = _mlock(_address_of(self._buffer), size)

    @classmethod
    def from_bytes(
        cls,
        data: Any,
        lock_memory: Optional[bool] = None,
    ) -> "SensitiveBuffer":
        """
        Create a SensitiveBuffer holding a copy of data.

        The original data is NOT wiped - caller is responsible.
        """
        with as_byte_view(data, "data") as view:
            buf = cls(size=view.nbytes, lock_memory=lock_memory)
            buf.write(view)
        return buf

    @property
    def size(self) -> int:
        """Get buffer size."""
        return self._size

    @property
    def data_length(self) -> int:
        """Get the end of the last write."""
        return self._write_pos

    @property
    def is_wiped(self) -> bool:
        """Check if buffer has been wiped."""
        return self._wiped

    @property
    def is_locked(self) -> bool:
        """Check if memory is locked."""
        return self._locked

    def _require_live(self) -> None:
        if self._wiped:
            raise ErasedMaterialError("Buffer has been wiped")

    def write(self, data: Any, offset: int = 0) -> int:
        """
        Write data into the buffer at offset.

        Args:
            data: Bytes-like data to write
            offset: Offset in buffer

        Returns:
            Number of bytes written

        Raises:
            ValueError: If the data does not fit
        """
        self._require_live()

        with as_byte_view(data, "data") as view:
            if offset < 0 or offset + view.nbytes > self._size:
                raise ValueError(
                    f"Write of {view.nbytes} bytes at offset {offset} "
                    f"exceeds buffer of {self._size} bytes"
                )
            self._buffer[offset:offset + view.nbytes] = view
            self._write_pos = offset + view.nbytes
            return view.nbytes

    def append(self, data: Any) -> int:
        """Append data at the current write position."""
        return self.write(data, self._write_pos)

    def read(self, size: int = -1, offset: int = 0) -> bytes:
        """
        Read a copy of the buffer content.

        Warning: the returned bytes object cannot be wiped.
        """
        self._require_live()

        with memoryview(self._buffer) as view:
            if size < 0:
                return bytes(view[offset:])
            return bytes(view[offset:offset + size])

    def view(self) -> memoryview:
        """Get a writable view aliasing the buffer (no copy)."""
        self._require_live()
        return memoryview(self._buffer)

    def wipe(self) -> None:
        """
        Securely wipe the buffer.

        Uses the pass count settled at construction; the final pass is zero.
        """
        if self._wiped:
            return

        secure_erase(self._buffer, passes=self._passes)
        self._wiped = True

        if self._locked:
            self._locked = False
            _munlock(_address_of(self._buffer), self._size)

    def __enter__(self) -> "SensitiveBuffer":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - always wipe."""
        self.wipe()

    def __del__(self) -> None:
        """Destructor - attempt to wipe."""
        try:
            self.wipe()
        except Exception:
            pass

    def __len__(self) -> int:
        """Get buffer length."""
        return self._size

    def __repr__(self) -> str:
        """Safe representation."""
        if self._wiped:
            return "SensitiveBuffer(WIPED)"
        return f"SensitiveBuffer(size={self._size}, locked={self._locked})"


class SealedBytes:
    """
    Write-once sensitive bytes.

    The content is copied in at construction and can only be read or
    wiped afterwards. Subclasses add length rules (CipherKey, Block).

    Usage:
        with SealedBytes(secret) as sealed:
            consume(sealed.view())
        # Content is now zeroed
    """

    __slots__ = ("_buffer", "_wiped", "__weakref__")

    def __init__(self, data: Any) -> None:
        with as_byte_view(data, "data") as view:
            self._check_length(view.nbytes)
            self._buffer = bytearray(view)
        self._wiped = False

    @classmethod
    def _check_length(cls, length: int) -> None:
        """Hook for subclasses with fixed sizes."""

    @classmethod
    def from_hex(cls, text: str):
        """
        Build from hex notation, e.g. a published test vector.

        The decoded scratch copy is erased before returning.
        """
        decoded = bytearray.fromhex(text)
        try:
            return cls(decoded)
        finally:
            secure_erase(decoded)

    @property
    def is_wiped(self) -> bool:
        """Check if content has been wiped."""
        return self._wiped

    def _require_live(self) -> None:
        if self._wiped:
            raise ErasedMaterialError(f"{type(self).__name__} has been wiped")

    def view(self) -> memoryview:
        """Get a read-only view aliasing the content (no copy)."""
        self._require_live()
        return memoryview(self._buffer).toreadonly()

    def hex(self) -> str:
        """Hex form of the content. Warning: the string cannot be wiped."""
        self._require_live()
        return self._buffer.hex()

    def wipe(self) -> None:
        """Securely zero the content."""
        if self._wiped:
            return
        secure_erase(self._buffer)
        self._wiped = True

    def __bytes__(self) -> bytes:
        """Copy of the content. Warning: the copy cannot be wiped."""
        self._require_live()
        return bytes(self._buffer)

    def __len__(self) -> int:
        return len(self._buffer)

    def __eq__(self, other: object) -> bool:
        """Constant-time content comparison between same-typed values."""
        if not isinstance(other, SealedBytes) or type(other) is not type(self):
            return NotImplemented
        self._require_live()
        other._require_live()
        return hmac.compare_digest(self._buffer, other._buffer)

    __hash__ = None  # type: ignore[assignment]

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.wipe()

    def __del__(self) -> None:
        try:
            self.wipe()
        except Exception:
            pass

    def __reduce__(self):
        raise TypeError(f"{type(self).__name__} cannot be pickled")

    def __repr__(self) -> str:
        if self._wiped:
            return f"{type(self).__name__}(WIPED)"
        return f"{type(self).__name__}(len={len(self._buffer)})"
