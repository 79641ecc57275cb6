"""
Memory Zeroization Utilities
============================

Provides explicit, non-elidable erasure of sensitive buffers.

Security Properties:
- Writes go through ctypes.memset, a foreign call the interpreter
  cannot optimize away or reason through
- Exactly the requested prefix is overwritten; the final pattern is zero
- Exception-safe cleanup via context manager and decorator

Key Concepts:
- Zeroization: Overwriting memory with zeros (optionally after 0xFF passes)
- Guard: Automatic erasure on scope exit
"""

from __future__ import annotations

import ctypes
import functools
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, TypeVar

from aesbridge.security.constants import (
    ALTERNATE_PATTERN,
    DEFAULT_WIPE_PASSES,
    ERASE_PATTERN,
    MAX_WIPE_PASSES,
)
from aesbridge.utils.validators import as_byte_view


def _wipe_patterns(passes: int) -> list[int]:
    """Pass patterns, alternating so that the last one is always zero."""
    return [
        ERASE_PATTERN if (passes - 1 - index) % 2 == 0 else ALTERNATE_PATTERN
        for index in range(passes)
    ]


def secure_erase(
    buffer: Any,
    length: Optional[int] = None,
    *,
    passes: int = DEFAULT_WIPE_PASSES,
) -> None:
    """
    Overwrite the first ``length`` bytes of a buffer with zero.

    The overwrite is performed with ctypes.memset against the buffer's
    own storage, so no copy is made and the store cannot be dropped.

    Args:
        buffer: Writable, C-contiguous bytes-like object (e.g. bytearray)
        length: Number of bytes to erase; None erases the whole buffer
        passes: Overwrite passes (0xFF/0x00 alternating, ending with 0x00)

    Raises:
        TypeError: If buffer is immutable, non-contiguous or not bytes-like
        ValueError: If length is out of range or passes is invalid

    Security Notes:
        - All checks happen before the first write
        - length 0 is a no-op
        - Python may still hold copies made elsewhere (e.g. bytes objects)
    """
    if not 1 <= passes <= MAX_WIPE_PASSES:
        raise ValueError(f"passes must be between 1 and {MAX_WIPE_PASSES}")

    with as_byte_view(buffer, "buffer", writable=True) as view:
        if length is None:
            length = view.nbytes
        elif length < 0 or length > view.nbytes:
            raise ValueError(
                f"length {length} out of range for buffer of {view.nbytes} bytes"
            )

        if length == 0:
            return

        window = (ctypes.c_char * length).from_buffer(view)
        try:
            addr = ctypes.addressof(window)
            for pattern in _wipe_patterns(passes):
                ctypes.memset(addr, pattern, length)
        finally:
            # Drop the export so the view (and the caller's buffer) can be released
            del window


def zeroize(item: Any) -> None:
    """
    Erase an item holding sensitive material.

    Objects exposing wipe() (SensitiveBuffer, SealedBytes, KeySchedule)
    erase themselves; anything else is treated as a raw buffer.
    """
    if _is_wipeable(item):
        item.wipe()
    else:
        secure_erase(item)


def _is_wipeable(item: Any) -> bool:
    return callable(getattr(item, "wipe", None))


def _zeroize_all(items: tuple[Any, ...]) -> None:
    """
    Erase every item, even if some of them fail.

    The first failure is re-raised once all items have been attempted.
    """
    first_error: Optional[Exception] = None
    for item in items:
        try:
            zeroize(item)
        except Exception as e:
            if first_error is None:
                first_error = e
    if first_error is not None:
        raise first_error


def _check_erasable(items: tuple[Any, ...]) -> None:
    """Reject anything zeroize() could not erase, before it is needed."""
    for item in items:
        if _is_wipeable(item):
            continue
        with as_byte_view(item, "item", writable=True):
            pass


T = TypeVar("T")


def zeroize_on_exception(
    *items: Any,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator that erases items if the wrapped call raises.

    Usage:
        key = bytearray(32)

        @zeroize_on_exception(key)
        def load():
            fill_key(key)
            return derive_schedule(key)
            # If anything raises, key is zeroed before propagation

        schedule = load()
        secure_erase(key)  # Normal cleanup
    """
    _check_erasable(items)

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return func(*args, **kwargs)
            except BaseException:
                _zeroize_all(items)
                raise
        return wrapper
    return decorator


@contextmanager
def ZeroizeContext(*items: Any) -> Iterator[None]:
    """
    Context manager that erases items on exit.

    Always erases, whether exit is normal or exceptional. Every item
    is validated on entry, and a failing item never stops the others
    from being erased; its error is raised after all are attempted.

    Usage:
        key = bytearray(16)
        block = bytearray(16)

        with ZeroizeContext(key, block):
            fill_key(key)
            ...
        # key and block are now zeroed
    """
    _check_erasable(items)
    try:
        yield
    finally:
        _zeroize_all(items)
