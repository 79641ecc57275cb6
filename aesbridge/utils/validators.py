"""
Validation Utilities
====================

Buffer-protocol checks shared by the erase and cipher primitives.
"""

from __future__ import annotations

from typing import Any


def as_byte_view(
    value: Any,
    field_name: str = "value",
    writable: bool = False,
) -> memoryview:
    """
    Return a C-contiguous memoryview over a bytes-like object.

    No data is copied: the view aliases the caller's storage. Views
    are flattened to unsigned bytes where the source format allows;
    callers should rely on ``nbytes`` rather than ``len()``.

    Args:
        value: Any object supporting the buffer protocol
        field_name: Name of the argument for error messages
        writable: If True, read-only buffers are rejected

    Returns:
        memoryview over the caller's storage

    Raises:
        TypeError: If value is not bytes-like, not contiguous,
            or read-only when writable is requested
    """
    if isinstance(value, str):
        raise TypeError(f"{field_name} must be bytes-like, not str")

    try:
        view = memoryview(value)
    except TypeError as e:
        raise TypeError(
            f"{field_name} must be bytes-like, not {type(value).__name__}"
        ) from e

    if writable and view.readonly:
        view.release()
        raise TypeError(f"{field_name} must be a writable buffer")

    if not view.c_contiguous:
        view.release()
        raise TypeError(f"{field_name} must be a C-contiguous buffer")

    if view.format == "B" and view.ndim == 1:
        return view

    try:
        flat = view.cast("B")
    except (TypeError, ValueError):
        # Non-native formats (e.g. ctypes "<c") cannot be cast; nbytes still holds
        return view
    return flat
