"""
Utils module - Utility functions and helpers.
"""

from aesbridge.utils.validators import as_byte_view

__all__ = ["as_byte_view"]
