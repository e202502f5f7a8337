"""Common infrastructure utilities."""

from __future__ import annotations

from .converters import to_int, to_positive_int

__all__ = [
    "to_int",
    "to_positive_int",
]
