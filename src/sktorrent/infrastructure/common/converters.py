"""Type conversion utilities."""

from __future__ import annotations


def to_int(raw: str | int | None) -> int | None:
    """Convert string or int to int, return None if invalid.

    Handles various formats:
        - None → None
        - int → int (passthrough)
        - "123" → 123
        - "1,234" → 1234
        - "1 234" → 1234
        - "" → None
        - invalid → None
    """
    if raw is None:
        return None

    if isinstance(raw, int):
        return raw

    if isinstance(raw, str):
        txt = "".join(ch for ch in raw if ch.isdecimal())
        if not txt:
            return None
        return int(txt)

    return None


def to_positive_int(raw: str | None) -> int | None:
    """Parse a strictly numeric token as a positive int.

    Unlike :func:`to_int` no digits are scavenged from mixed text:
    ``"5"`` → 5, ``"05"`` → 5, ``"0"`` → None, ``"abc"`` → None,
    ``"-3"`` → None.
    """
    if raw is None:
        return None
    txt = raw.strip()
    if not txt.isdecimal():
        return None
    value = int(txt)
    return value if value > 0 else None
