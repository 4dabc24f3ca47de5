"""Conversions from captured field text to typed values.

The grammar only guarantees the shape of a field, not that it converts:
a lone ``.`` or ``-`` still matches a number slot. The parse helpers return
None in that case and callers fall back to zero or a sentinel.
"""

from __future__ import annotations

import math
from typing import AbstractSet, Optional

from ..constants import AGE_OF_CORRECTION_ABSENT


def _text(value: bytes) -> str:
    return value.decode("ascii", errors="replace")


def parse_uint(value: bytes) -> Optional[int]:
    """Unsigned integer, None for empty or non-numeric text."""
    if not value or not value.isdigit():
        return None
    return int(value)


def parse_int(value: bytes) -> Optional[int]:
    """Optionally negative integer, None on failure."""
    if not value:
        return None
    try:
        return int(_text(value))
    except ValueError:
        return None


def parse_float(value: bytes) -> Optional[float]:
    """Real number, None on failure."""
    if not value:
        return None
    try:
        return float(_text(value))
    except ValueError:
        return None


def split_hms(value: int) -> tuple[int, int, int]:
    """``HHMMSS`` packed into one integer -> (hours, minutes, seconds)."""
    return (value // 10000) % 100, (value // 100) % 100, value % 100


def split_dmy(value: int) -> tuple[int, int, int]:
    """``DDMMYY`` packed into one integer -> (day, month, two-digit year)."""
    return (value // 10000) % 100, (value // 100) % 100, value % 100


def deg_min_to_dec_deg(deg_min: float, is_negative: bool = False) -> float:
    """``DDMM.MMMM`` / ``DDDMM.MMMM`` packed value -> decimal degrees."""
    minutes = math.fmod(deg_min, 100.0)
    degrees = int(deg_min / 100)
    dec_deg = degrees + minutes / 60
    return -dec_deg if is_negative else dec_deg


def decimal_degrees_to_packed(dec_deg: float) -> float:
    """Inverse of :func:`deg_min_to_dec_deg`, sign dropped."""
    value = abs(dec_deg)
    degrees = int(value)
    return degrees * 100 + (value - degrees) * 60


def pick_enum(value: bytes, allowed: AbstractSet[str], current: Optional[str]) -> Optional[str]:
    """The captured character if it is allowed, otherwise ``current``."""
    if len(value) == 1:
        char = _text(value)
        if char in allowed:
            return char
    return current


def copy_text(value: bytes, width: int) -> str:
    """Field text truncated to ``width`` characters."""
    return _text(value[:width])


def parse_age(value: bytes) -> int:
    """Age of correction in whole seconds; -1 when absent or unreadable."""
    age = parse_float(value)
    if age is None:
        return AGE_OF_CORRECTION_ABSENT
    return int(age)
