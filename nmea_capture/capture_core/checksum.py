"""NMEA checksum helpers (XOR of everything between ``$`` and ``*``)."""

from __future__ import annotations

from typing import Union

Text = Union[str, bytes]


def _as_bytes(value: Text) -> bytes:
    return value.encode("ascii", errors="replace") if isinstance(value, str) else value


def compute_checksum(payload: Text) -> int:
    """XOR of the payload bytes (without the leading ``$``)."""
    calculated = 0
    for byte in _as_bytes(payload):
        calculated ^= byte
    return calculated


def format_checksum(value: int) -> str:
    return f"{value & 0xFF:02X}"


def validate_checksum(sentence: Text) -> bool:
    """True if ``sentence`` carries a ``*HH`` suffix matching its payload."""
    data = _as_bytes(sentence)
    if not data.startswith(b"$") or b"*" not in data:
        return False
    payload, _, checksum = data[1:].partition(b"*")
    if len(checksum) < 2:
        return False
    try:
        expected = int(checksum[:2], 16)
    except ValueError:
        return False
    return compute_checksum(payload) == expected


def with_checksum(body: str) -> str:
    """Frame ``body`` (no ``$``) as ``$body*HH``; handy for test fixtures."""
    return f"${body}*{format_checksum(compute_checksum(body))}"
