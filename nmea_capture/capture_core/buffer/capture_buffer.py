"""Bounded byte buffer filled one character at a time from the receiver."""

from __future__ import annotations

import threading

from ..constants import DEFAULT_BUFFER_CAPACITY, MIN_BUFFER_CAPACITY


class CaptureBuffer:
    """Fixed-capacity, append-only byte buffer with a write cursor.

    The cursor never passes ``capacity - 1``; once it gets there further
    bytes are dropped until the buffer is reset. NUL bytes are never stored.
    Every push, stored or not, refreshes ``last_update`` so the flush policy
    can tell a busy line from a quiet one.

    A single lock guards the storage, so one thread (or interrupt-style
    callback) may push while another snapshots and discards.
    """

    def __init__(self, capacity: int = DEFAULT_BUFFER_CAPACITY, now: int = 0):
        if capacity < MIN_BUFFER_CAPACITY:
            raise ValueError(f"capacity must be at least {MIN_BUFFER_CAPACITY}, got {capacity}")
        self._capacity = capacity
        self._chars = bytearray(capacity)
        self._cursor = 0
        self._last_update = now
        self._dropped = 0
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def cursor(self) -> int:
        """Index of the next byte to be written."""
        return self._cursor

    @property
    def last_update(self) -> int:
        """Tick (ms) of the most recent push or reset."""
        return self._last_update

    @property
    def dropped_bytes(self) -> int:
        """Bytes discarded because the buffer was saturated."""
        return self._dropped

    @property
    def is_empty(self) -> bool:
        return self._cursor == 0

    @property
    def is_saturated(self) -> bool:
        return self._cursor >= self._capacity - 1

    def __len__(self) -> int:
        return self._cursor

    def push(self, byte: int, now: int) -> bool:
        """Append one byte; returns True if it was stored."""
        with self._lock:
            self._last_update = now
            if byte == 0:
                return False
            if self._cursor >= self._capacity - 1:
                self._dropped += 1
                return False
            self._chars[self._cursor] = byte & 0xFF
            self._cursor += 1
            return True

    def reset(self, now: int) -> None:
        """Zero the contents and rewind the cursor."""
        with self._lock:
            self._clear(now)

    def discard(self, count: int, now: int) -> None:
        """Drop the first ``count`` bytes, keeping anything written after them.

        With ``count >= cursor`` this is the same as :meth:`reset`; a partial
        discard leaves ``last_update`` alone since no byte arrived.
        """
        with self._lock:
            if count <= 0:
                return
            if count >= self._cursor:
                self._clear(now)
                return
            remaining = self._cursor - count
            self._chars[:remaining] = self._chars[count:self._cursor]
            self._chars[remaining:] = bytes(self._capacity - remaining)
            self._cursor = remaining

    def snapshot(self) -> bytes:
        """Immutable copy of the stored bytes ``[0, cursor)``."""
        with self._lock:
            return bytes(self._chars[:self._cursor])

    def raw(self) -> bytes:
        """Copy of the whole backing store, zero tail included."""
        with self._lock:
            return bytes(self._chars)

    def _clear(self, now: int) -> None:
        self._chars[:] = bytes(self._capacity)
        self._cursor = 0
        self._last_update = now
