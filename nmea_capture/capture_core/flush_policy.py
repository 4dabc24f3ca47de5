"""When an unmatched capture buffer is treated as garbage and cleared."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from .constants import DEFAULT_MIN_IDLE_MS, FlushPolicyMode


class FlushReason(Enum):
    SATURATED = "saturated"
    NO_MATCH = "no_match"


class FlushPolicy:
    """Decides after each processing pass whether the buffer must be cleared.

    A saturated buffer is always cleared. Otherwise a pass that ran over a
    non-empty buffer with every decoder reporting no match clears it, either
    straight away (``immediate``) or once the line has been quiet for at
    least ``min_idle_ms`` (``idle``), so a sentence still arriving byte by
    byte is not thrown away halfway through.
    """

    def __init__(
        self,
        mode: FlushPolicyMode = FlushPolicyMode.IDLE,
        min_idle_ms: int = DEFAULT_MIN_IDLE_MS,
    ):
        self.mode = FlushPolicyMode(mode)
        self.min_idle_ms = max(0, int(min_idle_ms))

    def evaluate(
        self,
        *,
        saturated: bool,
        attempted: bool,
        matched: bool,
        idle_ms: int,
    ) -> Optional[FlushReason]:
        if saturated:
            return FlushReason.SATURATED
        if not attempted or matched:
            return None
        if self.mode is FlushPolicyMode.IDLE and idle_ms < self.min_idle_ms:
            return None
        return FlushReason.NO_MATCH

    def __repr__(self) -> str:
        return f"FlushPolicy(mode={self.mode.value}, min_idle_ms={self.min_idle_ms})"
