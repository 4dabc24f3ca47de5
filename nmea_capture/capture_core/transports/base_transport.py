"""Abstract byte source for the capture handler."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class BaseByteTransport(ABC):
    """Read-only link that delivers raw receiver bytes.

    Unlike a line-oriented transport nothing is framed here: the capture
    engine does its own sentence framing, so ``read_chunk`` hands back
    whatever bytes have arrived.
    """

    def __init__(self) -> None:
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    @abstractmethod
    async def connect(self) -> bool:
        """Open the link; False on failure."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the link. Safe to call when already closed."""

    @abstractmethod
    async def read_chunk(self, timeout: float = 1.0) -> Optional[bytes]:
        """Bytes received so far, ``b""`` on timeout, None once the link is lost."""

    async def __aenter__(self) -> "BaseByteTransport":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.disconnect()
