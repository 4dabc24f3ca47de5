"""Serial UART byte transport for NMEA receivers.

Uses serial_asyncio for non-blocking reads from UART receivers such as a
BerryGPS on ``/dev/serial0`` or a USB dongle on ``/dev/ttyUSB0``.
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import Optional

import serial
import serial_asyncio

from nmea_capture.core.logging_utils import get_module_logger

from ..constants import DEFAULT_BAUD_RATE, DEFAULT_READ_CHUNK
from .base_transport import BaseByteTransport

logger = get_module_logger("SerialTransport")


class SerialCaptureTransport(BaseByteTransport):
    """Serial transport returning raw bytes for the capture engine.

    Example:
        transport = SerialCaptureTransport("/dev/serial0", 9600)
        async with transport:
            engine.feed(await transport.read_chunk())
    """

    def __init__(
        self,
        port: str,
        baudrate: int = DEFAULT_BAUD_RATE,
        chunk_size: int = DEFAULT_READ_CHUNK,
    ):
        super().__init__()
        self.port = port
        self.baudrate = baudrate
        self.chunk_size = chunk_size

        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None
        self._last_error: Optional[str] = None

    @property
    def is_connected(self) -> bool:
        return self._connected and self._reader is not None

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    async def connect(self) -> bool:
        if self.is_connected:
            logger.debug("Already connected to %s", self.port)
            return True

        try:
            self._reader, self._writer = await serial_asyncio.open_serial_connection(
                url=self.port,
                baudrate=self.baudrate,
            )
        except asyncio.CancelledError:
            raise
        except (serial.SerialException, OSError) as exc:
            event_type = "serial_exception" if isinstance(exc, serial.SerialException) else "serial_error"
            self._last_error = str(exc)
            self._connected = False
            logger.warning(
                "%s connecting to %s at %d baud: %s",
                event_type, self.port, self.baudrate, exc,
            )
            return False

        self._connected = True
        self._last_error = None
        logger.info("Connected to receiver on %s at %d baud", self.port, self.baudrate)
        return True

    async def disconnect(self) -> None:
        if self._writer is None:
            self._connected = False
            return

        writer = self._writer
        self._writer = None
        self._reader = None
        self._connected = False

        with contextlib.suppress(OSError, serial.SerialException):
            writer.close()

        try:
            await asyncio.wait_for(writer.wait_closed(), timeout=1.0)
        except asyncio.TimeoutError:
            logger.debug("Timeout waiting for serial close on %s", self.port)
        except (OSError, serial.SerialException):
            logger.debug("Error closing serial on %s", self.port)

        logger.info("Disconnected from receiver on %s", self.port)

    async def read_chunk(self, timeout: float = 1.0) -> Optional[bytes]:
        """Up to ``chunk_size`` raw bytes; ``b""`` on timeout, None on error/EOF."""
        if not self.is_connected or self._reader is None:
            return None

        try:
            data = await asyncio.wait_for(self._reader.read(self.chunk_size), timeout=timeout)
        except asyncio.TimeoutError:
            return b""
        except asyncio.CancelledError:
            raise
        except (serial.SerialException, OSError) as exc:
            self._last_error = str(exc)
            logger.warning("Read error on %s: %s", self.port, exc)
            return None

        if not data:
            logger.warning("Serial stream ended on %s (EOF)", self.port)
            self._last_error = "Stream ended (EOF)"
            return None
        return data
