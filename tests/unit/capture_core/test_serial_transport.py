"""Unit tests for the serial byte transport."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import serial

from nmea_capture.capture_core.transports import BaseByteTransport, SerialCaptureTransport

SERIAL_ASYNCIO = "nmea_capture.capture_core.transports.serial_transport.serial_asyncio"


class TestBaseByteTransport:
    """Test the abstract transport interface."""

    def test_interface_defined(self):
        assert hasattr(BaseByteTransport, "connect")
        assert hasattr(BaseByteTransport, "disconnect")
        assert hasattr(BaseByteTransport, "read_chunk")
        assert hasattr(BaseByteTransport, "is_connected")

    def test_cannot_instantiate(self):
        with pytest.raises(TypeError):
            BaseByteTransport()


class TestSerialCaptureTransport:
    """Test the serial transport implementation."""

    def test_initialization(self):
        transport = SerialCaptureTransport("/dev/serial0", 9600)
        assert transport.port == "/dev/serial0"
        assert transport.baudrate == 9600
        assert transport.chunk_size == 64
        assert transport.is_connected is False
        assert transport.last_error is None

    @pytest.mark.asyncio
    async def test_connect_success(self):
        with patch(SERIAL_ASYNCIO) as mock_serial:
            mock_serial.open_serial_connection = AsyncMock(return_value=(AsyncMock(), MagicMock()))

            transport = SerialCaptureTransport("/dev/serial0", 4800)
            assert await transport.connect() is True
            assert transport.is_connected is True
            mock_serial.open_serial_connection.assert_called_once_with(
                url="/dev/serial0",
                baudrate=4800,
            )

    @pytest.mark.asyncio
    async def test_connect_failure(self):
        with patch(SERIAL_ASYNCIO) as mock_serial:
            mock_serial.open_serial_connection = AsyncMock(side_effect=OSError("Device not found"))

            transport = SerialCaptureTransport("/dev/serial0")
            assert await transport.connect() is False
            assert transport.is_connected is False
            assert "Device not found" in transport.last_error

    @pytest.mark.asyncio
    async def test_connect_serial_exception(self):
        with patch(SERIAL_ASYNCIO) as mock_serial:
            mock_serial.open_serial_connection = AsyncMock(
                side_effect=serial.SerialException("busy")
            )
            transport = SerialCaptureTransport("/dev/serial0")
            assert await transport.connect() is False
            assert transport.last_error == "busy"

    @pytest.mark.asyncio
    async def test_read_chunk_returns_raw_bytes(self):
        with patch(SERIAL_ASYNCIO) as mock_serial:
            mock_reader = AsyncMock()
            mock_reader.read = AsyncMock(return_value=b"$GPGGA,12")
            mock_serial.open_serial_connection = AsyncMock(return_value=(mock_reader, MagicMock()))

            transport = SerialCaptureTransport("/dev/serial0", chunk_size=16)
            await transport.connect()

            assert await transport.read_chunk() == b"$GPGGA,12"
            mock_reader.read.assert_called_once_with(16)

    @pytest.mark.asyncio
    async def test_read_chunk_timeout(self):
        with patch(SERIAL_ASYNCIO) as mock_serial:
            mock_reader = AsyncMock()
            mock_reader.read = AsyncMock(side_effect=asyncio.TimeoutError())
            mock_serial.open_serial_connection = AsyncMock(return_value=(mock_reader, MagicMock()))

            transport = SerialCaptureTransport("/dev/serial0")
            await transport.connect()
            assert await transport.read_chunk(timeout=0.1) == b""

    @pytest.mark.asyncio
    async def test_read_chunk_eof(self):
        with patch(SERIAL_ASYNCIO) as mock_serial:
            mock_reader = AsyncMock()
            mock_reader.read = AsyncMock(return_value=b"")
            mock_serial.open_serial_connection = AsyncMock(return_value=(mock_reader, MagicMock()))

            transport = SerialCaptureTransport("/dev/serial0")
            await transport.connect()
            assert await transport.read_chunk() is None
            assert transport.last_error == "Stream ended (EOF)"

    @pytest.mark.asyncio
    async def test_read_chunk_error(self):
        with patch(SERIAL_ASYNCIO) as mock_serial:
            mock_reader = AsyncMock()
            mock_reader.read = AsyncMock(side_effect=serial.SerialException("unplugged"))
            mock_serial.open_serial_connection = AsyncMock(return_value=(mock_reader, MagicMock()))

            transport = SerialCaptureTransport("/dev/serial0")
            await transport.connect()
            assert await transport.read_chunk() is None
            assert transport.last_error == "unplugged"

    @pytest.mark.asyncio
    async def test_read_chunk_when_disconnected(self):
        transport = SerialCaptureTransport("/dev/serial0")
        assert await transport.read_chunk() is None

    @pytest.mark.asyncio
    async def test_disconnect(self):
        with patch(SERIAL_ASYNCIO) as mock_serial:
            mock_writer = MagicMock()
            mock_writer.wait_closed = AsyncMock()
            mock_serial.open_serial_connection = AsyncMock(return_value=(AsyncMock(), mock_writer))

            transport = SerialCaptureTransport("/dev/serial0")
            await transport.connect()
            await transport.disconnect()

            assert transport.is_connected is False
            mock_writer.close.assert_called_once()
            mock_writer.wait_closed.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_disconnect_when_not_connected(self):
        transport = SerialCaptureTransport("/dev/serial0")
        await transport.disconnect()
        assert transport.is_connected is False

    @pytest.mark.asyncio
    async def test_async_context_manager(self):
        with patch(SERIAL_ASYNCIO) as mock_serial:
            mock_writer = MagicMock()
            mock_writer.wait_closed = AsyncMock()
            mock_serial.open_serial_connection = AsyncMock(return_value=(AsyncMock(), mock_writer))

            async with SerialCaptureTransport("/dev/serial0") as transport:
                assert transport.is_connected is True
            assert transport.is_connected is False
