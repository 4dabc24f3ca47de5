"""Byte transports feeding the capture engine."""

from .base_transport import BaseByteTransport
from .serial_transport import SerialCaptureTransport

__all__ = ["BaseByteTransport", "SerialCaptureTransport"]
