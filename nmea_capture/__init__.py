"""Byte-stream NMEA-0183 sentence capture and field decoding."""

from nmea_capture.capture_core import (
    CaptureConfig,
    CaptureHandler,
    NMEACaptureEngine,
    SentenceType,
    SerialCaptureTransport,
)

__version__ = "0.1.0"

__all__ = [
    "CaptureConfig",
    "CaptureHandler",
    "NMEACaptureEngine",
    "SentenceType",
    "SerialCaptureTransport",
]
