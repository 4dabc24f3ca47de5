"""Byte capture buffer."""

from .capture_buffer import CaptureBuffer

__all__ = ["CaptureBuffer"]
