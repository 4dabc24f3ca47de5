"""Asyncio handlers that run the capture engine against a transport."""

from .capture_handler import CaptureHandler

__all__ = ["CaptureHandler"]
