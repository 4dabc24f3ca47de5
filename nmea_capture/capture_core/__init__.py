"""NMEA capture core: byte buffer, sentence grammars, decoders and engine."""

from .buffer import CaptureBuffer
from .checksum import compute_checksum, validate_checksum, with_checksum
from .config import CaptureConfig
from .constants import CoordinateConvention, FlushPolicyMode, SentenceType
from .decoders import DecodeResult
from .engine import NMEACaptureEngine
from .flush_policy import FlushPolicy, FlushReason
from .grammar import SentenceMatch, SentenceMatcher, grammar_table
from .handlers import CaptureHandler
from .records import (
    CourseSpeedRecord,
    FixRecord,
    NMEARecord,
    RecommendedMinimumRecord,
    TimeDateRecord,
)
from .transports import BaseByteTransport, SerialCaptureTransport

__all__ = [
    "CaptureBuffer",
    "compute_checksum",
    "validate_checksum",
    "with_checksum",
    "CaptureConfig",
    "CoordinateConvention",
    "FlushPolicyMode",
    "SentenceType",
    "DecodeResult",
    "NMEACaptureEngine",
    "FlushPolicy",
    "FlushReason",
    "SentenceMatch",
    "SentenceMatcher",
    "grammar_table",
    "CaptureHandler",
    "NMEARecord",
    "FixRecord",
    "RecommendedMinimumRecord",
    "CourseSpeedRecord",
    "TimeDateRecord",
    "BaseByteTransport",
    "SerialCaptureTransport",
]
