"""Decoded record types."""

from .nmea_types import (
    CourseSpeedRecord,
    FixRecord,
    NMEARecord,
    RecommendedMinimumRecord,
    TimeDateRecord,
)

__all__ = [
    "NMEARecord",
    "FixRecord",
    "RecommendedMinimumRecord",
    "CourseSpeedRecord",
    "TimeDateRecord",
]
