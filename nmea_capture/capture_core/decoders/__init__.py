"""Per-sentence field decoders."""

from .base_decoder import DecodeResult, FieldReader, SentenceDecoder
from .coordinates import (
    CoordinateStrategy,
    HemisphereCoordinates,
    SignedCoordinates,
    coordinate_strategy,
)
from .course_speed_decoder import CourseSpeedDecoder
from .fix_decoder import FixDecoder
from .recommended_minimum_decoder import RecommendedMinimumDecoder
from .time_date_decoder import TimeDateDecoder

__all__ = [
    "DecodeResult",
    "FieldReader",
    "SentenceDecoder",
    "CoordinateStrategy",
    "HemisphereCoordinates",
    "SignedCoordinates",
    "coordinate_strategy",
    "CourseSpeedDecoder",
    "FixDecoder",
    "RecommendedMinimumDecoder",
    "TimeDateDecoder",
]
