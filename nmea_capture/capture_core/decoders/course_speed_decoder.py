"""VTG (course over ground and ground speed) decoder."""

from __future__ import annotations

from ..constants import MODE_INDICATORS, SentenceType
from ..grammar.sentence_matcher import SentenceMatcher
from ..records.nmea_types import CourseSpeedRecord
from .base_decoder import FieldReader, SentenceDecoder
from .field_codec import parse_float, pick_enum

_TRUE = frozenset("T")
_MAGNETIC = frozenset("M")
_KNOTS = frozenset("N")
_KMH = frozenset("K")


class CourseSpeedDecoder(SentenceDecoder[CourseSpeedRecord]):
    sentence_type = SentenceType.VTG

    def __init__(self, matcher: SentenceMatcher, *, validate_checksums: bool = False):
        super().__init__(matcher, CourseSpeedRecord(), validate_checksums=validate_checksums)

    def _decode_fields(self, record: CourseSpeedRecord, fields: FieldReader) -> None:
        record.course_t = parse_float(fields.next()) or 0.0
        record.course_t_c = pick_enum(fields.next(), _TRUE, record.course_t_c)

        record.course_m = parse_float(fields.next()) or 0.0
        record.course_m_c = pick_enum(fields.next(), _MAGNETIC, record.course_m_c)

        record.speed_kt = parse_float(fields.next()) or 0.0
        record.speed_kt_c = pick_enum(fields.next(), _KNOTS, record.speed_kt_c)

        record.speed_km = parse_float(fields.next()) or 0.0
        record.speed_km_c = pick_enum(fields.next(), _KMH, record.speed_km_c)

        record.mode = pick_enum(fields.next(), MODE_INDICATORS, record.mode)
