"""RMC (recommended minimum data) decoder."""

from __future__ import annotations

from ..constants import (
    MAGNETIC_VARIATION_DIR,
    MODE_INDICATORS,
    NAV_WARNING,
    RMC_YEAR_BASE,
    SentenceType,
)
from ..grammar.sentence_matcher import SentenceMatcher
from ..records.nmea_types import RecommendedMinimumRecord
from .base_decoder import FieldReader, SentenceDecoder, decode_utc_time
from .coordinates import CoordinateStrategy, SignedCoordinates
from .field_codec import parse_float, parse_uint, pick_enum, split_dmy


class RecommendedMinimumDecoder(SentenceDecoder[RecommendedMinimumRecord]):
    sentence_type = SentenceType.RMC

    def __init__(
        self,
        matcher: SentenceMatcher,
        coordinates: CoordinateStrategy | None = None,
        *,
        validate_checksums: bool = False,
    ):
        super().__init__(matcher, RecommendedMinimumRecord(), validate_checksums=validate_checksums)
        self._coordinates = coordinates or SignedCoordinates()

    def _decode_fields(self, record: RecommendedMinimumRecord, fields: FieldReader) -> None:
        decode_utc_time(record, fields)

        record.nav_warn = pick_enum(fields.next(), NAV_WARNING, record.nav_warn)

        self._coordinates.apply(record, "lat", fields.next(), fields.next())
        self._coordinates.apply(record, "lon", fields.next(), fields.next())

        record.speed_kt = parse_float(fields.next()) or 0.0
        record.course_t = parse_float(fields.next()) or 0.0

        # An absent date stays all zero rather than becoming the year 2000
        day_month_year = parse_uint(fields.next())
        if day_month_year is None:
            record.utc_day = record.utc_month = record.utc_year = 0
        else:
            record.utc_day, record.utc_month, year = split_dmy(day_month_year)
            record.utc_year = year + RMC_YEAR_BASE

        record.var = parse_float(fields.next()) or 0.0
        record.var_dir = pick_enum(fields.next(), MAGNETIC_VARIATION_DIR, record.var_dir)
        record.mode = pick_enum(fields.next(), MODE_INDICATORS, record.mode)
