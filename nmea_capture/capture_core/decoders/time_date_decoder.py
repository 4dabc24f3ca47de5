"""ZDA (time and date) decoder."""

from __future__ import annotations

from ..constants import SentenceType
from ..grammar.sentence_matcher import SentenceMatcher
from ..records.nmea_types import TimeDateRecord
from .base_decoder import FieldReader, SentenceDecoder, decode_utc_time
from .field_codec import parse_int, parse_uint


class TimeDateDecoder(SentenceDecoder[TimeDateRecord]):
    sentence_type = SentenceType.ZDA

    def __init__(self, matcher: SentenceMatcher, *, validate_checksums: bool = False):
        super().__init__(matcher, TimeDateRecord(), validate_checksums=validate_checksums)

    def _decode_fields(self, record: TimeDateRecord, fields: FieldReader) -> None:
        decode_utc_time(record, fields)

        record.utc_day = parse_uint(fields.next()) or 0
        record.utc_month = parse_uint(fields.next()) or 0
        record.utc_year = parse_uint(fields.next()) or 0

        record.utc_local_hours = parse_int(fields.next()) or 0
        record.utc_local_minutes = parse_int(fields.next()) or 0
