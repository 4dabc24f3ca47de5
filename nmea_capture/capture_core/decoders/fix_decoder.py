"""GGA (fix data) decoder."""

from __future__ import annotations

from ..constants import DISTANCE_UNITS, STATION_ID_WIDTH, SentenceType
from ..grammar.sentence_matcher import SentenceMatcher
from ..records.nmea_types import FixRecord
from .base_decoder import FieldReader, SentenceDecoder, decode_utc_time
from .coordinates import CoordinateStrategy, SignedCoordinates
from .field_codec import copy_text, parse_age, parse_float, parse_uint, pick_enum


class FixDecoder(SentenceDecoder[FixRecord]):
    sentence_type = SentenceType.GGA

    def __init__(
        self,
        matcher: SentenceMatcher,
        coordinates: CoordinateStrategy | None = None,
        *,
        validate_checksums: bool = False,
    ):
        super().__init__(matcher, FixRecord(), validate_checksums=validate_checksums)
        self._coordinates = coordinates or SignedCoordinates()

    def _decode_fields(self, record: FixRecord, fields: FieldReader) -> None:
        decode_utc_time(record, fields)

        self._coordinates.apply(record, "lat", fields.next(), fields.next())
        self._coordinates.apply(record, "lon", fields.next(), fields.next())

        record.quality = parse_uint(fields.next()) or 0
        record.num_sats = parse_uint(fields.next()) or 0
        record.hdop = parse_float(fields.next()) or 0.0

        record.alt = parse_float(fields.next()) or 0.0
        record.alt_unit = pick_enum(fields.next(), DISTANCE_UNITS, record.alt_unit)

        record.geo = parse_float(fields.next()) or 0.0
        record.geo_unit = pick_enum(fields.next(), DISTANCE_UNITS, record.geo_unit)

        record.aoc = parse_age(fields.next())
        record.station = copy_text(fields.next(), STATION_ID_WIDTH)
