"""Common decode flow shared by the per-sentence decoders."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Generic, Optional, TypeVar

from nmea_capture.core.logging_utils import get_module_logger

from ..checksum import validate_checksum
from ..constants import CHECKSUM_WIDTH, SentenceType
from ..grammar.sentence_matcher import SentenceMatch, SentenceMatcher
from ..records.nmea_types import NMEARecord
from .field_codec import copy_text, parse_uint, split_hms

logger = get_module_logger("Decoder")

R = TypeVar("R", bound=NMEARecord)


class DecodeResult(Enum):
    OK = "ok"
    NO_MATCH = "no_match"


class FieldReader:
    """Walks a match's field spans in declared order, skipping group 0."""

    def __init__(self, match: SentenceMatch):
        self._match = match
        self._index = 0

    @property
    def index(self) -> int:
        return self._index

    def next(self) -> bytes:
        self._index += 1
        return self._match.field(self._index)


class SentenceDecoder(ABC, Generic[R]):
    """Matches one sentence type and decodes it into its record.

    ``decode`` returns ``DecodeResult.NO_MATCH`` when the sentence is not in
    the data (or fails checksum validation, if enabled); the record is left
    exactly as it was. On a match the newest complete occurrence has every
    field written in order and ``updated_at`` stamped.
    """

    sentence_type: SentenceType

    def __init__(
        self,
        matcher: SentenceMatcher,
        record: R,
        *,
        validate_checksums: bool = False,
    ):
        self._matcher = matcher
        self._record = record
        self._validate_checksums = validate_checksums
        self.last_match: Optional[SentenceMatch] = None

    @property
    def record(self) -> R:
        return self._record

    def decode(self, data: bytes, now: int) -> DecodeResult:
        self.last_match = None
        # Newest occurrence wins when the snapshot holds several
        for match in reversed(self._matcher.match_all(data, self.sentence_type)):
            checksum_valid = validate_checksum(match.sentence)
            if self._validate_checksums and not checksum_valid:
                logger.debug(
                    "Rejected %s with bad checksum: %r",
                    self.sentence_type.value,
                    match.sentence,
                )
                continue
            self._apply(match, checksum_valid, now)
            return DecodeResult.OK
        return DecodeResult.NO_MATCH

    def _apply(self, match: SentenceMatch, checksum_valid: bool, now: int) -> None:
        record = self._record
        fields = FieldReader(match)
        self._decode_fields(record, fields)
        record.check = copy_text(fields.next(), CHECKSUM_WIDTH)
        record.checksum_valid = checksum_valid
        record.updated_at = now

        self.last_match = match

    @abstractmethod
    def _decode_fields(self, record: R, fields: FieldReader) -> None:
        """Decode every field except the trailing checksum."""


def decode_utc_time(record, fields: FieldReader) -> None:
    """Combined ``HHMMSS`` field followed by its fraction field."""
    record.utc_h, record.utc_m, record.utc_s = split_hms(parse_uint(fields.next()) or 0)
    fraction = fields.next()
    record.utc_fraction = parse_uint(fraction) or 0
    record.utc_fraction_digits = len(fraction)
