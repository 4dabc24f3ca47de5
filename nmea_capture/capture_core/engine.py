"""Capture engine tying the buffer, grammars, decoders and flush policy together.

Bytes come in one at a time through :meth:`NMEACaptureEngine.on_byte_received`
(or in chunks through :meth:`~NMEACaptureEngine.feed`) and land in the
capture buffer. A periodic :meth:`~NMEACaptureEngine.process` pass looks for
every enabled sentence type in a snapshot of the buffer, decodes whatever it
finds into the per-type records, then either consumes the matched prefix or
clears the buffer according to the flush policy.
"""

from __future__ import annotations

import time
from typing import Callable, Dict, Optional

from nmea_capture.core.logging_utils import get_module_logger

from .buffer import CaptureBuffer
from .config import CaptureConfig
from .constants import ALL_SENTENCE_TYPES, SentenceType
from .decoders import (
    CourseSpeedDecoder,
    DecodeResult,
    FixDecoder,
    RecommendedMinimumDecoder,
    SentenceDecoder,
    TimeDateDecoder,
    coordinate_strategy,
)
from .flush_policy import FlushPolicy, FlushReason
from .grammar import SentenceMatcher
from .records import (
    CourseSpeedRecord,
    FixRecord,
    RecommendedMinimumRecord,
    TimeDateRecord,
)

logger = get_module_logger("CaptureEngine")

Clock = Callable[[], int]


def monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


class NMEACaptureEngine:
    """Frames and decodes NMEA sentences from a raw receiver byte stream.

    Args:
        config: Engine settings; defaults to :class:`CaptureConfig` defaults.
        clock: Millisecond tick source used to stamp bytes and decodes.
        request_next_byte: Called after every received byte and every pass,
            for transports that must be re-armed to deliver the next byte.
    """

    def __init__(
        self,
        config: Optional[CaptureConfig] = None,
        clock: Optional[Clock] = None,
        request_next_byte: Optional[Callable[[], None]] = None,
    ):
        self.config = config or CaptureConfig()
        self._clock = clock or monotonic_ms
        self._request_next_byte = request_next_byte

        self.buffer = CaptureBuffer(self.config.buffer_capacity, now=self._clock())
        self.flush_policy = FlushPolicy(self.config.flush_policy, self.config.min_idle_ms)
        self.matcher = SentenceMatcher(self.config.talkers)

        coordinates = coordinate_strategy(self.config.coordinate_convention)
        validate = self.config.validate_checksums
        factories = {
            SentenceType.GGA: lambda: FixDecoder(self.matcher, coordinates, validate_checksums=validate),
            SentenceType.RMC: lambda: RecommendedMinimumDecoder(
                self.matcher, coordinates, validate_checksums=validate
            ),
            SentenceType.VTG: lambda: CourseSpeedDecoder(self.matcher, validate_checksums=validate),
            SentenceType.ZDA: lambda: TimeDateDecoder(self.matcher, validate_checksums=validate),
        }
        self._decoders: Dict[SentenceType, SentenceDecoder] = {
            sentence_type: factories[sentence_type]()
            for sentence_type in ALL_SENTENCE_TYPES
            if self.config.is_enabled(sentence_type)
        }

        self.passes = 0
        self.flushes = 0

        logger.debug(
            "Engine ready: types=%s capacity=%d %r consume=%s",
            ",".join(t.value for t in self._decoders),
            self.buffer.capacity,
            self.flush_policy,
            self.config.consume_matches,
        )

    @property
    def enabled_types(self) -> tuple[SentenceType, ...]:
        return tuple(self._decoders)

    def now(self) -> int:
        return self._clock()

    # ------------------------------------------------------------------
    # Byte intake

    def on_byte_received(self, byte: int) -> None:
        self.buffer.push(byte, self._clock())
        self._request_next()

    def feed(self, data: bytes) -> None:
        for byte in data:
            self.on_byte_received(byte)

    # ------------------------------------------------------------------
    # Processing

    def process(self, now: Optional[int] = None) -> list[SentenceType]:
        """Run one matching pass; returns the sentence types decoded."""
        if now is None:
            now = self._clock()
        self.passes += 1

        snapshot = self.buffer.snapshot()
        saturated = len(snapshot) >= self.buffer.capacity - 1
        attempted = bool(snapshot) and bool(self._decoders)

        decoded: list[SentenceType] = []
        furthest_end = 0
        if attempted:
            # Every decoder runs, even after an earlier one matched
            for sentence_type, decoder in self._decoders.items():
                if decoder.decode(snapshot, now) is DecodeResult.OK:
                    decoded.append(sentence_type)
                    furthest_end = max(furthest_end, decoder.last_match.end)
                    logger.debug("Decoded %s: %r", sentence_type.value, decoder.last_match.sentence)

        reason = self.flush_policy.evaluate(
            saturated=saturated,
            attempted=attempted,
            matched=bool(decoded),
            idle_ms=now - self.buffer.last_update,
        )
        if reason is not None:
            self.buffer.discard(len(snapshot), now)
            self.flushes += 1
            if reason is FlushReason.SATURATED:
                logger.debug("Buffer saturated, flushed %d bytes", len(snapshot))
            else:
                logger.debug("No sentence in %d bytes, flushed", len(snapshot))
        elif decoded and self.config.consume_matches:
            self.buffer.discard(furthest_end, now)

        self._request_next()
        return decoded

    def _request_next(self) -> None:
        if self._request_next_byte is not None:
            self._request_next_byte()

    # ------------------------------------------------------------------
    # Record access

    def _record(self, sentence_type: SentenceType):
        decoder = self._decoders.get(sentence_type)
        return decoder.record.copy() if decoder is not None else None

    def get_record(self, sentence_type: SentenceType):
        """Copy of the latest record for ``sentence_type``, None if disabled."""
        return self._record(SentenceType(sentence_type))

    def get_fix(self) -> Optional[FixRecord]:
        return self._record(SentenceType.GGA)

    def get_recommended_minimum(self) -> Optional[RecommendedMinimumRecord]:
        return self._record(SentenceType.RMC)

    def get_course_speed(self) -> Optional[CourseSpeedRecord]:
        return self._record(SentenceType.VTG)

    def get_time_date(self) -> Optional[TimeDateRecord]:
        return self._record(SentenceType.ZDA)

    def reset(self) -> None:
        """Clear the capture buffer; decoded records are kept."""
        self.buffer.reset(self._clock())
