"""Unit tests for the flush policy and the capture engine."""

import threading
from unittest.mock import MagicMock

import pytest

from nmea_capture.capture_core.config import CaptureConfig
from nmea_capture.capture_core.constants import FlushPolicyMode, SentenceType
from nmea_capture.capture_core.engine import NMEACaptureEngine
from nmea_capture.capture_core.flush_policy import FlushPolicy, FlushReason

from tests.infrastructure.fixtures import (
    GGA_BAD_CHECKSUM,
    GGA_REFERENCE,
    GNGGA_REFERENCE,
    RECEIVER_BURST,
    RMC_REFERENCE,
    VTG_REFERENCE,
    ZDA_REFERENCE,
)
from tests.infrastructure.mocks.serial_mocks import generate_gga


def make_engine(clock, **overrides) -> NMEACaptureEngine:
    return NMEACaptureEngine(CaptureConfig(**overrides), clock=clock)


class TestFlushPolicy:
    """Test the flush decision table."""

    def test_saturated_always_flushes(self):
        policy = FlushPolicy(FlushPolicyMode.IDLE, 50)
        assert policy.evaluate(saturated=True, attempted=True, matched=True, idle_ms=0) is FlushReason.SATURATED

    def test_match_never_flushes(self):
        policy = FlushPolicy(FlushPolicyMode.IMMEDIATE)
        assert policy.evaluate(saturated=False, attempted=True, matched=True, idle_ms=1000) is None

    def test_empty_buffer_never_flushes(self):
        policy = FlushPolicy(FlushPolicyMode.IMMEDIATE)
        assert policy.evaluate(saturated=False, attempted=False, matched=False, idle_ms=1000) is None

    def test_immediate_ignores_idle_time(self):
        policy = FlushPolicy(FlushPolicyMode.IMMEDIATE, 50)
        assert policy.evaluate(saturated=False, attempted=True, matched=False, idle_ms=0) is FlushReason.NO_MATCH

    @pytest.mark.parametrize("idle_ms,expected", [(0, None), (49, None), (50, FlushReason.NO_MATCH)])
    def test_idle_threshold(self, idle_ms, expected):
        policy = FlushPolicy(FlushPolicyMode.IDLE, 50)
        assert policy.evaluate(saturated=False, attempted=True, matched=False, idle_ms=idle_ms) is expected


class TestEngineDecoding:
    """Test processing passes."""

    def test_reference_fix(self, clock):
        """Test the reference GGA sentence decodes end to end."""
        engine = make_engine(clock)
        engine.feed(GGA_REFERENCE + b"\r\n")

        assert engine.process() == [SentenceType.GGA]
        fix = engine.get_fix()
        assert fix.lat == pytest.approx(48.1173, abs=1e-4)
        assert fix.lon == pytest.approx(11.516667, abs=1e-4)
        assert fix.quality == 1
        assert fix.num_sats == 8
        assert fix.updated_at == clock.now

    def test_back_to_back_sentences_decode_in_one_pass(self, clock):
        """Test every sentence type in one snapshot is decoded by a single pass."""
        engine = make_engine(clock)
        engine.feed(RECEIVER_BURST)

        decoded = engine.process()
        assert decoded == [SentenceType.GGA, SentenceType.RMC, SentenceType.VTG, SentenceType.ZDA]
        assert engine.get_recommended_minimum().speed_kt == pytest.approx(22.4)
        assert engine.get_course_speed().speed_km == pytest.approx(10.2)
        assert engine.get_time_date().utc_year == 2002

    def test_records_are_copies(self, clock):
        """Test callers cannot modify the engine's records."""
        engine = make_engine(clock)
        engine.feed(GGA_REFERENCE)
        engine.process()

        fix = engine.get_fix()
        fix.lat = 0.0
        assert engine.get_fix().lat != 0.0

    def test_records_before_first_decode(self, clock):
        engine = make_engine(clock)
        fix = engine.get_fix()
        assert fix is not None
        assert fix.updated_at is None
        assert not fix.has_data

    def test_disabled_types_return_none(self, clock):
        """Test disabled sentence types have no decoder and no record."""
        engine = make_engine(clock, sentences="GGA")
        engine.feed(GGA_REFERENCE + b"\r\n" + RMC_REFERENCE + b"\r\n")

        assert engine.enabled_types == (SentenceType.GGA,)
        assert engine.process() == [SentenceType.GGA]
        assert engine.get_recommended_minimum() is None
        assert engine.get_course_speed() is None
        assert engine.get_time_date() is None

    def test_talkers(self, clock):
        engine = make_engine(clock, talkers="GP,GN")
        engine.feed(GNGGA_REFERENCE)
        assert engine.process() == [SentenceType.GGA]

    def test_checksum_validation(self, clock):
        """Test a corrupted sentence is rejected when validation is on."""
        engine = make_engine(clock, validate_checksums=True, flush_policy="immediate")
        engine.feed(GGA_BAD_CHECKSUM)

        assert engine.process() == []
        assert engine.get_fix().updated_at is None
        assert engine.buffer.is_empty


class TestEngineConsumption:
    """Test what happens to matched bytes."""

    def test_consume_keeps_trailing_partial(self, clock):
        """Test the matched prefix is dropped and a partial sentence kept."""
        engine = make_engine(clock)
        engine.feed(GGA_REFERENCE + b"\r\n$GPRM")

        engine.process()
        assert engine.buffer.snapshot() == b"\r\n$GPRM"

        engine.feed(RMC_REFERENCE[len(b"$GPRM"):])
        assert engine.process() == [SentenceType.RMC]

    def test_consumed_sentence_not_decoded_twice(self, clock):
        engine = make_engine(clock)
        engine.feed(GGA_REFERENCE)

        assert engine.process() == [SentenceType.GGA]
        assert engine.buffer.is_empty
        assert engine.process() == []

    def test_repeated_type_keeps_newest(self, clock):
        """Test an older and a newer sentence of one type both get consumed, newest decoded."""
        engine = make_engine(clock)
        engine.feed(
            generate_gga(time_str="120000") + b"\r\n"
            + generate_gga(time_str="120001") + b"\r\n"
            + RMC_REFERENCE + b"\r\n"
        )

        assert engine.process() == [SentenceType.GGA, SentenceType.RMC]
        assert engine.get_fix().utc_s == 1
        assert engine.buffer.snapshot() == b"\r\n"
        assert engine.process() == []
        assert engine.get_fix().utc_s == 1

    def test_repeated_type_skips_newer_bad_checksum(self, clock):
        engine = make_engine(clock, validate_checksums=True)
        engine.feed(generate_gga(time_str="120000") + b"\r\n" + GGA_BAD_CHECKSUM)

        assert engine.process() == [SentenceType.GGA]
        fix = engine.get_fix()
        assert fix.utc_h == 12 and fix.utc_m == 0 and fix.utc_s == 0
        assert fix.checksum_valid is True
        assert engine.buffer.snapshot() == b"\r\n" + GGA_BAD_CHECKSUM

    def test_retain_rematches_same_sentence(self, clock):
        """Test that with consumption off a sentence is decoded again each pass."""
        engine = make_engine(clock, consume_matches=False)
        engine.feed(GGA_REFERENCE)

        assert engine.process() == [SentenceType.GGA]
        clock.advance(100)
        assert engine.process() == [SentenceType.GGA]
        assert engine.get_fix().updated_at == clock.now
        assert engine.buffer.snapshot() == GGA_REFERENCE


class TestEngineFlush:
    """Test flushing of unmatched and saturated buffers."""

    def test_saturation_flushes_regardless_of_idle(self, clock):
        engine = make_engine(clock, buffer_capacity=32)
        engine.feed(b"x" * 40)

        assert engine.buffer.is_saturated
        assert engine.buffer.dropped_bytes == 9
        assert engine.process(now=clock.now) == []
        assert engine.buffer.is_empty
        assert engine.buffer.last_update == clock.now
        assert engine.flushes == 1

    def test_partial_sentence_survives_until_idle(self, clock):
        """Test an incomplete sentence is not flushed while bytes still arrive."""
        engine = make_engine(clock, min_idle_ms=50)
        half = len(GGA_REFERENCE) // 2
        engine.feed(GGA_REFERENCE[:half])

        clock.advance(10)
        assert engine.process() == []
        assert len(engine.buffer) == half

        engine.feed(GGA_REFERENCE[half:])
        assert engine.process() == [SentenceType.GGA]

    def test_garbage_flushed_after_idle_then_recovers(self, clock):
        """Test garbage is cleared once the line is quiet and matching resumes."""
        engine = make_engine(clock, min_idle_ms=50)
        engine.feed(b"\x13\x37garbage\r\n")

        clock.advance(10)
        engine.process()
        assert not engine.buffer.is_empty

        clock.advance(50)
        assert engine.process() == []
        assert engine.buffer.is_empty
        assert engine.flushes == 1

        engine.feed(VTG_REFERENCE + b"\r\n" + ZDA_REFERENCE)
        assert engine.process() == [SentenceType.VTG, SentenceType.ZDA]

    def test_immediate_policy_flushes_at_once(self, clock):
        engine = make_engine(clock, flush_policy="immediate")
        engine.feed(b"$GPGGA,1235")

        assert engine.process() == []
        assert engine.buffer.is_empty

    def test_empty_buffer_is_not_flushed(self, clock):
        engine = make_engine(clock, flush_policy="immediate")
        clock.advance(500)
        assert engine.process() == []
        assert engine.flushes == 0

    def test_arbitrary_bytes_never_overrun(self, clock):
        """Test every byte value, NUL and non-ASCII included, is absorbed safely."""
        engine = make_engine(clock, buffer_capacity=64, flush_policy="immediate")
        for _ in range(3):
            engine.feed(bytes(range(256)))
            assert engine.buffer.cursor <= engine.buffer.capacity - 1
            engine.process()
            assert engine.buffer.is_empty

        engine.feed(b"\xff\xfe" + GGA_REFERENCE)
        assert engine.process() == [SentenceType.GGA]

    def test_no_decoders_enabled(self, clock):
        """Test that with nothing enabled the buffer only clears on saturation."""
        engine = make_engine(clock, sentences="", flush_policy="immediate")
        engine.feed(GGA_REFERENCE)
        assert engine.process() == []
        assert engine.buffer.snapshot() == GGA_REFERENCE


class TestEngineHooks:
    """Test the intake hook and clock injection."""

    def test_request_next_byte_called(self, clock):
        """Test the hook fires after every byte and every pass."""
        hook = MagicMock()
        engine = NMEACaptureEngine(CaptureConfig(), clock=clock, request_next_byte=hook)

        engine.feed(b"ab")
        assert hook.call_count == 2
        engine.process()
        assert hook.call_count == 3

    def test_bytes_stamped_with_clock(self, clock):
        engine = make_engine(clock)
        clock.advance(25)
        engine.on_byte_received(ord("$"))
        assert engine.buffer.last_update == clock.now

    def test_explicit_now(self, clock):
        engine = make_engine(clock)
        engine.feed(GGA_REFERENCE)
        engine.process(now=424242)
        assert engine.get_fix().updated_at == 424242


class TestEngineConcurrency:
    """Test byte intake from another thread while passes run."""

    def test_producer_thread_during_processing(self, clock):
        """Test a feeding thread and processing passes share the buffer safely."""
        engine = make_engine(clock)
        errors = []

        def produce():
            try:
                for _ in range(200):
                    engine.feed(RECEIVER_BURST)
            except Exception as e:
                errors.append(e)

        producer = threading.Thread(target=produce)
        decoded = set()
        producer.start()
        while producer.is_alive():
            decoded.update(engine.process())
            assert engine.buffer.cursor <= engine.buffer.capacity - 1
        producer.join()
        decoded.update(engine.process())

        assert errors == []
        assert SentenceType.GGA in decoded
        assert engine.buffer.cursor <= engine.buffer.capacity - 1

        engine.reset()
        engine.feed(RECEIVER_BURST)
        assert engine.process() == [SentenceType.GGA, SentenceType.RMC, SentenceType.VTG, SentenceType.ZDA]
