"""Command line entry point: capture NMEA sentences from a serial receiver.

Settings come from ``config.txt`` (the packaged file unless ``--config`` is
given), with command line flags taking precedence.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import signal
from pathlib import Path
from typing import Optional

from nmea_capture.capture_core import (
    CaptureConfig,
    CaptureHandler,
    CoordinateConvention,
    FlushPolicyMode,
    NMEACaptureEngine,
    SentenceType,
    SerialCaptureTransport,
)
from nmea_capture.capture_core.records import (
    CourseSpeedRecord,
    FixRecord,
    NMEARecord,
    RecommendedMinimumRecord,
    TimeDateRecord,
)
from nmea_capture.core.logging_config import configure_logging
from nmea_capture.core.logging_utils import get_module_logger
from nmea_capture.core.reconnect import ReconnectConfig

logger = get_module_logger("MainCapture")


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Capture and decode NMEA-0183 sentences from a serial receiver")
    parser.add_argument("--config", dest="config_path", type=Path, default=None,
                        help="Path to a config.txt file (defaults to the packaged one).")
    parser.add_argument("--port", dest="serial_port", default=None,
                        help="Serial device, e.g. /dev/serial0 or /dev/ttyUSB0.")
    parser.add_argument("--baud", dest="baud_rate", type=int, default=None,
                        help="Serial baud rate.")
    parser.add_argument("--sentences", default=None,
                        help="Comma separated sentence types to decode (GGA,RMC,VTG,ZDA).")
    parser.add_argument("--talkers", default=None,
                        help="Comma separated talker IDs to accept (GP,GN,...).")
    parser.add_argument("--buffer-capacity", dest="buffer_capacity", type=int, default=None,
                        help="Capture buffer size in bytes.")
    parser.add_argument("--flush-policy", dest="flush_policy", default=None,
                        choices=[mode.value for mode in FlushPolicyMode],
                        help="When to clear a buffer that matched nothing.")
    parser.add_argument("--min-idle-ms", dest="min_idle_ms", type=int, default=None,
                        help="Quiet time required before an idle flush.")
    parser.add_argument("--coordinates", dest="coordinate_convention", default=None,
                        choices=[convention.value for convention in CoordinateConvention],
                        help="Signed decimal degrees or unsigned degrees plus hemisphere.")
    parser.add_argument("--consume-matches", dest="consume_matches", default=None,
                        action=argparse.BooleanOptionalAction,
                        help="Drop matched sentences from the buffer after decoding.")
    parser.add_argument("--validate-checksums", dest="validate_checksums", default=None,
                        action=argparse.BooleanOptionalAction,
                        help="Reject sentences whose checksum does not match.")
    parser.add_argument("--poll-interval-ms", dest="poll_interval_ms", type=int, default=None,
                        help="Milliseconds between processing passes.")
    parser.add_argument("--log-level", dest="log_level", default=None,
                        help="Logging level (debug, info, warning, error).")
    parser.add_argument("--log-file", dest="log_file", default=None,
                        help="Also log to this rotating file.")
    return parser.parse_args(argv)


def format_record(sentence_type: SentenceType, record: NMEARecord) -> str:
    """One human readable line per decoded record."""
    if isinstance(record, FixRecord):
        body = (
            f"lat={record.lat:.6f} lon={record.lon:.6f} quality={record.quality} "
            f"sats={record.num_sats} hdop={record.hdop} alt={record.alt}{record.alt_unit or ''}"
        )
    elif isinstance(record, RecommendedMinimumRecord):
        body = (
            f"status={record.nav_warn or '-'} lat={record.lat:.6f} lon={record.lon:.6f} "
            f"speed={record.speed_kt}kt/{record.speed_kmh:.1f}kmh course={record.course_t} "
            f"date={record.utc_year:04d}-{record.utc_month:02d}-{record.utc_day:02d}"
        )
    elif isinstance(record, CourseSpeedRecord):
        body = f"course={record.course_t} speed={record.speed_kt}kt/{record.speed_km}kmh mode={record.mode or '-'}"
    elif isinstance(record, TimeDateRecord):
        body = (
            f"date={record.utc_year:04d}-{record.utc_month:02d}-{record.utc_day:02d} "
            f"zone={record.utc_local_hours:+03d}:{abs(record.utc_local_minutes):02d}"
        )
    else:
        body = repr(record)

    checksum = "ok" if record.checksum_valid else "bad"
    return f"{sentence_type.value} {body} *{record.check} ({checksum})"


async def _print_record(sentence_type: SentenceType, record: NMEARecord) -> None:
    print(format_record(sentence_type, record), flush=True)


def _install_signal_handlers(stop_event: asyncio.Event, loop: asyncio.AbstractEventLoop) -> None:
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, stop_event.set)


def build_handler(
    config: CaptureConfig,
    transport: SerialCaptureTransport,
    engine: NMEACaptureEngine,
) -> CaptureHandler:
    """Handler printing every record, backing off from ``reconnect_delay_s``."""
    reconnect = ReconnectConfig(
        base_reconnect_delay=config.reconnect_delay_s,
        max_reconnect_delay=max(ReconnectConfig.max_reconnect_delay, config.reconnect_delay_s),
    )
    handler = CaptureHandler(
        f"NMEA:{Path(config.serial_port).name}",
        transport,
        engine,
        reconnect_config=reconnect,
    )
    handler.data_callback = _print_record
    return handler


async def run(config: CaptureConfig) -> int:
    transport = SerialCaptureTransport(config.serial_port, config.baud_rate)
    if not await transport.connect():
        logger.error("Could not open %s: %s", config.serial_port, transport.last_error)
        return 1

    engine = NMEACaptureEngine(config)
    handler = build_handler(config, transport, engine)

    stop_event = asyncio.Event()
    _install_signal_handlers(stop_event, asyncio.get_running_loop())

    await handler.start()
    try:
        await stop_event.wait()
    finally:
        await handler.stop()
        await transport.disconnect()
        logger.info(
            "Capture finished: %d passes, %d flushes, %d bytes dropped",
            engine.passes,
            engine.flushes,
            engine.buffer.dropped_bytes,
        )
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    try:
        config = CaptureConfig.load(args.config_path).apply_args_override(args)
    except ValueError as exc:
        configure_logging()
        logger.error("Invalid configuration: %s", exc)
        return 2

    configure_logging(config.log_level, log_file=config.log_file or None)
    logger.debug("Configuration: %s", config.to_dict())

    try:
        return asyncio.run(run(config))
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    raise SystemExit(main())
