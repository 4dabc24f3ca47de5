"""Capture Handler

Drives an :class:`NMEACaptureEngine` from a byte transport. A read loop
pushes every received byte into the engine; a separate poll loop runs a
processing pass every ``poll_interval_ms`` and hands each freshly decoded
record to ``data_callback``.

Lost links are recovered through ReconnectingMixin instead of ending the
read loop on the first error.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional, Set

from nmea_capture.core.logging_utils import get_module_logger
from nmea_capture.core.reconnect import ReconnectConfig, ReconnectingMixin

from ..constants import SentenceType
from ..engine import NMEACaptureEngine
from ..records import FixRecord, NMEARecord, RecommendedMinimumRecord
from ..transports import BaseByteTransport

logger = get_module_logger("CaptureHandler")

DataCallback = Callable[[SentenceType, NMEARecord], Awaitable[None]]


def _task_exception_handler(task: asyncio.Task) -> None:
    """Log exceptions from fire-and-forget callback tasks."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Unhandled exception in capture callback task: %s", exc)


class CaptureHandler(ReconnectingMixin):
    """Runs byte intake and processing passes for one receiver.

    Example:
        transport = SerialCaptureTransport("/dev/serial0", 9600)
        await transport.connect()

        handler = CaptureHandler("NMEA:serial0", transport, engine)
        handler.data_callback = on_record
        await handler.start()
        ...
        await handler.stop()
    """

    def __init__(
        self,
        device_id: str,
        transport: BaseByteTransport,
        engine: Optional[NMEACaptureEngine] = None,
        *,
        poll_interval_ms: Optional[int] = None,
        read_timeout: float = 1.0,
        reconnect_config: Optional[ReconnectConfig] = None,
    ):
        self.device_id = device_id
        self.transport = transport
        self.engine = engine or NMEACaptureEngine()
        self.poll_interval_ms = (
            poll_interval_ms if poll_interval_ms is not None else self.engine.config.poll_interval_ms
        )
        self.read_timeout = read_timeout

        self.data_callback: Optional[DataCallback] = None

        self._running = False
        self._read_task: Optional[asyncio.Task] = None
        self._poll_task: Optional[asyncio.Task] = None
        self._logged_first_fix = False

        # Used by ReconnectingMixin.reset_reconnect_state
        self._consecutive_errors = 0
        self._init_reconnect(device_id=device_id, config=reconnect_config)

        self._pending_tasks: Set[asyncio.Task] = set()

    @property
    def is_connected(self) -> bool:
        return self.transport.is_connected if self.transport else False

    @property
    def is_running(self) -> bool:
        return self._running

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start(self) -> None:
        if self._running:
            logger.warning("Handler %s already running", self.device_id)
            return

        self._running = True
        self._read_task = asyncio.create_task(self._read_loop())
        self._poll_task = asyncio.create_task(self._poll_loop())
        logger.info("Capture handler started for %s", self.device_id)

    async def stop(self) -> None:
        self._running = False

        for task in (self._read_task, self._poll_task):
            if task is None:
                continue
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._read_task = None
        self._poll_task = None

        for task in self._pending_tasks:
            if not task.done():
                task.cancel()
        self._pending_tasks.clear()

        logger.info("Capture handler stopped for %s", self.device_id)

    # =========================================================================
    # Loops
    # =========================================================================

    async def _read_loop(self) -> None:
        logger.debug("Read loop started for %s", self.device_id)
        self._consecutive_errors = 0

        while self._running:
            if not self.is_connected:
                logger.warning("Receiver %s disconnected, attempting reconnect", self.device_id)
                if not await self._on_circuit_breaker_triggered():
                    logger.error("Reconnection failed for %s - exiting read loop", self.device_id)
                    break
                continue

            try:
                chunk = await self.transport.read_chunk(timeout=self.read_timeout)
            except asyncio.CancelledError:
                break
            except Exception as e:
                chunk = None
                logger.error("Error in read loop for %s: %s", self.device_id, e)

            if chunk:
                self._consecutive_errors = 0
                self.engine.feed(chunk)
            elif chunk is None:
                if await self._on_read_error() is False:
                    break
            # Yield to the poll loop between chunks
            await asyncio.sleep(0)

        logger.debug(
            "Read loop ended for %s (running=%s, connected=%s, errors=%d, reconnect_state=%s)",
            self.device_id,
            self._running,
            self.is_connected,
            self._consecutive_errors,
            self._reconnect_state.value,
        )

    async def _on_read_error(self) -> bool:
        """Back off after a failed read; False once reconnection gives up."""
        self._consecutive_errors += 1
        config = self._reconnect_config
        if self._consecutive_errors >= config.max_consecutive_errors:
            logger.warning("Circuit breaker triggered for %s - attempting reconnection", self.device_id)
            return await self._on_circuit_breaker_triggered()

        backoff = min(
            config.error_backoff * (2 ** (self._consecutive_errors - 1)),
            config.max_error_backoff,
        )
        await asyncio.sleep(backoff)
        return True

    async def _poll_loop(self) -> None:
        interval = self.poll_interval_ms / 1000
        while self._running:
            try:
                await asyncio.sleep(interval)
            except asyncio.CancelledError:
                break
            try:
                self.process_once()
            except Exception as e:
                logger.error("Error in poll loop for %s: %s", self.device_id, e)

    def process_once(self) -> list[SentenceType]:
        """Run one processing pass and dispatch the decoded records."""
        decoded = self.engine.process()
        for sentence_type in decoded:
            record = self.engine.get_record(sentence_type)
            if record is None:
                continue
            self._log_first_fix(record)
            self._dispatch(sentence_type, record)
        return decoded

    def _log_first_fix(self, record: NMEARecord) -> None:
        if self._logged_first_fix:
            return
        if isinstance(record, (FixRecord, RecommendedMinimumRecord)) and record.has_position():
            self._logged_first_fix = True
            logger.info(
                "First fix acquired for %s: lat=%.6f, lon=%.6f",
                self.device_id,
                record.lat,
                record.lon,
            )

    def _dispatch(self, sentence_type: SentenceType, record: NMEARecord) -> None:
        if self.data_callback is None:
            return
        task = asyncio.create_task(self.data_callback(sentence_type, record))
        self._pending_tasks.add(task)
        task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._pending_tasks.discard(task)
        _task_exception_handler(task)

    # =========================================================================
    # Reconnection
    # =========================================================================

    async def _attempt_reconnect(self) -> bool:
        await self.transport.disconnect()
        # Give the OS a moment to release the port
        await asyncio.sleep(0.2)

        if await self.transport.connect():
            self.engine.reset()
            logger.info("Transport reconnected for %s", self.device_id)
            return True
        logger.warning("Transport reconnect failed for %s", self.device_id)
        return False
