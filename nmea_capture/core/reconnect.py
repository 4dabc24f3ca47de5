"""Reconnect-with-backoff mixin for the serial capture handler."""

from __future__ import annotations

import asyncio
import random
import time
from dataclasses import dataclass
from enum import Enum

from nmea_capture.core.logging_utils import get_module_logger

logger = get_module_logger("Reconnect")


class ReconnectState(Enum):
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"
    FAILED = "failed"


@dataclass
class ReconnectConfig:
    """Backoff settings used when the receiver link drops."""

    max_consecutive_errors: int = 10
    error_backoff: float = 0.1
    max_error_backoff: float = 2.0

    max_reconnect_attempts: int = 5
    base_reconnect_delay: float = 1.0
    max_reconnect_delay: float = 30.0
    backoff_factor: float = 2.0
    jitter_factor: float = 0.1

    @classmethod
    def default(cls) -> "ReconnectConfig":
        return cls()

    def delay_for(self, attempt: int) -> float:
        """Backoff delay (seconds, with jitter) before reconnect ``attempt``."""
        delay = min(
            self.base_reconnect_delay * (self.backoff_factor ** (attempt - 1)),
            self.max_reconnect_delay,
        )
        return delay + delay * self.jitter_factor * random.random()


class ReconnectingMixin:
    """Adds bounded, exponentially backed-off reconnection to a handler.

    Subclasses call ``_init_reconnect`` from ``__init__`` and implement
    ``_attempt_reconnect``. The read loop calls
    ``_on_circuit_breaker_triggered`` when the link is lost and exits when it
    returns False.
    """

    _reconnect_config: ReconnectConfig
    _reconnect_state: ReconnectState
    _reconnect_attempt: int
    _reconnect_device_id: str

    def _init_reconnect(self, device_id: str, config: ReconnectConfig | None = None) -> None:
        self._reconnect_config = config or ReconnectConfig.default()
        self._reconnect_state = ReconnectState.CONNECTED
        self._reconnect_attempt = 0
        self._reconnect_device_id = device_id

    async def _on_circuit_breaker_triggered(self) -> bool:
        """Retry the link until it comes back or the attempts run out."""
        config = self._reconnect_config

        while self._reconnect_attempt < config.max_reconnect_attempts:
            self._reconnect_state = ReconnectState.RECONNECTING
            self._reconnect_attempt += 1
            delay = config.delay_for(self._reconnect_attempt)

            logger.info(
                "Reconnecting %s (attempt %d/%d) in %.1fs",
                self._reconnect_device_id,
                self._reconnect_attempt,
                config.max_reconnect_attempts,
                delay,
            )
            await asyncio.sleep(delay)

            start_time = time.perf_counter()
            try:
                success = await self._attempt_reconnect()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                success = False
                logger.warning(
                    "Reconnection attempt %d failed for %s: %s",
                    self._reconnect_attempt,
                    self._reconnect_device_id,
                    e,
                )

            if success:
                logger.info(
                    "Reconnected %s in %.1fms (attempt %d)",
                    self._reconnect_device_id,
                    (time.perf_counter() - start_time) * 1000,
                    self._reconnect_attempt,
                )
                self.reset_reconnect_state()
                return True

        self._reconnect_state = ReconnectState.FAILED
        logger.error(
            "Reconnection failed for %s after %d attempts - giving up",
            self._reconnect_device_id,
            self._reconnect_attempt,
        )
        return False

    async def _attempt_reconnect(self) -> bool:
        raise NotImplementedError(
            "Subclass must implement _attempt_reconnect() to use ReconnectingMixin"
        )

    @property
    def reconnect_state(self) -> ReconnectState:
        return self._reconnect_state

    @property
    def reconnect_failed(self) -> bool:
        return self._reconnect_state == ReconnectState.FAILED

    def reset_reconnect_state(self) -> None:
        self._reconnect_state = ReconnectState.CONNECTED
        self._reconnect_attempt = 0
        if hasattr(self, '_consecutive_errors'):
            self._consecutive_errors = 0
