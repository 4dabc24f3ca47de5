"""Typed configuration for the capture engine and its serial adapter."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Optional

from nmea_capture.core.config_loader import ConfigLoader, default_config_path
from nmea_capture.core.logging_utils import get_module_logger

from .constants import (
    ALL_SENTENCE_TYPES,
    DEFAULT_BAUD_RATE,
    DEFAULT_BUFFER_CAPACITY,
    DEFAULT_MIN_IDLE_MS,
    DEFAULT_POLL_INTERVAL_MS,
    DEFAULT_RECONNECT_DELAY,
    DEFAULT_SERIAL_PORT,
    DEFAULT_TALKERS,
    MIN_BUFFER_CAPACITY,
    CoordinateConvention,
    FlushPolicyMode,
    SentenceType,
)

logger = get_module_logger("CaptureConfig")

# Raw config.txt defaults; list-valued keys are comma separated strings.
DEFAULTS = {
    "buffer_capacity": DEFAULT_BUFFER_CAPACITY,
    "min_idle_ms": DEFAULT_MIN_IDLE_MS,
    "flush_policy": FlushPolicyMode.IDLE.value,
    "coordinate_convention": CoordinateConvention.SIGNED.value,
    "consume_matches": True,
    "sentences": ",".join(t.value for t in ALL_SENTENCE_TYPES),
    "talkers": ",".join(DEFAULT_TALKERS),
    "validate_checksums": False,
    "serial_port": DEFAULT_SERIAL_PORT,
    "baud_rate": DEFAULT_BAUD_RATE,
    "poll_interval_ms": DEFAULT_POLL_INTERVAL_MS,
    "reconnect_delay_s": DEFAULT_RECONNECT_DELAY,
    "log_level": "info",
    "log_file": "",
}


def _split_list(value: Any) -> list[str]:
    if isinstance(value, str):
        items: Iterable[Any] = value.split(",")
    else:
        items = value
    names = (item.value if isinstance(item, Enum) else str(item) for item in items)
    return [name.strip().upper() for name in names if name.strip()]


def _enum_value(value: Any) -> Any:
    return value.strip().lower() if isinstance(value, str) and not isinstance(value, Enum) else value


def parse_sentence_types(value: Any) -> frozenset[SentenceType]:
    """Parse ``"GGA,RMC"`` (or an iterable of names/members) into a set."""
    result = set()
    for name in _split_list(value):
        try:
            result.add(SentenceType(name))
        except ValueError:
            raise ValueError(f"Unknown sentence type '{name}'") from None
    return frozenset(result)


def parse_talkers(value: Any) -> tuple[str, ...]:
    talkers = tuple(dict.fromkeys(_split_list(value)))
    for talker in talkers:
        if len(talker) != 2 or not talker.isalnum():
            raise ValueError(f"Talker ID must be two alphanumeric characters, got '{talker}'")
    return talkers or DEFAULT_TALKERS


@dataclass(slots=True)
class CaptureConfig:
    """Configuration resolved once when the engine is constructed."""

    # Capture engine
    buffer_capacity: int = DEFAULT_BUFFER_CAPACITY
    min_idle_ms: int = DEFAULT_MIN_IDLE_MS
    flush_policy: FlushPolicyMode = FlushPolicyMode.IDLE
    coordinate_convention: CoordinateConvention = CoordinateConvention.SIGNED
    consume_matches: bool = True
    sentences: frozenset[SentenceType] = field(
        default_factory=lambda: frozenset(ALL_SENTENCE_TYPES)
    )
    talkers: tuple[str, ...] = DEFAULT_TALKERS
    validate_checksums: bool = False

    # Serial adapter
    serial_port: str = DEFAULT_SERIAL_PORT
    baud_rate: int = DEFAULT_BAUD_RATE
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    reconnect_delay_s: float = DEFAULT_RECONNECT_DELAY

    # Logging
    log_level: str = "info"
    log_file: str = ""

    def __post_init__(self) -> None:
        self.buffer_capacity = int(self.buffer_capacity)
        if self.buffer_capacity < MIN_BUFFER_CAPACITY:
            raise ValueError(
                f"buffer_capacity must be at least {MIN_BUFFER_CAPACITY}, got {self.buffer_capacity}"
            )
        self.min_idle_ms = max(0, int(self.min_idle_ms))
        self.flush_policy = FlushPolicyMode(_enum_value(self.flush_policy))
        self.coordinate_convention = CoordinateConvention(_enum_value(self.coordinate_convention))
        self.sentences = parse_sentence_types(self.sentences)
        self.talkers = parse_talkers(self.talkers)
        self.poll_interval_ms = max(1, int(self.poll_interval_ms))

    def is_enabled(self, sentence_type: SentenceType) -> bool:
        return sentence_type in self.sentences

    @classmethod
    def from_dict(cls, values: dict[str, Any]) -> "CaptureConfig":
        """Build a config from loose values, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            logger.debug("Ignoring unknown config keys: %s", ", ".join(unknown))
        return cls(**{key: value for key, value in values.items() if key in known})

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "CaptureConfig":
        """Load config.txt (the packaged one by default) over the defaults."""
        path = config_path if config_path is not None else default_config_path()
        return cls.from_dict(ConfigLoader.load(path, defaults=DEFAULTS, strict=True))

    def apply_args_override(self, args: Any) -> "CaptureConfig":
        """Return a copy with any non-None CLI argument values applied."""
        overrides = {}
        for f in fields(self):
            value = getattr(args, f.name, None)
            if value is not None:
                overrides[f.name] = value
        return replace(self, **overrides) if overrides else self

    def to_dict(self) -> dict[str, Any]:
        """Export as plain config.txt style values."""
        return {
            "buffer_capacity": self.buffer_capacity,
            "min_idle_ms": self.min_idle_ms,
            "flush_policy": self.flush_policy.value,
            "coordinate_convention": self.coordinate_convention.value,
            "consume_matches": self.consume_matches,
            "sentences": ",".join(t.value for t in ALL_SENTENCE_TYPES if t in self.sentences),
            "talkers": ",".join(self.talkers),
            "validate_checksums": self.validate_checksums,
            "serial_port": self.serial_port,
            "baud_rate": self.baud_rate,
            "poll_interval_ms": self.poll_interval_ms,
            "reconnect_delay_s": self.reconnect_delay_s,
            "log_level": self.log_level,
            "log_file": self.log_file,
        }
