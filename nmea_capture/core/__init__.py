"""Shared infrastructure: logging, config files, reconnection."""

from .logging_utils import StructuredLogger, ensure_structured_logger, get_module_logger
from .logging_config import configure_logging
from .config_loader import ConfigLoader
from .reconnect import ReconnectConfig, ReconnectingMixin, ReconnectState

__all__ = [
    "StructuredLogger",
    "ensure_structured_logger",
    "get_module_logger",
    "configure_logging",
    "ConfigLoader",
    "ReconnectConfig",
    "ReconnectingMixin",
    "ReconnectState",
]
