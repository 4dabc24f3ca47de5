"""Logging setup for the nmea-capture command.

Decoded records go to stdout, so log output is written to stderr and, when
``log_file`` is set, to a size-rotated file. Handlers are attached to the
``nmea_capture`` logger only; embedding applications keep their root setup.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

from .logging_utils import LOGGER_NAMESPACE

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"
LOG_FILE_MAX_BYTES = 1024 * 1024
LOG_FILE_BACKUPS = 3


class _CaptureHandlerMixin:
    """Marks handlers installed here so a second call can replace them."""


class _StderrHandler(_CaptureHandlerMixin, logging.StreamHandler):
    pass


class _FileHandler(_CaptureHandlerMixin, RotatingFileHandler):
    pass


def coerce_level(level: Union[int, str]) -> int:
    """``"debug"`` -> ``logging.DEBUG``; unknown names raise ValueError."""
    if isinstance(level, str):
        value = logging.getLevelName(level.strip().upper())
        if not isinstance(value, int):
            raise ValueError(f"Unknown log level '{level}'")
        return value
    return int(level)


def configure_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    numeric_level = coerce_level(level)
    package_logger = logging.getLogger(LOGGER_NAMESPACE)
    for handler in list(package_logger.handlers):
        if isinstance(handler, _CaptureHandlerMixin):
            package_logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT, LOG_DATEFMT)
    handlers: list[logging.Handler] = [_StderrHandler(sys.stderr)]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            _FileHandler(path, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8")
        )
    for handler in handlers:
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    package_logger.setLevel(numeric_level)
    return package_logger


__all__ = ["configure_logging", "coerce_level", "LOG_FORMAT", "LOG_DATEFMT"]
