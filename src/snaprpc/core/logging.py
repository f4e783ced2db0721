"""Loguru setup for applications and the CLI; the library itself stays silent until enabled."""
from __future__ import annotations

import sys

from loguru import logger

_FORMAT = "<dim>{time:HH:mm:ss.SSS}</dim> | <level>{level: <8}</level> | <level>{message}</level>"


def configure_logging(level: str = "INFO") -> None:
    """Replace default sinks with one stderr sink at `level` and enable snaprpc logs."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=_FORMAT)
    logger.enable("snaprpc")
