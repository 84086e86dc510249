"""
Logging setup for processes embedding the grading engine.

Library modules only use loguru's `logger`; sinks are installed here, once,
by whoever owns the process.
"""

import sys

from loguru import logger

from config import get_settings

LOG_FORMAT = "<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {name}:{line} | {message}"


def configure_logging(level: str | None = None, log_file: str | None = None) -> None:
    """Replace loguru sinks with a stderr sink (and an optional rotating file)."""
    settings = get_settings()
    level = level or settings.log_level
    log_file = log_file or settings.log_file

    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)
    if log_file:
        logger.add(log_file, level=level, rotation="10 MB", retention=5, encoding="utf-8")
