"""Loguru setup for the tracker service.

Console output always; a rotating file sink only when LOG_FILE is set.
Defaults come from `settings` so `setup_logger()` with no arguments matches
the deployed configuration.
"""

import sys
from pathlib import Path

from loguru import logger

from app.config import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logger(
    level: str | None = None,
    log_file: str | None = None,
    rotation: str | None = None,
    retention: str | None = None,
) -> Path | None:
    """Replace loguru's default sink. Returns the log file path when one is configured."""
    level = (level or settings.log_level).upper()
    log_file = log_file or settings.log_file

    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if not log_file:
        logger.debug(f"Logging to console at {level}")
        return None

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_path,
        format=FILE_FORMAT,
        level=level,
        rotation=rotation or settings.log_rotation,
        retention=retention or settings.log_retention,
        compression="zip",
    )
    logger.debug(f"Logging to console and {log_path} at {level}")
    return log_path
