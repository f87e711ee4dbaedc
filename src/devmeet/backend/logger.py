"""Logging configuration for the backend"""
import logging
import sys
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s - %(levelname)s - %(name)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: Optional[int | str]) -> int:
    if level is None:
        return logging.INFO
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def setup_logger(
    name: str,
    level: Optional[int | str] = None,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """Setup a logger with consistent formatting

    Args:
        name: Logger name (typically the package name)
        level: Logging level or level name (defaults to INFO)
        format_string: Custom format string

    Returns:
        Configured logger instance
    """
    level = _resolve_level(level)
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid duplicate handlers
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(
            logging.Formatter(format_string or DEFAULT_FORMAT, datefmt=DATE_FORMAT)
        )
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a module logger

    Module loggers live under the ``devmeet`` hierarchy and propagate to the
    handler installed by ``setup_logger("devmeet")``.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
