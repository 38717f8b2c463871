"""Logging setup for the shortlinks logger tree."""

import logging
import sys
from typing import List, Optional, TextIO

LOGGER_NAME = "shortlinks"

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
    '"logger": "%(name)s", "message": "%(message)s"}'
)


def _formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return logging.Formatter(JSON_FORMAT)
    return logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
    name: str = LOGGER_NAME,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Configure a logger, replacing any handlers it already has.

    Child loggers (``shortlinks.store``, ``shortlinks.web`` and so on)
    inherit the handlers through propagation.

    Args:
        level: Logging level name; unknown names fall back to INFO
        log_file: Also write to this file when given
        json_format: Emit one JSON-shaped object per line
        name: Logger to configure
        stream: Console stream, stdout if not given

    Returns:
        The configured logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handlers: List[logging.Handler] = [logging.StreamHandler(stream or sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    formatter = _formatter(json_format)
    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
