"""Logging setup for processes embedding the engine."""

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(debug: bool = False, log_file: str | Path | None = None) -> logging.Logger:
    """
    Configure the ``flatdata`` logger.

    The library itself never calls this; modules only create loggers with
    ``logging.getLogger(__name__)``.

    Args:
        debug: Log at DEBUG instead of INFO.
        log_file: Optional file to mirror log output to.

    Returns:
        The configured package logger.
    """
    log_level = logging.DEBUG if debug else logging.INFO

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logger = logging.getLogger("flatdata")
    logger.setLevel(log_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
