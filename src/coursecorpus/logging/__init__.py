"""Logging helpers for the course corpus loader."""

import logging
import sys

from coursecorpus.logging.run_logger import RunLogger

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Package logger; handlers are only attached by ``setup_logging``."""
    return logging.getLogger(name or "coursecorpus")


def setup_logging(level: int = logging.INFO, stream=None) -> logging.Logger:
    """Attach a single stream handler to the package logger."""
    logger = get_logger()
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    else:
        # sys.stderr may have been replaced since the last call
        for handler in logger.handlers:
            if isinstance(handler, logging.StreamHandler):
                handler.setStream(stream or sys.stderr)
    logger.propagate = False
    return logger


__all__ = ["RunLogger", "get_logger", "setup_logging", "LOG_FORMAT"]
