"""
Centralized Logging Module for xliffkit.

Every module gets its logger through get_logger(__name__). The package is a
library, so nothing is printed unless the host application calls
configure_logging(), which attaches:
- Console (stdout, for development/debugging)
- File (optional, for post-mortem analysis of conversion runs)
"""
import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "xliffkit"

# Formatter with timestamp, level, module, and message
LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(funcName)s() | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """
    Returns the logger for a module of this package.

    Args:
        name: Usually __name__ of the calling module.
    """
    return logging.getLogger(name)


def configure_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Attaches console (and optionally file) output to the package logger.

    Safe to call more than once: handlers installed by an earlier call are
    replaced, never duplicated.

    Args:
        level: Threshold for the console handler.
        log_file: Path of a log file capturing everything (DEBUG and above).

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)

    # Avoid adding handlers multiple times
    for handler in list(logger.handlers):
        if getattr(handler, "_xliffkit_handler", False):
            logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    logger.setLevel(logging.DEBUG if log_file else level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    console_handler._xliffkit_handler = True
    logger.addHandler(console_handler)

    if log_file:
        # File Handler - captures everything (DEBUG and above)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        file_handler._xliffkit_handler = True
        logger.addHandler(file_handler)

    return logger
