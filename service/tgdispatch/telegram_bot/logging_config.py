"""
Logging configuration for the dispatch engine.
"""

import logging
import sys

LOGGER_NAME = "tgdispatch"


def setup_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Setup logging with proper format and handlers."""

    # Create logger
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # Console handler passes everything; the logger level does the filtering
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        '[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    handler.setFormatter(formatter)

    logger.addHandler(handler)

    # Prevent propagation to root logger
    logger.propagate = False

    return logger


def set_log_level(level: int | str) -> None:
    """Change the level of the shared bot logger (e.g. from settings)."""
    if isinstance(level, str):
        level = level.upper()
    bot_logger.setLevel(level)


# Global logger instance
bot_logger = setup_logging()
