"""
pdfh - Logger Module

This module sets up logging for the application.
"""

import logging

from pdfh.config import LOG_DATE_FORMAT, LOG_FORMAT, LOG_LEVEL, LOGGER_NAME


def setup_logger(log_level=None, log_format=None, logger_name=None):
    """Set up and configure the application logger

    Args:
        log_level: Logging level to use (default: config.LOG_LEVEL)
        log_format: Logging format string (default: config.LOG_FORMAT)
        logger_name: Name for the logger (default: config.LOGGER_NAME)

    Returns:
        A configured Logger instance
    """
    if log_level is None:
        log_level = LOG_LEVEL
    if log_format is None:
        log_format = LOG_FORMAT
    if logger_name is None:
        logger_name = LOGGER_NAME

    # basicConfig is a no-op once the root logger has handlers
    logging.basicConfig(level=log_level, format=log_format, datefmt=LOG_DATE_FORMAT)

    logger = logging.getLogger(logger_name)
    logger.setLevel(log_level)
    return logger


def set_level(level: int | str) -> None:
    """Change the level of the application logger and the root handler."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = LOG_LEVEL
    logging.getLogger().setLevel(level)
    logger.setLevel(level)


# Create a singleton logger instance
logger = setup_logger()
