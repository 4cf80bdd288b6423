"""
Logging configuration for the chat service
"""

import logging
import sys

ROOT_LOGGER_NAME = "chatroom"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a stdout handler to the package root logger

    Args:
        level: Logging level name (DEBUG, INFO, ...)

    Returns:
        The configured root logger of the package
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

        # Keep uvicorn's root handlers from printing our records twice
        logger.propagate = False

    logger.setLevel(level)
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger below the package namespace

    Args:
        name: Module name, usually ``__name__``

    Returns:
        Logger instance
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
