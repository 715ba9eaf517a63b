"""
Logging infrastructure.

Provides logging utilities for process entry points (API, outbox worker).
"""
import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def get_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """
    Get logger instance with the shared console handler attached.

    Args:
        name: Logger name (usually module name)
        level: Level applied when the handler is first installed

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(level)
    return logger


def configure_logging(level: int = logging.INFO) -> None:
    """Route every module logger through the shared format."""
    get_logger("core", level)
    get_logger("apps", level)
