"""Logging configuration for the trace_anne package.

This module is separate to avoid circular imports.
"""

import logging

# Package-level logger name
LOGGER_NAME = "trace_anne"

DEFAULT_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def get_logger() -> logging.Logger:
    """Get the package-level logger.

    All modules in this package should use this function to get a logger.

    Usage:
        from trace_anne.logging_config import get_logger
        logger = get_logger()
        logger.info("Message")
    """
    return logging.getLogger(LOGGER_NAME)


def configure_logging(
    level: int = logging.INFO,
    format: str = DEFAULT_FORMAT,
) -> None:
    """Configure logging for the entire package.

    Call this once at the start of a command-line entry point.

    Args:
        level: Logging level (default: INFO)
        format: Log message format
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Only add handler if none exist (avoid duplicate handlers)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(format))
        logger.addHandler(handler)
    else:
        for handler in logger.handlers:
            handler.setLevel(level)
