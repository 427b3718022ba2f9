"""
Logging utilities for the remoting backend.

Provides standardized logger configuration for transports and services.

LOGGING RULES:
- NEVER log full argument payloads at INFO level (they are client data)
- Coercion failures are client errors: log them at DEBUG, not ERROR
- Invocation failures are logged once, by the layer that translates them
  into a wire response

Acceptable logging:
- High-level events (e.g., "Invoking Locations.nearby", "socket connected")
- Error messages returned to the client
- Class/method registration at startup
"""

import logging
from typing import Optional

from remoting.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Get a configured logger for the specified module.

    Args:
        name: Module name (typically __name__)
        level: Optional logging level (defaults to settings.LOG_LEVEL)

    Returns:
        Configured logger instance

    A stream handler is attached only when logging has not been configured
    yet (root logger without handlers), e.g. when a transport module is used
    outside the app built by remoting.main. Otherwise records propagate to
    the root handler and are printed once.

    Usage:
        >>> from remoting.utils.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Remote class exposed")
    """

    logger = logging.getLogger(name)
    logger.setLevel(level if level is not None else settings.log_level)

    if not logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    return logger
