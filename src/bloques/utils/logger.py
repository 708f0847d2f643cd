"""Minimal logging utilities for bloques.

Provides a simple get_logger function that wraps the standard library logging.
bloques never configures handlers itself; the host application does.

Example:
    >>> from bloques.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Rendering %d blocks", 3)
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "bloques." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("myhandlers")
        >>> logger.name
        'bloques.myhandlers'
    """
    if not (name == "bloques" or name.startswith("bloques.")):
        name = f"bloques.{name}"
    return logging.getLogger(name)
