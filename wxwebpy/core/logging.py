"""Logging helpers for wxwebpy modules."""

import logging


def get_logger(name: str) -> logging.Logger:
    """Return the named logger, ready to work with or without basicConfig().

    Records always propagate to the root logger. While the application has
    not configured logging (root has no handlers) the logger is held at
    WARNING.

    Args:
        name: Dotted logger name, e.g. 'wxwebpy.login'
    """
    logger = logging.getLogger(name)
    logger.propagate = True
    if not logging.getLogger().handlers:
        logger.setLevel(logging.WARNING)
    return logger


def preview(data, limit: int = 300) -> str:
    """Shorten a payload for debug output."""
    if isinstance(data, (bytes, bytearray)):
        data = bytes(data).decode('utf-8', errors='replace')
    text = str(data)
    return text if len(text) <= limit else f"{text[:limit]}..."
