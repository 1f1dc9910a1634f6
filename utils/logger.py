"""
Shared logger utility for the inventory management system.
Provides a consistent logger configuration for demos and host integrations.
"""

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str | None = None, level: int | str = logging.INFO) -> logging.Logger:
    """
    Returns a logger with the specified name, configured with the standard format.
    The level may be given as a number or a level name such as "DEBUG".
    If no name is provided, returns the root logger.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
    if isinstance(level, str):
        level = level.upper()
    logger.setLevel(level)
    return logger
