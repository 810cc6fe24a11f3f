"""
Utility functions for logging handlers
"""

import logging
from typing import Optional

from ..config import RotationConfig
from .rotating_handler import RotatingLogHandler


def create_file_logger(
    name: str,
    config: Optional[RotationConfig] = None,
    formatter: Optional[logging.Formatter] = None,
    level: int = logging.DEBUG,
) -> logging.Logger:
    """
    Create a logger writing to a rotating file

    Args:
        name: Logger name
        config: Rotation configuration, the default config when omitted
        formatter: Optional custom formatter
        level: Logger level

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Remove existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    handler = RotatingLogHandler(config)

    if formatter:
        handler.setFormatter(formatter)
    else:
        simple_formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(simple_formatter)

    logger.addHandler(handler)
    logger.setLevel(level)

    return logger
