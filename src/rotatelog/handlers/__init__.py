"""
Logging handlers backed by the rotating log writer
"""

from .rotating_handler import RotatingLogHandler
from .utils import create_file_logger

__all__ = [
    "RotatingLogHandler",
    "create_file_logger",
]
