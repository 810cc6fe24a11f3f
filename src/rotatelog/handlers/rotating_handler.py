"""
Logging handler that writes records through a RotateLog
"""

import logging
from typing import Optional

from ..config import RotationConfig
from ..writer import RotateLog


class RotatingLogHandler(logging.Handler):
    """
    Handler writing formatted records to a size-rotated file

    Formatting is left to the handler's formatter; each record becomes one
    encoded line passed to the underlying writer.
    """

    terminator = "\n"

    def __init__(
        self,
        config: Optional[RotationConfig] = None,
        encoding: str = "utf-8",
        writer: Optional[RotateLog] = None,
    ):
        super().__init__()
        self.encoding = encoding
        self.writer = writer or RotateLog(config)
        self.config = self.writer.config

    @property
    def base_filename(self) -> str:
        return self.writer.filename

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a log record"""
        try:
            msg = self.format(record) + self.terminator
            self.writer.write(msg.encode(self.encoding))
        except Exception:
            self.handleError(record)

    def flush(self) -> None:
        """Flush the underlying file"""
        self.writer.flush()

    def close(self) -> None:
        """Close the file and stop background maintenance"""
        try:
            self.writer.shutdown()
        finally:
            super().close()
