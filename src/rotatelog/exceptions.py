"""
Exceptions raised by the rotating log writer
"""


class RotateLogError(Exception):
    """Base class for all rotatelog errors"""

    pass


class OversizedWriteError(RotateLogError):
    """A single write is larger than the maximum file size"""

    def __init__(self, size: int, limit: int):
        super().__init__(f"write length {size} exceeds maximum file size {limit}")
        self.size = size
        self.limit = limit


class LogFileOpenError(RotateLogError, OSError):
    """The active log file could not be created or opened"""

    pass


class RotationError(RotateLogError, OSError):
    """Renaming the active file or recreating it failed during rotation"""

    pass


class MaintenanceError(RotateLogError):
    """A removal or compression failed during a maintenance pass"""

    pass
