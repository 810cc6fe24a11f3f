"""
Rotating Log Writer

A size-based rotating log file writer with background compression and
age/count based retention of old backups.
"""

__version__ = "0.1.0"

from .config import (
    RotationConfig,
    get_default_config,
    set_default_config,
)
from .exceptions import (
    LogFileOpenError,
    MaintenanceError,
    OversizedWriteError,
    RotateLogError,
    RotationError,
)
from .handlers import RotatingLogHandler, create_file_logger
from .maintenance import (
    MaintenanceResult,
    MaintenanceWorker,
    compress_log_file,
    run_maintenance,
)
from .naming import BackupFile, backup_name, list_backups, parse_backup_name
from .writer import RotateLog

__all__ = [
    # Configuration
    "RotationConfig",
    "get_default_config",
    "set_default_config",
    # Writer
    "RotateLog",
    # Maintenance
    "MaintenanceResult",
    "MaintenanceWorker",
    "compress_log_file",
    "run_maintenance",
    # Naming
    "BackupFile",
    "backup_name",
    "list_backups",
    "parse_backup_name",
    # Handlers
    "RotatingLogHandler",
    "create_file_logger",
    # Exceptions
    "RotateLogError",
    "OversizedWriteError",
    "LogFileOpenError",
    "RotationError",
    "MaintenanceError",
]
