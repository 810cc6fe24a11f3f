import os
import sys
import tempfile
from dataclasses import dataclass
from typing import Optional

DEFAULT_MAX_SIZE = 100
MEGABYTE = 1024 * 1024
DEFAULT_DIR_MODE = 0o755
DEFAULT_FILE_MODE = 0o600


def default_filename() -> str:
    """Log path used when none is configured: <tempdir>/<program>_rotate.log"""
    program = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "python"
    return os.path.join(tempfile.gettempdir(), f"{program}_rotate.log")


@dataclass(frozen=True)
class RotationConfig:
    """Configuration for a rotating log file"""

    # Target file
    filename: str = ""

    # Rotation settings
    max_size: int = DEFAULT_MAX_SIZE  # in size units, 0 means the default
    size_unit: int = MEGABYTE

    # Retention settings
    max_backups: int = 0  # 0 keeps every backup
    max_age: int = 0  # days, 0 keeps every backup

    # Backup settings
    compress: bool = False
    compression_level: int = 9
    local_time: bool = False

    def __post_init__(self):
        """Validate configuration values"""
        if self.max_size < 0:
            raise ValueError("max_size must not be negative")
        if self.size_unit <= 0:
            raise ValueError("size_unit must be positive")
        if self.max_backups < 0:
            raise ValueError("max_backups must not be negative")
        if self.max_age < 0:
            raise ValueError("max_age must not be negative")
        if not 1 <= self.compression_level <= 9:
            raise ValueError("compression_level must be between 1 and 9")

    @property
    def path(self) -> str:
        return self.filename or default_filename()

    @property
    def directory(self) -> str:
        return os.path.dirname(os.path.abspath(self.path))

    @property
    def max_bytes(self) -> int:
        """Maximum size in bytes of the active file before it is rotated"""
        size = self.max_size or DEFAULT_MAX_SIZE
        return size * self.size_unit

    @property
    def needs_maintenance(self) -> bool:
        return bool(self.max_backups or self.max_age or self.compress)

    @classmethod
    def _parse_bool_env(cls, key: str, default: str = "false") -> bool:
        """Parse boolean from environment variable"""
        return os.getenv(key, default).lower() == "true"

    @classmethod
    def from_env(cls) -> "RotationConfig":
        """Create configuration from environment variables"""
        return cls(
            filename=os.getenv("ROTATELOG_FILENAME", ""),
            max_size=int(os.getenv("ROTATELOG_MAX_SIZE", str(DEFAULT_MAX_SIZE))),
            max_backups=int(os.getenv("ROTATELOG_MAX_BACKUPS", "0")),
            max_age=int(os.getenv("ROTATELOG_MAX_AGE", "0")),
            compress=cls._parse_bool_env("ROTATELOG_COMPRESS"),
            compression_level=int(os.getenv("ROTATELOG_COMPRESSION_LEVEL", "9")),
            local_time=cls._parse_bool_env("ROTATELOG_LOCAL_TIME"),
        )


_default_config: Optional[RotationConfig] = None


def get_default_config() -> RotationConfig:
    """Get the default configuration instance"""
    global _default_config
    if _default_config is None:
        _default_config = RotationConfig.from_env()
    return _default_config


def set_default_config(config: Optional[RotationConfig]) -> None:
    """Set the default configuration instance"""
    global _default_config
    _default_config = config
