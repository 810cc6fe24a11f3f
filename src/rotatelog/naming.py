"""
Backup naming scheme

Backups live next to the active file and carry their rotation time in the
name: ``<stem>-<YYYY-MM-DD HH:MM:SS><ext>``, optionally followed by ``.gz``.
The directory listing is the only record of which backups exist.
"""

import os
import re
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

BACKUP_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
COMPRESS_SUFFIX = ".gz"

_TIMESTAMP_RE = re.compile(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}")


@dataclass(frozen=True)
class BackupFile:
    """A rotated log file recognized from its name"""

    name: str
    timestamp: datetime
    compressed: bool = False

    @property
    def logical_name(self) -> str:
        """Name of the backup with any compression suffix removed"""
        if self.compressed:
            return self.name[: -len(COMPRESS_SUFFIX)]
        return self.name


def split_filename(path: str) -> Tuple[str, str]:
    """Return the backup prefix (stem plus dash) and extension of a log path"""
    stem, ext = os.path.splitext(os.path.basename(path))
    return f"{stem}-", ext


def current_time(local: bool, time_func: Callable[[], float] = time.time) -> datetime:
    """Current time as an aware datetime in the local zone or UTC"""
    if local:
        return datetime.fromtimestamp(time_func()).astimezone()
    return datetime.fromtimestamp(time_func(), tz=timezone.utc)


def backup_name(path: str, now: datetime) -> str:
    """Name the backup of ``path`` rotated at ``now``"""
    prefix, ext = split_filename(path)
    timestamp = now.strftime(BACKUP_TIME_FORMAT)
    return os.path.join(os.path.dirname(path), f"{prefix}{timestamp}{ext}")


def _parse_timestamp(value: str, local: bool) -> Optional[datetime]:
    if not _TIMESTAMP_RE.fullmatch(value):
        return None
    try:
        parsed = datetime.strptime(value, BACKUP_TIME_FORMAT)
    except ValueError:
        return None
    if local:
        return parsed.astimezone()
    return parsed.replace(tzinfo=timezone.utc)


def parse_backup_name(
    name: str, prefix: str, ext: str, local: bool = False
) -> Optional[BackupFile]:
    """Parse a directory entry into a BackupFile, or None if it is not one"""
    if not name.startswith(prefix):
        return None

    candidates = [(ext + COMPRESS_SUFFIX, True), (ext, False)]
    for suffix, compressed in candidates:
        if not name.endswith(suffix):
            continue
        end = len(name) - len(suffix)
        if end < len(prefix):
            continue
        timestamp = _parse_timestamp(name[len(prefix) : end], local)
        if timestamp is not None:
            return BackupFile(name=name, timestamp=timestamp, compressed=compressed)
    return None


def list_backups(directory: str, filename: str, local: bool = False) -> List[BackupFile]:
    """
    List the backups of ``filename`` found in ``directory``

    Entries that are directories or do not follow the naming scheme are
    skipped. The result is sorted most recent first. Raises OSError when the
    directory cannot be read.
    """
    prefix, ext = split_filename(filename)
    backups = []

    with os.scandir(directory) as entries:
        for entry in entries:
            if entry.is_dir():
                continue
            backup = parse_backup_name(entry.name, prefix, ext, local)
            if backup is not None:
                backups.append(backup)

    backups.sort(key=lambda b: b.timestamp, reverse=True)
    return backups
