"""
Background compression and removal of old log backups
"""

import gzip
import logging
import os
import shutil
import stat
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from .config import RotationConfig
from .exceptions import MaintenanceError
from .naming import COMPRESS_SUFFIX, BackupFile, current_time, list_backups

logger = logging.getLogger(__name__)


@dataclass
class MaintenanceResult:
    """Outcome of a single maintenance pass"""

    removed: List[str] = field(default_factory=list)
    compressed: List[str] = field(default_factory=list)
    errors: List[MaintenanceError] = field(default_factory=list)

    @property
    def last_error(self) -> Optional[MaintenanceError]:
        return self.errors[-1] if self.errors else None


def compress_log_file(src: str, dst: str, compression_level: int = 9) -> None:
    """
    Gzip ``src`` into ``dst`` and remove ``src``

    The compressed file gets the permission bits of the source. A partially
    written ``dst`` is removed when compression fails.
    """
    created = False
    try:
        mode = stat.S_IMODE(os.stat(src).st_mode)
        with open(src, "rb") as f_in:
            fd = os.open(dst, os.O_CREAT | os.O_TRUNC | os.O_WRONLY, mode)
            created = True
            with open(fd, "wb") as raw:
                with gzip.GzipFile(
                    fileobj=raw, mode="wb", compresslevel=compression_level
                ) as f_out:
                    shutil.copyfileobj(f_in, f_out)
    except OSError as e:
        if created:
            try:
                os.remove(dst)
            except OSError:
                logger.debug("Could not remove partial archive %s", dst)
        raise MaintenanceError(f"failed to compress log file {src}: {e}") from e

    try:
        os.remove(src)
    except OSError as e:
        raise MaintenanceError(f"failed to remove compressed log file {src}: {e}") from e


def run_maintenance(
    config: RotationConfig, now: Optional[datetime] = None
) -> MaintenanceResult:
    """
    Run one maintenance pass over the backups of ``config.path``

    Backups beyond ``max_backups`` (counted by logical backup) or older than
    ``max_age`` days are removed; surviving uncompressed backups are gzipped
    when ``compress`` is set. Individual failures are collected in the result
    and do not stop the pass.
    """
    result = MaintenanceResult()
    if not config.needs_maintenance:
        return result

    if now is None:
        now = current_time(config.local_time)

    directory = config.directory
    try:
        backups = list_backups(directory, config.path, config.local_time)
    except OSError as e:
        logger.debug("Can't read log file directory %s: %s", directory, e)
        return result

    remove: Dict[str, BackupFile] = {}

    if config.max_backups and config.max_backups < len(backups):
        preserved = set()
        for backup in backups:
            preserved.add(backup.logical_name)
            if len(preserved) > config.max_backups:
                remove[backup.name] = backup

    if config.max_age:
        cutoff = now - timedelta(days=config.max_age)
        for backup in backups:
            if backup.timestamp < cutoff:
                remove[backup.name] = backup

    compress: List[BackupFile] = []
    if config.compress:
        compress = [
            b for b in backups if b.name not in remove and not b.compressed
        ]

    for backup in remove.values():
        path = os.path.join(directory, backup.name)
        try:
            os.remove(path)
        except OSError as e:
            result.errors.append(MaintenanceError(f"failed to remove {path}: {e}"))
        else:
            result.removed.append(backup.name)

    for backup in compress:
        path = os.path.join(directory, backup.name)
        try:
            compress_log_file(path, path + COMPRESS_SUFFIX, config.compression_level)
        except MaintenanceError as e:
            result.errors.append(e)
        else:
            result.compressed.append(backup.name)

    return result


class MaintenanceWorker:
    """
    Single background thread running maintenance passes on demand

    Signals are kept in a one-slot mailbox: signalling while a pass is
    already pending does not queue another one. The thread is started by the
    first signal and passes never overlap.
    """

    def __init__(
        self,
        run_pass: Callable[[], MaintenanceResult],
        name: str = "rotatelog-maintenance",
    ):
        self._run_pass = run_pass
        self._name = name
        self._cond = threading.Condition()
        self._pending = False
        self._running = False
        self._stopped = False
        self._thread: Optional[threading.Thread] = None

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def signal(self) -> None:
        """Request a maintenance pass without waiting for it"""
        with self._cond:
            if self._stopped:
                return
            if self._thread is None:
                self._thread = threading.Thread(
                    target=self._worker, daemon=True, name=self._name
                )
                self._thread.start()
            self._pending = True
            self._cond.notify_all()

    def _worker(self) -> None:
        """Background loop: one pass per drained signal"""
        while True:
            with self._cond:
                while not self._pending and not self._stopped:
                    self._cond.wait()
                if not self._pending:
                    return
                self._pending = False
                self._running = True

            try:
                result = self._run_pass()
                for error in result.errors:
                    logger.warning("Log maintenance failed: %s", error)
                if result.removed or result.compressed:
                    logger.debug(
                        "Log maintenance removed %d and compressed %d backup(s)",
                        len(result.removed),
                        len(result.compressed),
                    )
            except Exception:
                logger.exception("Unexpected error during log maintenance")
            finally:
                with self._cond:
                    self._running = False
                    self._cond.notify_all()

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until no pass is pending or running; False on timeout"""
        with self._cond:
            return self._cond.wait_for(
                lambda: not self._pending and not self._running, timeout
            )

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop the thread once any pending pass has run"""
        with self._cond:
            self._stopped = True
            thread = self._thread
            self._cond.notify_all()

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
