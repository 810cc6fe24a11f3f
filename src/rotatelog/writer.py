"""
Size-based rotating log file writer
"""

import logging
import os
import stat
import threading
import time
from typing import BinaryIO, Callable, List, Optional, Tuple

from .config import DEFAULT_DIR_MODE, DEFAULT_FILE_MODE, RotationConfig, get_default_config
from .exceptions import LogFileOpenError, OversizedWriteError, RotationError
from .maintenance import MaintenanceResult, MaintenanceWorker, run_maintenance
from .naming import backup_name, current_time

logger = logging.getLogger(__name__)


class RotateLog:
    """
    Binary file writer that rolls over to a timestamped backup

    When a write would grow the active file past ``config.max_bytes`` the
    file is closed, renamed to ``<stem>-<timestamp><ext>`` and a fresh file
    is opened under the original name. Each rotation wakes a background
    worker that compresses and prunes old backups according to the config.

    All writes, rotations and closes are serialized by a single lock.
    """

    def __init__(
        self,
        config: Optional[RotationConfig] = None,
        *,
        time_func: Optional[Callable[[], float]] = None,
    ):
        self.config = config or get_default_config()
        self._time_func = time_func or time.time
        self._lock = threading.Lock()
        self._file: Optional[BinaryIO] = None
        self._size = 0
        self._deferred: List[Tuple[str, tuple]] = []
        self._maintenance = MaintenanceWorker(self.run_maintenance)

    @property
    def filename(self) -> str:
        return self.config.path

    @property
    def size(self) -> int:
        """Bytes written to the active file since it was opened"""
        return self._size

    @property
    def closed(self) -> bool:
        return self._file is None

    def write(self, data: bytes) -> int:
        """
        Append ``data`` to the active file, rotating first if it would not fit

        Raises OversizedWriteError without writing anything when ``data`` is
        larger than the maximum file size. Open and rotation failures raise
        LogFileOpenError or RotationError; I/O errors from the write itself
        propagate unchanged.
        """
        length = len(data)
        try:
            with self._lock:
                limit = self.config.max_bytes
                if length > limit:
                    raise OversizedWriteError(length, limit)

                if self._file is None:
                    self._open_existing_or_new(length)

                if self._size + length > limit:
                    self._rotate()

                return self._write_all(data)
        finally:
            self._log_deferred()

    def rotate(self) -> None:
        """Force a rotation, even if the active file is below the size limit"""
        try:
            with self._lock:
                self._rotate()
        finally:
            self._log_deferred()

    def flush(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.flush()

    def close(self) -> None:
        """Close the active file; calling it again is a no-op"""
        with self._lock:
            self._close()

    def shutdown(self, timeout: Optional[float] = None) -> None:
        """Close the active file and stop the maintenance worker"""
        self.close()
        self._maintenance.stop(timeout)

    def wait_for_maintenance(self, timeout: Optional[float] = None) -> bool:
        """Block until the maintenance worker has no pending or running pass"""
        return self._maintenance.wait_idle(timeout)

    def run_maintenance(self) -> MaintenanceResult:
        """Run one maintenance pass in the calling thread"""
        now = current_time(self.config.local_time, self._time_func)
        return run_maintenance(self.config, now)

    def __enter__(self) -> "RotateLog":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _write_all(self, data: bytes) -> int:
        """Write every byte of ``data``, retrying short writes"""
        view = memoryview(data)
        written = 0
        while written < len(view):
            n = self._file.write(view[written:])
            if not n:
                raise OSError(f"short write: {written} of {len(view)} bytes written")
            written += n
            self._size += n
        return written

    def _defer_log(self, msg: str, *args) -> None:
        # Emitted after the lock is released; a handler may write back into us.
        self._deferred.append((msg, args))

    def _log_deferred(self) -> None:
        if not self._deferred:
            return
        with self._lock:
            records, self._deferred = self._deferred, []
        for msg, args in records:
            logger.debug(msg, *args)

    def _open_existing_or_new(self, write_len: int) -> None:
        """Open the existing log file if the pending write fits, else start a new one"""
        self._maintenance.signal()

        path = self.filename
        try:
            info = os.stat(path)
        except FileNotFoundError:
            self._open_new()
            return
        except OSError as e:
            raise LogFileOpenError(f"error getting log file info: {e}") from e

        if info.st_size + write_len > self.config.max_bytes:
            self._rotate()
            return

        try:
            self._file = open(path, "ab", buffering=0)
        except OSError as e:
            self._defer_log("Can't append to %s (%s), starting a new file", path, e)
            self._open_new()
            return
        self._size = info.st_size

    def _rotate(self) -> None:
        self._close()
        self._open_new()
        self._maintenance.signal()

    def _close(self) -> None:
        if self._file is None:
            return
        try:
            self._file.close()
        finally:
            self._file = None

    def _open_new(self) -> None:
        """Move any existing log file aside and open a fresh one; assumes closed"""
        try:
            os.makedirs(self.config.directory, mode=DEFAULT_DIR_MODE, exist_ok=True)
        except OSError as e:
            raise LogFileOpenError(f"can't create log directory: {e}") from e

        path = self.filename
        mode = DEFAULT_FILE_MODE
        rotated = False
        try:
            info = os.stat(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise RotationError(f"error getting log file info: {e}") from e
        else:
            mode = stat.S_IMODE(info.st_mode)
            backup = backup_name(path, current_time(self.config.local_time, self._time_func))
            try:
                os.rename(path, backup)
            except OSError as e:
                raise RotationError(f"can't rename log file: {e}") from e
            rotated = True
            self._defer_log("Rotated log file %s to %s", path, backup)

        try:
            fd = os.open(path, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, mode)
            self._file = open(fd, "wb", buffering=0)
        except OSError as e:
            error_cls = RotationError if rotated else LogFileOpenError
            raise error_cls(f"can't open new log file: {e}") from e
        self._size = 0
