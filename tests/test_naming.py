"""
Tests for backup naming and discovery
"""

import os
import shutil
import tempfile
from datetime import datetime, timezone

import pytest

from rotatelog.naming import (
    BackupFile,
    backup_name,
    current_time,
    list_backups,
    parse_backup_name,
    split_filename,
)


def test_split_filename():
    assert split_filename("/var/log/app.log") == ("app-", ".log")
    assert split_filename("server") == ("server-", "")
    assert split_filename("archive.tar.log") == ("archive.tar-", ".log")


def test_backup_name_inserts_timestamp_before_extension():
    now = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    name = backup_name(os.path.join("logs", "app.log"), now)
    assert name == os.path.join("logs", "app-2024-01-02 03:04:05.log")


def test_backup_name_without_extension():
    now = datetime(2024, 12, 31, 23, 59, 59, tzinfo=timezone.utc)
    assert backup_name("server", now) == "server-2024-12-31 23:59:59"


def test_current_time_utc():
    assert current_time(False, lambda: 0.0) == datetime(1970, 1, 1, tzinfo=timezone.utc)


def test_current_time_local_is_aware():
    now = current_time(True, lambda: 1_700_000_000.0)
    assert now.tzinfo is not None
    assert now.timestamp() == 1_700_000_000.0


class TestParseBackupName:
    def test_uncompressed(self):
        backup = parse_backup_name("app-2024-01-02 03:04:05.log", "app-", ".log")
        assert backup == BackupFile(
            name="app-2024-01-02 03:04:05.log",
            timestamp=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
            compressed=False,
        )

    def test_compressed(self):
        backup = parse_backup_name("app-2024-01-02 03:04:05.log.gz", "app-", ".log")
        assert backup is not None
        assert backup.compressed is True
        assert backup.logical_name == "app-2024-01-02 03:04:05.log"

    def test_no_extension(self):
        assert parse_backup_name("server-2024-01-02 03:04:05", "server-", "") is not None
        backup = parse_backup_name("server-2024-01-02 03:04:05.gz", "server-", "")
        assert backup is not None
        assert backup.compressed is True

    def test_rejects_non_backups(self):
        cases = [
            "app.log",
            "other-2024-01-02 03:04:05.log",
            "app-2024-01-02 03:04:05.txt",
            "app-yesterday.log",
            "app-2024-1-2 3:4:5.log",
            "app-2024-13-02 03:04:05.log",
            "app-.log",
        ]
        for name in cases:
            assert parse_backup_name(name, "app-", ".log") is None, name

    def test_local_time_round_trip(self):
        now = current_time(True, lambda: 1_700_000_000.0)
        name = os.path.basename(backup_name("app.log", now))

        backup = parse_backup_name(name, "app-", ".log", local=True)
        assert backup is not None
        assert backup.timestamp == now


class TestListBackups:
    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.log_file = os.path.join(self.temp_dir, "app.log")

    def teardown_method(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _touch(self, name):
        open(os.path.join(self.temp_dir, name), "w").close()

    def test_sorted_most_recent_first(self):
        self._touch("app.log")
        self._touch("app-2024-01-01 10:00:00.log")
        self._touch("app-2024-01-03 10:00:00.log.gz")
        self._touch("app-2024-01-02 10:00:00.log")
        self._touch("unrelated.txt")
        os.mkdir(os.path.join(self.temp_dir, "app-2024-01-04 10:00:00.log"))

        backups = list_backups(self.temp_dir, self.log_file)

        assert [b.name for b in backups] == [
            "app-2024-01-03 10:00:00.log.gz",
            "app-2024-01-02 10:00:00.log",
            "app-2024-01-01 10:00:00.log",
        ]

    def test_empty_directory(self):
        assert list_backups(self.temp_dir, self.log_file) == []

    def test_missing_directory_raises(self):
        missing = os.path.join(self.temp_dir, "missing")
        with pytest.raises(OSError):
            list_backups(missing, self.log_file)
