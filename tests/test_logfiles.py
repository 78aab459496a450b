"""Tests for log file setup and retention."""

import os
import time
from datetime import datetime

import pytest

from cgroup_manager.exceptions import LogSetupError
from cgroup_manager.logfiles import cleanup_logs, log_file_path, prepare_log_file

DAY = 86400


def test_log_file_path(tmp_path):
    path = log_file_path(tmp_path, datetime(2024, 3, 5, 14, 7, 9))

    assert path == tmp_path / "cgroup_manager.2024.03.05.14.07.09.log"


def test_prepare_creates_directory_and_file(tmp_path):
    path = tmp_path / "log" / "cgroup_manager.x.log"

    prepare_log_file(path)

    assert path.is_file()


def test_prepare_failure(tmp_path):
    blocker = tmp_path / "log"
    blocker.write_text("not a directory")

    with pytest.raises(LogSetupError) as excinfo:
        prepare_log_file(blocker / "cgroup_manager.x.log")

    assert excinfo.value.exit_code == 1


def test_empty_log_file_is_removed(tmp_path):
    path = tmp_path / "cgroup_manager.now.log"
    path.touch()

    cleanup_logs(path, retention_days=30)

    assert not path.exists()


def test_non_empty_log_file_is_kept(tmp_path):
    path = tmp_path / "cgroup_manager.now.log"
    path.write_text("something happened\n")

    cleanup_logs(path, retention_days=30)

    assert path.exists()


def test_old_logs_are_pruned(tmp_path):
    now = time.time()
    current = tmp_path / "cgroup_manager.now.log"
    current.write_text("x\n")
    recent = tmp_path / "cgroup_manager.recent.log"
    recent.write_text("x\n")
    os.utime(recent, (now - 2 * DAY, now - 2 * DAY))
    old = tmp_path / "cgroup_manager.old.log"
    old.write_text("x\n")
    os.utime(old, (now - 31 * DAY, now - 31 * DAY))
    unrelated = tmp_path / "messages"
    unrelated.write_text("x\n")
    os.utime(unrelated, (now - 90 * DAY, now - 90 * DAY))

    pruned = cleanup_logs(current, retention_days=30, now=now)

    assert pruned == [old]
    assert current.exists()
    assert recent.exists()
    assert unrelated.exists()


def test_missing_log_directory(tmp_path):
    assert cleanup_logs(tmp_path / "missing" / "cgroup_manager.now.log", retention_days=1) == []
