"""Per-run log files and their retention."""

import sys
import time
from datetime import datetime
from pathlib import Path

from cgroup_manager.exceptions import LogSetupError

LOG_NAME = "cgroup_manager"
SECONDS_PER_DAY = 86400


def log_file_path(log_dir: str | Path, now: datetime | None = None) -> Path:
    """Return the log file of a run started at ``now``."""
    now = now or datetime.now()
    return Path(log_dir) / f"{LOG_NAME}.{now:%Y.%m.%d.%H.%M.%S}.log"


def prepare_log_file(path: Path) -> None:
    """Create the log file and its directory if they do not exist yet."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch(exist_ok=True)
    except OSError as e:
        raise LogSetupError(f"Validating logfile {path} failed - {e.strerror or e}") from e


def _remove(path: Path, what: str) -> bool:
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as e:
        print(f"Removing {what} {path} failed - {e.strerror or e}", file=sys.stderr)
        return False
    return True


def cleanup_logs(
    log_file: Path,
    retention_days: int,
    now: float | None = None,
) -> list[Path]:
    """
    Remove the run's log file if nothing was logged, then prune old logs.

    Args:
        log_file: Log file of the current run.
        retention_days: Log files modified longer ago than this are deleted.
        now: Reference timestamp, defaults to the current time.

    Returns:
        The old log files that were pruned.
    """
    if log_file.is_file() and log_file.stat().st_size == 0:
        _remove(log_file, "empty log file")

    log_dir = log_file.parent
    if not log_dir.is_dir():
        return []

    cutoff = (now if now is not None else time.time()) - retention_days * SECONDS_PER_DAY
    pruned = []
    for path in sorted(log_dir.glob(f"{LOG_NAME}.*.log")):
        if path == log_file or not path.is_file():
            continue
        if path.stat().st_mtime < cutoff:
            if _remove(path, "old log file"):
                pruned.append(path)
    return pruned
