"""Snapshot of the in-scope runtime processes."""

import logging

import psutil

from cgroup_manager.models import ProcessRecord
from cgroup_manager.settings import Settings

logger = logging.getLogger(__name__)


def logical_name(command_line: list[str], host: str) -> str:
    """
    Derive the logical instance name from a command line.

    The instance name is the last argument, truncated at the first
    ``_<host>`` so per-node suffixes collapse onto one service name.
    """
    if not command_line:
        return ""
    name = command_line[-1]
    return name.split(f"_{host}", 1)[0]


class ProcessSnapshotProvider:
    """
    Lists the processes owned by the runtime user that reference this host.

    The snapshot is taken once per pass and must not be re-derived later on,
    since processes can start or exit while the pass is running.
    """

    def __init__(self, settings: Settings) -> None:
        self._user = settings.user
        self._host = settings.host

    def _matches(self, username: str | None, command_line: list[str]) -> bool:
        if username != self._user:
            return False
        return any(self._host in arg for arg in command_line)

    def snapshot(self) -> tuple[ProcessRecord, ...]:
        """
        Collect the in-scope processes, sorted by pid.

        Handles NoSuchProcess, AccessDenied and ZombieProcess errors by
        skipping the affected process.
        """
        records: list[ProcessRecord] = []

        for proc in psutil.process_iter(attrs=["pid", "username", "cmdline"]):
            try:
                info = proc.info
                command_line = info.get("cmdline") or []
                if not self._matches(info.get("username"), command_line):
                    continue

                records.append(
                    ProcessRecord(
                        pid=info["pid"],
                        logical_name=logical_name(command_line, self._host),
                    )
                )
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                # Process exited or became unreadable while being listed
                continue

        records.sort(key=lambda record: record.pid)
        logger.debug(f"Found {len(records)} processes of {self._user} on {self._host}")
        return tuple(records)
