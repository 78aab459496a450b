"""Exceptions raised during a reconciliation pass.

Each exception carries the exit code the command line front end terminates
with, so the components never call ``sys.exit`` themselves.
"""


class CgroupManagerError(Exception):
    """Base class for all cgroup-manager errors."""

    exit_code: int = 1


class EnvironmentMismatchError(CgroupManagerError):
    """The host is not fit to run a pass (wrong OS, missing privileges)."""

    exit_code = 1


class NoProcessesFound(CgroupManagerError):
    """No in-scope processes are running; there is nothing to manage."""

    exit_code = 0


class GroupCreationError(CgroupManagerError):
    """A target cgroup directory could not be created."""

    exit_code = 2

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Creating directory {path} failed - {reason}")
        self.path = path


class MembershipWriteError(CgroupManagerError):
    """A pid could not be written into a cgroup membership file."""

    exit_code = 2

    def __init__(self, path: str, pid: int, reason: str) -> None:
        super().__init__(f"Putting pid {pid} in {path} failed - {reason}")
        self.path = path
        self.pid = pid


class LogSetupError(CgroupManagerError):
    """The per-run log file could not be prepared."""

    exit_code = 1


class MembershipReadError(CgroupManagerError):
    """A cgroup membership file could not be read or parsed."""

    exit_code = 2

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Reading {path} failed - {reason}")
        self.path = path
