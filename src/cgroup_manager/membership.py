"""Reading cgroup membership from the controller hierarchy."""

import logging
from pathlib import Path

from cgroup_manager.exceptions import MembershipReadError
from cgroup_manager.models import CgroupMembership

logger = logging.getLogger(__name__)


def matching_groups(controller_root: str | Path, prefix: str) -> list[Path]:
    """Return the child cgroup directories named ``<prefix>.*``, sorted by name."""
    root = Path(controller_root)
    if not root.is_dir():
        return []
    return sorted(path for path in root.glob(f"{prefix}.*") if path.is_dir())


def read_pids(membership_path: str | Path) -> list[int]:
    """
    Read the pids listed in a membership file, one per line.

    A file that disappeared since the directory was listed reads as empty.

    Raises:
        MembershipReadError: The file is unreadable or holds a non-numeric line.
    """
    try:
        with open(membership_path) as f:
            return [int(line) for line in f if line.strip()]
    except FileNotFoundError:
        logger.debug(f"Membership file {membership_path} vanished")
        return []
    except OSError as e:
        raise MembershipReadError(str(membership_path), e.strerror or str(e)) from e
    except ValueError as e:
        raise MembershipReadError(str(membership_path), str(e)) from e


def read_memberships(
    controller_root: str | Path,
    prefix: str,
    membership_file: str = "tasks",
) -> list[CgroupMembership]:
    """
    Map every pid found in a ``<prefix>.*`` cgroup to that cgroup's name.

    No matching cgroup yields an empty list, as on a host that was never
    activated. The result is sorted by pid.
    """
    memberships = [
        CgroupMembership(pid=pid, cgroup_name=group.name)
        for group in matching_groups(controller_root, prefix)
        for pid in read_pids(group / membership_file)
    ]
    memberships.sort(key=lambda membership: membership.pid)
    return memberships
