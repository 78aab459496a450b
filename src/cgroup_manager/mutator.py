"""Creating the target cgroups and moving processes between them."""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from cgroup_manager.exceptions import GroupCreationError, MembershipWriteError
from cgroup_manager.membership import read_memberships
from cgroup_manager.models import Classification
from cgroup_manager.settings import Settings

logger = logging.getLogger(__name__)


class CgroupMutator:
    """
    Applies placement decisions to the cgroup controller.

    Nothing here is transactional: groups created and pids written before a
    failure stay in effect, and the next pass picks up from there.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def ensure_group(self, path: Path) -> None:
        """Create a cgroup directory unless it already exists."""
        if path.is_dir():
            return
        try:
            os.mkdir(path)
        except OSError as e:
            raise GroupCreationError(str(path), e.strerror or str(e)) from e
        logger.info(f"Created cgroup {path}")

    def write_pids(self, membership_path: Path, pids: Iterable[int]) -> int:
        """
        Write pids into a membership file, one pid per write.

        The kernel may reject a multi-pid write as a whole, so each pid is
        committed on its own. A pid that exited since the snapshot is
        skipped; any other failure aborts the batch.

        Returns:
            The number of pids that were written.
        """
        written = 0
        for pid in pids:
            try:
                self._write_pid(membership_path, pid)
            except ProcessLookupError:
                logger.warning(f"Process {pid} no longer exists, not moved to {membership_path}")
                continue
            except OSError as e:
                raise MembershipWriteError(str(membership_path), pid, e.strerror or str(e)) from e
            written += 1
        return written

    def _write_pid(self, membership_path: Path, pid: int) -> None:
        with open(membership_path, "w") as f:
            f.write(f"{pid}\n")

    def activate(self, classification: Classification) -> None:
        """Create both target groups and place every classified process."""
        settings = self._settings
        self.ensure_group(settings.security_group_path)
        self.ensure_group(settings.default_group_path)

        placements = [
            (settings.security_group, classification.security),
            (settings.default_group, classification.default),
        ]
        for group, records in placements:
            if not records:
                continue
            path = settings.membership_path(group)
            written = self.write_pids(path, (record.pid for record in records))
            logger.debug(f"Wrote {written} pids to {path}")

    def deactivate(self) -> None:
        """Move every pid found in a ``<prefix>.*`` cgroup back to the root group."""
        settings = self._settings
        memberships = read_memberships(
            settings.controller_root, settings.group_prefix, settings.membership_file
        )
        if not memberships:
            logger.debug("No pids in any managed cgroup")
            return

        written = self.write_pids(
            settings.root_membership_path, (membership.pid for membership in memberships)
        )
        logger.debug(f"Wrote {written} pids to {settings.root_membership_path}")
