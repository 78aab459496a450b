"""One reconciliation pass: snapshot, classify, move, re-snapshot, diff."""

import logging
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import TextIO

from cgroup_manager.classifier import classify
from cgroup_manager.exceptions import NoProcessesFound
from cgroup_manager.membership import read_memberships
from cgroup_manager.models import DiffResult, ProcessRecord, StateRow
from cgroup_manager.mutator import CgroupMutator
from cgroup_manager.processes import ProcessSnapshotProvider
from cgroup_manager.report import build_state, compute_diff, render_table
from cgroup_manager.settings import Settings

logger = logging.getLogger(__name__)


class Mode(Enum):
    """What a pass does after taking the "before" snapshot."""

    INSPECT = "inspect"
    ACTIVATE = "activate"
    DEACTIVATE = "deactivate"

    @property
    def mutates(self) -> bool:
        return self is not Mode.INSPECT


@dataclass(slots=True)
class ReconcileResult:
    """Outcome of a pass."""

    mode: Mode
    processes: tuple[ProcessRecord, ...]
    before: list[StateRow]
    after: list[StateRow]
    diff: DiffResult = field(default_factory=list)


class Reconciler:
    """
    Runs a single reconciliation pass against the cgroup controller.

    The in-scope process set is captured once at the start and reused for
    both state tables; only cgroup membership is read again after mutating.
    """

    def __init__(
        self,
        settings: Settings,
        provider: ProcessSnapshotProvider | None = None,
        mutator: CgroupMutator | None = None,
    ) -> None:
        """
        Initialize the Reconciler.

        Args:
            settings: Host, user and controller configuration.
            provider: Source of the process snapshot. Defaults to the live process table.
            mutator: Applies placements. Defaults to writing to the controller.
        """
        self._settings = settings
        self._provider = provider or ProcessSnapshotProvider(settings)
        self._mutator = mutator or CgroupMutator(settings)

    def _read_state(self, processes: tuple[ProcessRecord, ...]) -> list[StateRow]:
        settings = self._settings
        memberships = read_memberships(
            settings.controller_root, settings.group_prefix, settings.membership_file
        )
        return build_state(processes, memberships)

    def run(self, mode: Mode = Mode.INSPECT) -> ReconcileResult:
        """
        Execute one pass.

        Raises:
            NoProcessesFound: No in-scope process is running.
            GroupCreationError: A target cgroup could not be created.
            MembershipWriteError: A pid could not be written.
        """
        processes = self._provider.snapshot()
        if not processes:
            raise NoProcessesFound(
                f"No running processes of {self._settings.user} detected on {self._settings.host}."
            )

        before = self._read_state(processes)
        if not mode.mutates:
            return ReconcileResult(mode=mode, processes=processes, before=before, after=before)

        if mode is Mode.ACTIVATE:
            self._mutator.activate(classify(processes, self._settings.security_marker))
        else:
            self._mutator.deactivate()

        after = self._read_state(processes)
        diff = compute_diff(before, after)
        grouped = sum(row.is_grouped for row in after)
        logger.debug(
            f"{mode.value}: {len(diff)} of {len(after)} processes changed cgroup, {grouped} now grouped"
        )
        return ReconcileResult(
            mode=mode, processes=processes, before=before, after=after, diff=diff
        )


def report(result: ReconcileResult, stream: TextIO | None = None) -> None:
    """
    Show the outcome of a pass.

    An inspect pass prints the full "before" table to the terminal only. A
    mutating pass prints and logs the changed rows, and nothing at all when
    no row changed.
    """
    if stream is None:
        stream = sys.stdout
    if not result.mode.mutates:
        print(render_table(result.before), file=stream)
        return

    if not result.diff:
        return

    table = render_table(result.diff)
    print(table, file=stream)
    logger.info(f"cgroup state changes:\n{table}")
