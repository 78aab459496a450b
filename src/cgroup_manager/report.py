"""Building, comparing and rendering cgroup state tables."""

from collections.abc import Iterable, Sequence

from cgroup_manager.models import CgroupMembership, DiffResult, ProcessRecord, StateRow

HEADER = ("PID", "JVM", "CGROUP")


def build_state(
    records: Iterable[ProcessRecord],
    memberships: Iterable[CgroupMembership],
) -> list[StateRow]:
    """
    Left-join processes against cgroup membership on pid.

    Every process yields exactly one row, with an empty cgroup when the pid
    is not a member of any target cgroup. Rows are ordered by pid.
    """
    names = {record.pid: record.logical_name for record in records}
    groups = {membership.pid: membership.cgroup_name for membership in memberships}
    return [
        StateRow(pid=pid, logical_name=name, cgroup_name=groups.get(pid, ""))
        for pid, name in sorted(names.items())
    ]


def compute_diff(before: Iterable[StateRow], after: Iterable[StateRow]) -> DiffResult:
    """Return the rows of ``after`` that do not appear verbatim in ``before``."""
    previous = set(before)
    return [row for row in after if row not in previous]


def render_table(rows: Sequence[StateRow]) -> str:
    """Render rows under the table header with aligned columns."""
    lines = [HEADER] + [(str(row.pid), row.logical_name, row.cgroup_name) for row in rows]
    widths = [max(len(line[i]) for line in lines) for i in range(len(HEADER))]
    return "\n".join(
        "  ".join(cell.ljust(width) for cell, width in zip(line, widths)).rstrip()
        for line in lines
    )
