"""Data models for cgroup-manager."""

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class ProcessRecord:
    """Immutable identity of an in-scope process."""

    pid: int
    logical_name: str  # Instance name with the host suffix stripped


@dataclass(slots=True, frozen=True)
class CgroupMembership:
    """A pid found in the membership file of a cgroup."""

    pid: int
    cgroup_name: str


@dataclass(slots=True, frozen=True)
class StateRow:
    """One row of the reconciliation state table."""

    pid: int
    logical_name: str
    cgroup_name: str = ""  # Empty when the pid is in no target cgroup

    @property
    def is_grouped(self) -> bool:
        """Check if the process sits in one of the target cgroups."""
        return bool(self.cgroup_name)


@dataclass(slots=True, frozen=True)
class Classification:
    """Partition of the in-scope processes into the two target groups."""

    security: tuple[ProcessRecord, ...]
    default: tuple[ProcessRecord, ...]


# Rows of the "after" table missing from the "before" table
DiffResult = list[StateRow]
