"""Split in-scope processes between the two target cgroups."""

from collections.abc import Iterable

from cgroup_manager.models import Classification, ProcessRecord


def is_security_service(record: ProcessRecord, marker: str) -> bool:
    return marker in record.logical_name


def classify(records: Iterable[ProcessRecord], marker: str) -> Classification:
    """
    Partition processes on whether their logical name contains ``marker``.

    Every record lands in exactly one of the two subsets.
    """
    security: list[ProcessRecord] = []
    default: list[ProcessRecord] = []
    for record in records:
        if is_security_service(record, marker):
            security.append(record)
        else:
            default.append(record)
    return Classification(security=tuple(security), default=tuple(default))
