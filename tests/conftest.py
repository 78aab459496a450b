"""Shared fixtures: settings pointing at a fake cgroup controller."""

from pathlib import Path

import pytest

from cgroup_manager.models import ProcessRecord
from cgroup_manager.mutator import CgroupMutator
from cgroup_manager.settings import Settings


class StaticProvider:
    """Process snapshot provider returning a fixed set of records."""

    def __init__(self, records: list[ProcessRecord]) -> None:
        self.records = tuple(records)
        self.calls = 0

    def snapshot(self) -> tuple[ProcessRecord, ...]:
        self.calls += 1
        return self.records


def read_tasks(path: Path) -> list[int]:
    if not path.exists():
        return []
    return [int(line) for line in path.read_text().splitlines() if line.strip()]


@pytest.fixture
def settings(tmp_path) -> Settings:
    controller = tmp_path / "cpu"
    controller.mkdir()
    (controller / "tasks").write_text("")
    return Settings(
        _env_file=None,
        controller_root=str(controller),
        host="node01",
        user="wasadmin",
        log_dir=str(tmp_path / "log"),
    )


@pytest.fixture
def dead_pids() -> set[int]:
    """Pids the fake kernel reports as exited."""
    return set()


@pytest.fixture
def kernel(settings, dead_pids, monkeypatch):
    """
    Emulate the cgroup controller on plain files.

    Writing a pid to a membership file moves it there and removes it from
    every other group of the hierarchy, as the kernel does.
    """
    root = Path(settings.controller_root)
    writes: list[tuple[Path, int]] = []

    def write_pid(self, membership_path, pid):
        if pid in dead_pids:
            raise ProcessLookupError(3, "No such process")
        for tasks in [root / "tasks", *root.glob("*/tasks")]:
            pids = [p for p in read_tasks(tasks) if p != pid]
            tasks.write_text("".join(f"{p}\n" for p in pids))
        pids = read_tasks(Path(membership_path)) + [pid]
        Path(membership_path).write_text("".join(f"{p}\n" for p in pids))
        writes.append((Path(membership_path), pid))

    monkeypatch.setattr(CgroupMutator, "_write_pid", write_pid)
    return writes


def place(settings: Settings, group: str, pids: list[int]) -> Path:
    """Create a cgroup directory holding ``pids``."""
    path = Path(settings.controller_root) / group
    path.mkdir(exist_ok=True)
    (path / "tasks").write_text("".join(f"{pid}\n" for pid in pids))
    return path
