# tests/test_task_store.py

from __future__ import annotations

import os
from pathlib import Path

import pytest

from tasklist_sync.core.errors import DataCorruptionError
from tasklist_sync.tasks.task_store import TaskFileStore

from .fakes import make_task


def test_missing_file_is_empty(tmp_path: Path) -> None:
    assert TaskFileStore(tmp_path / "nope.json").load() == []


def test_save_and_load(tmp_path: Path) -> None:
    store = TaskFileStore(tmp_path / "sub" / "tasks.json")
    tasks = [make_task("1"), make_task("2", "second")]

    store.save(tasks)

    assert store.load() == tasks
    assert not (tmp_path / "sub" / "tasks.json.tmp").exists()
    if os.name == "posix":
        assert (store.path.stat().st_mode & 0o777) == 0o600


def test_corrupt_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text("{broken", "utf-8")

    with pytest.raises(DataCorruptionError):
        TaskFileStore(path).load()
