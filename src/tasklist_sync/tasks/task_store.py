# src/tasklist_sync/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import os
from pathlib import Path

from ..core.codec import deserialize, serialize
from .task_models import TaskList

logger = logging.getLogger(__name__)


class TaskFileStore:
    """
    Local copy of the task list as a JSON file.

    - missing file => empty list
    - writes go to a temp file first and replace the target atomically
    - the file is kept private (mode 0600); task text may be sensitive

    The local file is always plaintext; encryption only applies on the wire.
    """

    def __init__(self, path: str | Path = "tasks.json") -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> TaskList:
        """Raises DataCorruptionError if the file is not a valid task list."""
        if not self._path.exists():
            return []
        tasks = deserialize(self._path.read_text("utf-8"))
        logger.debug("Loaded %d tasks from %s", len(tasks), self._path)
        return tasks

    def save(self, tasks: TaskList) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(serialize(tasks), "utf-8")
        os.replace(tmp, self._path)
        with contextlib.suppress(OSError):
            os.chmod(self._path, 0o600)
        logger.info("Saved %d tasks to %s", len(tasks), self._path)
