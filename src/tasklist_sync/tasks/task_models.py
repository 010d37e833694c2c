# src/tasklist_sync/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Notes:
    - "removed" is a tombstone: removed tasks stay in the list so the removal
      can propagate to other clients through a merge.
    """

    TODO = "todo"
    DONE = "done"
    REMOVED = "removed"


@dataclass(slots=True)
class Task:
    id: str
    status: TaskStatus
    text: str
    created: str
    modified: str

    due: str | None = None
    priority: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "status": str(self.status),
            "text": self.text,
            "created": self.created,
            "modified": self.modified,
        }
        if self.due is not None:
            out["due"] = self.due
        if self.priority is not None:
            out["priority"] = self.priority
        return out

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Task:
        """
        Build a Task from its JSON object form.

        Raises ValueError/TypeError/KeyError on structurally invalid input;
        callers translate that into their own error type.
        """
        for key in ("id", "status", "text", "created", "modified"):
            if not isinstance(raw[key], str):
                raise TypeError(f"Task field {key!r} must be a string")
        for key in ("due", "priority"):
            if raw.get(key) is not None and not isinstance(raw[key], str):
                raise TypeError(f"Task field {key!r} must be a string")

        return cls(
            id=raw["id"],
            status=TaskStatus(raw["status"]),
            text=raw["text"],
            created=raw["created"],
            modified=raw["modified"],
            due=raw.get("due"),
            priority=raw.get("priority"),
        )


TaskList = list[Task]


@dataclass(slots=True, frozen=True)
class DiffStat:
    """What a merge changed relative to one side's pre-merge task list."""

    added: int = 0
    updated: int = 0
    removed: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.added or self.updated or self.removed)

    def __str__(self) -> str:
        return f"+{self.added} ~{self.updated} -{self.removed}"
