# src/tasklist_sync/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The sync coordinator depends on Protocols instead of concrete implementations.
This keeps the merge algorithm and local storage swappable and makes testing easier.
"""

from typing import Protocol

from ..tasks.task_models import DiffStat, TaskList


class MergeEngine(Protocol):
    """
    Task list reconciliation.

    The coordinator knows nothing about how tasks are merged; it only needs
    the merged list and a per-side summary of what changed.
    """

    def merge(self, local: TaskList, remote: TaskList) -> TaskList: ...

    def compare(self, before: TaskList, after: TaskList) -> DiffStat: ...


class TaskRepo(Protocol):
    """Local copy of the task list (used by the command line front end)."""

    def load(self) -> TaskList: ...
    def save(self, tasks: TaskList) -> None: ...
