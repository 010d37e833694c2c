# src/tasklist_sync/tasks/merge.py

from __future__ import annotations

"""
Default merge engine.

Tasks are matched by id. When both sides hold the same task, the copy with the
later `modified` timestamp wins; on a tie a removal wins, then the local copy.
Removed tasks are kept as tombstones so deletions reach every client.

Order of the merged list: local tasks in local order, then tasks only the
remote side knows about, in remote order.
"""

import logging
from datetime import datetime, timezone

from .task_models import DiffStat, Task, TaskList, TaskStatus

logger = logging.getLogger(__name__)


def _parse_ts(raw: str) -> datetime | None:
    try:
        ts = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def _is_newer(a: Task, b: Task) -> bool:
    """True if `a` was modified strictly after `b`."""
    ta, tb = _parse_ts(a.modified), _parse_ts(b.modified)
    if ta is not None and tb is not None:
        return ta > tb
    # Unparseable timestamps: fall back to plain string order.
    return a.modified > b.modified


def _index(tasks: TaskList) -> dict[str, Task]:
    # Duplicate ids within one list: first occurrence wins.
    out: dict[str, Task] = {}
    for t in tasks:
        out.setdefault(t.id, t)
    return out


def _pick(local: Task, remote: Task) -> Task:
    if _is_newer(remote, local):
        return remote
    if _is_newer(local, remote):
        return local
    if remote.status == TaskStatus.REMOVED:
        return remote
    return local


class LatestModifiedMerge:
    """MergeEngine implementation: last writer wins per task."""

    def merge(self, local: TaskList, remote: TaskList) -> TaskList:
        local_by_id = _index(local)
        remote_by_id = _index(remote)

        merged: TaskList = []
        for task_id, task in local_by_id.items():
            other = remote_by_id.get(task_id)
            merged.append(task if other is None else _pick(task, other))

        merged.extend(t for task_id, t in remote_by_id.items() if task_id not in local_by_id)

        logger.debug(
            "Merged %d local + %d remote tasks into %d",
            len(local_by_id),
            len(remote_by_id),
            len(merged),
        )
        return merged

    def compare(self, before: TaskList, after: TaskList) -> DiffStat:
        before_by_id = _index(before)
        after_by_id = _index(after)

        added = updated = removed = 0
        for task_id, new in after_by_id.items():
            old = before_by_id.get(task_id)
            if old is None or old.status == TaskStatus.REMOVED:
                if new.status != TaskStatus.REMOVED:
                    added += 1
                continue
            if new.status == TaskStatus.REMOVED:
                removed += 1
            elif new != old:
                updated += 1

        for task_id, old in before_by_id.items():
            if task_id not in after_by_id and old.status != TaskStatus.REMOVED:
                removed += 1

        return DiffStat(added=added, updated=updated, removed=removed)
