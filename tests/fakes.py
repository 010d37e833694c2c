# tests/fakes.py

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import httpx

from tasklist_sync.tasks.merge import LatestModifiedMerge
from tasklist_sync.tasks.task_models import DiffStat, Task, TaskList, TaskStatus


@dataclass
class FakeTaskServer:
    """
    In-memory task list server behind httpx.MockTransport.

    Follows the wire protocol: GET/PUT/DELETE "/" and POST/DELETE "/session",
    bearer auth, version check on PUT with 409 + current state on mismatch.

    Test knobs:
    - queue_concurrent_write(): another client's write lands right before the
      next PUT is handled (one queued write per PUT)
    - conflict_body: replaces the 409 body (malformed server)
    - put_status: answer every PUT with this status instead
    """

    password: str = "admin"
    data: str | None = None
    version: int = 0
    stored: bool = False

    tokens: set[str] = field(default_factory=set)
    requests: list[httpx.Request] = field(default_factory=list)
    pending_writes: list[str] = field(default_factory=list)

    conflict_body: dict[str, Any] | None = None
    put_status: int | None = None

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def queue_concurrent_write(self, data: str) -> None:
        self.pending_writes.append(data)

    def store(self, data: str | None) -> None:
        self.data = data
        self.version += 1
        self.stored = True

    @property
    def put_count(self) -> int:
        return sum(1 for r in self.requests if r.method == "PUT")

    def _authorized(self, request: httpx.Request) -> bool:
        auth = request.headers.get("Authorization", "")
        return auth.startswith("Bearer ") and auth[len("Bearer ") :] in self.tokens

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/session":
            return self._handle_session(request)

        if path != "/":
            return httpx.Response(404, json={"message": "Not found"})

        if not self._authorized(request):
            return httpx.Response(401, json={"message": "Unauthorized"})

        if request.method == "GET":
            return httpx.Response(200, json={"data": self.data, "version": self.version})

        if request.method == "PUT":
            return self._handle_put(request)

        if request.method == "DELETE":
            if not self.stored:
                return httpx.Response(404, json={"message": "No data stored"})
            self.data = None
            self.stored = False
            return httpx.Response(200)

        return httpx.Response(405, json={"message": "Method not allowed"})

    def _handle_session(self, request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            body = json.loads(request.content)
            if body.get("password") != self.password:
                return httpx.Response(401, json={"message": "Invalid password"})
            token = f"token-{len(self.tokens) + 1}"
            self.tokens.add(token)
            return httpx.Response(200, json={"token": token})

        if request.method == "DELETE":
            if not self._authorized(request):
                return httpx.Response(401, json={"message": "Unauthorized"})
            auth = request.headers["Authorization"]
            self.tokens.discard(auth[len("Bearer ") :])
            return httpx.Response(200)

        return httpx.Response(405, json={"message": "Method not allowed"})

    def _handle_put(self, request: httpx.Request) -> httpx.Response:
        if self.pending_writes:
            self.store(self.pending_writes.pop(0))

        if self.put_status is not None:
            return httpx.Response(self.put_status, json={"message": "Server exploded"})

        body = json.loads(request.content)
        version = body["version"]
        if version != -1 and version != self.version:
            conflict = self.conflict_body
            if conflict is None:
                conflict = {"data": self.data, "version": self.version}
            return httpx.Response(409, json=conflict)

        self.store(body["data"])
        return httpx.Response(200)


class CountingMerge:
    """MergeEngine wrapper recording what the coordinator asked for."""

    def __init__(self) -> None:
        self._inner = LatestModifiedMerge()
        self.merge_calls: list[tuple[TaskList, TaskList]] = []
        self.compare_calls: list[tuple[TaskList, TaskList]] = []

    def merge(self, local: TaskList, remote: TaskList) -> TaskList:
        self.merge_calls.append((local, remote))
        return self._inner.merge(local, remote)

    def compare(self, before: TaskList, after: TaskList) -> DiffStat:
        self.compare_calls.append((before, after))
        return self._inner.compare(before, after)


def make_task(
    task_id: str,
    text: str = "Hello, world",
    *,
    status: TaskStatus = TaskStatus.TODO,
    modified: str = "2010-07-07T00:00:00+00:00",
) -> Task:
    return Task(
        id=task_id,
        status=status,
        text=text,
        created="2000-01-01T00:00:00+00:00",
        modified=modified,
    )
