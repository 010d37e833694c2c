# tests/conftest.py

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from tasklist_sync.config import ClientConfig, Settings
from tasklist_sync.core.client import Client

from .fakes import FakeTaskServer

SERVER_URL = "http://tasks.test"


@pytest.fixture()
def server() -> FakeTaskServer:
    return FakeTaskServer()


@pytest.fixture()
def make_client(server: FakeTaskServer) -> Callable[..., Client]:
    """
    Build a Client talking to the fake server.

    Clients are already logged in unless token=None is passed explicitly.
    """

    def _make(*, token: str | None = "token-test", merge_engine=None, **config_kwargs) -> Client:
        if token is not None:
            server.tokens.add(token)
        config = ClientConfig(server=SERVER_URL, token=token, **config_kwargs)
        http = httpx.AsyncClient(transport=server.transport())
        return Client(config, http, merge_engine=merge_engine)

    return _make


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """
    Settings pointing at tmp paths.

    Built directly rather than from the environment, to keep tests isolated
    and deterministic.
    """
    data_dir = tmp_path / "data"
    return Settings(
        app_name="tasksync-test",
        log_level="DEBUG",
        server=SERVER_URL,
        token=None,
        verify=True,
        ca_path=None,
        timeout_seconds=5.0,
        max_retries=1,
        encryption_key=None,
        data_dir=data_dir,
        tasks_path=data_dir / "tasks.json",
        token_path=data_dir / "token",
    )
