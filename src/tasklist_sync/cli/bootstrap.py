# src/tasklist_sync/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the sync client and the local task file into AppState,
- persists the session token between invocations.
"""

from __future__ import annotations

import contextlib
import logging
import os
from pathlib import Path

from ..config import Settings, get_settings
from ..core.client import setup_client
from ..core.state import AppState
from ..tasks.task_store import TaskFileStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_path.parent.mkdir(parents=True, exist_ok=True)
    settings.token_path.parent.mkdir(parents=True, exist_ok=True)


def load_token(path: Path) -> str | None:
    if not path.exists():
        return None
    token = path.read_text("utf-8").strip()
    return token or None


def save_token(path: Path, token: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(".tmp")
    tmp.write_text(token, "utf-8")
    # Keep the token private before it gets its final name.
    with contextlib.suppress(OSError):
        os.chmod(tmp, 0o600)
    os.replace(tmp, path)
    logger.debug("Saved session token to %s", path)


def clear_token(path: Path) -> None:
    with contextlib.suppress(FileNotFoundError):
        path.unlink()
        logger.debug("Removed session token %s", path)


async def create_initial_state(*, settings: Settings | None = None, transport=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    config = settings.client_config(token=load_token(settings.token_path))
    client = await setup_client(config, transport=transport, timeout=settings.timeout_seconds)

    return AppState(
        settings=settings,
        client=client,
        task_store=TaskFileStore(settings.tasks_path),
    )
