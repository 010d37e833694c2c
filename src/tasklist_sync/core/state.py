# src/tasklist_sync/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..config import Settings
from .client import Client
from .ports import TaskRepo


@dataclass
class AppState:
    # Store Settings on the state for easy access in command handlers.
    settings: Settings

    client: Client
    task_store: TaskRepo
