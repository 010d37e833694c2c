# src/tasklist_sync/core/codec.py

"""
Payload codec: task list <-> wire string.

The wire form is compact JSON. When a passphrase is configured the JSON is
wrapped in an encrypted envelope (see crypto.py). Whether to encrypt is
decided once, by the Protection value the codec is built with, so downloads,
uploads and conflict payloads are all handled the same way.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from ..tasks.task_models import Task, TaskList
from . import crypto
from .errors import DataCorruptionError

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Plain:
    """Payload is sent in clear."""


@dataclass(slots=True, frozen=True)
class Encrypted:
    passphrase: str

    def __repr__(self) -> str:
        return "Encrypted(passphrase=***)"


Protection = Plain | Encrypted


def protection_for(encryption_key: str | None) -> Protection:
    if encryption_key:
        return Encrypted(encryption_key)
    return Plain()


def serialize(tasks: TaskList) -> str:
    return json.dumps([t.to_dict() for t in tasks], ensure_ascii=False, separators=(",", ":"))


def deserialize(text: str) -> TaskList:
    """Parse the JSON wire form. Raises DataCorruptionError on anything invalid."""
    if crypto.looks_encrypted(text):
        raise DataCorruptionError("Data is encrypted, an encryption key is required")

    try:
        raw: Any = json.loads(text)
    except ValueError as e:
        raise DataCorruptionError() from e

    if not isinstance(raw, list):
        raise DataCorruptionError("Task list must be a JSON array")

    tasks: TaskList = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            raise DataCorruptionError(f"Task #{i} is not an object")
        try:
            tasks.append(Task.from_dict(item))
        except (KeyError, TypeError, ValueError) as e:
            raise DataCorruptionError(f"Task #{i} is invalid: {e}") from e
    return tasks


class PayloadCodec:
    def __init__(self, protection: Protection) -> None:
        self.protection = protection

    @property
    def encrypted(self) -> bool:
        return isinstance(self.protection, Encrypted)

    async def encode(self, tasks: TaskList) -> str:
        text = serialize(tasks)
        match self.protection:
            case Encrypted(passphrase=passphrase):
                return await crypto.encrypt(text, passphrase)
            case Plain():
                return text
        raise TypeError(f"Unknown protection: {self.protection!r}")

    async def decode(self, wire: str | None) -> TaskList:
        """
        Decode what the server stored. Empty/absent data is an empty list.

        Raises DataCorruptionError (or its DecryptionError subclass).
        """
        if not wire:
            return []

        match self.protection:
            case Encrypted(passphrase=passphrase):
                text = await crypto.decrypt(wire, passphrase)
            case Plain():
                text = wire
            case _:
                raise TypeError(f"Unknown protection: {self.protection!r}")

        tasks = deserialize(text)
        logger.debug("Decoded %d tasks (encrypted=%s)", len(tasks), self.encrypted)
        return tasks
