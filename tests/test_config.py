# tests/test_config.py

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest

from tasklist_sync.config import ClientConfig, Settings
from tasklist_sync.core.errors import HttpError


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("SERVER", "TOKEN", "MAX_RETRIES", "ENCRYPTION_KEY", "VERIFY", "DATA_DIR", "CA_PATH", "TASKS_PATH"):
        monkeypatch.delenv(f"TASKSYNC_{name}", raising=False)

    settings = Settings.from_env(dotenv=False)

    assert settings.server == "http://localhost:3000"
    assert settings.verify is True
    assert settings.max_retries is None
    assert settings.encryption_key is None
    assert settings.tasks_path == Path(".local/tasksync") / "tasks.json"


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    ca_file = tmp_path / "ca.pem"
    ca_file.write_text("-----BEGIN CERTIFICATE-----\n...\n", "utf-8")

    monkeypatch.setenv("TASKSYNC_SERVER", "https://tasks.example.com")
    monkeypatch.setenv("TASKSYNC_TOKEN", "env-token")
    monkeypatch.setenv("TASKSYNC_VERIFY", "no")
    monkeypatch.setenv("TASKSYNC_CA_PATH", str(ca_file))
    monkeypatch.setenv("TASKSYNC_MAX_RETRIES", "3")
    monkeypatch.setenv("TASKSYNC_ENCRYPTION_KEY", "abc")
    monkeypatch.setenv("TASKSYNC_DATA_DIR", str(tmp_path / "data"))

    settings = Settings.from_env(dotenv=False)
    config = settings.client_config()

    assert settings.tasks_path == tmp_path / "data" / "tasks.json"
    assert config == ClientConfig(
        server="https://tasks.example.com",
        token="env-token",
        verify=False,
        ca=ca_file.read_text("utf-8"),
        max_retries=3,
        encryption_key="abc",
    )
    # An explicit (stored) token wins over the environment.
    assert settings.client_config(token="stored").token == "stored"


def test_invalid_numbers_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKSYNC_MAX_RETRIES", "many")
    monkeypatch.setenv("TASKSYNC_TIMEOUT_SECONDS", "soon")

    settings = Settings.from_env(dotenv=False)

    assert settings.max_retries is None
    assert settings.timeout_seconds == 30.0


def test_client_config_repr_hides_secrets() -> None:
    config = ClientConfig(server="http://x", token="t0ken", encryption_key="p4ss")

    assert "t0ken" not in repr(config)
    assert "p4ss" not in repr(config)


def test_client_config_missing_ca_file(tmp_path: Path) -> None:
    settings = replace(Settings.from_env(dotenv=False), ca_path=tmp_path / "missing.pem")

    with pytest.raises(HttpError) as exc_info:
        settings.client_config()

    assert exc_info.value.status == 500
    assert "missing.pem" in exc_info.value.message
