# src/tasklist_sync/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
- ClientConfig is the small per-client view the library itself consumes.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .core.errors import HttpError

logger = logging.getLogger(__name__)

ENV_PREFIX = "TASKSYNC"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_opt(name: str) -> str | None:
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return None
    return v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int | None) -> int | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring invalid integer in %s: %r", name, raw)
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid number in %s: %r", name, raw)
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(slots=True)
class ClientConfig:
    """
    Connection settings for one Client.

    Only `token` changes after construction (login/logout).
    """

    # Server URL
    server: str
    # Bearer token; set by login() or directly
    token: str | None = None
    # Verify the certificate chain when using https
    verify: bool = True
    # Trusted CA certificates (PEM); replaces the default trust store.
    # Only used when verify is True.
    ca: str | None = None
    # Max automatic retries on conflicting updates; None/0 means no retry
    max_retries: int | None = None
    # Passphrase used to encrypt data before sending it; None sends plaintext
    encryption_key: str | None = None

    def __repr__(self) -> str:
        return (
            f"ClientConfig(server={self.server!r}, token={'***' if self.token else None}, "
            f"verify={self.verify}, ca={'<pem>' if self.ca else None}, "
            f"max_retries={self.max_retries}, "
            f"encryption_key={'***' if self.encryption_key else None})"
        )


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Server ----
    server: str
    token: str | None
    verify: bool
    ca_path: Path | None
    timeout_seconds: float

    # ---- Sync ----
    max_retries: int | None
    encryption_key: str | None

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    tasks_path: Path
    token_path: Path

    @staticmethod
    def from_env(*, dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv(override=False)

        app_name = _env(_k("APP_NAME"), "tasksync") or "tasksync"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        server = _env(_k("SERVER"), "http://localhost:3000").strip()
        token = _env_opt(_k("TOKEN"))
        verify = _env_bool(_k("VERIFY"), True)
        ca_raw = _env_opt(_k("CA_PATH"))
        ca_path = Path(ca_raw).expanduser() if ca_raw else None
        timeout_seconds = _env_float(_k("TIMEOUT_SECONDS"), 30.0)

        max_retries = _env_int(_k("MAX_RETRIES"), None)
        encryption_key = _env_opt(_k("ENCRYPTION_KEY"))

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/tasksync"))
        tasks_path = _env_path(_k("TASKS_PATH"), data_dir / "tasks.json")
        token_path = _env_path(_k("TOKEN_PATH"), data_dir / "token")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            server=server,
            token=token,
            verify=verify,
            ca_path=ca_path,
            timeout_seconds=timeout_seconds,
            max_retries=max_retries,
            encryption_key=encryption_key,
            data_dir=data_dir,
            tasks_path=tasks_path,
            token_path=token_path,
        )

    def client_config(self, *, token: str | None = None) -> ClientConfig:
        """
        Build the ClientConfig; an explicit token overrides TASKSYNC_TOKEN.

        An unreadable CA file raises HttpError(500), like any other client error.
        """
        ca = None
        if self.ca_path is not None:
            try:
                ca = self.ca_path.read_text("utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise HttpError(500, f"Cannot read CA file {self.ca_path}: {e}") from e
        return ClientConfig(
            server=self.server,
            token=token or self.token,
            verify=self.verify,
            ca=ca,
            max_retries=self.max_retries,
            encryption_key=self.encryption_key,
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings
