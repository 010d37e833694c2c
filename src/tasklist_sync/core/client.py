# src/tasklist_sync/core/client.py

"""
Task list sync client.

The server stores one task list plus a version number. Writes carry the
version the writer last saw; the server rejects a stale version with 409 and
returns its current state, which sync() merges against before trying again.

Usage:
    config = ClientConfig(server="https://tasks.example.com", max_retries=3)
    async with await setup_client(config) as client:
        await client.login("secret")
        result = await client.sync(local_tasks)
"""

from __future__ import annotations

import logging
import ssl
from dataclasses import dataclass
from enum import Enum
from types import TracebackType
from typing import Any

import httpx

from ..config import ClientConfig
from ..tasks.merge import LatestModifiedMerge
from ..tasks.task_models import DiffStat, TaskList
from .codec import PayloadCodec, protection_for
from .errors import (
    CONFLICT_STATUS,
    ConflictError,
    HttpError,
    InvalidResponseError,
    handle_error,
)
from .ports import MergeEngine

logger = logging.getLogger(__name__)

OVERWRITE_VERSION = -1
"""Version sentinel: overwrite whatever the server holds."""

DEFAULT_TIMEOUT = 30.0


class SyncPhase(str, Enum):
    FETCHING = "fetching"
    MERGING = "merging"
    WRITING = "writing"
    CONFLICTED = "conflicted"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class DownloadResult:
    data: TaskList
    version: int


@dataclass(slots=True, frozen=True)
class SyncDiff:
    client: DiffStat
    server: DiffStat


@dataclass(slots=True, frozen=True)
class SyncResult:
    data: TaskList
    diff: SyncDiff


def _json_object(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError as e:
        raise InvalidResponseError(f"Invalid JSON response from server: {response.text!r}") from e
    if not isinstance(body, dict):
        raise InvalidResponseError(f"Invalid response from server: {body!r}")
    return body


def _data_and_version(body: dict[str, Any], what: str) -> tuple[str | None, int]:
    data = body.get("data")
    version = body.get("version")
    # bool is an int subclass; reject it explicitly
    if (
        "version" not in body
        or not isinstance(version, int)
        or isinstance(version, bool)
        or not (data is None or isinstance(data, str))
    ):
        raise InvalidResponseError(f"Invalid {what} response from server: {body!r}")
    return data, version


def _conflict_from_response(response: httpx.Response) -> ConflictError:
    body = _json_object(response)
    if "data" not in body:
        raise InvalidResponseError(f"Invalid conflict response from server: {body!r}")
    data, version = _data_and_version(body, "conflict")
    message = body.get("message")
    return ConflictError(
        message if isinstance(message, str) else "Conflicting update",
        data=data,
        version=version,
    )


class Client:
    config: ClientConfig
    http: httpx.AsyncClient
    merge_engine: MergeEngine
    codec: PayloadCodec
    phase: SyncPhase | None

    def __init__(
        self,
        config: ClientConfig,
        http: httpx.AsyncClient,
        *,
        merge_engine: MergeEngine | None = None,
    ) -> None:
        self.config = config
        self.http = http
        self.merge_engine = merge_engine or LatestModifiedMerge()
        self.codec = PayloadCodec(protection_for(config.encryption_key))
        self.phase = None

    async def __aenter__(self) -> Client:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http.aclose()

    def full_path(self, path: str) -> str:
        """
        Convert a relative path to a normalized full URL.

        Duplicate slashes are collapsed and the trailing slash is dropped,
        so "session" and "/session" give the same URL.
        """
        base = httpx.URL(self.config.server)
        segments = [s for s in f"{base.path}/{path}".split("/") if s]
        return str(base.copy_with(path="/" + "/".join(segments)))

    def _auth_headers(self) -> dict[str, str]:
        if not self.config.token:
            return {}
        return {"Authorization": f"Bearer {self.config.token}"}

    # ---- session ----

    async def login(self, password: str) -> None:
        try:
            response = await self.http.post(self.full_path("session"), json={"password": password})
            response.raise_for_status()
            token = _json_object(response).get("token")
            if not isinstance(token, str) or not token:
                raise InvalidResponseError("Invalid login response from server: missing token")
            self.config.token = token
            logger.info("Logged in to %s", self.config.server)
        except Exception as e:
            # A failed login leaves no session behind, even a previous one.
            self.config.token = None
            handle_error(e)

    async def logout(self) -> None:
        try:
            response = await self.http.delete(self.full_path("session"), headers=self._auth_headers())
            response.raise_for_status()
            logger.info("Logged out from %s", self.config.server)
        except Exception as e:
            handle_error(e)
        finally:
            # Local token goes away even if the server call failed.
            self.config.token = None

    # ---- data ----

    async def sync(self, data: TaskList) -> SyncResult:
        """
        Merge `data` with the server copy and write the result back.

        On a version conflict the merge is redone against the state the server
        returned, up to config.max_retries times. Other errors are not retried.
        """
        max_retries = self.config.max_retries or 0
        self.phase = SyncPhase.FETCHING
        try:
            current = await self.download()
            server_data, version = current.data, current.version

            attempt = 0
            while True:
                self.phase = SyncPhase.MERGING
                merged = self.merge_engine.merge(data, server_data)

                self.phase = SyncPhase.WRITING
                logger.debug("Sync attempt %d: uploading at version %d", attempt, version)
                try:
                    await self.upload(merged, version)
                except ConflictError as conflict:
                    self.phase = SyncPhase.CONFLICTED
                    if attempt >= max_retries:
                        logger.warning(
                            "Sync conflict at version %d, giving up after %d retries",
                            version,
                            attempt,
                        )
                        raise
                    attempt += 1
                    logger.info(
                        "Sync conflict: server is at version %d (expected %d), retrying (%d/%d)",
                        conflict.version,
                        version,
                        attempt,
                        max_retries,
                    )
                    server_data = await self.codec.decode(conflict.data)
                    version = conflict.version
                    continue

                self.phase = SyncPhase.SUCCEEDED
                result = SyncResult(
                    data=merged,
                    diff=SyncDiff(
                        client=self.merge_engine.compare(data, merged),
                        server=self.merge_engine.compare(server_data, merged),
                    ),
                )
                logger.info(
                    "Sync done (attempts=%d): client %s, server %s",
                    attempt + 1,
                    result.diff.client,
                    result.diff.server,
                )
                return result
        except Exception as e:
            logger.debug("Sync failed during %s: %r", self.phase.value, e)
            self.phase = SyncPhase.FAILED
            handle_error(e)

    async def download(self) -> DownloadResult:
        try:
            response = await self.http.get(self.full_path("/"), headers=self._auth_headers())
            response.raise_for_status()
            data, version = _data_and_version(_json_object(response), "download")
            tasks = await self.codec.decode(data)
            logger.debug("Downloaded %d tasks at version %d", len(tasks), version)
            return DownloadResult(data=tasks, version=version)
        except Exception as e:
            handle_error(e)

    async def upload(self, data: TaskList, version: int = OVERWRITE_VERSION) -> None:
        """
        Write `data` to the server.

        `version` is the version the caller last saw; OVERWRITE_VERSION (-1)
        skips the check. A stale version raises ConflictError holding the
        server's current data and version.
        """
        try:
            wire = await self.codec.encode(data)
            response = await self.http.put(
                self.full_path("/"),
                json={"data": wire, "version": version},
                headers=self._auth_headers(),
            )
            if response.status_code == CONFLICT_STATUS:
                raise _conflict_from_response(response)
            response.raise_for_status()
            logger.debug("Uploaded %d tasks (expected version %d)", len(data), version)
        except Exception as e:
            handle_error(e)

    async def delete(self) -> None:
        try:
            response = await self.http.delete(self.full_path("/"), headers=self._auth_headers())
            response.raise_for_status()
            logger.info("Deleted task list on %s", self.config.server)
        except Exception as e:
            handle_error(e)


def _verify_option(config: ClientConfig) -> bool | ssl.SSLContext:
    if not config.verify:
        return False
    if config.ca:
        # Trust only the given CA(s), not the system store.
        try:
            return ssl.create_default_context(cadata=config.ca)
        except ssl.SSLError as e:
            raise HttpError(500, f"Invalid CA certificate: {e}") from e
    return True


async def setup_client(
    config: ClientConfig,
    *,
    merge_engine: MergeEngine | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Client:
    """
    Create a Client and its HTTP session from `config`.

    `transport` replaces the network layer (tests pass httpx.MockTransport).
    """
    http = httpx.AsyncClient(
        verify=_verify_option(config),
        transport=transport,
        timeout=timeout,
    )
    logger.debug("Client ready: %r", config)
    return Client(config, http, merge_engine=merge_engine)
