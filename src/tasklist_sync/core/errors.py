# src/tasklist_sync/core/errors.py

"""
Error types raised by the client.

Every failure leaving the library has the same shape: an HttpError carrying a
status code and a message. Transport failures are normalized by handle_error()
at the boundary of each public client call.
"""

from __future__ import annotations

import logging
from typing import Any, NoReturn

import httpx

logger = logging.getLogger(__name__)

CONFLICT_STATUS = 409


class HttpError(Exception):
    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message

    def __str__(self) -> str:
        return f"{self.status}: {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status}, message={self.message!r})"


class ConflictError(HttpError):
    """
    Upload rejected because the expected version is stale.

    Carries the server's current (still encoded) data and version so the
    caller can merge against it and try again.
    """

    def __init__(self, message: str, *, data: str | None, version: int) -> None:
        super().__init__(CONFLICT_STATUS, message)
        self.data = data
        self.version = version


class DataCorruptionError(HttpError):
    def __init__(self, message: str = "Data corrupted or encrypted") -> None:
        super().__init__(500, message)


class DecryptionError(DataCorruptionError):
    pass


class InvalidResponseError(HttpError):
    """Server answered with a body that does not follow the protocol."""

    def __init__(self, message: str) -> None:
        super().__init__(502, message)


def _response_message(response: httpx.Response) -> str:
    try:
        body: Any = response.json()
    except ValueError:
        return response.text or response.reason_phrase

    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return response.text


def handle_http_status_error(error: httpx.HTTPStatusError) -> NoReturn:
    # The request was made and the server responded with a non-2xx status.
    response = error.response
    raise HttpError(response.status_code, _response_message(response)) from error


def handle_request_error(error: httpx.RequestError) -> NoReturn:
    if isinstance(error, (httpx.UnsupportedProtocol, httpx.LocalProtocolError)):
        # Something went wrong while setting up the request.
        raise HttpError(500, str(error)) from error
    # The request was made but no response was received.
    raise HttpError(503, str(error) or type(error).__name__) from error


def handle_error(error: Exception) -> NoReturn:
    """Re-raise any failure as an HttpError. Never returns."""
    if isinstance(error, HttpError):
        raise error
    if isinstance(error, httpx.HTTPStatusError):
        handle_http_status_error(error)
    if isinstance(error, httpx.RequestError):
        handle_request_error(error)
    if isinstance(error, httpx.InvalidURL):
        raise HttpError(500, str(error)) from error

    logger.debug("Unexpected client error: %r", error)
    raise HttpError(500, str(error) or type(error).__name__) from error
