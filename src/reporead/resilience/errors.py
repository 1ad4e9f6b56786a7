"""Error taxonomy and classification for structured error handling.

Every failure the service reports belongs to one closed set of kinds.
Each kind renders to a single human-readable string, which is what
the HTTP API and the CLI show to the user.

``classify_error`` sorts third-party exceptions (httpx, litellm) by
category so they can be mapped onto the taxonomy and retried only
when the failure is transient.
"""

from __future__ import annotations

import asyncio
from enum import Enum


class ErrorKind(Enum):
    INVALID_URL = "invalid_url"
    HTTP = "http"
    IO = "io"
    ZIP = "zip"
    JSON = "json"
    REPO_NOT_FOUND = "repo_not_found"


class RepoError(Exception):
    """Base class for every error surfaced at the command boundary."""

    kind: ErrorKind
    prefix = "Error"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.prefix}: {self.message}"


class InvalidUrl(RepoError):
    """Bad input: unparseable URL, unsafe path, hosting HTTP status."""

    kind = ErrorKind.INVALID_URL
    prefix = "Invalid URL"
    status_code = 400


class UnsafePath(InvalidUrl):
    """A path that would resolve outside its allowed root."""

    prefix = "Unsafe path"


class HttpError(RepoError):
    """Transport-level failure talking to a remote service."""

    kind = ErrorKind.HTTP
    prefix = "HTTP request failed"
    status_code = 502


class IoError(RepoError):
    kind = ErrorKind.IO
    prefix = "IO error"


class ZipError(RepoError):
    kind = ErrorKind.ZIP
    prefix = "ZIP extraction failed"


class JsonError(RepoError):
    kind = ErrorKind.JSON
    prefix = "JSON error"


class RepoNotFound(RepoError):
    kind = ErrorKind.REPO_NOT_FOUND
    prefix = "Repository not found"
    status_code = 404


class ErrorClass(Enum):
    TRANSIENT = "transient"  # 429, network errors — retryable
    SERVER = "server"  # 500, 502, 503 — retryable
    TIMEOUT = "timeout"  # deadline exceeded — retryable with backoff
    CLIENT = "client"  # 400, 401, 403 — do NOT retry
    UNKNOWN = "unknown"  # unclassified — do NOT retry


def classify_error(error: Exception) -> ErrorClass:
    """Classify an error to determine handling strategy.

    Checks structured attributes first (status_code), falls back
    to string matching for untyped exceptions.
    """
    status_code = getattr(error, "status_code", None)
    if isinstance(status_code, int):
        if status_code == 429:
            return ErrorClass.TRANSIENT
        if 400 <= status_code < 500:
            return ErrorClass.CLIENT
        if 500 <= status_code < 600:
            return ErrorClass.SERVER

    if isinstance(error, (TimeoutError, asyncio.TimeoutError)):
        return ErrorClass.TIMEOUT

    msg = str(error).lower()

    if "timeout" in msg or "timed out" in msg:
        return ErrorClass.TIMEOUT
    if "429" in msg or "rate limit" in msg or "rate_limit" in msg:
        return ErrorClass.TRANSIENT
    if "econnrefused" in msg or "connection" in msg:
        return ErrorClass.TRANSIENT

    return ErrorClass.UNKNOWN


_RETRYABLE = frozenset({
    ErrorClass.TRANSIENT,
    ErrorClass.SERVER,
    ErrorClass.TIMEOUT,
})


def is_retryable(error: Exception) -> bool:
    """Return True if the error category supports retry."""
    return classify_error(error) in _RETRYABLE
