"""Error kinds and exceptions raised by the fetch pipeline.

Every failure that leaves the transport or cached fetch belongs to a closed
set of kinds. Metrics key their per-kind counters off `ErrorKind` values, so
the labels stay stable no matter which exception class produced them.
"""

from __future__ import annotations

from enum import StrEnum

import httpx
from pydantic import ValidationError


class ErrorKind(StrEnum):
    """Closed classification of pipeline failures.

    Values double as the labels stored in metrics and shown in reports.
    """
    HTTP_STATUS = "HttpStatusError"
    NETWORK = "NetworkError"
    TIMEOUT = "TimeoutError"
    PARSE = "ParseError"
    VALIDATION = "ValidationError"
    UNKNOWN = "UnknownError"


class FetchError(Exception):
    """Base class for failures raised by the transport or cached fetch."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.url = url


class HttpStatusError(FetchError):
    """Upstream answered with a non-success status."""

    kind = ErrorKind.HTTP_STATUS

    def __init__(self, status: int, status_text: str = "", *, url: str | None = None) -> None:
        super().__init__(f"HTTP {status}: {status_text}" if status_text else f"HTTP {status}", url=url)
        self.status = status
        self.status_text = status_text


class RetryExhaustedError(HttpStatusError):
    """A retryable status persisted through every retry attempt."""

    def __init__(self, status: int, status_text: str = "", *, retries: int, url: str | None = None) -> None:
        super().__init__(status, status_text, url=url)
        self.retries = retries
        self.message = f"{self.message} (after {retries} retries)"
        self.args = (self.message,)


class NetworkError(FetchError):
    """Connection-level failure (DNS, refused, reset) after retries."""

    kind = ErrorKind.NETWORK


class RequestTimeoutError(NetworkError):
    """Upstream did not answer within the configured timeout."""

    kind = ErrorKind.TIMEOUT


class ParseError(FetchError):
    """Response body could not be decoded as JSON."""

    kind = ErrorKind.PARSE


def classify_exception(exc: BaseException) -> ErrorKind:
    """Map an exception onto the closed `ErrorKind` set."""
    if isinstance(exc, FetchError):
        return exc.kind
    if isinstance(exc, ValidationError):
        return ErrorKind.VALIDATION
    if isinstance(exc, httpx.TimeoutException):
        return ErrorKind.TIMEOUT
    if isinstance(exc, httpx.TransportError):
        return ErrorKind.NETWORK
    return ErrorKind.UNKNOWN
