"""Retry options for upstream HTTP requests.

Decides which responses and exceptions are worth another attempt and how
long to wait in between. The transport consumes these; cached fetch only
passes them through.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Annotated, Final

import httpx
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from .backoff import Backoff, ExponentialBackoff

if TYPE_CHECKING:
    from ibge_mcp.foundation.config import RetrySettings

DEFAULT_RETRYABLE_STATUS: frozenset[int] = frozenset({429, 500, 502, 503, 504})

_NETWORK_PATTERNS: tuple[str, ...] = (
    "econnrefused",
    "econnreset",
    "etimedout",
    "enotfound",
    "eai_again",
    "ehostunreach",
    "enetunreach",
    "fetch failed",
    "socket hang up",
    "network error",
    "network request failed",
    "connection reset",
    "connection refused",
    "connection aborted",
    "name or service not known",
    "temporary failure in name resolution",
    "timed out",
    "timeout",
)

_TRANSIENT_HTTPX = (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError)


class RetryOptions(BaseModel):
    """Retry behavior for a single upstream request.

    Attributes:
        max_retries: Retries after the first attempt (0 = single attempt)
        backoff: Delay strategy between attempts
        retryable_status_codes: Response statuses that trigger a retry

    Example:
        >>> RetryOptions(max_retries=2, backoff=ExponentialBackoff(initial_delay=0.5, max_delay=2.0))
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,  # For Backoff protocol
        extra="forbid",
        revalidate_instances="never",
    )

    max_retries: Annotated[int, Field(ge=0, le=10)] = 4
    backoff: Backoff = Field(default_factory=ExponentialBackoff, repr=False)
    retryable_status_codes: frozenset[int] = DEFAULT_RETRYABLE_STATUS

    @field_validator("retryable_status_codes", mode="before")
    @classmethod
    def _normalize_codes(cls, v: frozenset[int] | set[int] | list[int] | tuple[int, ...]) -> frozenset[int]:
        return v if isinstance(v, frozenset) else frozenset(int(c) for c in v)

    @computed_field
    @property
    def is_disabled(self) -> bool:
        return self.max_retries == 0

    @classmethod
    def from_settings(cls, settings: RetrySettings) -> RetryOptions:
        return cls(
            max_retries=settings.max_retries,
            backoff=ExponentialBackoff(
                initial_delay=settings.initial_delay,
                max_delay=settings.max_delay,
                multiplier=settings.multiplier,
            ),
            retryable_status_codes=settings.retryable_status_codes,
        )

    def is_retryable_status(self, status: int) -> bool:
        return status in self.retryable_status_codes

    def get_delay(self, attempt: int) -> float:
        """Delay before retry `attempt` (0-indexed)."""
        return self.backoff.delay(attempt)


# Named configurations for different call profiles
RETRY_PRESETS: Final[Mapping[str, RetryOptions]] = MappingProxyType({
    "DEFAULT": RetryOptions(max_retries=4, backoff=ExponentialBackoff(initial_delay=2.0)),
    "AGGRESSIVE": RetryOptions(max_retries=6, backoff=ExponentialBackoff(initial_delay=1.0, max_delay=30.0)),
    "QUICK": RetryOptions(max_retries=2, backoff=ExponentialBackoff(initial_delay=0.5, max_delay=2.0)),
    "NONE": RetryOptions(max_retries=0),
})


def is_network_error(exc: BaseException) -> bool:
    """Whether an exception looks like a transient connection failure."""
    if isinstance(exc, _TRANSIENT_HTTPX):
        return True
    haystack = f"{type(exc).__name__} {exc}".lower()
    return any(pattern in haystack for pattern in _NETWORK_PATTERNS)
