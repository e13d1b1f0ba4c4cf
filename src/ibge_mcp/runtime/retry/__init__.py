"""Retry with exponential backoff for upstream HTTP requests.

- RetryOptions / RETRY_PRESETS: how many retries, which statuses, how long to wait
- HttpTransport: httpx-backed GET with retry, the default Transport
"""

from .backoff import Backoff, ConstantBackoff, ExponentialBackoff
from .policy import DEFAULT_RETRYABLE_STATUS, RETRY_PRESETS, RetryOptions, is_network_error
from .transport import HttpTransport, Transport

__all__ = [
    "Backoff",
    "ConstantBackoff",
    "ExponentialBackoff",
    "DEFAULT_RETRYABLE_STATUS",
    "RETRY_PRESETS",
    "RetryOptions",
    "is_network_error",
    "HttpTransport",
    "Transport",
]
