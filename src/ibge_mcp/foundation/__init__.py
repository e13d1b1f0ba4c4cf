"""Foundation layer: configuration and error types shared by every other layer."""

from .config import IbgeSettings, clear_settings_cache, constants, get_settings
from .errors import (
    ErrorKind,
    FetchError,
    HttpStatusError,
    NetworkError,
    ParseError,
    RequestTimeoutError,
    RetryExhaustedError,
    ToolError,
    classify_exception,
)

__all__ = [
    "IbgeSettings",
    "get_settings",
    "clear_settings_cache",
    "constants",
    "ErrorKind",
    "FetchError",
    "HttpStatusError",
    "NetworkError",
    "ParseError",
    "RequestTimeoutError",
    "RetryExhaustedError",
    "ToolError",
    "classify_exception",
]
