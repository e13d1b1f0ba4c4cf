"""Error handling for the IBGE MCP server.

- ErrorKind: closed classification used as metrics labels
- FetchError and subclasses: typed failures from transport and cached fetch
- ToolError: structured, renderable error returned by tool handlers
"""

from .errors import (
    ErrorKind,
    FetchError,
    HttpStatusError,
    NetworkError,
    ParseError,
    RequestTimeoutError,
    RetryExhaustedError,
    classify_exception,
)
from .tool import IBGE_ERROR_CODES, ToolError

__all__ = [
    "ErrorKind",
    "FetchError",
    "HttpStatusError",
    "NetworkError",
    "ParseError",
    "RequestTimeoutError",
    "RetryExhaustedError",
    "classify_exception",
    "IBGE_ERROR_CODES",
    "ToolError",
]
