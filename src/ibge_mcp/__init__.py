"""ibge-mcp - MCP tool server for the IBGE public APIs.

Every tool call runs through one pipeline: a TTL request cache in front of
a retrying HTTP transport, with call metrics and stderr-only logging.

Quick Start:
    >>> from ibge_mcp import Pipeline, TOOLS
    >>> async with Pipeline() as pipeline:
    ...     print(await TOOLS["ibge_estados"].run(pipeline, {"regiao": "NE"}))

Serving over MCP (stdio):
    $ ibge-mcp
    # or: python -m ibge_mcp
"""

from .foundation import (
    ErrorKind,
    FetchError,
    HttpStatusError,
    IbgeSettings,
    NetworkError,
    ParseError,
    RequestTimeoutError,
    RetryExhaustedError,
    ToolError,
    get_settings,
)
from .io import CacheTTL, RequestCache, cache_key, cached_fetch
from .runtime import (
    RETRY_PRESETS,
    HttpTransport,
    Logger,
    MetricsCollector,
    Pipeline,
    RetryOptions,
    configure_logging,
    with_metrics,
)
from .tools import TOOLS, ToolSpec, ibge_tool

__version__ = "1.1.0"

__all__ = [
    "__version__",
    # Config
    "IbgeSettings",
    "get_settings",
    # Errors
    "ErrorKind",
    "FetchError",
    "HttpStatusError",
    "NetworkError",
    "ParseError",
    "RequestTimeoutError",
    "RetryExhaustedError",
    "ToolError",
    # Cache
    "CacheTTL",
    "RequestCache",
    "cache_key",
    "cached_fetch",
    # Runtime
    "RETRY_PRESETS",
    "HttpTransport",
    "Logger",
    "MetricsCollector",
    "Pipeline",
    "RetryOptions",
    "configure_logging",
    "with_metrics",
    # Tools
    "TOOLS",
    "ToolSpec",
    "ibge_tool",
]
