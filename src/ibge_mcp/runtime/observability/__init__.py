"""Observability: call metrics and stderr-only diagnostic logging.

Quick Start:
    >>> from ibge_mcp.runtime.observability import MetricsCollector, with_metrics, configure_logging
    >>> log = configure_logging()
    >>> collector = MetricsCollector()
    >>> result = await with_metrics(collector, "ibge_estados", "localidades", work, logger=log)
    >>> print(collector.get_report())
"""

from .logging import (
    ConsoleRenderer,
    JsonRenderer,
    LogEntry,
    Logger,
    LogLevel,
    LogRenderer,
    NoOpRenderer,
    configure_logging,
)
from .metrics import (
    ApiMetrics,
    ErrorRecord,
    GlobalMetrics,
    MetricEntry,
    MetricsCollector,
    ToolMetrics,
    with_metrics,
)

__all__ = [
    # Logging
    "ConsoleRenderer",
    "JsonRenderer",
    "LogEntry",
    "Logger",
    "LogLevel",
    "LogRenderer",
    "NoOpRenderer",
    "configure_logging",
    # Metrics
    "ApiMetrics",
    "ErrorRecord",
    "GlobalMetrics",
    "MetricEntry",
    "MetricsCollector",
    "ToolMetrics",
    "with_metrics",
]
