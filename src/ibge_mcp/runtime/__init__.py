"""Runtime layer: retrying transport, observability, and the request pipeline."""

from .observability import Logger, MetricsCollector, configure_logging, with_metrics
from .pipeline import Pipeline
from .retry import RETRY_PRESETS, HttpTransport, RetryOptions, Transport

__all__ = [
    "Logger",
    "MetricsCollector",
    "configure_logging",
    "with_metrics",
    "Pipeline",
    "RETRY_PRESETS",
    "HttpTransport",
    "RetryOptions",
    "Transport",
]
