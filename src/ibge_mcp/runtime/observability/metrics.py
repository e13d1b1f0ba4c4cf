"""Call metrics: per-call outcome records folded into global, per-tool and per-API aggregates.

The collector is thread-safe: each operation holds a lock for its own
duration only. `with_metrics` wraps a unit of work, records exactly one
entry for it, and always hands back the wrapped call's own result or exception.
"""

from __future__ import annotations

import math
import threading
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import TYPE_CHECKING, TypeVar

from ibge_mcp.foundation.errors import ErrorKind, classify_exception
from ibge_mcp.io.cache import FetchProbe

if TYPE_CHECKING:
    from .logging import Logger

T = TypeVar("T")

DEFAULT_MAX_RECENT_ERRORS = 50
REPORT_RECENT_ERRORS = 10


# ═══════════════════════════════════════════════════════════════════════════════
# Records & Aggregates
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class MetricEntry:
    """One observed call.

    Attributes:
        timestamp: Completion time, epoch seconds
        tool: Tool name
        duration: Elapsed wall time in milliseconds
        success: Whether the unit of work completed without raising
        cached: Whether the call was served from cache
        api: Upstream API name, if any
        error_type: ErrorKind label on failure
    """

    timestamp: float
    tool: str
    duration: float
    success: bool
    cached: bool
    api: str | None = None
    error_type: str | None = None


@dataclass(slots=True)
class ToolMetrics:
    calls: int = 0
    successes: int = 0
    failures: int = 0
    total_duration: float = 0.0
    avg_duration: float = 0.0
    cache_hits: int = 0
    cache_misses: int = 0
    last_called: float | None = None
    errors: dict[str, int] = field(default_factory=dict)


@dataclass(slots=True)
class ApiMetrics:
    calls: int = 0
    errors: int = 0
    avg_duration: float = 0.0


@dataclass(frozen=True, slots=True)
class ErrorRecord:
    timestamp: float
    tool: str
    error: str


@dataclass(slots=True)
class GlobalMetrics:
    """Process-wide aggregates since start (or the last reset)."""

    start_time: float = field(default_factory=time.time)
    total_calls: int = 0
    total_successes: int = 0
    total_failures: int = 0
    total_cache_hits: int = 0
    total_cache_misses: int = 0
    by_tool: dict[str, ToolMetrics] = field(default_factory=dict)
    by_api: dict[str, ApiMetrics] = field(default_factory=dict)
    recent_errors: list[ErrorRecord] = field(default_factory=list)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _percentage(part: int, total: int) -> str:
    if total == 0:
        return "0%"
    return f"{_round_half_up(part / total * 100)}%"


# ═══════════════════════════════════════════════════════════════════════════════
# Collector
# ═══════════════════════════════════════════════════════════════════════════════


class MetricsCollector:
    """Accumulates MetricEntry records.

    Example:
        >>> collector = MetricsCollector()
        >>> collector.record(MetricEntry(time.time(), "ibge_estados", 12.5, True, False, api="localidades"))
        >>> collector.get_metrics().by_tool["ibge_estados"].calls
        1
    """

    __slots__ = ("_lock", "_enabled", "_max_recent_errors", "_metrics", "_clock")

    def __init__(
        self,
        max_recent_errors: int = DEFAULT_MAX_RECENT_ERRORS,
        enabled: bool = True,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._lock = threading.Lock()
        self._enabled = enabled
        self._max_recent_errors = max_recent_errors
        self._clock = clock
        self._metrics = GlobalMetrics(start_time=clock())

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def record(self, entry: MetricEntry) -> None:
        """Fold one entry into the aggregates. No-op while disabled."""
        if not self._enabled:
            return
        with self._lock:
            m = self._metrics
            m.total_calls += 1
            if entry.success:
                m.total_successes += 1
            else:
                m.total_failures += 1
            if entry.cached:
                m.total_cache_hits += 1
            else:
                m.total_cache_misses += 1

            self._update_tool(entry)
            if entry.api:
                self._update_api(entry)

            if not entry.success and entry.error_type:
                m.recent_errors.append(ErrorRecord(entry.timestamp, entry.tool, entry.error_type))
                if len(m.recent_errors) > self._max_recent_errors:
                    del m.recent_errors[0]

    def _update_tool(self, entry: MetricEntry) -> None:
        tool = self._metrics.by_tool.setdefault(entry.tool, ToolMetrics())
        tool.calls += 1
        tool.total_duration += entry.duration
        tool.avg_duration = tool.total_duration / tool.calls
        tool.last_called = entry.timestamp
        if entry.success:
            tool.successes += 1
        else:
            tool.failures += 1
            if entry.error_type:
                tool.errors[entry.error_type] = tool.errors.get(entry.error_type, 0) + 1
        if entry.cached:
            tool.cache_hits += 1
        else:
            tool.cache_misses += 1

    def _update_api(self, entry: MetricEntry) -> None:
        api = self._metrics.by_api.setdefault(entry.api or "unknown", ApiMetrics())
        prev_total = api.avg_duration * api.calls
        api.calls += 1
        api.avg_duration = (prev_total + entry.duration) / api.calls
        if not entry.success:
            api.errors += 1

    def get_metrics(self) -> GlobalMetrics:
        """Snapshot of the current aggregates; later records do not affect it."""
        with self._lock:
            m = self._metrics
            return replace(
                m,
                by_tool={name: replace(t, errors=dict(t.errors)) for name, t in m.by_tool.items()},
                by_api={name: replace(a) for name, a in m.by_api.items()},
                recent_errors=list(m.recent_errors),
            )

    def get_report(self) -> str:
        """Markdown summary for humans and LLMs."""
        m = self.get_metrics()
        uptime_minutes = math.floor((self._clock() - m.start_time) / 60)

        lines = [
            "## IBGE MCP Server - Métricas",
            "",
            "### Estatísticas Globais",
            "",
            "| Métrica | Valor |",
            "|:--------|------:|",
            f"| **Uptime** | {uptime_minutes} minutos |",
            f"| **Total de chamadas** | {m.total_calls} |",
            f"| **Sucessos** | {m.total_successes} ({_percentage(m.total_successes, m.total_calls)}) |",
            f"| **Falhas** | {m.total_failures} ({_percentage(m.total_failures, m.total_calls)}) |",
            f"| **Cache hits** | {m.total_cache_hits} ({_percentage(m.total_cache_hits, m.total_calls)}) |",
            f"| **Cache misses** | {m.total_cache_misses} |",
            "",
        ]

        if m.by_tool:
            lines += [
                "### Por Ferramenta",
                "",
                "| Ferramenta | Chamadas | Sucesso | Tempo médio | Cache hit |",
                "|:-----------|:--------:|:-------:|:-----------:|:---------:|",
            ]
            for name, t in sorted(m.by_tool.items(), key=lambda kv: kv[1].calls, reverse=True):
                lines.append(
                    f"| {name} | {t.calls} | {_percentage(t.successes, t.calls)} | "
                    f"{_round_half_up(t.avg_duration)}ms | {_percentage(t.cache_hits, t.calls)} |"
                )
            lines.append("")

        if m.by_api:
            lines += [
                "### Por API",
                "",
                "| API | Chamadas | Erros | Tempo médio |",
                "|:----|:--------:|:-----:|:-----------:|",
            ]
            for name, a in m.by_api.items():
                lines.append(f"| {name} | {a.calls} | {a.errors} | {_round_half_up(a.avg_duration)}ms |")
            lines.append("")

        if m.recent_errors:
            lines += [
                f"### Erros Recentes (últimos {REPORT_RECENT_ERRORS})",
                "",
                "| Horário | Ferramenta | Erro |",
                "|:--------|:-----------|:-----|",
            ]
            for err in m.recent_errors[-REPORT_RECENT_ERRORS:]:
                hhmmss = datetime.fromtimestamp(err.timestamp).strftime("%H:%M:%S")
                lines.append(f"| {hhmmss} | {err.tool} | {err.error} |")
            lines.append("")

        return "\n".join(lines)

    def reset(self) -> None:
        """Discard every aggregate and restart the uptime clock."""
        with self._lock:
            self._metrics = GlobalMetrics(start_time=self._clock())


# ═══════════════════════════════════════════════════════════════════════════════
# Instrumentation
# ═══════════════════════════════════════════════════════════════════════════════


async def with_metrics(
    collector: MetricsCollector,
    tool: str,
    api: str | None,
    fn: Callable[[], Awaitable[T]],
    cached: bool | None = False,
    *,
    logger: Logger | None = None,
) -> T:
    """Run `fn`, record one MetricEntry for it, and return or re-raise its outcome unchanged.

    Args:
        collector: Destination of the entry
        tool: Tool name
        api: Upstream API name, if any
        fn: Zero-arg coroutine factory doing the work
        cached: Cache flag to record; None detects it from the fetches made inside `fn`
        logger: Receives bookkeeping failures, which are never raised

    Example:
        >>> data = await with_metrics(collector, "ibge_estados", "localidades", lambda: fetch_states())
    """
    probe = FetchProbe() if cached is None else None
    start = time.perf_counter()
    success = True
    error_type: str | None = None

    try:
        if probe is None:
            return await fn()
        with probe:
            return await fn()
    except BaseException as e:
        success = False
        error_type = classify_exception(e).value
        raise
    finally:
        try:
            duration = (time.perf_counter() - start) * 1000
            was_cached = probe.all_hits if probe is not None else bool(cached)
            collector.record(MetricEntry(
                timestamp=time.time(),
                tool=tool,
                duration=duration,
                success=success,
                cached=was_cached,
                api=api,
                error_type=error_type or (None if success else ErrorKind.UNKNOWN.value),
            ))
            if logger is not None:
                logger.debug("Tool call", {"tool": tool, "api": api, "ms": round(duration, 1), "success": success})
        except Exception as rec_err:  # bookkeeping must not replace the outcome
            if logger is not None:
                logger.error("Failed to record metrics", {"tool": tool, "error": repr(rec_err)})
