"""Leveled diagnostic logging that never touches stdout.

stdout carries the MCP protocol stream, so every renderer here writes to
stderr. Logging is disabled until explicitly enabled.

Quick Start:
    >>> from ibge_mcp.runtime.observability import Logger
    >>> log = Logger(level="debug", enabled=True)
    >>> log.info("Cache hit", {"key": "estados"})
    # stderr => [INFO] Cache hit {"key":"estados"}

    >>> # From settings
    >>> log = configure_logging(get_settings().logging)
"""

from __future__ import annotations

import sys
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import TYPE_CHECKING, Protocol, TextIO, runtime_checkable

import orjson

if TYPE_CHECKING:
    from ibge_mcp.foundation.config import LoggingSettings

LogData = Mapping[str, object]


class LogLevel(IntEnum):
    """Ordered severity: debug < info < warn < error."""

    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, value: str | LogLevel) -> LogLevel:
        if isinstance(value, LogLevel):
            return value
        name = value.strip().upper()
        if name == "WARNING":
            name = "WARN"
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"Unknown log level: {value!r}. Use debug, info, warn or error") from None


@dataclass(slots=True)
class LogEntry:
    """A single emitted log line."""

    timestamp: float
    level: LogLevel
    message: str
    data: LogData | None = None

    @property
    def ts_iso(self) -> str:
        return datetime.fromtimestamp(self.timestamp).astimezone().isoformat()

    @property
    def ts_human(self) -> str:
        """HH:MM:SS.mmm in local time."""
        return datetime.fromtimestamp(self.timestamp).strftime("%H:%M:%S.%f")[:-3]


def _dumps(value: object) -> str:
    return orjson.dumps(value, default=str, option=orjson.OPT_NON_STR_KEYS).decode()


# ─────────────────────────────────────────────────────────────────────────────
# Renderers
# ─────────────────────────────────────────────────────────────────────────────


@runtime_checkable
class LogRenderer(Protocol):
    """Protocol for log output renderers."""

    def render(self, entry: LogEntry) -> None: ...


@dataclass(slots=True)
class ConsoleRenderer:
    """Human-readable output.

    Format: [LEVEL] message {"key":"value"}
    """

    output: TextIO = field(default_factory=lambda: sys.stderr)
    show_timestamp: bool = False

    def render(self, entry: LogEntry) -> None:
        parts: list[str] = []
        if self.show_timestamp:
            parts.append(entry.ts_human)
        parts.append(f"[{entry.level.name}]")
        parts.append(entry.message)
        if entry.data:
            parts.append(_dumps(dict(entry.data)))
        print(" ".join(parts), file=self.output, flush=True)


@dataclass(slots=True)
class JsonRenderer:
    """JSON Lines output, one object per entry."""

    output: TextIO = field(default_factory=lambda: sys.stderr)

    def render(self, entry: LogEntry) -> None:
        payload: dict[str, object] = {
            "timestamp": entry.ts_iso,
            "level": entry.level.label,
            "message": entry.message,
        }
        if entry.data:
            payload["data"] = dict(entry.data)
        print(_dumps(payload), file=self.output, flush=True)


@dataclass(slots=True)
class NoOpRenderer:
    """Silent renderer for testing."""

    def render(self, entry: LogEntry) -> None:
        pass


# ─────────────────────────────────────────────────────────────────────────────
# Logger
# ─────────────────────────────────────────────────────────────────────────────


class Logger:
    """Minimum-level logger with an on/off switch.

    Emits only when enabled and the entry's level is at or above the
    configured minimum. Rendering is delegated to a LogRenderer.
    """

    __slots__ = ("_level", "_enabled", "_renderer")

    def __init__(
        self,
        level: str | LogLevel = LogLevel.INFO,
        enabled: bool = False,
        renderer: LogRenderer | None = None,
    ) -> None:
        self._level = LogLevel.parse(level)
        self._enabled = enabled
        self._renderer: LogRenderer = renderer if renderer is not None else ConsoleRenderer()

    @property
    def level(self) -> LogLevel:
        return self._level

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_level(self, level: str | LogLevel) -> None:
        self._level = LogLevel.parse(level)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def is_enabled_for(self, level: LogLevel) -> bool:
        return self._enabled and level >= self._level

    def log(self, level: LogLevel, message: str, data: LogData | None = None) -> None:
        if not self.is_enabled_for(level):
            return
        self._renderer.render(LogEntry(time.time(), level, message, data))

    def debug(self, message: str, data: LogData | None = None) -> None:
        self.log(LogLevel.DEBUG, message, data)

    def info(self, message: str, data: LogData | None = None) -> None:
        self.log(LogLevel.INFO, message, data)

    def warn(self, message: str, data: LogData | None = None) -> None:
        self.log(LogLevel.WARN, message, data)

    def error(self, message: str, data: LogData | None = None) -> None:
        self.log(LogLevel.ERROR, message, data)

    def __repr__(self) -> str:
        return f"Logger(level={self._level.label!r}, enabled={self._enabled})"


def configure_logging(settings: LoggingSettings | None = None, *, output: TextIO | None = None) -> Logger:
    """Build a Logger from LoggingSettings.

    Args:
        settings: Logging configuration (global settings when None)
        output: Stream override (default: stderr)
    """
    if settings is None:
        from ibge_mcp.foundation.config import get_settings
        settings = get_settings().logging

    stream = output or sys.stderr
    renderer: LogRenderer = JsonRenderer(output=stream) if settings.format == "json" else ConsoleRenderer(output=stream)
    return Logger(level=settings.level, enabled=settings.enabled, renderer=renderer)
