"""Tests for the stderr logger."""

import io

import orjson
import pytest

from ibge_mcp.foundation.config import LoggingSettings
from ibge_mcp.runtime.observability import (
    ConsoleRenderer,
    JsonRenderer,
    LogEntry,
    Logger,
    LogLevel,
    configure_logging,
)


class CaptureRenderer:
    def __init__(self) -> None:
        self.entries: list[LogEntry] = []

    def render(self, entry: LogEntry) -> None:
        self.entries.append(entry)


def test_disabled_by_default() -> None:
    capture = CaptureRenderer()
    log = Logger(renderer=capture)
    log.error("boom")
    assert capture.entries == []


def test_level_threshold() -> None:
    capture = CaptureRenderer()
    log = Logger(level="warn", enabled=True, renderer=capture)
    log.debug("d")
    log.info("i")
    log.warn("w")
    log.error("e")
    assert [e.message for e in capture.entries] == ["w", "e"]


def test_set_level_and_enabled() -> None:
    capture = CaptureRenderer()
    log = Logger(renderer=capture)
    log.set_enabled(True)
    log.set_level(LogLevel.DEBUG)
    log.debug("now visible", {"k": 1})
    assert capture.entries[0].level is LogLevel.DEBUG
    assert capture.entries[0].data == {"k": 1}


def test_level_parse() -> None:
    assert LogLevel.parse("WARNING") is LogLevel.WARN
    assert LogLevel.parse(" info ") is LogLevel.INFO
    assert LogLevel.DEBUG < LogLevel.INFO < LogLevel.WARN < LogLevel.ERROR
    with pytest.raises(ValueError):
        LogLevel.parse("verbose")


def test_console_format() -> None:
    out = io.StringIO()
    log = Logger(enabled=True, renderer=ConsoleRenderer(output=out))
    log.info("Cache hit", {"key": "estados"})
    log.warn("Retrying request")
    assert out.getvalue().splitlines() == ['[INFO] Cache hit {"key":"estados"}', "[WARN] Retrying request"]


def test_json_format() -> None:
    out = io.StringIO()
    log = Logger(enabled=True, renderer=JsonRenderer(output=out))
    log.error("Tool failed", {"tool": "ibge_sidra", "status": 500})
    payload = orjson.loads(out.getvalue())
    assert payload["level"] == "error"
    assert payload["message"] == "Tool failed"
    assert payload["data"] == {"tool": "ibge_sidra", "status": 500}
    assert "timestamp" in payload


def test_never_writes_stdout(capsys) -> None:
    log = Logger(level="debug", enabled=True)
    log.info("hello")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "[INFO] hello" in captured.err


def test_configure_from_settings() -> None:
    out = io.StringIO()
    log = configure_logging(LoggingSettings(enabled=True, level="debug", format="json"), output=out)
    assert log.enabled
    assert log.level is LogLevel.DEBUG
    log.debug("x")
    assert orjson.loads(out.getvalue())["level"] == "debug"
