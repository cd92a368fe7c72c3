"""Tests for stepatom data models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from stepatom.core.models import (
    AtomState,
    EngineName,
    Environment,
    Envs,
    LogEntry,
    LogLevel,
    RunArgs,
    SelectorStrategy,
)


async def _sink(entry: LogEntry) -> None:
    return None


class TestEnums:
    def test_engine_names(self) -> None:
        assert [e.value for e in EngineName] == ["puppeteer", "playwright"]

    def test_log_levels(self) -> None:
        assert {lvl.value for lvl in LogLevel} == {"raw", "info", "timer", "error"}

    def test_selector_strategies(self) -> None:
        assert {s.value for s in SelectorStrategy} == {"xpath", "css"}

    def test_states(self) -> None:
        assert AtomState.IDLE == "idle"
        assert AtomState.DONE == "done"


class TestLogEntry:
    def test_defaults(self) -> None:
        entry = LogEntry(text="x")
        assert entry.level is LogLevel.RAW
        assert entry.level_indent == 0
        assert entry.extend_info is False
        assert entry.std_out is True
        assert entry.screenshot is False
        assert entry.fullpage is False

    def test_negative_indent_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LogEntry(text="x", level_indent=-1)

    def test_unknown_level_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LogEntry(text="x", level="warn")


class TestRunArgs:
    def test_requires_log_sink(self) -> None:
        with pytest.raises(ValidationError):
            RunArgs()

    def test_defaults(self) -> None:
        args = RunArgs(log=_sink)
        assert args.data == {}
        assert args.level_indent == 0
        assert isinstance(args.envs, Envs)
        assert isinstance(args.env, Environment)
        assert args.env.browser.engine == "playwright"

    def test_arbitrary_page_object(self) -> None:
        page = object()
        assert RunArgs(log=_sink, page=page).page is page
