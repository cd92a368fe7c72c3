"""Log sinks — render and persist structured Atom log entries.

A sink is any async callable taking a LogEntry.
ConsoleLogSink writes to the terminal via typer and appends to a log file.
MemoryLogSink collects entries (tests, embedding).
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from pathlib import Path  # noqa: TC003

import typer

from stepatom.core.models import LogEntry, LogLevel

# Rendered line layout: <time prefix><" | " per indent level><text>
TIME_PREFIX_WIDTH = 21
INDENT_WIDTH = 3
INDENT_MARK = " | "

_COLORS: dict[LogLevel, str | None] = {
    LogLevel.RAW: None,
    LogLevel.INFO: None,
    LogLevel.TIMER: typer.colors.CYAN,
    LogLevel.ERROR: typer.colors.RED,
}


def render_entry(entry: LogEntry, now: datetime) -> list[str]:
    """Render an entry as plain text lines with time prefix and indent marks."""
    indent = INDENT_MARK * entry.level_indent
    prefix = f"{now:%Y-%m-%d %H:%M:%S}".ljust(TIME_PREFIX_WIDTH)
    continuation = " " * TIME_PREFIX_WIDTH
    lines = entry.text.split("\n")
    rendered = [f"{prefix}{indent}{lines[0]}"]
    rendered.extend(f"{continuation}{indent}{line}" for line in lines[1:])
    return rendered


class ConsoleLogSink:
    """Terminal output via typer, plus an optional plain-text log file.

    Entries with ``std_out=False`` go to the file only.
    """

    def __init__(
        self,
        log_file: Path | None = None,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._log_file = log_file
        self._now = now
        if log_file is not None:
            log_file.parent.mkdir(parents=True, exist_ok=True)

    @property
    def log_file(self) -> Path | None:
        return self._log_file

    async def __call__(self, entry: LogEntry) -> None:
        lines = render_entry(entry, self._now())

        if entry.std_out:
            color = _COLORS[entry.level]
            is_error = entry.level == LogLevel.ERROR
            for line in lines:
                typer.echo(typer.style(line, fg=color) if color else line, err=is_error)

        if self._log_file is not None:
            with open(self._log_file, "a", encoding="utf-8") as f:  # noqa: PTH123
                f.write("\n".join(lines) + "\n")


class MemoryLogSink:
    """Collects every entry in order."""

    def __init__(self) -> None:
        self.entries: list[LogEntry] = []

    async def __call__(self, entry: LogEntry) -> None:
        self.entries.append(entry)

    def texts(self) -> list[str]:
        return [e.text for e in self.entries]

    def by_level(self, level: LogLevel) -> list[LogEntry]:
        return [e for e in self.entries if e.level == level]

    def clear(self) -> None:
        self.entries.clear()
