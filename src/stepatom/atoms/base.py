"""Atom — base class of a single executable test step.

run_test() flow:
    bind → atom_run → (succeeded: timer + extended info, verbose only)
                    → (failed: full diagnostic dump, then AtomError)

Failure dump order is fixed; log consumers locate sections by position:
    1. full log file pointer      6. selectors dump
    2. separator                  7. runner args dump
    3. timer                      8. error message + stack
    4. extended context block     9. separator
    5. data dump
"""

from __future__ import annotations

import json
import logging
import time
import traceback
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from stepatom.atoms.context import RunContext
from stepatom.core.exceptions import AtomError, ConfigError
from stepatom.core.models import AtomState, LogLevel, RunArgs
from stepatom.core.sinks import INDENT_WIDTH, TIME_PREFIX_WIDTH

logger = logging.getLogger(__name__)

MIN_SEPARATOR_WIDTH = 10

# (context attribute, marker) in emission order
_EXTEND_BLOCKS: tuple[tuple[str, str], ...] = (
    ("bind_data", "📌📋 (bD)"),
    ("data_test", "📋 (D)"),
    ("selectors_test", "☸️ (S)"),
    ("bind_selectors", "📌☸️ (bS)"),
    ("bind_results", "↩️ (bR)"),
    ("options", "⚙️ (opt)"),
)


def format_elapsed(seconds: float) -> str:
    """Format an elapsed duration with millisecond resolution."""
    return f"{seconds:.3f} sec."


def _jsonable(value: Any, seen: frozenset[int] = frozenset()) -> Any:
    """Copy of ``value`` that json can always encode.

    Non-str keys become their repr, other objects become str, and a
    container already on the current path becomes ``"<circular>"``.
    """
    if value is None or isinstance(value, str | int | float | bool):
        return value
    if id(value) in seen:
        return "<circular>"
    if isinstance(value, Mapping):
        inner = seen | {id(value)}
        return {
            key if isinstance(key, str) else repr(key): _jsonable(item, inner)
            for key, item in value.items()
        }
    if isinstance(value, list | tuple | set | frozenset):
        inner = seen | {id(value)}
        return [_jsonable(item, inner) for item in value]
    try:
        return str(value)
    except Exception:  # noqa: BLE001
        return object.__repr__(value)


def _to_json(value: Any, indent: int | None = None) -> str:
    return json.dumps(_jsonable(value), indent=indent, ensure_ascii=False)


def _error_lines(error: BaseException) -> tuple[str, list[str]]:
    """Message and stack lines of an error.

    Driver errors exposing ``message`` / ``stack`` strings (Playwright's Error
    does) are used as-is; otherwise the Python traceback is formatted.
    """
    message = getattr(error, "message", None)
    if not isinstance(message, str) or not message:
        message = str(error) or type(error).__name__

    stack = getattr(error, "stack", None)
    if not isinstance(stack, str) or not stack:
        stack = "".join(traceback.format_exception(error))
    return message, stack.splitlines()


class Atom:
    """Single test step: resolve elements, act, log.

    Subclasses implement atom_run(). All dependencies are injected via
    constructor for deterministic testing.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.perf_counter,
        formatter: Callable[[float], str] = format_elapsed,
    ) -> None:
        self._clock = clock
        self._formatter = formatter

    async def atom_run(self, ctx: RunContext) -> Any:
        """Step action. Override in subclasses."""
        logger.info("Empty Atom Run")

    async def get_element(
        self, ctx: RunContext, selector: Any, all_elements: bool = False
    ) -> Any:
        """Resolve a selector on the run's page."""
        return await ctx.get_element(selector, all_elements)

    def bind(self, args: RunArgs | Mapping[str, Any]) -> RunContext:
        """Build the per-call context from the invocation arguments."""
        if not isinstance(args, RunArgs):
            try:
                args = RunArgs.model_validate(args)
            except ValidationError as e:
                msg = f"Invalid Atom run arguments: {e}"
                raise ConfigError(msg) from e
        return RunContext.from_args(args)

    async def run_test(self, args: RunArgs | Mapping[str, Any]) -> Any:
        """Run the step once.

        Returns:
            Whatever atom_run() returned.

        Raises:
            AtomError: On any failure of atom_run() or of the success logging,
                after the diagnostic dump.
            ConfigError: If the arguments cannot be bound.
        """
        started_at = self._clock()
        ctx = self.bind(args)
        ctx.state = AtomState.RUNNING
        logger.debug("Atom %r started (step %s)", ctx.name, ctx.step_id)

        try:
            result = await self.atom_run(ctx)
            ctx.state = AtomState.SUCCEEDED
            await self.log_extend(ctx, started_at)
        except Exception as error:  # noqa: BLE001
            ctx.state = AtomState.FAILED
            logger.debug("Atom %r failed: %s", ctx.name, error)
            try:
                await self._log_failure(ctx, started_at, error)
            except Exception:
                logger.exception("Atom %r: diagnostic dump could not be written", ctx.name)
            ctx.state = AtomState.DONE
            raise AtomError from None

        ctx.state = AtomState.DONE
        return result

    async def log_extend(self, ctx: RunContext, started_at: float, is_error: bool = False) -> None:
        """Timer entry and one entry per non-empty context object.

        Emitted only with PPD_LOG_EXTEND, or always when ``is_error``.
        """
        if not (ctx.envs.args.log_extend or is_error):
            return

        elapsed = self._clock() - started_at
        await ctx.log(
            f"⌛: {self._formatter(elapsed)}",
            level=LogLevel.TIMER,
            extend_info=True,
        )
        for attr, marker in _EXTEND_BLOCKS:
            value = getattr(ctx, attr)
            if value:
                await ctx.log(
                    f"{marker}: {_to_json(value)}",
                    level=LogLevel.INFO,
                    extend_info=True,
                )

    def log_file_path(self, ctx: RunContext) -> Path:
        """Full diagnostic log file of the run."""
        folder = ctx.envs.output.folder_full or ctx.envs.args.output
        return (Path(folder) / ctx.envs.args.log_file_name).resolve()

    def separator_width(self, ctx: RunContext) -> int:
        overhead = TIME_PREFIX_WIDTH + INDENT_WIDTH * (ctx.level_indent + 1)
        return max(ctx.envs.args.log_width - overhead, MIN_SEPARATOR_WIDTH)

    async def _log_failure(self, ctx: RunContext, started_at: float, error: BaseException) -> None:
        separator = "=" * self.separator_width(ctx)

        await ctx.log(f"💾 Full log: {self.log_file_path(ctx).as_uri()}", level=LogLevel.ERROR)
        await ctx.log(separator, level=LogLevel.ERROR)
        await self.log_extend(ctx, started_at, is_error=True)
        await self._log_dump(ctx, "📋 (All Data)", ctx.data)
        await self._log_dump(ctx, "☸️ (All Selectors)", ctx.selectors)
        await self._log_dump(ctx, "⚙️ (Args)", ctx.envs.args.model_dump(mode="json"))

        message, stack = _error_lines(error)
        await ctx.log(f"Error in Atom: {message}", level=LogLevel.ERROR)
        for line in stack:
            await ctx.log(line, level=LogLevel.ERROR)

        await ctx.log(separator, level=LogLevel.ERROR)

    async def _log_dump(self, ctx: RunContext, title: str, mapping: Any) -> None:
        """Pretty-printed mapping, one entry per line, file only."""
        lines = [f"{title}:", *_to_json(mapping, indent=2).splitlines()]
        for line in lines:
            await ctx.log(line, level=LogLevel.RAW, extend_info=True, std_out=False)
