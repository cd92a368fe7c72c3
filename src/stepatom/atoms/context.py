"""RunContext — per-call state of a single Atom run.

Built once by Atom.bind() from RunArgs and passed by reference to every
lifecycle stage and to Atom.atom_run(). Never shared between runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from stepatom.core.models import AtomState, LogEntry
from stepatom.engine.resolver import ElementResolver

if TYPE_CHECKING:
    from stepatom.core.models import Environment, Envs, LogSink, RunArgs

DEFAULT_LOG_OPTIONS: dict[str, Any] = {
    "screenshot": False,
    "fullpage": False,
    "level": "raw",
}


def merge_log_options(
    options: dict[str, Any] | None, log_options: dict[str, Any] | None
) -> dict[str, Any]:
    """Merge display defaults < run options < explicit log options."""
    merged = dict(DEFAULT_LOG_OPTIONS)
    merged.update({k: v for k, v in (options or {}).items() if k in DEFAULT_LOG_OPTIONS})
    merged.update(log_options or {})
    return merged


@dataclass
class RunContext:
    """Everything an Atom run can see."""

    envs: Envs
    env: Environment
    sink: LogSink
    envs_id: str | None = None
    env_name: str | None = None
    env_page_name: str | None = None
    data: dict[str, Any] = field(default_factory=dict)
    data_test: dict[str, Any] = field(default_factory=dict)
    selectors: dict[str, Any] = field(default_factory=dict)
    selectors_test: dict[str, Any] = field(default_factory=dict)
    options: dict[str, Any] = field(default_factory=dict)
    allow_results: list[str] = field(default_factory=list)
    bind_results: dict[str, Any] = field(default_factory=dict)
    bind_selectors: dict[str, Any] = field(default_factory=dict)
    bind_data: dict[str, Any] = field(default_factory=dict)
    level_indent: int = 0
    repeat: int = 1
    step_id: str | None = None
    name: str = ""
    description: str = ""
    browser: Any = None
    page: Any = None
    socket: Any = None
    log_defaults: dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_LOG_OPTIONS))
    state: AtomState = AtomState.IDLE

    @classmethod
    def from_args(cls, args: RunArgs) -> RunContext:
        """Copy every invocation argument verbatim and merge log display options."""
        return cls(
            envs=args.envs,
            env=args.env,
            sink=args.log,
            envs_id=args.envs_id,
            env_name=args.env_name,
            env_page_name=args.env_page_name,
            data=args.data,
            data_test=args.data_test,
            selectors=args.selectors,
            selectors_test=args.selectors_test,
            options=args.options,
            allow_results=args.allow_results,
            bind_results=args.bind_results,
            bind_selectors=args.bind_selectors,
            bind_data=args.bind_data,
            level_indent=args.level_indent,
            repeat=args.repeat,
            step_id=args.step_id,
            name=args.name,
            description=args.description,
            browser=args.browser,
            page=args.page,
            socket=args.socket,
            log_defaults=merge_log_options(args.options, args.log_options),
            state=AtomState.BOUND,
        )

    async def log(self, text: str = "", **overrides: Any) -> None:
        """Send one entry to the sink: display defaults, indent, then per-call overrides."""
        fields: dict[str, Any] = {
            **self.log_defaults,
            "level_indent": self.level_indent + 1,
            "text": text,
            **overrides,
        }
        await self.sink(LogEntry(**fields))

    async def get_element(
        self, selector: Any, all_elements: bool = False, page: Any = None
    ) -> Any:
        """Resolve a selector on ``page`` (defaults to the run's page)."""
        resolver = ElementResolver.for_environment(self.env)
        return await resolver.resolve(self.page if page is None else page, selector, all_elements)
