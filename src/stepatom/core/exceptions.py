"""stepatom exception hierarchy.

All exceptions inherit from StepAtomError.
ResolutionError subclasses carry structured fields (selector, engine, found)
so callers inside an Atom can inspect them; AtomError carries none.
"""

from __future__ import annotations

from collections.abc import Iterable


class StepAtomError(Exception):
    """Base exception for all stepatom errors."""


class ConfigError(StepAtomError):
    """Runner arguments load/validation error."""


class EngineError(StepAtomError):
    """Browser session error (launch failure, navigation failure, etc.)."""


class ResolutionError(StepAtomError):
    """Element resolution failed. Fatal to the current Atom."""

    def __init__(
        self, message: str, selector: str | None = None, engine: str | None = None
    ) -> None:
        self.selector = selector
        self.engine = engine
        super().__init__(message)


class CardinalityError(ResolutionError):
    """Selector matched more elements than the caller allows."""

    def __init__(self, selector: str, strategy: str, found: int, engine: str | None = None) -> None:
        self.strategy = strategy
        self.found = found
        super().__init__(
            f"Find more than 1 {strategy} elements {selector}",
            selector=selector,
            engine=engine,
        )


class UnsupportedEngineError(ResolutionError):
    """Configured automation engine is not one of the supported backends."""

    def __init__(self, engine: str | None, supported: Iterable[str]) -> None:
        self.supported = tuple(supported)
        super().__init__(
            f"Unsupported engine: {engine!r}. Supported engines: {', '.join(self.supported)}",
            engine=engine,
        )


class AtomError(StepAtomError):
    """Normalized failure raised by Atom.run_test. Details live in the log stream."""

    MESSAGE = "Error in Atom"

    def __init__(self) -> None:
        super().__init__(self.MESSAGE)
