"""ElementResolver — selector string + engine name → page element handle(s).

Selector syntax:
    xpath://div[@class='x']   XPath lookup
    css:.btn                  CSS lookup
    .btn                      CSS lookup (no prefix)

The two backends expose different primitives:
    puppeteer   querySelector / querySelectorAll / xpath
    playwright  query_selector_all only; the resolver builds the
                ``xpath=`` / ``css=`` selector itself.
Cardinality checks always happen here, never in the backend.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from stepatom.core.exceptions import CardinalityError, UnsupportedEngineError
from stepatom.core.models import EngineName, SelectorStrategy

if TYPE_CHECKING:
    from stepatom.core.models import Environment

logger = logging.getLogger(__name__)

_NOT_A_PAGE = (str, bytes, bytearray, int, float, bool)

Lookup = Callable[[Any, SelectorStrategy, str, bool], Awaitable[Any]]


def parse_selector(selector: str) -> tuple[SelectorStrategy, str]:
    """Split an optional ``xpath:`` / ``css:`` prefix off a selector.

    Returns:
        Tuple of (strategy, bare selector). No prefix means CSS.
    """
    for strategy in SelectorStrategy:
        prefix = f"{strategy.value}:"
        if selector.startswith(prefix):
            return strategy, selector[len(prefix) :]
    return SelectorStrategy.CSS, selector


def get_engine(env: Environment | None) -> EngineName:
    """Return the configured engine of an environment.

    Raises:
        UnsupportedEngineError: If the engine is missing or not an EngineName member.
    """
    name = env.browser.engine if env is not None else None
    try:
        return EngineName(name)
    except ValueError:
        raise UnsupportedEngineError(name, [e.value for e in EngineName]) from None


async def _lookup_puppeteer(
    page: Any, strategy: SelectorStrategy, expr: str, all_elements: bool
) -> Any:
    if strategy is SelectorStrategy.XPATH:
        return await page.xpath(expr)
    if all_elements:
        return await page.querySelectorAll(expr)
    return await page.querySelector(expr)


async def _lookup_playwright(
    page: Any, strategy: SelectorStrategy, expr: str, all_elements: bool
) -> Any:
    return await page.query_selector_all(f"{strategy.value}={expr}")


_LOOKUPS: dict[EngineName, Lookup] = {
    EngineName.PUPPETEER: _lookup_puppeteer,
    EngineName.PLAYWRIGHT: _lookup_playwright,
}


class ElementResolver:
    """Resolve selectors against a page using one backend."""

    def __init__(self, engine: EngineName) -> None:
        self.engine = engine
        self._lookup = _LOOKUPS[engine]

    @classmethod
    def for_environment(cls, env: Environment | None) -> ElementResolver:
        """Build a resolver for the engine configured in ``env``."""
        return cls(get_engine(env))

    async def resolve(self, page: Any, selector: Any, all_elements: bool = False) -> Any:
        """Resolve a selector to element handle(s).

        Args:
            page: Backend page object.
            selector: Selector string, optionally prefixed with ``xpath:`` or ``css:``.
            all_elements: Return every match as a list instead of a single handle.

        Returns:
            ``False`` if page or selector is unusable. Otherwise a list when
            ``all_elements`` is set, else the single handle or ``None``.

        Raises:
            CardinalityError: If ``all_elements`` is False and more than one element matches.
        """
        if page is None or isinstance(page, _NOT_A_PAGE):
            return False
        if not selector or not isinstance(selector, str):
            return False

        strategy, expr = parse_selector(selector)
        logger.debug("Resolving %s via %s (%s)", selector, self.engine.value, strategy.value)
        found = await self._lookup(page, strategy, expr, all_elements)

        if all_elements:
            if found is None:
                return []
            if isinstance(found, (list, tuple)):
                return list(found)
            return [found]

        if isinstance(found, (list, tuple)):
            if len(found) > 1:
                raise CardinalityError(
                    selector, strategy.value, len(found), engine=self.engine.value
                )
            return found[0] if found else None
        return found
