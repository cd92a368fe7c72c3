"""ProbeAtom — count the elements a selector matches."""

from __future__ import annotations

from typing import Any

from stepatom.atoms.base import Atom
from stepatom.atoms.context import RunContext  # noqa: TC001
from stepatom.core.exceptions import ResolutionError
from stepatom.core.models import LogLevel

TARGET_KEY = "target"


class ProbeAtom(Atom):
    """Resolve ``selectors["target"]`` and report how many elements match."""

    async def atom_run(self, ctx: RunContext) -> dict[str, Any]:
        selector = ctx.selectors.get(TARGET_KEY)
        elements = await self.get_element(ctx, selector, all_elements=True)
        if elements is False:
            msg = f"Nothing to probe: page or selector missing ({selector!r})"
            raise ResolutionError(msg, selector=selector)

        count = len(elements)
        await ctx.log(f"🔎 {selector}: {count} element(s)", level=LogLevel.INFO)
        return {"count": count}
