"""PlaywrightSession — browser session providing the page Atoms run against.

Only the ``playwright`` engine can be launched from here; puppeteer-style
pages are supplied by the caller.
"""

from __future__ import annotations

import logging

from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    async_playwright,
)

from stepatom.core.exceptions import EngineError
from stepatom.core.models import BrowserSettings, EngineName

logger = logging.getLogger(__name__)


class PlaywrightSession:
    """Playwright browser + context + page."""

    def __init__(self, settings: BrowserSettings | None = None) -> None:
        self._settings = settings or BrowserSettings()
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._page: Page | None = None

    @property
    def browser(self) -> Browser | None:
        return self._browser

    @property
    def page(self) -> Page:
        """Current Playwright page. Raises EngineError if not started."""
        if self._page is None:
            msg = "PlaywrightSession not started. Call start() first."
            raise EngineError(msg)
        return self._page

    async def start(self) -> None:
        """Launch browser and create page."""
        if self._settings.engine != EngineName.PLAYWRIGHT:
            msg = f"PlaywrightSession cannot launch engine: {self._settings.engine}"
            raise EngineError(msg)
        try:
            pw = await async_playwright().start()
            self._playwright = pw

            browser_type = getattr(pw, self._settings.browser_type, None)
            if browser_type is None:
                msg = f"Unknown browser: {self._settings.browser_type}"
                raise EngineError(msg)

            self._browser = await browser_type.launch(headless=self._settings.headless)
            self._context = await self._browser.new_context(
                viewport={
                    "width": self._settings.viewport_width,
                    "height": self._settings.viewport_height,
                },
                ignore_https_errors=True,
            )
            self._context.set_default_timeout(self._settings.timeout_ms)
            self._page = await self._context.new_page()
            logger.debug(
                "Launched %s (headless=%s)", self._settings.browser_type, self._settings.headless
            )
        except EngineError:
            raise
        except Exception as e:
            msg = f"Failed to start PlaywrightSession: {e}"
            raise EngineError(msg) from e

    async def stop(self) -> None:
        """Close browser and cleanup."""
        try:
            if self._context:
                await self._context.close()
            if self._browser:
                await self._browser.close()
            if self._playwright:
                await self._playwright.stop()
        except Exception as e:
            msg = f"Failed to stop PlaywrightSession: {e}"
            raise EngineError(msg) from e
        finally:
            self._page = None
            self._context = None
            self._browser = None
            self._playwright = None

    async def navigate(self, url: str) -> None:
        """Navigate to URL."""
        try:
            await self.page.goto(url, wait_until="domcontentloaded")
        except EngineError:
            raise
        except Exception as e:
            msg = f"Navigation to {url} failed: {e}"
            raise EngineError(msg) from e
