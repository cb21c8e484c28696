"""Shared headless browser and per-request page scopes."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
    Error as PlaywrightError,
)

from pfproxy.config import ServiceConfig
from pfproxy.exceptions import BrowserLaunchError
from pfproxy.logging import get_logger


class BrowserSession:
    """
    Owns one long-lived Chromium instance shared by every request.

    The browser is launched lazily on the first ``acquire()``. Concurrent
    callers during startup wait on the same launch. A failed launch is not
    remembered, so the next caller tries again.

    Example:
        session = BrowserSession(config)
        async with session.page() as page:
            await page.goto(url)
        await session.close()
    """

    def __init__(self, config: ServiceConfig | None = None):
        self.config = config or ServiceConfig()
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._lock = asyncio.Lock()
        self._log = get_logger("browser")

    @property
    def is_running(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    async def acquire(self) -> Browser:
        """
        Return the shared browser, launching it if needed.

        Raises:
            BrowserLaunchError: If Chromium could not be started
        """
        if self.is_running:
            return self._browser

        async with self._lock:
            if not self.is_running:
                self._browser = await self._launch()
            return self._browser

    async def _launch(self) -> Browser:
        self._log.info("browser_launch", headless=self.config.headless)
        try:
            if self._playwright is None:
                self._playwright = await async_playwright().start()
            return await self._playwright.chromium.launch(
                headless=self.config.headless,
                args=list(self.config.launch_args),
            )
        except PlaywrightError as e:
            self._log.error("browser_launch_failed", error=str(e))
            raise BrowserLaunchError(f"Browser launch failed: {e}") from e
        except Exception as e:
            self._log.error("browser_launch_failed", error=str(e))
            raise BrowserLaunchError(f"Unexpected launch error: {e}") from e

    @asynccontextmanager
    async def page(self) -> AsyncIterator[Page]:
        """
        Open an isolated context and page for one request.

        The page is closed before its context on every exit path. Close
        failures are logged and dropped so they never replace the real
        outcome.
        """
        browser = await self.acquire()
        context: BrowserContext = await browser.new_context(
            user_agent=self.config.user_agent,
            locale=self.config.locale,
            viewport={
                "width": self.config.viewport_width,
                "height": self.config.viewport_height,
            },
        )
        page: Page | None = None
        try:
            page = await context.new_page()
            page.set_default_timeout(self.config.browser_timeout_ms)
            page.set_default_navigation_timeout(self.config.browser_timeout_ms)
            yield page
        finally:
            if page is not None:
                await self._close_quietly(page, "page")
            await self._close_quietly(context, "context")

    async def _close_quietly(self, resource, kind: str) -> None:
        try:
            await resource.close()
        except Exception as e:
            self._log.debug("close_failed", resource=kind, error=str(e))

    async def close(self) -> None:
        """Shut down the browser and the Playwright driver."""
        browser, self._browser = self._browser, None
        playwright, self._playwright = self._playwright, None
        if browser is not None:
            await self._close_quietly(browser, "browser")
        if playwright is not None:
            try:
                await playwright.stop()
            except Exception as e:
                self._log.debug("close_failed", resource="playwright", error=str(e))

    async def __aenter__(self) -> "BrowserSession":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
