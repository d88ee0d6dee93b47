"""Headless browser sessions backed by Playwright."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Protocol

from playwright.async_api import (
    Browser,
    Error as PlaywrightError,
    Page,
    Playwright,
    Route,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from .config import ScrapeConfig
from .errors import LaunchError, NavigationError, NavigationTimeoutError

logger = logging.getLogger("news_scraper")


class RenderingSession(Protocol):
    """A single isolated browsing context bound to one URL's fetch."""

    async def goto(self, url: str, wait_until: str) -> Optional[int]:
        """Navigate and return the response status, or ``None`` without one."""

    async def wait_for_selector(self, selector: str, timeout: float) -> bool:
        """Wait until ``selector`` matches; ``False`` when it never does."""

    async def content(self) -> str:
        """Return the fully rendered markup."""


class Renderer(Protocol):
    """Source of rendering sessions."""

    def session(self):
        """Async context manager yielding a ``RenderingSession``.

        Raises ``LaunchError`` on entry when no session can be acquired and
        always releases the session on exit.
        """


class PlaywrightSession:
    """``RenderingSession`` implemented over a Playwright page."""

    def __init__(self, page: Page) -> None:
        self._page = page

    async def goto(self, url: str, wait_until: str) -> Optional[int]:
        try:
            response = await self._page.goto(url, wait_until=wait_until)
        except PlaywrightTimeoutError as exc:
            raise NavigationTimeoutError(str(exc)) from exc
        except PlaywrightError as exc:
            raise NavigationError(str(exc)) from exc
        if response is None:
            return None
        return response.status

    async def wait_for_selector(self, selector: str, timeout: float) -> bool:
        try:
            await self._page.wait_for_selector(
                selector, state="attached", timeout=timeout * 1000
            )
        except PlaywrightError as exc:
            logger.debug("Selector %r not found: %s", selector, exc)
            return False
        return True

    async def content(self) -> str:
        try:
            return await self._page.content()
        except PlaywrightError as exc:
            raise NavigationError(f"Could not read rendered markup: {exc}") from exc


class PlaywrightRenderer:
    """Launches one sandboxed Chromium per session from a shared driver handle.

    The Playwright driver is owned by the caller: create it once at process
    start (or use :meth:`start`) and stop it at shutdown. Each call to
    :meth:`session` launches a fresh browser that is torn down on exit, so no
    two URLs ever share a browsing context.
    """

    def __init__(self, playwright: Playwright, config: Optional[ScrapeConfig] = None) -> None:
        self._playwright = playwright
        self.config = config or ScrapeConfig()

    @classmethod
    @asynccontextmanager
    async def start(cls, config: Optional[ScrapeConfig] = None) -> AsyncIterator["PlaywrightRenderer"]:
        """Own the Playwright driver for the lifetime of the ``async with`` block."""
        async with async_playwright() as playwright:
            yield cls(playwright, config)

    async def _block_resources(self, route: Route) -> None:
        if route.request.resource_type in self.config.blocked_resource_types:
            await route.abort()
        else:
            await route.continue_()

    async def _launch(self) -> Browser:
        try:
            return await self._playwright.chromium.launch(
                headless=self.config.headless,
                args=list(self.config.launch_args),
                timeout=self.config.launch_timeout * 1000,
            )
        except PlaywrightError as exc:
            raise LaunchError(f"Failed to launch browser: {exc}") from exc

    async def _prepare_page(self, browser: Browser) -> Page:
        try:
            context = await browser.new_context(user_agent=self.config.user_agent)
            page = await context.new_page()
            page.set_default_navigation_timeout(self.config.default_navigation_timeout * 1000)
            await page.route("**/*", self._block_resources)
        except PlaywrightError as exc:
            raise LaunchError(f"Failed to open page: {exc}") from exc
        return page

    @asynccontextmanager
    async def session(self) -> AsyncIterator[PlaywrightSession]:
        browser = await self._launch()
        try:
            page = await self._prepare_page(browser)
            yield PlaywrightSession(page)
        finally:
            try:
                await browser.close()
            except PlaywrightError as exc:
                logger.warning("Failed to close browser cleanly: %s", exc)
