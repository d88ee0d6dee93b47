"""Tests for the Playwright-backed renderer, using mocked driver objects."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from news_scraper.config import ScrapeConfig
from news_scraper.errors import LaunchError, NavigationError, NavigationTimeoutError
from news_scraper.rendering import PlaywrightRenderer, PlaywrightSession


@pytest.fixture
def driver():
    playwright = MagicMock()
    browser = MagicMock()
    context = MagicMock()
    page = MagicMock()
    playwright.chromium.launch = AsyncMock(return_value=browser)
    browser.new_context = AsyncMock(return_value=context)
    browser.close = AsyncMock()
    context.new_page = AsyncMock(return_value=page)
    page.route = AsyncMock()
    return playwright, browser, context, page


def open_and_close(renderer, body=None):
    async def run():
        async with renderer.session() as session:
            if body:
                await body(session)
            return session

    return asyncio.run(run())


class TestPlaywrightRenderer:
    def test_session_is_configured_and_released(self, driver):
        playwright, browser, _, page = driver
        config = ScrapeConfig(launch_timeout=45.0, default_navigation_timeout=20.0)
        session = open_and_close(PlaywrightRenderer(playwright, config))

        assert isinstance(session, PlaywrightSession)
        launch_kwargs = playwright.chromium.launch.await_args.kwargs
        assert launch_kwargs["timeout"] == 45000
        assert launch_kwargs["headless"] is True
        assert "--no-sandbox" in launch_kwargs["args"]
        browser.new_context.assert_awaited_once_with(user_agent=config.user_agent)
        page.set_default_navigation_timeout.assert_called_once_with(20000)
        assert page.route.await_args.args[0] == "**/*"
        browser.close.assert_awaited_once()

    def test_browser_closed_when_work_fails(self, driver):
        playwright, browser, _, _ = driver

        async def explode(session):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            open_and_close(PlaywrightRenderer(playwright), explode)
        browser.close.assert_awaited_once()

    def test_launch_failure_raises_launch_error(self, driver):
        playwright, browser, _, _ = driver
        playwright.chromium.launch.side_effect = PlaywrightError("Executable doesn't exist")
        with pytest.raises(LaunchError):
            open_and_close(PlaywrightRenderer(playwright))
        browser.close.assert_not_awaited()

    def test_page_setup_failure_still_closes_browser(self, driver):
        playwright, browser, _, _ = driver
        browser.new_context.side_effect = PlaywrightError("Target closed")
        with pytest.raises(LaunchError):
            open_and_close(PlaywrightRenderer(playwright))
        browser.close.assert_awaited_once()

    @pytest.mark.parametrize(
        "resource_type, blocked",
        [("image", True), ("stylesheet", True), ("font", True), ("media", True),
         ("document", False), ("script", False), ("xhr", False)],
    )
    def test_resource_blocking(self, driver, resource_type, blocked):
        renderer = PlaywrightRenderer(driver[0])
        route = MagicMock()
        route.request.resource_type = resource_type
        route.abort = AsyncMock()
        route.continue_ = AsyncMock()
        asyncio.run(renderer._block_resources(route))
        assert route.abort.await_count == int(blocked)
        assert route.continue_.await_count == int(not blocked)


class TestPlaywrightSession:
    def test_goto_returns_status(self):
        page = MagicMock()
        page.goto = AsyncMock(return_value=MagicMock(status=200))
        status = asyncio.run(PlaywrightSession(page).goto("https://e.com/a", "domcontentloaded"))
        assert status == 200
        page.goto.assert_awaited_once_with("https://e.com/a", wait_until="domcontentloaded")

    def test_goto_without_response(self):
        page = MagicMock()
        page.goto = AsyncMock(return_value=None)
        assert asyncio.run(PlaywrightSession(page).goto("https://e.com/a", "load")) is None

    def test_goto_errors_are_translated(self):
        page = MagicMock()
        page.goto = AsyncMock(side_effect=PlaywrightTimeoutError("Timeout 60000ms exceeded"))
        with pytest.raises(NavigationTimeoutError):
            asyncio.run(PlaywrightSession(page).goto("https://e.com/a", "load"))

        page.goto = AsyncMock(side_effect=PlaywrightError("net::ERR_NAME_NOT_RESOLVED"))
        with pytest.raises(NavigationError):
            asyncio.run(PlaywrightSession(page).goto("https://e.com/a", "load"))

    def test_wait_for_selector_timeout_is_false(self):
        page = MagicMock()
        page.wait_for_selector = AsyncMock(side_effect=PlaywrightTimeoutError("Timeout"))
        assert asyncio.run(PlaywrightSession(page).wait_for_selector("p", 5.0)) is False
        page.wait_for_selector.assert_awaited_once_with("p", state="attached", timeout=5000.0)

    def test_wait_for_selector_only_needs_the_marker_in_the_dom(self):
        page = MagicMock()
        page.wait_for_selector = AsyncMock(return_value=None)
        assert asyncio.run(PlaywrightSession(page).wait_for_selector("p, article", 5.0)) is True
        assert page.wait_for_selector.await_args.kwargs["state"] == "attached"
