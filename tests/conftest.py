"""Shared fixtures: scripted stand-ins for the browser rendering layer."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Collection, Dict, List, Optional, Union

import pytest

from news_scraper.config import ScrapeConfig
from news_scraper.errors import LaunchError

GotoStep = Union[int, None, str, BaseException]


def _article_html(
    body: str,
    title: str = "Sample Article",
    head_extra: str = "",
) -> str:
    return (
        f"<html><head><title>{title}</title>{head_extra}</head>"
        f"<body>{body}</body></html>"
    )


def _words(count: int, word: str = "lorem") -> str:
    """Text of roughly ``count`` characters made of repeated words."""
    chunk = f"{word} "
    text = (chunk * (count // len(chunk) + 1))[:count]
    return text.strip()


@dataclass
class PageScript:
    """How a fake page behaves: one goto step per attempt, then markup.

    A step of ``PageScript.HANG`` makes that navigation never finish.
    """

    HANG = "hang"

    steps: List[GotoStep] = field(default_factory=lambda: [200])
    html: str = ""
    selector_found: bool = True


class FakeSession:
    def __init__(self, renderer: "FakeRenderer") -> None:
        self.renderer = renderer
        self.url: Optional[str] = None

    async def goto(self, url: str, wait_until: str) -> Optional[int]:
        self.url = url
        self.renderer.goto_calls.append((url, wait_until))
        script = self.renderer.pages[url]
        index = self.renderer.attempts.get(url, 0)
        self.renderer.attempts[url] = index + 1
        step = script.steps[min(index, len(script.steps) - 1)]
        if step == PageScript.HANG:
            await asyncio.sleep(3600)
        if isinstance(step, BaseException):
            raise step
        return step

    async def wait_for_selector(self, selector: str, timeout: float) -> bool:
        script = self.renderer.pages[self.url]
        if not script.selector_found:
            await asyncio.sleep(3600)
        return True

    async def content(self) -> str:
        return self.renderer.pages[self.url].html


class FakeRenderer:
    """Renderer handing out ``FakeSession`` objects driven by ``pages``.

    ``launch_fails`` breaks every launch; ``failing_launches`` breaks only the
    listed launches, counted from 1 in the order sessions are requested.
    """

    def __init__(
        self,
        pages: Dict[str, PageScript],
        launch_fails: bool = False,
        failing_launches: Collection[int] = (),
    ) -> None:
        self.pages = pages
        self.launch_fails = launch_fails
        self.failing_launches = set(failing_launches)
        self.launches = 0
        self.opened = 0
        self.closed = 0
        self.live = 0
        self.max_live = 0
        self.goto_calls: List[tuple] = []
        self.attempts: Dict[str, int] = {}

    @asynccontextmanager
    async def session(self):
        self.launches += 1
        if self.launch_fails or self.launches in self.failing_launches:
            raise LaunchError("browser binary missing")
        self.opened += 1
        self.live += 1
        self.max_live = max(self.max_live, self.live)
        try:
            yield FakeSession(self)
        finally:
            self.live -= 1
            self.closed += 1


@pytest.fixture
def article_html():
    """Build a minimal HTML document around ``body``."""
    return _article_html


@pytest.fixture
def words():
    return _words


@pytest.fixture
def page_script():
    """The ``PageScript`` type, for scripting how each fake page behaves."""
    return PageScript


@pytest.fixture
def fake_renderer():
    """Factory for ``FakeRenderer`` instances."""
    return FakeRenderer


@pytest.fixture
def fast_config() -> ScrapeConfig:
    """Config with tiny deadlines and no sleeping between attempts."""
    return ScrapeConfig(
        navigation_timeout=0.05,
        retry_delay=0.0,
        content_wait_timeout=0.05,
        politeness_delay=0.0,
    )
