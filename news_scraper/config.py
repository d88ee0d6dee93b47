"""Configuration objects and constants for the scraper."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)
DEFAULT_LAUNCH_ARGS = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-gpu",
    "--disable-dev-shm-usage",
)
BLOCKED_RESOURCE_TYPES = ("image", "stylesheet", "font", "media")
CONTENT_READY_SELECTOR = "p, article, .article, .content, #content, main"


@dataclass
class ScrapeConfig:
    """Top-level settings that control rendering, extraction and batching."""

    launch_timeout: float = 60.0
    navigation_timeout: float = 30.0
    default_navigation_timeout: float = 60.0
    max_navigation_attempts: int = 3
    retry_delay: float = 2.0
    content_wait_timeout: float = 5.0
    politeness_delay: float = 1.0
    wait_until: str = "domcontentloaded"
    headless: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    launch_args: Tuple[str, ...] = DEFAULT_LAUNCH_ARGS
    blocked_resource_types: Tuple[str, ...] = BLOCKED_RESOURCE_TYPES
    content_ready_selector: str = CONTENT_READY_SELECTOR
    container_min_chars: int = 200
    paragraph_min_chars: int = 100
    content_floor_chars: int = 100
    max_hosts: int = 1

    def __post_init__(self) -> None:
        if self.max_navigation_attempts < 1:
            raise ValueError("max_navigation_attempts must be at least 1")
        if self.max_hosts < 1:
            raise ValueError("max_hosts must be at least 1")
