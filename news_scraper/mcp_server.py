"""MCP server exposing the scraper as tools."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from .config import ScrapeConfig
from .crawler import process_batch
from .fetcher import PageFetcher
from .rendering import PlaywrightRenderer

logger = logging.getLogger("news_scraper.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="news-scraper")


async def _scrape_urls(urls: List[str], config: ScrapeConfig):
    async with PlaywrightRenderer.start(config) as renderer:
        return await process_batch(urls, PageFetcher(renderer, config))


@mcp.tool()
async def scrape(
    url: str,
) -> str:
    """Render one article URL and return its cleaned text."""

    batch = await _scrape_urls([url], ScrapeConfig(politeness_delay=0.0))
    if not batch.articles:
        outcome = batch.outcomes[0] if batch.outcomes else None
        status = outcome.status.value if outcome else "unknown"
        raise RuntimeError(f"No usable content from {url} ({status})")
    return batch.articles[0].content


@mcp.tool()
async def scrape_many(
    urls: List[str],
    delay: float = 1.0,
) -> List[Dict[str, Optional[str]]]:
    """Render several article URLs in order and return the ones that yielded text."""

    batch = await _scrape_urls(urls, ScrapeConfig(politeness_delay=delay))
    return [article.to_dict() for article in batch.articles]


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
