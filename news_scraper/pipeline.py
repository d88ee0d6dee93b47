"""Search, de-duplicate against past runs, and scrape in one call."""

from __future__ import annotations

import logging
from typing import Optional

from .config import ScrapeConfig
from .crawler import process_batch
from .fetcher import PageFetcher
from .models import BatchResult
from .rendering import Renderer
from .sources import ProcessedUrlStore, SearchProvider

logger = logging.getLogger("news_scraper")


async def collect_articles(
    provider: SearchProvider,
    store: ProcessedUrlStore,
    renderer: Renderer,
    query: str,
    num_results: int = 8,
    days_ago: int = 1,
    config: Optional[ScrapeConfig] = None,
    mark_processed: bool = False,
) -> BatchResult:
    """Scrape fresh search results for ``query``.

    URLs already in ``store`` are dropped before scraping. With
    ``mark_processed`` every successfully scraped URL is recorded afterwards;
    otherwise that is left to the caller (e.g. after summarization succeeds).
    """
    logger.info("Searching for %r over the past %d day(s)", query, days_ago)
    results = provider.search(query, num_results, days_ago)
    if not results:
        logger.warning("No search results found for %r", query)
        return BatchResult()

    fresh = []
    for candidate in results:
        if store.is_processed(candidate.url):
            logger.info("Skipping previously processed URL: %s", candidate.url)
        else:
            fresh.append(candidate)
    if not fresh:
        logger.info("All %d search results have been processed previously", len(results))
        return BatchResult()

    logger.info("Proceeding with %d new results", len(fresh))
    batch = await process_batch(fresh, PageFetcher(renderer, config))

    if mark_processed:
        for article in batch.articles:
            store.mark_processed(article.url)
            logger.debug("Marked as processed: %s", article.url)
    return batch
