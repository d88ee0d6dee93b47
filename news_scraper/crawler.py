"""High-level orchestration for scraping a batch of candidate URLs."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Dict, Iterable, List, Sequence, Tuple, Union

from .classifier import classify_url
from .errors import NoCandidatesError, RendererUnavailableError
from .fetcher import PageFetcher
from .models import (
    BatchResult,
    CandidateUrl,
    FetchResult,
    FetchStatus,
    ScrapedArticle,
)
from .utils import host_of

logger = logging.getLogger("news_scraper")

Indexed = Tuple[int, CandidateUrl]


def _as_candidates(urls: Iterable[Union[CandidateUrl, str]]) -> List[CandidateUrl]:
    return [url if isinstance(url, CandidateUrl) else CandidateUrl(url=url) for url in urls]


def build_article(candidate: CandidateUrl, result: FetchResult) -> ScrapedArticle:
    """Combine a successful fetch with what the search provider already knew."""
    document = result.document
    title = (document.title if document else "") or candidate.title
    published = (document.published_date if document else None) or candidate.date
    return ScrapedArticle(
        url=candidate.url,
        title=title,
        content=result.content,
        published_date=published,
    )


async def _fetch_isolated(fetcher: PageFetcher, candidate: CandidateUrl) -> FetchResult:
    try:
        return await fetcher.fetch(candidate.url)
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Unexpected error processing %s", candidate.url)
        return FetchResult(url=candidate.url, status=FetchStatus.ERROR, detail=str(exc))


async def _run_sequence(
    fetcher: PageFetcher, items: Sequence[Indexed], delay: float
) -> List[Tuple[int, FetchResult]]:
    """Fetch ``items`` one at a time, pausing ``delay`` between real fetches."""
    results: List[Tuple[int, FetchResult]] = []
    fetched_before = False
    for index, candidate in items:
        classification = classify_url(candidate.url)
        if classification.skip:
            logger.info("Skipping %s URL: %s", classification.reason.value, candidate.url)
            skipped = FetchResult(
                url=candidate.url, status=FetchStatus.SKIPPED, reason=classification.reason
            )
            results.append((index, skipped))
            continue
        if fetched_before and delay > 0:
            await asyncio.sleep(delay)
        results.append((index, await _fetch_isolated(fetcher, candidate)))
        fetched_before = True
    return results


def _group_by_host(candidates: Sequence[CandidateUrl]) -> List[List[Indexed]]:
    groups: Dict[str, List[Indexed]] = {}
    for index, candidate in enumerate(candidates):
        groups.setdefault(host_of(candidate.url), []).append((index, candidate))
    return list(groups.values())


async def _run_per_host(
    fetcher: PageFetcher, candidates: Sequence[CandidateUrl], delay: float, max_hosts: int
) -> List[Tuple[int, FetchResult]]:
    semaphore = asyncio.Semaphore(max_hosts)

    async def worker(items: Sequence[Indexed]) -> List[Tuple[int, FetchResult]]:
        async with semaphore:
            return await _run_sequence(fetcher, items, delay)

    chunks = await asyncio.gather(*(worker(group) for group in _group_by_host(candidates)))
    return [pair for chunk in chunks for pair in chunk]


async def process_batch(
    urls: Iterable[Union[CandidateUrl, str]],
    fetcher: PageFetcher,
) -> BatchResult:
    """Scrape every candidate and return the successful articles in input order.

    A failure on one URL never stops the batch. Raises ``NoCandidatesError``
    for an empty input and ``RendererUnavailableError`` when no URL could get
    a rendering session at all.
    """
    candidates = _as_candidates(urls)
    if not candidates:
        raise NoCandidatesError("No candidate URLs to scrape")

    config = fetcher.config
    start = time.perf_counter()
    if config.max_hosts > 1:
        pairs = await _run_per_host(fetcher, candidates, config.politeness_delay, config.max_hosts)
    else:
        pairs = await _run_sequence(fetcher, list(enumerate(candidates)), config.politeness_delay)
    pairs.sort(key=lambda pair: pair[0])

    batch = BatchResult()
    for index, result in pairs:
        batch.outcomes.append(result)
        batch.summary.record(result)
        if result.ok:
            batch.articles.append(build_article(candidates[index], result))
        elif result.status is not FetchStatus.SKIPPED:
            logger.info(
                "No article from %s (%s after %d attempts) %s",
                result.url,
                result.status.value,
                len(result.attempts),
                result.detail,
            )

    fetched = [r for r in batch.outcomes if r.status is not FetchStatus.SKIPPED]
    if fetched and all(r.status is FetchStatus.LAUNCH_ERROR for r in fetched):
        raise RendererUnavailableError(
            f"Rendering session unavailable for all {len(fetched)} attempted URLs"
        )

    logger.info(
        "Scraped content from %d URLs out of %d results in %.2fs",
        batch.summary.succeeded,
        batch.summary.attempted,
        time.perf_counter() - start,
    )
    return batch
