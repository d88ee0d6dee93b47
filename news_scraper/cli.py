"""Command-line entry point for the news scraper."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
import time
from pathlib import Path
from typing import Iterable, Sequence

from .config import ScrapeConfig
from .crawler import process_batch
from .errors import ScraperError
from .fetcher import PageFetcher
from .models import BatchResult
from .pipeline import collect_articles
from .rendering import PlaywrightRenderer
from .sources import GoogleSearchProvider, JsonProcessedUrlStore

logger = logging.getLogger("news_scraper.cli")

DEFAULT_STORE_PATH = Path("~/.news_scraper/processed_urls.json")


def _ensure_command_prefix(argv: Sequence[str], commands: Iterable[str]) -> Sequence[str]:
    if not argv:
        return argv
    first = argv[0]
    if first in commands or first.startswith("-"):
        return argv
    return ("scrape", *argv)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Per-attempt navigation timeout in seconds",
    )
    parser.add_argument(
        "--launch-timeout",
        type=float,
        default=60.0,
        help="Browser launch timeout in seconds",
    )
    parser.add_argument(
        "--attempts",
        type=int,
        default=3,
        help="Navigation attempts per URL",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=1.0,
        help="Politeness delay in seconds between fetches",
    )
    parser.add_argument(
        "--max-hosts",
        type=int,
        default=1,
        help="Scrape this many distinct hosts concurrently (1 keeps it sequential)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the scraped articles as a JSON array on STDOUT",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def _add_search_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("query", help="Search query")
    parser.add_argument(
        "--results",
        type=int,
        default=8,
        help="Number of search results to request",
    )
    parser.add_argument(
        "--days",
        type=int,
        default=1,
        help="Restrict results to the past N days",
    )
    parser.add_argument(
        "--store",
        type=Path,
        default=Path(os.getenv("SCRAPER_PROCESSED_STORE", str(DEFAULT_STORE_PATH))),
        help="JSON file recording URLs processed by earlier runs",
    )
    parser.add_argument(
        "--mark-processed",
        action="store_true",
        help="Record successfully scraped URLs in the store",
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Render news pages with Playwright and extract clean article text.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scrape_parser = subparsers.add_parser("scrape", help="Scrape the given article URLs")
    scrape_parser.add_argument("urls", nargs="+", help="One or more URLs to scrape")
    _add_common_arguments(scrape_parser)

    search_parser = subparsers.add_parser(
        "search", help="Search Google Custom Search and scrape the fresh results"
    )
    _add_search_arguments(search_parser)
    _add_common_arguments(search_parser)

    argv = list(sys.argv[1:] if argv is None else argv)
    argv = list(_ensure_command_prefix(argv, subparsers.choices.keys()))
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ScrapeConfig:
    return ScrapeConfig(
        navigation_timeout=args.timeout,
        launch_timeout=args.launch_timeout,
        max_navigation_attempts=args.attempts,
        politeness_delay=args.delay,
        max_hosts=args.max_hosts,
    )


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def _emit(batch: BatchResult, as_json: bool) -> None:
    if as_json:
        json.dump([article.to_dict() for article in batch.articles], sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        for article in batch.articles:
            sys.stdout.write(
                f"{article.url}\n  {article.title or '(untitled)'} | "
                f"{article.published_date or 'undated'} | {len(article.content)} chars\n"
            )
    sys.stdout.flush()


async def _scrape(urls: Sequence[str], config: ScrapeConfig) -> BatchResult:
    async with PlaywrightRenderer.start(config) as renderer:
        return await process_batch(urls, PageFetcher(renderer, config))


async def _search(args: argparse.Namespace, config: ScrapeConfig) -> BatchResult:
    provider = GoogleSearchProvider(
        api_key=os.getenv("GOOGLE_API_KEY", ""),
        engine_id=os.getenv("GOOGLE_CSE_ID", ""),
    )
    store = JsonProcessedUrlStore(args.store)
    async with PlaywrightRenderer.start(config) as renderer:
        return await collect_articles(
            provider,
            store,
            renderer,
            args.query,
            num_results=args.results,
            days_ago=args.days,
            config=config,
            mark_processed=args.mark_processed,
        )


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    _configure_logging(args)
    try:
        config = build_config(args)
        overall_start = time.perf_counter()
        if args.command == "scrape":
            batch = asyncio.run(_scrape(args.urls, config))
        else:
            batch = asyncio.run(_search(args, config))
    except (ScraperError, ValueError) as exc:
        logger.error("%s", exc)
        sys.exit(1)

    summary = batch.summary
    logger.info(
        "Finished in %.2fs (%d/%d succeeded, %d skipped, failures: %s)",
        time.perf_counter() - overall_start,
        summary.succeeded,
        summary.attempted,
        summary.skipped,
        summary.failed or "none",
    )
    _emit(batch, args.json)


if __name__ == "__main__":
    main()
