"""HTML text extraction with a container/paragraph/body fallback chain."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple

from bs4 import BeautifulSoup

from .config import ScrapeConfig
from .metadata import extract_date, extract_title
from .models import ExtractedDocument
from .utils import normalize_text

logger = logging.getLogger("news_scraper")

BOILERPLATE_SELECTOR = ", ".join(
    (
        "script",
        "style",
        "noscript",
        "nav",
        "footer",
        "header",
        "aside",
        ".sidebar",
        ".footer",
        ".header",
        ".nav",
        ".menu",
        ".ad",
        ".ads",
        ".advertisement",
        ".cookie",
        ".popup",
    )
)

CONTAINER_SELECTORS: Tuple[str, ...] = (
    "article",
    ".article",
    ".post",
    ".entry",
    ".content",
    "#content",
    ".article-content",
    ".post-content",
    ".entry-content",
    "main",
    "[role='main']",
    ".main-content",
    "#main-content",
    ".body-content",
    "#body-content",
)

STRATEGY_CONTAINER = "container"
STRATEGY_PARAGRAPHS = "paragraphs"
STRATEGY_BODY = "body"


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def strip_boilerplate(soup: BeautifulSoup) -> BeautifulSoup:
    """Remove navigation, ads, banners and non-text tags in place."""
    for tag in soup.select(BOILERPLATE_SELECTOR):
        # A match nested inside an already removed match is gone too.
        if tag.decomposed:
            continue
        tag.decompose()
    return soup


def _element_text(element) -> str:
    return element.get_text(" ")


def _first_container(
    soup: BeautifulSoup, selectors: Iterable[str], min_chars: int
) -> Optional[Tuple[str, str]]:
    for selector in selectors:
        element = soup.select_one(selector)
        if element is None:
            continue
        text = _element_text(element)
        if len(normalize_text(text)) > min_chars:
            return selector, text
    return None


def _paragraph_text(soup: BeautifulSoup) -> str:
    parts = (normalize_text(_element_text(p)) for p in soup.find_all("p"))
    return " ".join(part for part in parts if part)


def _body_text(soup: BeautifulSoup) -> str:
    root = soup.body or soup
    return _element_text(root)


def select_text(soup: BeautifulSoup, config: ScrapeConfig) -> Tuple[str, str]:
    """Run the fallback chain on an already pruned document.

    Returns ``(strategy, text)``. The container strategy wins when the first
    element matching one of ``CONTAINER_SELECTORS`` (tried in order) holds more
    than ``config.container_min_chars`` characters. Otherwise paragraphs are
    joined, and if even those stay under ``config.paragraph_min_chars`` the
    whole body is used.
    """
    found = _first_container(soup, CONTAINER_SELECTORS, config.container_min_chars)
    if found:
        selector, text = found
        logger.debug("Found main content using selector %s", selector)
        return STRATEGY_CONTAINER, text

    paragraphs = _paragraph_text(soup)
    if len(paragraphs) >= config.paragraph_min_chars:
        return STRATEGY_PARAGRAPHS, paragraphs

    return STRATEGY_BODY, _body_text(soup)


def extract_text(soup: BeautifulSoup, config: Optional[ScrapeConfig] = None) -> str:
    """Prune ``soup`` and return the best available article text (may be empty)."""
    config = config or ScrapeConfig()
    strip_boilerplate(soup)
    _, text = select_text(soup, config)
    return text


def extract_document(html: str, config: Optional[ScrapeConfig] = None) -> ExtractedDocument:
    """Parse rendered markup into title, raw article text and publication date.

    Metadata is read before pruning so dates living in headers survive.
    """
    config = config or ScrapeConfig()
    soup = parse_html(html)
    published = extract_date(soup)
    title = extract_title(soup)

    strip_boilerplate(soup)
    strategy, text = select_text(soup, config)
    logger.debug("Extracted %d raw chars via %s strategy", len(text), strategy)
    return ExtractedDocument(title=title, raw_text=text, published_date=published)
