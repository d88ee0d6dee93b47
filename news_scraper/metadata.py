"""Publication date and title lookup from parsed markup."""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

from bs4 import BeautifulSoup
from dateutil import parser as date_parser

from .utils import normalize_text

logger = logging.getLogger("news_scraper")

# (attribute, value) pairs probed in order on <meta> tags.
DATE_META_TAGS: Sequence[Tuple[str, str]] = (
    ("property", "article:published_time"),
    ("name", "publish_date"),
    ("name", "date"),
    ("name", "pubdate"),
    ("name", "publication_date"),
)
DATE_CONTAINER_SELECTORS: Sequence[str] = (".date", ".published", ".pubdate", ".timestamp")


def normalize_date(value: Optional[str]) -> Optional[str]:
    """Return ``YYYY-MM-DD`` when ``value`` parses, otherwise the trimmed input."""
    if not value:
        return None
    value = value.strip()
    if not value:
        return None
    try:
        return date_parser.parse(value).date().isoformat()
    except (ValueError, OverflowError, TypeError) as exc:
        logger.debug("Keeping unparsed date %r: %s", value, exc)
        return value


def _find_raw_date(soup: BeautifulSoup) -> Optional[str]:
    for attr, name in DATE_META_TAGS:
        tag = soup.find("meta", attrs={attr: name})
        if tag and tag.get("content", "").strip():
            return tag["content"]

    time_tag = soup.find("time", attrs={"datetime": True})
    if time_tag and time_tag["datetime"].strip():
        return time_tag["datetime"]

    for selector in DATE_CONTAINER_SELECTORS:
        element = soup.select_one(selector)
        if element is None:
            continue
        value = (
            element.get("datetime")
            or element.get("content")
            or normalize_text(element.get_text(" "))
        )
        if value and value.strip():
            return value
    return None


def extract_date(soup: BeautifulSoup) -> Optional[str]:
    """Find the publication date using meta tags, ``<time>``, then date classes."""
    return normalize_date(_find_raw_date(soup))


def extract_title(soup: BeautifulSoup) -> str:
    """Document title, falling back to the first ``<h1>``, then ``""``."""
    if soup.title:
        title = normalize_text(soup.title.get_text())
        if title:
            return title
    heading = soup.find("h1")
    if heading:
        return normalize_text(heading.get_text(" "))
    return ""
