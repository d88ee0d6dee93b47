"""Utility helpers for string normalization and URL handling."""

from __future__ import annotations

import re
from urllib.parse import urlparse

WHITESPACE_PATTERN = re.compile(r"\s+")


def normalize_text(value: str) -> str:
    """Collapse every whitespace run into a single space and trim the ends."""
    if not value:
        return ""
    return WHITESPACE_PATTERN.sub(" ", value).strip()


def host_of(url: str) -> str:
    """Return the lowercase host of ``url`` without a leading ``www.``."""
    try:
        netloc = urlparse(url).netloc.lower()
    except ValueError:
        return ""
    if netloc.startswith("www."):
        netloc = netloc[4:]
    return netloc
