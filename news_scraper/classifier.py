"""Pre-fetch URL filtering for homepages and other non-article pages."""

from __future__ import annotations

import re
from typing import Sequence, Tuple
from urllib.parse import urlparse

from .models import ClassificationResult, SkipReason


# Evaluated in order; the homepage family always runs before the
# non-article family.
HOMEPAGE_PATTERNS: Sequence[Tuple[re.Pattern, SkipReason]] = (
    (re.compile(r"^/?$"), SkipReason.HOMEPAGE),
    (re.compile(r"^/index\.(?:html?|php|aspx?|jsp)$", re.IGNORECASE), SkipReason.INDEX_PAGE),
    (re.compile(r"^/home\.(?:html?|php|aspx?|jsp)$", re.IGNORECASE), SkipReason.INDEX_PAGE),
    (re.compile(r"^/default\.(?:html?|php|aspx?|jsp)$", re.IGNORECASE), SkipReason.INDEX_PAGE),
    (re.compile(r"^/welcome\.(?:html?|php|aspx?|jsp)$", re.IGNORECASE), SkipReason.INDEX_PAGE),
    (re.compile(r"^/home/?$", re.IGNORECASE), SkipReason.HOMEPAGE),
    (re.compile(r"^/main/?$", re.IGNORECASE), SkipReason.HOMEPAGE),
)

NON_ARTICLE_SLUGS = (
    "about",
    "contact",
    "faq",
    "help",
    "support",
    "terms",
    "privacy",
    "login",
    "signup",
    "register",
    "account",
)
NON_ARTICLE_PATTERN = re.compile(
    r"^/(?:%s)/?$" % "|".join(NON_ARTICLE_SLUGS), re.IGNORECASE
)

_NOT_SKIPPABLE = ClassificationResult(skip=False, reason=SkipReason.NONE)


def classify_url(url: str) -> ClassificationResult:
    """Decide whether ``url`` can be skipped before paying any network cost.

    Malformed input never raises; it is reported as ``malformed`` and left
    fetchable, since a parse failure says nothing about the page itself.
    """
    try:
        parsed = urlparse(url)
    except (TypeError, ValueError, AttributeError):
        return ClassificationResult(skip=False, reason=SkipReason.MALFORMED)
    if not parsed.scheme or not parsed.netloc:
        return ClassificationResult(skip=False, reason=SkipReason.MALFORMED)

    path = parsed.path
    for pattern, reason in HOMEPAGE_PATTERNS:
        if pattern.match(path):
            return ClassificationResult(skip=True, reason=reason)
    if NON_ARTICLE_PATTERN.match(path):
        return ClassificationResult(skip=True, reason=SkipReason.NON_ARTICLE_PAGE)
    return _NOT_SKIPPABLE
