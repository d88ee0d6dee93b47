"""Collaborators around the scraper: search providers and processed-URL stores."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol, Set

import requests

from .errors import SearchError
from .models import CandidateUrl

logger = logging.getLogger("news_scraper")

GOOGLE_SEARCH_ENDPOINT = "https://www.googleapis.com/customsearch/v1"
GOOGLE_PAGE_SIZE = 10
GOOGLE_MAX_RESULTS = 100
DATE_METATAGS = ("article:published_time", "og:updated_time", "date", "pubdate")


class SearchProvider(Protocol):
    def search(self, query: str, num_results: int, days_ago: int) -> List[CandidateUrl]:
        """Return candidate URLs for ``query`` published in the last ``days_ago`` days."""


class ProcessedUrlStore(Protocol):
    def is_processed(self, url: str) -> bool:
        ...

    def mark_processed(self, url: str) -> None:
        ...


def _item_date(item: Dict[str, Any]) -> Optional[str]:
    metatags = (item.get("pagemap") or {}).get("metatags") or []
    for tags in metatags:
        for key in DATE_METATAGS:
            value = tags.get(key)
            if value:
                return value
    return None


class GoogleSearchProvider:
    """Google Custom Search JSON API client."""

    def __init__(
        self,
        api_key: str,
        engine_id: str,
        session: Optional[requests.Session] = None,
        timeout: float = 15.0,
    ) -> None:
        if not api_key or not engine_id:
            raise ValueError("Google search needs both an API key and an engine id")
        self.api_key = api_key
        self.engine_id = engine_id
        self.session = session or requests.Session()
        self.timeout = timeout

    def _fetch_page(self, query: str, start: int, count: int, days_ago: int) -> Dict[str, Any]:
        params = {
            "key": self.api_key,
            "cx": self.engine_id,
            "q": query,
            "num": count,
            "start": start,
        }
        if days_ago > 0:
            params["dateRestrict"] = f"d{days_ago}"
        try:
            resp = self.session.get(GOOGLE_SEARCH_ENDPOINT, params=params, timeout=self.timeout)
            resp.raise_for_status()
            return resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise SearchError(f"Search request for {query!r} failed: {exc}") from exc

    def search(self, query: str, num_results: int, days_ago: int) -> List[CandidateUrl]:
        wanted = max(0, min(num_results, GOOGLE_MAX_RESULTS))
        candidates: List[CandidateUrl] = []
        seen: Set[str] = set()
        start = 1
        while len(candidates) < wanted:
            count = min(GOOGLE_PAGE_SIZE, wanted - len(candidates))
            payload = self._fetch_page(query, start, count, days_ago)
            items = payload.get("items") or []
            before = len(candidates)
            for item in items:
                link = item.get("link")
                if not link or link in seen:
                    continue
                seen.add(link)
                candidates.append(
                    CandidateUrl(url=link, title=item.get("title", ""), date=_item_date(item))
                )
            if len(items) < count or len(candidates) == before:
                break
            start += count
        logger.info("Search for %r returned %d results", query, len(candidates))
        return candidates[:wanted]


class MemoryProcessedUrlStore:
    """Process-local store, mostly useful for tests and one-off runs."""

    def __init__(self, urls: Iterable[str] = ()) -> None:
        self._urls: Set[str] = set(urls)

    def is_processed(self, url: str) -> bool:
        return url in self._urls

    def mark_processed(self, url: str) -> None:
        self._urls.add(url)


class JsonProcessedUrlStore:
    """Processed URLs persisted as a JSON list on disk."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path).expanduser()
        self._urls: Set[str] = self._load()

    def _load(self) -> Set[str]:
        if not self.path.exists():
            return set()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable processed-URL store %s: %s", self.path, exc)
            return set()
        if not isinstance(data, list):
            logger.warning("Ignoring malformed processed-URL store %s", self.path)
            return set()
        return {str(url) for url in data}

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".processed-", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(sorted(self._urls), handle, indent=2)
            os.replace(tmp_name, self.path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def is_processed(self, url: str) -> bool:
        return url in self._urls

    def mark_processed(self, url: str) -> None:
        if url in self._urls:
            return
        self._urls.add(url)
        self._save()
