"""Data models used throughout the scraping pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class SkipReason(str, Enum):
    """Why a URL was (or was not) filtered before fetching."""

    HOMEPAGE = "homepage"
    INDEX_PAGE = "indexPage"
    NON_ARTICLE_PAGE = "nonArticlePage"
    MALFORMED = "malformed"
    NONE = "none"


class AttemptOutcome(str, Enum):
    """Result of one navigation attempt."""

    SUCCESS = "success"
    NAVIGATION_TIMEOUT = "navigation_timeout"
    NETWORK_ERROR = "network_error"
    NON_OK_STATUS = "non_ok_status"


class FetchStatus(str, Enum):
    """Terminal state of a single URL's fetch lifecycle."""

    DONE = "done"
    SKIPPED = "skipped"
    LAUNCH_ERROR = "launch_error"
    NAVIGATION_EXHAUSTED = "navigation_exhausted"
    NON_OK_STATUS = "non_ok_status"
    INSUFFICIENT_CONTENT = "insufficient_content"
    ERROR = "error"


@dataclass(frozen=True)
class CandidateUrl:
    """A URL discovered by a search provider, not yet validated."""

    url: str
    title: str = ""
    date: Optional[str] = None


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of the pre-fetch URL check."""

    skip: bool
    reason: SkipReason


@dataclass(frozen=True)
class FetchAttempt:
    """One navigation attempt for a URL."""

    attempt_number: int
    outcome: AttemptOutcome
    status_code: Optional[int] = None
    detail: str = ""


@dataclass(frozen=True)
class ExtractedDocument:
    """Title, cleaned text and date recovered from rendered markup."""

    title: str
    raw_text: str
    published_date: Optional[str] = None


@dataclass(frozen=True)
class FetchResult:
    """Terminal outcome of fetching and extracting one URL."""

    url: str
    status: FetchStatus
    document: Optional[ExtractedDocument] = None
    attempts: Tuple[FetchAttempt, ...] = ()
    content: str = ""
    reason: SkipReason = SkipReason.NONE
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.DONE and bool(self.content)


@dataclass(frozen=True)
class ScrapedArticle:
    """Article content handed to downstream consumers."""

    url: str
    title: str
    content: str
    published_date: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.content:
            raise ValueError(f"ScrapedArticle for {self.url} has empty content")

    def to_dict(self) -> Dict[str, Optional[str]]:
        return asdict(self)


@dataclass
class BatchSummary:
    """Counts describing how a batch went."""

    attempted: int = 0
    succeeded: int = 0
    skipped: int = 0
    failed: Dict[str, int] = field(default_factory=dict)

    def record(self, result: FetchResult) -> None:
        self.attempted += 1
        if result.ok:
            self.succeeded += 1
        elif result.status is FetchStatus.SKIPPED:
            self.skipped += 1
        else:
            key = result.status.value
            self.failed[key] = self.failed.get(key, 0) + 1


@dataclass
class BatchResult:
    """Ordered successful articles plus per-URL outcomes for a batch."""

    articles: List[ScrapedArticle] = field(default_factory=list)
    summary: BatchSummary = field(default_factory=BatchSummary)
    outcomes: List[FetchResult] = field(default_factory=list)

    def __iter__(self):
        return iter(self.articles)

    def __len__(self) -> int:
        return len(self.articles)
