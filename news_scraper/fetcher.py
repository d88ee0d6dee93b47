"""Fetch orchestration for a single URL: classify, render, validate, extract."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .classifier import classify_url
from .config import ScrapeConfig
from .content import extract_document
from .deadline import (
    AttemptResult,
    Completed,
    DeadlineExceeded,
    RetryPolicy,
    retry_with_deadline,
    run_with_deadline,
)
from .errors import LaunchError, NavigationError, NavigationTimeoutError
from .models import (
    AttemptOutcome,
    FetchAttempt,
    FetchResult,
    FetchStatus,
    SkipReason,
)
from .rendering import Renderer, RenderingSession
from .utils import normalize_text

logger = logging.getLogger("news_scraper")

HTTP_OK = 200


def _to_attempt(number: int, result: AttemptResult) -> FetchAttempt:
    if isinstance(result, Completed):
        status = result.value
        if status == HTTP_OK:
            return FetchAttempt(number, AttemptOutcome.SUCCESS, status_code=status)
        return FetchAttempt(
            number,
            AttemptOutcome.NON_OK_STATUS,
            status_code=status,
            detail="no response" if status is None else f"status {status}",
        )
    if isinstance(result, DeadlineExceeded):
        return FetchAttempt(
            number,
            AttemptOutcome.NAVIGATION_TIMEOUT,
            detail=f"Navigation timeout after {result.seconds:g}s",
        )
    if isinstance(result.error, NavigationTimeoutError):
        return FetchAttempt(number, AttemptOutcome.NAVIGATION_TIMEOUT, detail=str(result.error))
    return FetchAttempt(number, AttemptOutcome.NETWORK_ERROR, detail=str(result.error))


class PageFetcher:
    """Drives one rendering session per URL and returns a tagged ``FetchResult``.

    Per-URL problems never raise: skips, launch failures, exhausted
    navigation, bad status codes and short content all come back as a
    ``FetchResult`` with the matching ``FetchStatus``.
    """

    def __init__(self, renderer: Renderer, config: Optional[ScrapeConfig] = None) -> None:
        self.renderer = renderer
        self.config = config or ScrapeConfig()

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.config.max_navigation_attempts,
            delay=self.config.retry_delay,
        )

    async def fetch(self, url: str) -> FetchResult:
        classification = classify_url(url)
        if classification.skip:
            logger.info("Skipping %s: %s", classification.reason.value, url)
            return FetchResult(url=url, status=FetchStatus.SKIPPED, reason=classification.reason)
        if classification.reason is SkipReason.MALFORMED:
            logger.warning("Could not parse %s; fetching anyway", url)

        logger.info("Scraping content from %s", url)
        try:
            async with self.renderer.session() as session:
                return await self._fetch_in_session(session, url, classification.reason)
        except LaunchError as exc:
            logger.error("Rendering session unavailable for %s: %s", url, exc)
            return FetchResult(
                url=url,
                status=FetchStatus.LAUNCH_ERROR,
                reason=classification.reason,
                detail=str(exc),
            )

    async def _navigate(
        self, session: RenderingSession, url: str
    ) -> Tuple[Optional[FetchAttempt], List[FetchAttempt]]:
        policy = self.retry_policy

        def attempt():
            return session.goto(url, self.config.wait_until)

        log = await retry_with_deadline(
            attempt,
            self.config.navigation_timeout,
            policy,
            retry_on=(NavigationError,),
        )
        attempts = [_to_attempt(number, result) for number, result in enumerate(log, start=1)]
        for record in attempts:
            if record.outcome in (AttemptOutcome.NAVIGATION_TIMEOUT, AttemptOutcome.NETWORK_ERROR):
                logger.warning(
                    "Navigation attempt %d/%d for %s failed: %s",
                    record.attempt_number,
                    policy.max_attempts,
                    url,
                    record.detail,
                )
        final = attempts[-1] if isinstance(log[-1], Completed) else None
        return final, attempts

    async def _wait_for_content(self, session: RenderingSession, url: str) -> None:
        timeout = self.config.content_wait_timeout
        waited = await run_with_deadline(
            session.wait_for_selector(self.config.content_ready_selector, timeout),
            timeout,
        )
        if not (isinstance(waited, Completed) and waited.value):
            logger.debug("No common content selectors found on %s, proceeding anyway", url)

    async def _fetch_in_session(
        self, session: RenderingSession, url: str, reason: SkipReason
    ) -> FetchResult:
        final, attempts = await self._navigate(session, url)
        history = tuple(attempts)
        if final is None:
            logger.error("Failed to load page after %d attempts: %s", len(attempts), url)
            return FetchResult(
                url=url,
                status=FetchStatus.NAVIGATION_EXHAUSTED,
                attempts=history,
                reason=reason,
                detail=attempts[-1].detail,
            )

        if final.outcome is not AttemptOutcome.SUCCESS:
            logger.error("Failed to load page %s, status: %s", url, final.status_code or "unknown")
            return FetchResult(
                url=url,
                status=FetchStatus.NON_OK_STATUS,
                attempts=history,
                reason=reason,
                detail=final.detail,
            )

        await self._wait_for_content(session, url)

        try:
            html = await session.content()
        except NavigationError as exc:
            logger.error("Extraction failed for %s after %d attempts: %s", url, len(attempts), exc)
            return FetchResult(
                url=url, status=FetchStatus.ERROR, attempts=history, reason=reason, detail=str(exc)
            )

        document = extract_document(html, self.config)
        content = normalize_text(document.raw_text)
        if len(content) < self.config.content_floor_chars:
            logger.info(
                "Insufficient content from %s (%d chars < %d)",
                url,
                len(content),
                self.config.content_floor_chars,
            )
            return FetchResult(
                url=url,
                status=FetchStatus.INSUFFICIENT_CONTENT,
                document=document,
                attempts=history,
                reason=reason,
                detail=f"{len(content)} chars",
            )

        logger.info("Scraped %d chars from %s", len(content), url)
        return FetchResult(
            url=url,
            status=FetchStatus.DONE,
            document=document,
            attempts=history,
            content=content,
            reason=reason,
        )
