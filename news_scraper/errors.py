"""Exception types raised by the scraper."""

from __future__ import annotations


class ScraperError(Exception):
    """Base class for scraper failures."""


class LaunchError(ScraperError):
    """The rendering session could not be acquired."""


class NavigationError(ScraperError):
    """A single navigation attempt failed below the HTTP layer."""


class NoCandidatesError(ScraperError):
    """A batch was started without any candidate URLs."""


class RendererUnavailableError(ScraperError):
    """Every URL in a batch failed to acquire a rendering session."""


class SearchError(ScraperError):
    """The search provider could not return candidates."""


class NavigationTimeoutError(NavigationError):
    """The browser's own navigation timeout fired during an attempt."""
