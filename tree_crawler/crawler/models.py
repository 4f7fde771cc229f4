"""
Data models for the TreeCrawler crawl engine.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(slots=True)
class PageData:
    """One crawl result: the URL exactly as it was claimed and its content."""

    url: str
    content: str


@dataclass(slots=True)
class FetchResult:
    """What a fetcher returns for one URL: body text and outgoing links in document order."""

    content: str
    links: List[str] = field(default_factory=list)


class FetchError(Exception):
    """A fetch of a single URL failed.

    The only recoverable error of the crawl: it prunes the subtree below
    ``url`` and is never raised to the consumer of the result stream.
    """

    def __init__(self, url: str, cause: object) -> None:
        self.url = url
        self.cause = cause
        super().__init__(str(cause))


__all__ = ("PageData", "FetchResult", "FetchError")
