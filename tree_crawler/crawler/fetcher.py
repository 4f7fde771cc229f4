"""
Fetcher module: the capability the crawl engine calls to load one document.

A fetcher turns a URL into a :class:`FetchResult` (body and outgoing links)
or raises :class:`FetchError`. It may be called concurrently from many tasks.
"""
from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, Mapping, Protocol, Union, runtime_checkable

import yaml
from aiohttp import ClientError, ClientSession

from tree_crawler.crawler.link_extractor import extract_links
from tree_crawler.crawler.models import FetchError, FetchResult


@runtime_checkable
class Fetcher(Protocol):
    async def fetch(self, url: str) -> FetchResult:
        ...


class MappingFetcher:
    """Serves canned results from an in-memory graph ``{url: FetchResult}``."""

    def __init__(self, pages: Mapping[str, FetchResult]) -> None:
        self.pages: Dict[str, FetchResult] = dict(pages)

    async def fetch(self, url: str) -> FetchResult:
        try:
            return self.pages[url]
        except KeyError:
            raise FetchError(url, f"not found: {url}") from None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> MappingFetcher:
        """
        Build a fetcher from a parsed graph document::

            pages:
              "https://golang.org/":
                body: "The Go Programming Language"
                links: ["https://golang.org/pkg/"]
        """
        raw_pages = data.get("pages")
        if not isinstance(raw_pages, Mapping):
            raise TypeError("graph document must contain a 'pages' mapping")
        pages: Dict[str, FetchResult] = {}
        for url, entry in raw_pages.items():
            entry = entry or {}
            if not isinstance(entry, Mapping):
                raise TypeError(f"page entry for {url!r} must be a mapping, got {type(entry).__name__}")
            links = entry.get("links") or []
            if not isinstance(links, list):
                raise TypeError(f"links of {url!r} must be a list")
            pages[str(url)] = FetchResult(content=str(entry.get("body", "")), links=[str(u) for u in links])
        return cls(pages)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> MappingFetcher:
        """Load a YAML or JSON graph file."""
        path_obj = Path(path)
        text = path_obj.read_text(encoding="utf-8")
        if path_obj.suffix.lower() == ".json":
            try:
                data = json.loads(text)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid JSON in {path_obj}: {exc}") from exc
        else:
            try:
                data = yaml.safe_load(text)
            except yaml.YAMLError as exc:
                raise ValueError(f"Invalid YAML in {path_obj}: {exc}") from exc
        if not isinstance(data, Mapping):
            raise TypeError(f"Top level of {path_obj} must be a mapping, got {type(data).__name__}")
        return cls.from_mapping(data)


class HttpFetcher:
    """Fetches pages over HTTP with a shared aiohttp session."""

    def __init__(self, session: ClientSession, *, same_host_only: bool = True) -> None:
        self.session = session
        self.same_host_only = same_host_only

    async def fetch(self, url: str) -> FetchResult:
        """
        GET *url* and return its text plus the links found in it.

        HTTP errors, connection problems and timeouts raise FetchError;
        nothing is retried.
        """
        try:
            async with self.session.get(url, raise_for_status=False) as resp:
                if resp.status >= 400:
                    raise FetchError(url, f"HTTP {resp.status}: {url}")
                ctype = resp.headers.get("Content-Type", "").lower()
                text = await resp.text(errors="replace")
        except asyncio.TimeoutError:
            raise FetchError(url, f"timeout: {url}") from None
        except ClientError as exc:
            raise FetchError(url, f"{type(exc).__name__}: {exc}") from exc

        if "html" not in ctype:
            return FetchResult(content=text)
        links = extract_links(str(resp.url), text, same_host_only=self.same_host_only)
        return FetchResult(content=text, links=links)


__all__ = ("Fetcher", "MappingFetcher", "HttpFetcher")
