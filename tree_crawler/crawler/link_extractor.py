"""
Link extraction for HTML pages fetched by :class:`~tree_crawler.crawler.fetcher.HttpFetcher`.
"""
from __future__ import annotations

from typing import List
from urllib.parse import urldefrag, urljoin, urlparse

from bs4 import BeautifulSoup
from bs4.element import Tag

_SKIP_PREFIXES = ("mailto:", "javascript:", "tel:", "data:")


def extract_links(base_url: str, html: str, *, same_host_only: bool = True) -> List[str]:
    """
    Extract absolute HTTP(S) links from ``<a href>`` tags of *html*.

    Relative links are resolved against *base_url* and fragments dropped.
    The result keeps first-occurrence order without duplicates.
    """
    soup = BeautifulSoup(html, "html.parser")
    base_netloc = urlparse(base_url).netloc
    seen: set[str] = set()
    links: List[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        raw = href_val.strip()
        if not raw or raw.lower().startswith(_SKIP_PREFIXES):
            continue
        try:
            absolute, _ = urldefrag(urljoin(base_url, raw))
            parsed = urlparse(absolute)
        except ValueError:
            # malformed href, e.g. an unbalanced IPv6 bracket
            continue
        if parsed.scheme not in ("http", "https"):
            continue
        if same_host_only and parsed.netloc != base_netloc:
            continue
        if absolute not in seen:
            seen.add(absolute)
            links.append(absolute)
    return links


__all__ = ("extract_links",)
