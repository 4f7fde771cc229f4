"""tree_crawler.aggregator: сборка отчёта об обходе из страниц и ошибок загрузки."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Iterable, List, TypedDict

from tree_crawler.crawler.models import FetchError, PageData


class PageInfo(TypedDict):
    """Информация о загруженной странице."""

    url: str
    content: str
    size: int


class FailureInfo(TypedDict):
    """Информация о неудачной загрузке."""

    url: str
    error: str


@dataclass(slots=True)
class CrawlReport:
    """Результаты обхода: страницы в порядке выдачи и ошибки загрузки."""

    seed_url: str
    max_depth: int
    pages: List[PageInfo] = field(default_factory=list)
    failures: List[FailureInfo] = field(default_factory=list)

    @property
    def urls(self) -> List[str]:
        return [p["url"] for p in self.pages]

    def json(self, *, pretty: bool = False) -> str:
        """Возвращает JSON-представление CrawlReport."""
        return json.dumps(asdict(self), ensure_ascii=False, indent=2 if pretty else None)


def aggregate_results(
    pages: Iterable[PageData],
    failures: Iterable[FetchError] = (),
    *,
    seed_url: str,
    max_depth: int,
) -> CrawlReport:
    """Собирает страницы и ошибки в CrawlReport."""
    report = CrawlReport(seed_url=seed_url, max_depth=max_depth)
    report.pages = [
        {"url": p.url, "content": p.content, "size": len(p.content.encode("utf-8"))} for p in pages
    ]
    report.failures = [{"url": f.url, "error": str(f)} for f in failures]
    return report


__all__ = ["CrawlReport", "PageInfo", "FailureInfo", "aggregate_results"]
