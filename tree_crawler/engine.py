# File: tree_crawler/engine.py
"""tree_crawler.engine: запуск обхода по конфигурации и агрегация результатов."""

from __future__ import annotations

from typing import AsyncIterator, List, Optional

from tree_crawler.aggregator import CrawlReport, aggregate_results
from tree_crawler.config import CrawlConfig
from tree_crawler.crawler.crawler import AsyncCrawler
from tree_crawler.crawler.fetcher import Fetcher
from tree_crawler.crawler.models import FetchError, PageData
from tree_crawler.logger import logger

__all__ = ["stream_scan", "start_scan"]


async def stream_scan(
    cfg: CrawlConfig,
    fetcher: Optional[Fetcher] = None,
    failures: Optional[List[FetchError]] = None,
) -> AsyncIterator[PageData]:
    """
    Выдаёт PageData по мере обхода.

    Если передан список failures, в него дописываются ошибки загрузки.
    """
    async with AsyncCrawler(cfg, fetcher) as crawler:
        try:
            async for page in crawler.stream():
                yield page
        finally:
            if failures is not None:
                failures.extend(crawler.failures)


async def start_scan(cfg: CrawlConfig, fetcher: Optional[Fetcher] = None) -> CrawlReport:
    """
    Запускает обход в контексте AsyncCrawler и возвращает CrawlReport.

    Parameters
    ----------
    cfg : CrawlConfig
        Конфигурация обхода.
    fetcher : Fetcher, optional
        Готовый загрузчик; по умолчанию строится из конфигурации.
    """
    logger.info("Starting crawl…")
    async with AsyncCrawler(cfg, fetcher) as crawler:
        pages = await crawler.crawl()
        failures = list(crawler.failures)
    return aggregate_results(pages, failures, seed_url=cfg.seed_url, max_depth=cfg.max_depth)
