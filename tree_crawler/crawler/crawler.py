from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from typing import AsyncIterator, Callable, List, Optional

from aiohttp import ClientSession, ClientTimeout

from tree_crawler.crawler.channel import ResultChannel
from tree_crawler.crawler.fetcher import Fetcher, HttpFetcher, MappingFetcher
from tree_crawler.crawler.models import FetchError, PageData
from tree_crawler.crawler.registry import VisitedRegistry
from tree_crawler.logger import LOGGER_NAME

__all__ = ("crawl", "spawn_crawl", "AsyncCrawler")

logger = logging.getLogger(LOGGER_NAME)

FailureHook = Callable[[FetchError], None]


async def crawl(
    url: str,
    depth: int,
    registry: VisitedRegistry,
    fetcher: Fetcher,
    out: ResultChannel,
    *,
    limiter: Optional[asyncio.Semaphore] = None,
    on_failure: Optional[FailureHook] = None,
) -> None:
    """Crawl *url* and everything reachable from it within *depth* hops.

    The page itself is sent on *out* first, then the results of each child
    in link order. *out* is closed on every exit path.
    """
    try:
        if depth <= 0:
            logger.debug("depth exhausted: %s", url)
            return
        if not await registry.claim(url):
            logger.debug("already visited: %s", url)
            return

        try:
            if limiter is None:
                result = await fetcher.fetch(url)
            else:
                async with limiter:
                    result = await fetcher.fetch(url)
        except FetchError as exc:
            logger.warning("Failed %s: %s", url, exc)
            if on_failure is not None:
                on_failure(exc)
            return

        await out.send(PageData(url, result.content))

        async with asyncio.TaskGroup() as group:
            children: List[ResultChannel] = []
            for link in result.links:
                child = ResultChannel()
                group.create_task(
                    crawl(link, depth - 1, registry, fetcher, child, limiter=limiter, on_failure=on_failure)
                )
                children.append(child)
            for child in children:
                async for page in child:
                    await out.send(page)
    finally:
        out.close()


def spawn_crawl(
    seed: str,
    max_depth: int,
    fetcher: Fetcher,
    sink: ResultChannel,
    *,
    limiter: Optional[asyncio.Semaphore] = None,
    on_failure: Optional[FailureHook] = None,
) -> asyncio.Task[None]:
    """Start a crawl of *seed* in the background, streaming results into *sink*.

    Every call gets its own :class:`VisitedRegistry`. The caller reads *sink*
    until it closes, which happens once the whole discovery tree is done.
    """
    registry = VisitedRegistry()
    return asyncio.create_task(
        crawl(seed, max_depth, registry, fetcher, sink, limiter=limiter, on_failure=on_failure)
    )


class AsyncCrawler:
    """Асинхронный краулер: рекурсивный обход дерева ссылок с дедупликацией и ограничением глубины."""

    def __init__(self, config, fetcher: Optional[Fetcher] = None) -> None:
        self.config = config
        self._validate_config()
        self.fetcher: Optional[Fetcher] = fetcher
        self.failures: List[FetchError] = []
        self.session: Optional[ClientSession] = None
        self.logger = logger

    async def __aenter__(self) -> AsyncCrawler:
        if self.fetcher is None:
            graph_file = getattr(self.config, "graph_file", None)
            if graph_file is not None:
                self.fetcher = MappingFetcher.from_file(graph_file)
            else:
                self.session = ClientSession(
                    timeout=ClientTimeout(total=self.config.timeout),
                    headers={"User-Agent": self.config.user_agent},
                    raise_for_status=False,
                )
                self.fetcher = HttpFetcher(
                    self.session, same_host_only=getattr(self.config, "same_host_only", True)
                )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def stream(self) -> AsyncIterator[PageData]:
        """Yield pages as the crawl produces them. Closing the generator early cancels the crawl."""
        if self.fetcher is None:
            raise RuntimeError("Fetcher not initialized")
        self.failures = []
        max_concurrency = getattr(self.config, "max_concurrency", None)
        limiter = asyncio.Semaphore(max_concurrency) if max_concurrency else None
        sink = ResultChannel()
        root = spawn_crawl(
            self.config.seed_url,
            self.config.max_depth,
            self.fetcher,
            sink,
            limiter=limiter,
            on_failure=self.failures.append,
        )
        try:
            async for page in sink:
                yield page
        finally:
            if not root.done():
                root.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await root

    async def crawl(self) -> List[PageData]:
        self.logger.info("Старт обхода: %s (глубина %d)", self.config.seed_url, self.config.max_depth)
        start = time.monotonic()
        results: List[PageData] = [page async for page in self.stream()]
        duration = time.monotonic() - start
        self.logger.info(
            "Завершено: %d страниц за %.2f с (%.2f стр/с)",
            len(results), duration, len(results) / duration if duration else 0,
        )
        if self.failures:
            self.logger.info("Ошибок загрузки: %d", len(self.failures))
        return results

    def _validate_config(self) -> None:
        required = ("seed_url", "max_depth")
        for f in required:
            if not hasattr(self.config, f):
                raise AttributeError(f"config missing '{f}'")
        max_concurrency = getattr(self.config, "max_concurrency", None)
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
