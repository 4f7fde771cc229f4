"""tree_crawler.crawler: движок обхода — задачи, каналы результатов, реестр посещённых URL и загрузчики."""

from tree_crawler.crawler.channel import ChannelClosedError, ResultChannel
from tree_crawler.crawler.crawler import AsyncCrawler, crawl, spawn_crawl
from tree_crawler.crawler.fetcher import Fetcher, HttpFetcher, MappingFetcher
from tree_crawler.crawler.models import FetchError, FetchResult, PageData
from tree_crawler.crawler.registry import VisitedRegistry

__all__ = [
    "AsyncCrawler",
    "ChannelClosedError",
    "FetchError",
    "FetchResult",
    "Fetcher",
    "HttpFetcher",
    "MappingFetcher",
    "PageData",
    "ResultChannel",
    "VisitedRegistry",
    "crawl",
    "spawn_crawl",
]
