# File: tests/conftest.py
from __future__ import annotations

import asyncio
import contextlib
from pathlib import Path
from typing import AsyncIterator, Dict, List, Mapping, Optional, Sequence, Tuple

import pytest
import yaml
from aiohttp import web

from tree_crawler.crawler.models import FetchError, FetchResult
from tree_crawler.logger import configure

Graph = Mapping[str, Tuple[str, Sequence[str]]]

#: the sample graph served by the default config
GOLANG_GRAPH: Dict[str, Tuple[str, List[str]]] = {
    "https://golang.org/": (
        "The Go Programming Language",
        ["https://golang.org/pkg/", "https://golang.org/cmd/"],
    ),
    "https://golang.org/pkg/": (
        "Packages",
        [
            "https://golang.org/",
            "https://golang.org/cmd/",
            "https://golang.org/pkg/fmt/",
            "https://golang.org/pkg/os/",
        ],
    ),
    "https://golang.org/pkg/fmt/": ("Package fmt", ["https://golang.org/", "https://golang.org/pkg/"]),
    "https://golang.org/pkg/os/": ("Package os", ["https://golang.org/", "https://golang.org/pkg/"]),
}


class GraphFetcher:
    """Test fetcher over an in-memory graph with optional per-URL delays and errors."""

    def __init__(
        self,
        graph: Graph,
        delays: Optional[Mapping[str, float]] = None,
        errors: Optional[Mapping[str, BaseException]] = None,
    ) -> None:
        self.graph = graph
        self.delays = dict(delays or {})
        self.errors = dict(errors or {})
        self.calls: List[str] = []
        self.cancelled: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self, url: str) -> FetchResult:
        self.calls.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self.delays.get(url, 0.0)
            if delay:
                await asyncio.sleep(delay)
            if url in self.errors:
                raise self.errors[url]
            if url not in self.graph:
                raise FetchError(url, f"not found: {url}")
            body, links = self.graph[url]
            return FetchResult(content=body, links=list(links))
        except asyncio.CancelledError:
            self.cancelled.append(url)
            raise
        finally:
            self.in_flight -= 1


@pytest.fixture(autouse=True)
def reset_logging():
    """CLI tests rebind the log handler to CliRunner streams; restore it afterwards."""
    yield
    configure(level="INFO")


@pytest.fixture()
def fetcher_factory():
    return GraphFetcher


@pytest.fixture()
def golang_fetcher() -> GraphFetcher:
    return GraphFetcher(GOLANG_GRAPH)


@pytest.fixture()
def graph_file(tmp_path: Path) -> Path:
    """Write the sample graph in the YAML format understood by MappingFetcher."""
    path = tmp_path / "graph.yaml"
    pages = {url: {"body": body, "links": links} for url, (body, links) in GOLANG_GRAPH.items()}
    path.write_text(yaml.safe_dump({"pages": pages}), encoding="utf-8")
    return path


@pytest.fixture()
def serve_app(unused_tcp_port: int):
    """Return an async context manager that serves an aiohttp app and yields its base URL."""

    @contextlib.asynccontextmanager
    async def _serve(app: web.Application) -> AsyncIterator[str]:
        runner = web.AppRunner(app)
        await runner.setup()
        site = web.TCPSite(runner, "127.0.0.1", unused_tcp_port)
        await site.start()
        try:
            yield f"http://127.0.0.1:{unused_tcp_port}"
        finally:
            await runner.cleanup()

    return _serve
