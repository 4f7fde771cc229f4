import json

import pytest
from aiohttp import ClientSession, ClientTimeout, web

from tree_crawler.crawler.fetcher import Fetcher, HttpFetcher, MappingFetcher
from tree_crawler.crawler.link_extractor import extract_links
from tree_crawler.crawler.models import FetchError, FetchResult

BASE = "http://example.com/docs/index.html"


def test_extract_links_resolves_and_filters():
    html = """
    <a href="intro.html">Intro</a>
    <a href="/about#team">About</a>
    <a href="/about">About again</a>
    <a href="mailto:me@example.com">Mail</a>
    <a href="javascript:void(0)">JS</a>
    <a href="ftp://example.com/file">FTP</a>
    <a href="http://external.com/">External</a>
    <a href="">Empty</a>
    """
    assert extract_links(BASE, html) == [
        "http://example.com/docs/intro.html",
        "http://example.com/about",
    ]


def test_extract_links_skips_malformed_href():
    html = '<a href="/before">B</a><a href="http://[bad/">Bad</a><a href="/after">A</a>'
    assert extract_links(BASE, html) == [
        "http://example.com/before",
        "http://example.com/after",
    ]


def test_extract_links_can_follow_other_hosts():
    html = '<a href="/a">A</a><a href="https://other.org/b">B</a>'
    assert extract_links(BASE, html, same_host_only=False) == [
        "http://example.com/a",
        "https://other.org/b",
    ]


@pytest.mark.asyncio()
async def test_mapping_fetcher():
    fetcher = MappingFetcher({"A": FetchResult("page A", ["B"])})
    assert isinstance(fetcher, Fetcher)
    assert await fetcher.fetch("A") == FetchResult("page A", ["B"])
    with pytest.raises(FetchError) as excinfo:
        await fetcher.fetch("B")
    assert excinfo.value.url == "B"
    assert str(excinfo.value) == "not found: B"


@pytest.mark.asyncio()
async def test_mapping_fetcher_from_yaml(graph_file):
    fetcher = MappingFetcher.from_file(graph_file)
    result = await fetcher.fetch("https://golang.org/pkg/fmt/")
    assert result.content == "Package fmt"
    assert result.links == ["https://golang.org/", "https://golang.org/pkg/"]


def test_mapping_fetcher_from_json(tmp_path):
    path = tmp_path / "graph.json"
    path.write_text(json.dumps({"pages": {"A": {"body": "a", "links": ["B"]}, "B": None}}), encoding="utf-8")
    fetcher = MappingFetcher.from_file(path)
    assert fetcher.pages == {"A": FetchResult("a", ["B"]), "B": FetchResult("", [])}


@pytest.mark.parametrize(
    "content,expect_exc",
    [
        ("- a\n- b\n", TypeError),
        ("other: {}\n", TypeError),
        ("pages:\n  A: [1, 2]\n", TypeError),
        ("pages:\n  A:\n    links: B\n", TypeError),
        ("pages: [unclosed\n", ValueError),
    ],
)
def test_mapping_fetcher_rejects_bad_graph(tmp_path, content, expect_exc):
    path = tmp_path / "graph.yaml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(expect_exc):
        MappingFetcher.from_file(path)


@pytest.mark.asyncio()
async def test_http_fetcher(serve_app):
    app = web.Application()

    async def handle_page(_):
        return web.Response(
            text='<a href="/next">Next</a><a href="http://elsewhere.org/">Out</a>',
            content_type="text/html",
        )

    async def handle_text(_):
        return web.Response(text='<a href="/next">not parsed</a>', content_type="text/plain")

    async def handle_error(_):
        return web.Response(status=500)

    app.router.add_get("/page", handle_page)
    app.router.add_get("/plain.txt", handle_text)
    app.router.add_get("/error", handle_error)

    async with serve_app(app) as base:
        async with ClientSession(timeout=ClientTimeout(total=2)) as session:
            fetcher = HttpFetcher(session)

            page = await fetcher.fetch(f"{base}/page")
            assert page.links == [f"{base}/next"]
            assert "Next" in page.content

            text = await fetcher.fetch(f"{base}/plain.txt")
            assert text.links == []
            assert "not parsed" in text.content

            with pytest.raises(FetchError, match="HTTP 404"):
                await fetcher.fetch(f"{base}/absent")
            with pytest.raises(FetchError, match="HTTP 500"):
                await fetcher.fetch(f"{base}/error")


@pytest.mark.asyncio()
async def test_http_fetcher_connection_error(unused_tcp_port):
    async with ClientSession(timeout=ClientTimeout(total=2)) as session:
        fetcher = HttpFetcher(session)
        with pytest.raises(FetchError) as excinfo:
            await fetcher.fetch(f"http://127.0.0.1:{unused_tcp_port}/")
    assert excinfo.value.url == f"http://127.0.0.1:{unused_tcp_port}/"
