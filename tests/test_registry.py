import asyncio

import pytest

from tree_crawler.crawler.registry import VisitedRegistry


@pytest.mark.asyncio()
async def test_claim_once():
    registry = VisitedRegistry()
    assert await registry.claim("https://a/")
    assert not await registry.claim("https://a/")
    assert "https://a/" in registry
    assert "https://b/" not in registry
    assert len(registry) == 1


@pytest.mark.asyncio()
async def test_identifiers_are_not_normalized():
    registry = VisitedRegistry()
    assert await registry.claim("https://a/")
    assert await registry.claim("https://a")
    assert await registry.claim("HTTPS://A/")
    assert registry.visited() == ["https://a/", "https://a", "HTTPS://A/"]


@pytest.mark.asyncio()
async def test_concurrent_claims_have_single_winner():
    registry = VisitedRegistry()
    results = await asyncio.gather(*(registry.claim("https://a/") for _ in range(50)))
    assert results.count(True) == 1
    assert len(registry) == 1
