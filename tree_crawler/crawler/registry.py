"""
Shared visited-set used to deduplicate fetches across concurrent crawl tasks.
"""
from __future__ import annotations

import asyncio
from typing import Dict, List


class VisitedRegistry:
    """Set of URLs already claimed for fetching, guarded by one lock.

    One instance is created per crawl invocation and shared by reference
    between every task of that crawl. Entries are never removed.
    """

    def __init__(self) -> None:
        self._visited: Dict[str, bool] = {}
        self._lock = asyncio.Lock()

    async def claim(self, url: str) -> bool:
        """Mark *url* as visited. Return False if someone already did."""
        async with self._lock:
            if self._visited.get(url):
                return False
            self._visited[url] = True
            return True

    def visited(self) -> List[str]:
        """Snapshot of claimed URLs in claim order."""
        return list(self._visited)

    def __contains__(self, url: object) -> bool:
        return bool(self._visited.get(url))  # type: ignore[call-overload]

    def __len__(self) -> int:
        return len(self._visited)


__all__ = ("VisitedRegistry",)
