"""
Unbuffered result channel connecting a crawl task to its parent.

Each task owns exactly one outbound channel: it creates it, sends on it and
closes it. The parent only reads. ``send`` returns once the reader has taken
the record, so a task can never run more than one record ahead of the drain
loop above it.
"""
from __future__ import annotations

import asyncio
from typing import AsyncIterator, Final

from tree_crawler.crawler.models import PageData

_CLOSED: Final = object()


class ChannelClosedError(RuntimeError):
    """Send on, or second close of, an already closed channel."""


class ResultChannel:
    """Rendezvous channel of :class:`PageData` records."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._closed = False
        self._drained = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, page: PageData) -> None:
        """Hand *page* to the reader and wait until it has been received."""
        if self._closed:
            raise ChannelClosedError("send on closed channel")
        self._queue.put_nowait(page)
        await self._queue.join()

    def close(self) -> None:
        """Mark the end of the stream. Never blocks."""
        if self._closed:
            raise ChannelClosedError("close of closed channel")
        self._closed = True
        self._queue.put_nowait(_CLOSED)

    async def receive(self) -> PageData:
        """Return the next record; raise :class:`StopAsyncIteration` once closed and drained."""
        if self._drained:
            raise StopAsyncIteration
        item = await self._queue.get()
        self._queue.task_done()
        if item is _CLOSED:
            self._drained = True
            raise StopAsyncIteration
        return item  # type: ignore[return-value]

    def __aiter__(self) -> AsyncIterator[PageData]:
        return self

    async def __anext__(self) -> PageData:
        return await self.receive()


__all__ = ("ResultChannel", "ChannelClosedError")
