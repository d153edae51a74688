from __future__ import annotations

import asyncio
from typing import Generic, TypeVar

T = TypeVar("T")

_CLOSED = object()


class ChannelClosed(Exception):
    """Raised by `get()` once the channel has been closed."""


class SnapshotChannel(Generic[T]):
    """
    Single-consumer channel carrying full snapshots from a store to a subscriber.

    The producer calls `publish` / `fail`; the consumer drains with `get()` or
    `async for`. `close()` is idempotent and takes effect immediately: queued
    snapshots are discarded and no further item is handed out.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def publish(self, snapshot: T) -> bool:
        """Queue a snapshot. Returns False if the channel is already closed."""
        if self._closed:
            return False
        self._queue.put_nowait(snapshot)
        return True

    def fail(self, error: BaseException) -> bool:
        """Deliver an error to the consumer; the channel stays open."""
        if self._closed:
            return False
        self._queue.put_nowait(error)
        return True

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        while not self._queue.empty():
            self._queue.get_nowait()
        # wake a consumer blocked in get()
        self._queue.put_nowait(_CLOSED)

    async def get(self) -> T:
        if self._closed:
            raise ChannelClosed()
        item = await self._queue.get()
        if item is _CLOSED or self._closed:
            raise ChannelClosed()
        if isinstance(item, BaseException):
            raise item
        return item  # type: ignore[return-value]

    def __aiter__(self) -> "SnapshotChannel[T]":
        return self

    async def __anext__(self) -> T:
        try:
            return await self.get()
        except ChannelClosed:
            raise StopAsyncIteration
