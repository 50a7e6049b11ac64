"""Streaming conduits carrying scan output to the consumer.

A conduit is a small-buffered, multi-producer, single-consumer queue that
can be closed. Producers block on ``put`` while the buffer is full, so a
slow consumer throttles the whole traversal. Once closed, the consumer sees
every item written before the close, then the end of the stream.
"""

import asyncio
from collections import deque
from typing import Any, AsyncIterator, Generic, Optional, TypeVar

from .._common.errors import ConduitClosedError

T = TypeVar('T')

_CLOSED = object()


class AsyncConduit(Generic[T]):
    """Closable async conduit.

    Iterate with ``async for`` or call ``get()`` until it raises
    ``ConduitClosedError``.
    """

    def __init__(self, maxsize: int = 1, name: Optional[str] = None):
        """Initialize conduit.

        Args:
            maxsize: Items buffered before ``put`` blocks
            name: Label used in error messages and repr
        """
        if maxsize < 1:
            raise ValueError(f"maxsize must be at least 1, got {maxsize}")
        self.name = name
        self._queue: asyncio.Queue = asyncio.Queue(maxsize)
        self._returned: deque = deque()
        self._closed = False
        self._drained = False
        self._count = 0

    @property
    def closed(self) -> bool:
        """True once the producer side has been closed."""
        return self._closed

    @property
    def drained(self) -> bool:
        """True once the consumer has observed the close."""
        return self._drained

    @property
    def count(self) -> int:
        """Items written so far."""
        return self._count

    async def put(self, item: T) -> None:
        """Write an item, waiting while the buffer is full.

        Raises:
            ConduitClosedError: If the conduit was closed
        """
        if self._closed:
            raise ConduitClosedError(self.name)
        await self._queue.put(item)
        self._count += 1

    async def close(self) -> None:
        """Mark the end of the stream.

        Waits like ``put`` while the buffer is full, so the consumer reads
        every earlier item before it sees the end.

        Raises:
            ConduitClosedError: If the conduit was already closed
        """
        if self._closed:
            raise ConduitClosedError(self.name)
        self._closed = True
        await self._queue.put(_CLOSED)

    async def get(self) -> T:
        """Read the next item.

        Raises:
            ConduitClosedError: Once the stream has ended
        """
        if self._returned:
            return self._returned.popleft()
        if self._drained:
            raise ConduitClosedError(self.name)
        item = await self._queue.get()
        if item is _CLOSED:
            self._drained = True
            raise ConduitClosedError(self.name)
        return item

    def unget(self, item: T) -> None:
        """Hand back an item taken by ``get`` that was never consumed.

        The item is returned by the next ``get``, ahead of anything still
        buffered. Does not count as a write and never blocks.
        """
        self._returned.appendleft(item)

    def __aiter__(self) -> AsyncIterator[T]:
        return self

    async def __anext__(self) -> T:
        try:
            return await self.get()
        except ConduitClosedError:
            raise StopAsyncIteration from None

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"AsyncConduit(name={self.name!r}, {state}, count={self._count})"
