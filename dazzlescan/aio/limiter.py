"""Concurrency limiter for directory reads.

A counting semaphore that caps how many directory listings are in flight.
Tasks are cheap to schedule; only the read itself waits for a slot.
"""

import asyncio
from typing import Optional

from .._common.config import default_concurrency


class ConcurrencyLimiter:
    """Counting semaphore bounding simultaneous directory reads.

    Each traversal task acquires one slot right before listing its
    directory and releases it when done, whatever the outcome. There is
    no fairness guarantee beyond the FIFO order asyncio gives waiters.
    """

    def __init__(self, capacity: Optional[int] = None):
        """Initialize limiter.

        Args:
            capacity: Maximum concurrent reads (defaults to half the CPUs)
        """
        if capacity is None:
            capacity = default_concurrency()
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._semaphore = asyncio.Semaphore(capacity)
        self._in_flight = 0
        self._peak = 0

    @property
    def in_flight(self) -> int:
        """Slots currently held."""
        return self._in_flight

    @property
    def available(self) -> int:
        """Slots currently free."""
        return self.capacity - self._in_flight

    @property
    def peak(self) -> int:
        """Highest number of slots held at once."""
        return self._peak

    async def acquire(self) -> None:
        """Wait for a free slot and take it."""
        await self._semaphore.acquire()
        self._in_flight += 1
        self._peak = max(self._peak, self._in_flight)

    def release(self) -> None:
        """Return a slot."""
        if self._in_flight == 0:
            raise RuntimeError("ConcurrencyLimiter released too many times")
        self._in_flight -= 1
        self._semaphore.release()

    async def __aenter__(self):
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.release()

    def __repr__(self) -> str:
        return f"ConcurrencyLimiter(capacity={self.capacity}, in_flight={self._in_flight})"
