"""Per-key asyncio locks serialising read-modify-write cycles on one document.

Aggregation and conflict resolution both read the stored match statistics,
compute a new state and write it back.  Holding the lock for the document id
across that whole cycle means two operations on the same match cannot
interleave within this process.  Separate worker processes are not covered.

Usage:
    async with stats_locks.hold(stats_id):
        ...
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator


class KeyedLocks:
    """Registry of asyncio.Lock objects created on demand and dropped when idle."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                del self._locks[key]

    def __contains__(self, key: str) -> bool:
        return key in self._locks


# Module-level registry shared by aggregation and resolution
stats_locks = KeyedLocks()
