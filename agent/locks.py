"""
Per-thread turn locks.

A turn (append user -> generate -> append assistant) must not interleave with
another turn on the same thread. ThreadLocks hands out one asyncio.Lock per
thread id; different threads never contend.

Entries are reference-counted and dropped once no coroutine holds or waits
on them, so the registry does not grow with the number of threads ever seen.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = asyncio.Lock()
        self.users = 0


class ThreadLocks:
    """Registry of per-thread asyncio locks. Use from a single event loop."""

    def __init__(self):
        self._entries: Dict[str, _Entry] = {}

    @asynccontextmanager
    async def hold(self, thread_id: str) -> AsyncIterator[None]:
        """Hold the lock for thread_id for the duration of the block."""
        entry = self._entries.get(thread_id)
        if entry is None:
            entry = self._entries[thread_id] = _Entry()
        entry.users += 1

        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0:
                del self._entries[thread_id]

    def __len__(self) -> int:
        """Number of threads currently locked or awaited."""
        return len(self._entries)
