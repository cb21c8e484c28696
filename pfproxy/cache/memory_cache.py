"""In-process cache with lazy TTL expiry."""

import asyncio
import time
from collections import OrderedDict
from typing import Callable

from pfproxy.cache.base import CacheProvider
from pfproxy.models.profile import CacheEntry


class MemoryCache(CacheProvider):
    """
    Dict-backed cache living for the lifetime of the process.

    Expired entries are evicted when they are read; there is no background
    sweep. With ``max_entries`` > 0 the least recently used entry is dropped
    once the bound is exceeded.
    """

    def __init__(
        self,
        default_ttl: int = 60 * 60 * 24,
        max_entries: int = 0,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize memory cache.

        Args:
            default_ttl: Entry lifetime in seconds (24 hours)
            max_entries: Size bound, 0 for unbounded
            clock: Time source returning seconds
        """
        self.default_ttl = default_ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, handle: str) -> CacheEntry | None:
        """Return the entry, or None if missing or older than the TTL."""
        async with self._lock:
            entry = self._entries.get(handle)
            if entry is None:
                return None

            if self._clock() - entry.created_at > self.default_ttl:
                del self._entries[handle]
                return None

            self._entries.move_to_end(handle)
            return entry.model_copy()

    async def put(self, handle: str, display_name: str, avatar_ref: str | None) -> None:
        """Store entry, resetting its age."""
        entry = CacheEntry(
            handle=handle,
            display_name=display_name,
            avatar_ref=avatar_ref,
            created_at=self._clock(),
        )
        async with self._lock:
            self._entries[handle] = entry
            self._entries.move_to_end(handle)
            if self.max_entries > 0:
                while len(self._entries) > self.max_entries:
                    self._entries.popitem(last=False)

    async def invalidate(self, handle: str) -> None:
        """Remove specific entry."""
        async with self._lock:
            self._entries.pop(handle, None)

    async def clear(self) -> None:
        """Clear all cached entries."""
        async with self._lock:
            self._entries.clear()
