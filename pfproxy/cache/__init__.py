"""Cache implementations."""

from pfproxy.cache.base import CacheProvider
from pfproxy.cache.memory_cache import MemoryCache

__all__ = ["CacheProvider", "MemoryCache"]
