"""Abstract cache interface."""

from abc import ABC, abstractmethod

from pfproxy.models.profile import CacheEntry


class CacheProvider(ABC):
    """Abstract base class for cache implementations."""

    @abstractmethod
    async def get(self, handle: str) -> CacheEntry | None:
        """
        Retrieve the cached entry for a handle.

        Args:
            handle: Normalized profile handle

        Returns:
            CacheEntry or None if miss/expired
        """
        ...

    @abstractmethod
    async def put(self, handle: str, display_name: str, avatar_ref: str | None) -> None:
        """
        Store a resolved profile, replacing any existing entry.

        Args:
            handle: Normalized profile handle
            display_name: Name to report for the profile
            avatar_ref: Proxy-relative avatar reference, or None
        """
        ...

    @abstractmethod
    async def invalidate(self, handle: str) -> None:
        """
        Remove specific entry from cache.

        Args:
            handle: Normalized profile handle to invalidate
        """
        ...

    @abstractmethod
    async def clear(self) -> None:
        """Clear all cached entries."""
        ...

    async def close(self) -> None:
        """Cleanup connections and resources."""

    async def __aenter__(self) -> "CacheProvider":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - cleanup."""
        await self.close()
