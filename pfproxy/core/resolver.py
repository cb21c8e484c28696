"""Resolution pipeline - coordinates cache, browser session and extraction."""

import asyncio
from urllib.parse import quote

from pfproxy.config import ServiceConfig, CacheBackend
from pfproxy.cache.base import CacheProvider
from pfproxy.cache.memory_cache import MemoryCache
from pfproxy.core.session import BrowserSession
from pfproxy.core.fetcher import build_profile_url, open_profile, read_state_text, read_og_image
from pfproxy.core.extractor import extract_from_state, clean_avatar_url
from pfproxy.logging import get_logger
from pfproxy.models.profile import ResolutionResult
from pfproxy.exceptions import InvalidInputError, ResolveError

PROXY_PATH = "/proxy-image"


def normalize_handle(user: str | None) -> str:
    """
    Turn caller input into a cache key: trimmed, no leading @, lower-case.

    Raises:
        InvalidInputError: If nothing is left after normalization
    """
    handle = (user or "").strip()
    if handle.startswith("@"):
        handle = handle[1:]
    handle = handle.lower()
    if not handle:
        raise InvalidInputError("Missing user")
    return handle


def build_proxy_ref(avatar_url: str) -> str:
    """Same-origin image proxy path for an external avatar URL."""
    return f"{PROXY_PATH}?url={quote(avatar_url, safe='')}"


class Resolver:
    """
    Resolves a profile handle to a display name and proxied avatar.

    Example:
        async with Resolver() as resolver:
            result = await resolver.resolve("@someone")
            print(result.avatar)
    """

    def __init__(
        self,
        config: ServiceConfig | None = None,
        session: BrowserSession | None = None,
        cache: CacheProvider | None = None,
    ):
        """
        Initialize resolver with optional collaborators.

        Args:
            config: ServiceConfig instance, uses defaults if None
            session: Browser session, one is created from config if None
            cache: Cache provider, one is created from config if None
        """
        self.config = config or ServiceConfig()
        self._session = session or BrowserSession(self.config)
        if cache is None and self.config.cache_backend == CacheBackend.MEMORY:
            cache = MemoryCache(
                self.config.cache_ttl_seconds,
                self.config.cache_max_entries,
            )
        self._cache = cache
        self._inflight: dict[str, asyncio.Future] = {}
        self._log = get_logger("resolver")

    async def __aenter__(self) -> "Resolver":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Release the browser and cache."""
        await self._session.close()
        if self._cache is not None:
            await self._cache.close()

    async def resolve(self, user: str | None, force_refresh: bool = False) -> ResolutionResult:
        """
        Resolve a handle, serving from cache when possible.

        Args:
            user: Raw handle, with or without a leading @
            force_refresh: Skip the cache lookup

        Returns:
            ResolutionResult; ``blocked`` is True when no avatar was found

        Raises:
            InvalidInputError: If the handle is empty
            ResolveError: If the browser or navigation failed
        """
        handle = normalize_handle(user)
        self._log.info("resolve_start", handle=handle, force_refresh=force_refresh)

        if self._cache is not None and not force_refresh:
            cached = await self._cache.get(handle)
            if cached is not None:
                self._log.info("cache_hit", handle=handle)
                return ResolutionResult(
                    name=cached.display_name,
                    avatar=cached.avatar_ref,
                    blocked=False,
                    cached=True,
                )

        if not self.config.single_flight:
            return await self._resolve_fresh(handle)

        task = self._inflight.get(handle)
        if task is None or task.done():
            task = asyncio.ensure_future(self._resolve_fresh(handle))
            self._inflight[handle] = task
            task.add_done_callback(lambda t: self._forget(handle, t))
        # Shielded so one cancelled caller does not cancel the shared lookup
        return await asyncio.shield(task)

    def _forget(self, handle: str, task: asyncio.Future) -> None:
        if self._inflight.get(handle) is task:
            del self._inflight[handle]

    async def _resolve_fresh(self, handle: str) -> ResolutionResult:
        url = build_profile_url(handle, self.config.profile_url_template)

        try:
            async with self._session.page() as page:
                await open_profile(page, url)

                avatar = extract_from_state(await read_state_text(page))
                if not avatar:
                    avatar = await read_og_image(page)
                avatar = clean_avatar_url(avatar)
        except ResolveError as e:
            self._log.error("resolve_failed", handle=handle, error=str(e))
            raise
        except Exception as e:
            self._log.error("resolve_failed", handle=handle, error=str(e))
            raise ResolveError(f"Unexpected error resolving @{handle}: {e}") from e

        if not avatar:
            # Not cached: a transient scrape miss must not stick for the TTL
            self._log.warning("resolve_blocked", handle=handle)
            return ResolutionResult(name=handle, avatar=None, blocked=True, cached=False)

        avatar_ref = build_proxy_ref(avatar)
        if self._cache is not None:
            await self._cache.put(handle, handle, avatar_ref)

        self._log.info("resolve_found", handle=handle)
        return ResolutionResult(name=handle, avatar=avatar_ref, blocked=False, cached=False)

    async def invalidate_cache(self, user: str) -> None:
        """Remove a specific handle from cache."""
        if self._cache is not None:
            await self._cache.invalidate(normalize_handle(user))

    async def clear_cache(self) -> None:
        """Clear all cached data."""
        if self._cache is not None:
            await self._cache.clear()
