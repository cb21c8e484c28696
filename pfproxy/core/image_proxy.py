"""Image relay for avatars that cannot be hot-linked cross-origin."""

from dataclasses import dataclass
from urllib.parse import urlparse

import httpx

from pfproxy.config import ServiceConfig
from pfproxy.core.extractor import normalize_url
from pfproxy.exceptions import InvalidInputError, UpstreamFetchError
from pfproxy.logging import get_logger

ALLOWED_SCHEMES = ("http", "https")


@dataclass
class ProxiedImage:
    """Image bytes fetched from upstream."""

    content: bytes
    content_type: str
    cache_control: str


def validate_proxy_url(raw_url: str | None) -> str:
    """
    Normalize a caller-supplied image URL and check its scheme.

    Raises:
        InvalidInputError: If the URL is missing, unparseable or not http(s)
    """
    if not raw_url:
        raise InvalidInputError("Missing url")

    url = normalize_url(raw_url)
    if not url:
        raise InvalidInputError("Missing url")

    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise InvalidInputError("Invalid url") from e

    if parsed.scheme.lower() not in ALLOWED_SCHEMES or not parsed.netloc:
        raise InvalidInputError("Invalid url")
    return url


class ImageProxy:
    """Fetches external images with browser-like headers."""

    def __init__(
        self,
        config: ServiceConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.config = config or ServiceConfig()
        self._client = client or httpx.AsyncClient(
            timeout=self.config.proxy_timeout_seconds,
            follow_redirects=True,
        )
        self._headers = {
            "User-Agent": self.config.user_agent,
            "Referer": self.config.proxy_referer,
            "Accept": self.config.proxy_accept,
        }
        self._log = get_logger("image_proxy")

    async def fetch(self, raw_url: str | None) -> ProxiedImage:
        """
        Fetch an image for relaying to the client.

        Args:
            raw_url: Absolute or protocol-relative image URL

        Returns:
            ProxiedImage with body, content type and cache directive

        Raises:
            InvalidInputError: If the URL fails validation (no request is made)
            UpstreamFetchError: If upstream is unreachable or not 2xx
        """
        url = validate_proxy_url(raw_url)
        self._log.debug("proxy_fetch", url=url[:120])

        try:
            response = await self._client.get(url, headers=self._headers)
        except httpx.RequestError as e:
            self._log.error("proxy_upstream_error", url=url[:120], error=str(e))
            raise UpstreamFetchError(None) from e

        if not response.is_success:
            self._log.error("proxy_upstream_error", url=url[:120], status=response.status_code)
            raise UpstreamFetchError(response.status_code)

        return ProxiedImage(
            content=response.content,
            content_type=response.headers.get("content-type") or self.config.proxy_default_content_type,
            cache_control=f"public, max-age={self.config.proxy_cache_max_age}",
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ImageProxy":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
