"""Unit tests for the image proxy - httpx MockTransport, no internet."""

import httpx
import pytest

from pfproxy.config import ServiceConfig
from pfproxy.core.image_proxy import ImageProxy, validate_proxy_url
from pfproxy.exceptions import InvalidInputError, UpstreamFetchError

PNG = b"\x89PNG\r\n\x1a\nfake"


def make_proxy(handler, config: ServiceConfig | None = None) -> tuple[ImageProxy, list[httpx.Request]]:
    """ImageProxy whose client records every outbound request."""
    seen: list[httpx.Request] = []

    def recording(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(recording), follow_redirects=True)
    return ImageProxy(config or ServiceConfig(), client=client), seen


class TestValidateProxyUrl:
    """Input validation."""

    @pytest.mark.parametrize(
        "raw",
        [
            "file:///etc/passwd",
            "javascript:alert(1)",
            "ftp://host/a.png",
            "data:image/png;base64,AAAA",
            "not a url",
            "https://",
        ],
    )
    def test_rejects_bad_urls(self, raw):
        with pytest.raises(InvalidInputError, match="Invalid url"):
            validate_proxy_url(raw)

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_rejects_missing(self, raw):
        with pytest.raises(InvalidInputError, match="Missing url"):
            validate_proxy_url(raw)

    def test_protocol_relative_becomes_https(self):
        assert validate_proxy_url("//p16.cdn/a.jpeg") == "https://p16.cdn/a.jpeg"

    @pytest.mark.parametrize("raw", ["http://p16.cdn/a.jpeg", "https://p16.cdn/a.jpeg", "HTTPS://p16.cdn/a"])
    def test_accepts_http_and_https(self, raw):
        assert validate_proxy_url(raw) == raw


class TestImageProxyFetch:
    """Outbound fetch and relay."""

    @pytest.mark.asyncio
    async def test_relays_body_and_content_type(self):
        proxy, _ = make_proxy(lambda r: httpx.Response(200, content=PNG, headers={"content-type": "image/png"}))

        async with proxy:
            image = await proxy.fetch("https://p16.cdn/a.png")

        assert image.content == PNG
        assert image.content_type == "image/png"
        assert image.cache_control == "public, max-age=86400"

    @pytest.mark.asyncio
    async def test_default_content_type(self):
        proxy, _ = make_proxy(lambda r: httpx.Response(200, content=PNG))

        image = await proxy.fetch("https://p16.cdn/a")

        assert image.content_type == "image/jpeg"

    @pytest.mark.asyncio
    async def test_sends_browser_like_headers(self):
        proxy, seen = make_proxy(lambda r: httpx.Response(200, content=PNG))

        await proxy.fetch("//p16.cdn/a.jpeg")

        request = seen[0]
        assert str(request.url) == "https://p16.cdn/a.jpeg"
        assert "Chrome" in request.headers["user-agent"]
        assert request.headers["referer"] == "https://www.tiktok.com/"
        assert request.headers["accept"].startswith("image/avif")

    @pytest.mark.asyncio
    async def test_follows_redirects(self):
        def handler(request):
            if request.url.path == "/old.jpeg":
                return httpx.Response(302, headers={"location": "https://p16.cdn/new.jpeg"})
            return httpx.Response(200, content=PNG, headers={"content-type": "image/webp"})

        proxy, seen = make_proxy(handler)

        image = await proxy.fetch("https://p16.cdn/old.jpeg")

        assert image.content_type == "image/webp"
        assert len(seen) == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [403, 404, 500])
    async def test_upstream_error_carries_status(self, status):
        proxy, _ = make_proxy(lambda r: httpx.Response(status))

        with pytest.raises(UpstreamFetchError) as exc_info:
            await proxy.fetch("https://p16.cdn/a.jpeg")

        assert exc_info.value.status_code == status
        assert str(exc_info.value) == f"proxy failed: {status}"

    @pytest.mark.asyncio
    async def test_unreachable_upstream(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        proxy, _ = make_proxy(handler)

        with pytest.raises(UpstreamFetchError) as exc_info:
            await proxy.fetch("https://p16.cdn/a.jpeg")

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", ["file:///etc/passwd", "javascript:alert(1)", None])
    async def test_invalid_url_makes_no_request(self, raw):
        proxy, seen = make_proxy(lambda r: httpx.Response(200, content=PNG))

        with pytest.raises(InvalidInputError):
            await proxy.fetch(raw)

        assert seen == []
