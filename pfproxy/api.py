"""FastAPI web server for pfproxy."""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles

from pfproxy import __version__
from pfproxy.config import ServiceConfig
from pfproxy.core.cashtag import build_cashtag
from pfproxy.core.image_proxy import ImageProxy
from pfproxy.core.resolver import Resolver
from pfproxy.exceptions import InvalidInputError, ResolveError, UpstreamFetchError
from pfproxy.logging import configure_logging, get_logger

log = get_logger("api")


def get_resolver(request: Request) -> Resolver:
    return request.app.state.resolver


def get_image_proxy(request: Request) -> ImageProxy:
    return request.app.state.image_proxy


def create_app(
    config: ServiceConfig | None = None,
    resolver: Resolver | None = None,
    image_proxy: ImageProxy | None = None,
) -> FastAPI:
    """
    Build the HTTP application.

    Args:
        config: ServiceConfig instance, uses defaults if None
        resolver: Pre-built resolver (tests pass fakes); built from config if None
        image_proxy: Pre-built image proxy; built from config if None

    Returns:
        Configured FastAPI app
    """
    config = config or ServiceConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Own the resolver and image proxy for the process lifetime."""
        configure_logging(config)
        app.state.resolver = resolver or Resolver(config)
        app.state.image_proxy = image_proxy or ImageProxy(config)
        yield
        await app.state.resolver.close()
        await app.state.image_proxy.close()

    app = FastAPI(
        title="pfproxy",
        description="Profile avatar resolver and image proxy",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", response_class=PlainTextResponse, tags=["System"])
    async def health_check():
        """Liveness probe."""
        return "ok"

    @app.get("/tiktok", tags=["Profiles"])
    async def resolve_profile(
        user: str | None = Query(None, description="Profile handle, with or without @"),
        resolver: Resolver = Depends(get_resolver),
    ):
        """
        Resolve a handle to its display name and proxied avatar.

        ``blocked`` is true when no avatar could be extracted; such results
        are not cached.
        """
        try:
            result = await resolver.resolve(user)
        except InvalidInputError as e:
            return JSONResponse(status_code=400, content={"error": str(e)})
        except ResolveError as e:
            log.exception("profile_error", user=user)
            return JSONResponse(
                status_code=500,
                content={"error": "TikTok fetch failed", "details": str(e.__cause__ or e)},
            )
        return result.model_dump()

    @app.get("/proxy-image", tags=["Images"])
    async def proxy_image(
        url: str | None = Query(None, description="Absolute image URL"),
        image_proxy: ImageProxy = Depends(get_image_proxy),
    ):
        """Relay an external image so the browser loads it same-origin."""
        try:
            image = await image_proxy.fetch(url)
        except InvalidInputError as e:
            return PlainTextResponse(str(e), status_code=400)
        except UpstreamFetchError as e:
            return PlainTextResponse(str(e), status_code=502)
        except Exception:
            log.exception("proxy_image_error", url=url)
            return PlainTextResponse("proxy error", status_code=500)

        return Response(
            content=image.content,
            media_type=image.content_type,
            headers={"Cache-Control": image.cache_control},
        )

    @app.get("/cash", tags=["Payments"])
    async def cashtag(tag: str | None = Query(None, description="Cashtag, with or without $")):
        """Build a confirmation link for a cashtag. Nothing is scraped."""
        try:
            result = build_cashtag(tag)
        except InvalidInputError as e:
            return JSONResponse(status_code=400, content={"error": str(e)})
        return result.model_dump(by_alias=True)

    if config.static_dir and Path(config.static_dir).is_dir():
        app.mount("/", StaticFiles(directory=config.static_dir, html=True), name="static")

    return app


def main(config: ServiceConfig | None = None) -> None:
    """Run the server with uvicorn on the configured host and port."""
    import uvicorn

    config = config or ServiceConfig()
    uvicorn.run(create_app(config), host=config.host, port=config.port)


if __name__ == "__main__":
    main()
