"""Configuration management using Pydantic Settings."""

from enum import Enum

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/122 Safari/537.36"
)


class CacheBackend(str, Enum):
    """Cache backend type."""
    MEMORY = "memory"
    NONE = "none"


class LogFormat(str, Enum):
    """Log output format."""
    JSON = "json"
    CONSOLE = "console"


class ServiceConfig(BaseSettings):
    """Configuration for the pfproxy service."""

    # Browser settings
    headless: bool = True
    browser_timeout_ms: int = 15000
    user_agent: str = DEFAULT_USER_AGENT
    locale: str = "en-US"
    viewport_width: int = 900
    viewport_height: int = 900
    launch_args: list[str] = [
        "--no-sandbox",
        "--disable-setuid-sandbox",
        "--disable-dev-shm-usage",
        "--disable-gpu",
    ]

    # Profile source
    profile_url_template: str = "https://www.tiktok.com/@{handle}?lang=en"

    # Cache settings
    cache_backend: CacheBackend = CacheBackend.MEMORY
    cache_ttl_seconds: int = 60 * 60 * 24
    cache_max_entries: int = 0  # 0 = unbounded
    single_flight: bool = True

    # Image proxy
    proxy_timeout_seconds: float = 30.0
    proxy_referer: str = "https://www.tiktok.com/"
    proxy_accept: str = "image/avif,image/webp,image/apng,image/*,*/*;q=0.8"
    proxy_cache_max_age: int = 60 * 60 * 24
    proxy_default_content_type: str = "image/jpeg"

    # HTTP server
    host: str = "0.0.0.0"
    port: int = Field(
        default=3000,
        validation_alias=AliasChoices("PFPROXY_PORT", "PORT", "port"),
    )
    static_dir: str | None = "public"
    cors_origins: list[str] = ["*"]

    # Logging
    log_level: str = "INFO"
    log_format: LogFormat = LogFormat.CONSOLE

    model_config = {
        "env_prefix": "PFPROXY_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }
