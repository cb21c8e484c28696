"""Profile resolution models."""

from pydantic import BaseModel


class CacheEntry(BaseModel):
    """A resolved profile held in the cache."""

    handle: str
    display_name: str
    avatar_ref: str | None = None
    created_at: float


class ResolutionResult(BaseModel):
    """Outcome of resolving a handle, as returned to HTTP callers."""

    name: str
    avatar: str | None = None
    blocked: bool = False
    cached: bool = False
