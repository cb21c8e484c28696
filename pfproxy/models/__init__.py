"""Pydantic models for pfproxy."""

from pfproxy.models.profile import CacheEntry, ResolutionResult
from pfproxy.models.cashtag import CashtagResult

__all__ = [
    "CacheEntry",
    "ResolutionResult",
    "CashtagResult",
]
