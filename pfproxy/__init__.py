"""pfproxy - profile avatar resolver with a same-origin image proxy."""

from pfproxy.models.profile import CacheEntry, ResolutionResult
from pfproxy.models.cashtag import CashtagResult
from pfproxy.config import ServiceConfig
from pfproxy.core.resolver import Resolver
from pfproxy.core.image_proxy import ImageProxy
from pfproxy.core.cashtag import build_cashtag

__version__ = "0.1.0"

__all__ = [
    # Main interface
    "Resolver",
    "ImageProxy",
    "ServiceConfig",
    "build_cashtag",
    # Models
    "CacheEntry",
    "ResolutionResult",
    "CashtagResult",
    "__version__",
]
