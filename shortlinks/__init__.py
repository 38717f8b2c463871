"""Core business logic for URL shortener."""

from .shortcode import ShortCodeGenerator
from .resolver import ClientContext, RedirectResolver, ResolveOutcome, ResolveStatus
from .service import BatchResult, URLShortenerService

__all__ = [
    "ShortCodeGenerator",
    "ClientContext",
    "RedirectResolver",
    "ResolveOutcome",
    "ResolveStatus",
    "BatchResult",
    "URLShortenerService",
]
