"""Core business logic for shortkey."""

from .shortcode import ShortKeyGenerator
from .service import ResolutionEngine, ShorteningEngine, URLShortenerService

__all__ = [
    "ShortKeyGenerator",
    "ShorteningEngine",
    "ResolutionEngine",
    "URLShortenerService",
]

__version__ = "1.0.0"
