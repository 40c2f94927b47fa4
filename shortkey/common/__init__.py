"""Common utilities for shortkey."""

from .validators import validate_long_url, validate_short_key, is_blocked_host
from .url_builder import build_short_url
from .logging_config import setup_logging

__all__ = [
    "validate_long_url",
    "validate_short_key",
    "is_blocked_host",
    "build_short_url",
    "setup_logging",
]
