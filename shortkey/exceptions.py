"""Exceptions raised by the shortening and resolution engines.

Every error carries a machine-readable ``kind`` and a human-readable
``detail`` so the HTTP layer and the CLI can render them without
inspecting message strings.
"""

from typing import Dict, Optional


class ShortenerError(Exception):
    """Base class for all shortkey errors."""

    kind = "internal_error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_dict(self) -> Dict[str, str]:
        """Render as an ``{"error", "detail"}`` payload."""
        return {"error": self.kind, "detail": self.detail}


class ValidationError(ShortenerError):
    """A long URL was rejected before any store access.

    Attributes:
        rule: Name of the violated rule (``length``, ``format``, ``scheme``, ``ssrf``)
    """

    kind = "validation_error"

    def __init__(self, rule: str, detail: str):
        super().__init__(detail)
        self.rule = rule


class CollisionError(ShortenerError):
    """A generated key is already taken by a different long URL."""

    kind = "collision"

    def __init__(self, short_key: str, salt: int):
        super().__init__(f"short key '{short_key}' already taken (salt {salt})")
        self.short_key = short_key
        self.salt = salt


class RetriesExhaustedError(ShortenerError):
    """Every salted attempt collided."""

    kind = "retries_exhausted"

    def __init__(self, attempts: int):
        super().__init__(f"failed to store url after {attempts} attempts")
        self.attempts = attempts


class NotFoundError(ShortenerError):
    """The short key has no mapping."""

    kind = "not_found"

    def __init__(self, short_key: str):
        super().__init__(f"short key '{short_key}' not found")
        self.short_key = short_key


class InvalidKeyError(ShortenerError):
    """The short key has the wrong shape."""

    kind = "invalid_key"


class StoreError(ShortenerError):
    """Persistence failure other than a key collision.

    Never retried by the engines.
    """

    kind = "store_error"

    def __init__(self, detail: str, operation: Optional[str] = None):
        super().__init__(detail)
        self.operation = operation
