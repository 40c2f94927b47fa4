"""Shortening and resolution engines.

Both engines receive the mapping store at construction and keep no
mutable state between calls; every guarantee about concurrent requests
comes from the store.
"""

import logging
from typing import Dict, Optional

from .common.url_builder import build_short_url
from .common.validators import validate_long_url, validate_short_key
from .constants import KEY_LENGTH, MAX_COLLISION_RETRIES, MAX_URL_LENGTH
from .database.base import MappingStoreBase
from .database.models import InsertResult, URLMapping
from .exceptions import (
    CollisionError,
    NotFoundError,
    RetriesExhaustedError,
    StoreError,
)
from .shortcode import ShortKeyGenerator


class ShorteningEngine:
    """Validate, deduplicate, generate and persist."""

    def __init__(
        self,
        store: MappingStoreBase,
        base_url: str,
        path_prefix: str = "",
        generator: Optional[ShortKeyGenerator] = None,
        max_retries: int = MAX_COLLISION_RETRIES,
        max_url_length: int = MAX_URL_LENGTH,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize shortening engine.

        Args:
            store: Mapping store
            base_url: Base URL short keys are rendered under
            path_prefix: Optional path prefix between base URL and key
            generator: Optional short key generator
            max_retries: Salted insert attempts before giving up
            max_url_length: Longest accepted long URL
            logger: Optional logger
        """
        if max_retries < 1:
            raise ValueError(f"max_retries must be at least 1 (given: {max_retries})")

        self.store = store
        self.base_url = base_url
        self.path_prefix = path_prefix
        self.generator = generator or ShortKeyGenerator()
        self.max_retries = max_retries
        self.max_url_length = max_url_length
        self.logger = logger or logging.getLogger(__name__)

    async def shorten(self, long_url: str) -> str:
        """Return the short URL for a long URL, creating the mapping if needed.

        Args:
            long_url: The original long URL

        Returns:
            Complete short URL

        Raises:
            ValidationError: The URL was rejected; the store was not touched
            RetriesExhaustedError: Every salted key collided
            StoreError: The store failed for a reason other than a collision
        """
        validate_long_url(long_url, max_length=self.max_url_length)

        short_key = await self.store.find_by_long_url(long_url)
        if short_key:
            self.logger.debug(f"Existing short key for {long_url}: {short_key}")
        else:
            short_key = await self._insert_with_retry(long_url)

        return build_short_url(short_key, self.base_url, self.path_prefix)

    async def _insert_with_retry(self, long_url: str) -> str:
        """Insert salted keys until one is accepted."""
        last_collision = None

        for salt in range(self.max_retries):
            short_key = self.generator.generate(long_url, salt)
            result = await self.store.insert(short_key, long_url)

            if result is InsertResult.INSERTED:
                self.logger.info(f"Created short key: {short_key} -> {long_url}")
                return short_key

            # A concurrent writer for the same URL takes the same salted key
            existing = await self.store.find_by_long_url(long_url)
            if existing is not None:
                self.logger.info(f"Concurrent insert won for {long_url}: {existing}")
                return existing

            if result is InsertResult.DUPLICATE_URL:
                raise StoreError(
                    "long url reported as duplicate but not found", operation="insert"
                )

            last_collision = CollisionError(short_key, salt)
            self.logger.warning(f"Collision on short key {short_key} (salt {salt}), retrying")

        self.logger.error(f"Retries exhausted for {long_url} after {self.max_retries} attempts")
        raise RetriesExhaustedError(self.max_retries) from last_collision


class ResolutionEngine:
    """Turn short keys back into long URLs, counting each resolution."""

    def __init__(
        self,
        store: MappingStoreBase,
        key_length: int = KEY_LENGTH,
        logger: Optional[logging.Logger] = None,
    ):
        self.store = store
        self.key_length = key_length
        self.logger = logger or logging.getLogger(__name__)

    async def resolve(self, short_key: str) -> str:
        """Resolve a short key and increment its click count.

        Args:
            short_key: Key taken from the redirect path

        Returns:
            The original long URL

        Raises:
            InvalidKeyError: Bad length or alphabet; the store was not touched
            NotFoundError: No mapping for the key
            StoreError: The store failed
        """
        validate_short_key(short_key, length=self.key_length)

        long_url = await self.store.increment_and_fetch(short_key)
        if long_url is None:
            self.logger.warning(f"Short key not found: {short_key}")
            raise NotFoundError(short_key)

        self.logger.debug(f"Resolved {short_key} -> {long_url}")
        return long_url

    async def lookup(self, short_key: str) -> URLMapping:
        """Read a mapping without counting a click."""
        validate_short_key(short_key, length=self.key_length)

        mapping = await self.store.get_mapping(short_key)
        if mapping is None:
            raise NotFoundError(short_key)
        return mapping


class URLShortenerService:
    """Facade over both engines for the HTTP layer and the CLI."""

    def __init__(
        self,
        store: MappingStoreBase,
        base_url: str,
        path_prefix: str = "",
        generator: Optional[ShortKeyGenerator] = None,
        max_collision_retries: int = MAX_COLLISION_RETRIES,
        max_url_length: int = MAX_URL_LENGTH,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize URL shortener service.

        Args:
            store: Mapping store shared by both engines
            base_url: Base URL for generated short URLs
            path_prefix: Optional path prefix for short URLs
            generator: Optional short key generator
            max_collision_retries: Maximum salted attempts per long URL
            max_url_length: Longest accepted long URL
            logger: Optional logger
        """
        self.store = store
        self.logger = logger or logging.getLogger(__name__)
        generator = generator or ShortKeyGenerator()

        self.shortener = ShorteningEngine(
            store,
            base_url=base_url,
            path_prefix=path_prefix,
            generator=generator,
            max_retries=max_collision_retries,
            max_url_length=max_url_length,
            logger=self.logger,
        )
        self.resolver = ResolutionEngine(
            store,
            key_length=generator.key_length,
            logger=self.logger,
        )

    async def shorten(self, long_url: str) -> str:
        return await self.shortener.shorten(long_url)

    async def resolve(self, short_key: str) -> str:
        return await self.resolver.resolve(short_key)

    async def get_url_info(self, short_key: str) -> URLMapping:
        return await self.resolver.lookup(short_key)

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        db_healthy = await self.store.health_check()
        return {
            "database": db_healthy,
            "overall": db_healthy,
        }

    async def close(self) -> None:
        """Close store connections."""
        await self.store.close()
