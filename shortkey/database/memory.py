"""In-memory implementation of the mapping store.

Used for local development (``DATABASE_URL=memory://``) and tests. It
enforces the same uniqueness rules as the PostgreSQL schema. No operation
awaits between its read and its write, so each one is atomic with respect
to other coroutines on the same event loop.
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, Optional

from .base import MappingStoreBase
from .models import InsertResult, URLMapping


class InMemoryMappingStore(MappingStoreBase):
    """Dictionary-backed mapping store."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self._by_key: Dict[str, URLMapping] = {}
        self._key_by_url: Dict[str, str] = {}

    async def find_by_long_url(self, long_url: str) -> Optional[str]:
        return self._key_by_url.get(long_url)

    async def insert(self, short_key: str, long_url: str) -> InsertResult:
        if short_key in self._by_key:
            return InsertResult.KEY_COLLISION
        if long_url in self._key_by_url:
            return InsertResult.DUPLICATE_URL

        self._by_key[short_key] = URLMapping(
            short_key=short_key,
            long_url=long_url,
            created_at=datetime.now(timezone.utc),
        )
        self._key_by_url[long_url] = short_key
        return InsertResult.INSERTED

    async def increment_and_fetch(self, short_key: str) -> Optional[str]:
        mapping = self._by_key.get(short_key)
        if mapping is None:
            return None

        # URLMapping is frozen; swap in the bumped copy
        self._by_key[short_key] = replace(mapping, click_count=mapping.click_count + 1)
        return mapping.long_url

    async def get_mapping(self, short_key: str) -> Optional[URLMapping]:
        return self._by_key.get(short_key)

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        self.logger.debug(f"Discarding {len(self._by_key)} in-memory mappings")

    def __len__(self) -> int:
        return len(self._by_key)
