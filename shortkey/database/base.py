"""Abstract base class for mapping store implementations."""

from abc import ABC, abstractmethod
from typing import Optional

from .models import InsertResult, URLMapping


class MappingStoreBase(ABC):
    """Abstract base class for short key -> long URL persistence.

    The store is the only place uniqueness is enforced: a rejected insert is
    how the engines learn about collisions. Implementations raise
    ``StoreError`` for every failure that is not a uniqueness violation.
    """

    async def connect(self) -> None:
        """Open connections and verify the store is usable.

        Stores without a startup check keep this no-op.
        """
        return None

    @abstractmethod
    async def find_by_long_url(self, long_url: str) -> Optional[str]:
        """Find the short key already assigned to a long URL.

        Args:
            long_url: Exact long URL to look up

        Returns:
            The short key if found, None otherwise
        """
        pass

    @abstractmethod
    async def insert(self, short_key: str, long_url: str) -> InsertResult:
        """Insert a new mapping.

        Args:
            short_key: The generated short key
            long_url: The original long URL

        Returns:
            INSERTED on success, KEY_COLLISION if the key is taken,
            DUPLICATE_URL if the long URL is already stored
        """
        pass

    @abstractmethod
    async def increment_and_fetch(self, short_key: str) -> Optional[str]:
        """Atomically bump the click count and return the long URL.

        Args:
            short_key: The short key being resolved

        Returns:
            The long URL if the key exists, None otherwise
        """
        pass

    @abstractmethod
    async def get_mapping(self, short_key: str) -> Optional[URLMapping]:
        """Get the complete mapping without touching the click count.

        Args:
            short_key: The short key to look up

        Returns:
            URLMapping or None if not found
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the store is reachable.

        Returns:
            True if healthy, False otherwise
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release connections."""
        pass
