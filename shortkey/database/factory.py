"""Store construction from a connection URL."""

import logging
from typing import Optional

from .base import MappingStoreBase
from .memory import InMemoryMappingStore
from .postgres import PostgresMappingStore


def create_store(
    database_url: str,
    pool_max_size: int = 10,
    timeout_seconds: int = 30,
    create_tables: bool = False,
    logger: Optional[logging.Logger] = None,
) -> MappingStoreBase:
    """Create the store selected by the URL scheme.

    ``memory://`` selects the in-memory store; ``postgres://`` and
    ``postgresql://`` select PostgreSQL.

    Raises:
        ValueError: For any other scheme
    """
    scheme = database_url.split("://", 1)[0].lower()

    if scheme == "memory":
        return InMemoryMappingStore(logger=logger)

    if scheme in ("postgres", "postgresql"):
        return PostgresMappingStore(
            db_config=database_url,
            pool_max_size=pool_max_size,
            connection_timeout_seconds=timeout_seconds,
            create_tables=create_tables,
            logger=logger,
        )

    raise ValueError(f"Unsupported database URL scheme: {scheme!r}")

