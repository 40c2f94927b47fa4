"""Persistence layer for shortkey."""

from .base import MappingStoreBase
from .factory import create_store
from .memory import InMemoryMappingStore
from .models import InsertResult, URLMapping
from .postgres import PostgresMappingStore

__all__ = [
    "MappingStoreBase",
    "InMemoryMappingStore",
    "PostgresMappingStore",
    "InsertResult",
    "URLMapping",
    "create_store",
]
