"""Data models for shortkey."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class InsertResult(Enum):
    """Outcome of a single insert attempt."""

    INSERTED = "inserted"
    # short_key already belongs to another mapping
    KEY_COLLISION = "key_collision"
    # long_url was stored by a concurrent writer
    DUPLICATE_URL = "duplicate_url"


@dataclass(frozen=True)
class URLMapping:
    """Represents a URL mapping in the store."""

    short_key: str
    long_url: str
    created_at: Optional[datetime] = None
    click_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "short_key": self.short_key,
            "long_url": self.long_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "click_count": self.click_count,
        }

    @classmethod
    def from_record(cls, record) -> "URLMapping":
        """Create from a database row or any mapping with the same keys."""
        return cls(
            short_key=record["short_key"],
            long_url=record["long_url"],
            created_at=record["created_at"],
            click_count=record["click_count"] or 0,
        )
