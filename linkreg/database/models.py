"""Data models for the link registry."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


def _parse_timestamp(value) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


@dataclass
class Link:
    """Represents a short link in the backing store."""

    id: str
    code: str
    target_url: str
    created_at: datetime
    updated_at: datetime
    clicks: int = 0
    last_clicked_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "code": self.code,
            "target_url": self.target_url,
            "clicks": self.clicks,
            "last_clicked_at": self.last_clicked_at.isoformat() if self.last_clicked_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Link":
        """Create from dictionary (database row, Redis hash or to_dict output)."""
        return cls(
            id=data["id"],
            code=data["code"],
            target_url=data["target_url"],
            clicks=int(data.get("clicks") or 0),
            last_clicked_at=_parse_timestamp(data.get("last_clicked_at")),
            created_at=_parse_timestamp(data["created_at"]),
            updated_at=_parse_timestamp(data["updated_at"]),
        )
