"""Video model."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Video:
    """A training video. The url points either at an external host or at
    a file uploaded to the media bucket."""

    title: str
    url: str
    description: str | None = None
    id: str | None = None
    created_at: datetime | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "title": self.title,
            "description": self.description,
            "url": self.url,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Video":
        """Create from a stored row."""
        return cls(
            id=data.get("id"),
            title=data["title"],
            description=data.get("description"),
            url=data["url"],
            created_at=datetime.fromisoformat(data["created_at"]) if data.get("created_at") else None,
        )
