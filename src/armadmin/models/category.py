"""Exercise category model."""

from dataclasses import dataclass


@dataclass
class Category:
    """A grouping shown to app users when browsing exercises."""

    name: str
    description: str | None = None
    id: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "name": self.name,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Category":
        """Create from a stored row."""
        return cls(
            id=data.get("id"),
            name=data["name"],
            description=data.get("description"),
        )
