"""Exercise library models."""

from dataclasses import dataclass


@dataclass
class Exercise:
    """An exercise in the app's library.

    The recommended_* fields are optional coaching hints shown to app users;
    when present they are non-negative integers.
    """

    name: str
    description: str | None = None
    preview_url: str | None = None
    recommended_sets: int | None = None
    recommended_reps: int | None = None
    recommended_rest_seconds: int | None = None
    id: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "name": self.name,
            "description": self.description,
            "preview_url": self.preview_url,
            "recommended_sets": self.recommended_sets,
            "recommended_reps": self.recommended_reps,
            "recommended_rest_seconds": self.recommended_rest_seconds,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Exercise":
        """Create from a stored row."""
        return cls(
            id=data.get("id"),
            name=data["name"],
            description=data.get("description"),
            preview_url=data.get("preview_url"),
            recommended_sets=data.get("recommended_sets"),
            recommended_reps=data.get("recommended_reps"),
            recommended_rest_seconds=data.get("recommended_rest_seconds"),
        )


@dataclass
class ExerciseOption:
    """Minimal exercise reference used by pickers."""

    id: str
    name: str

    @classmethod
    def from_dict(cls, data: dict) -> "ExerciseOption":
        return cls(id=data["id"], name=data["name"])
