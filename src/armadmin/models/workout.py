"""Workout models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Workout:
    """A workout template.

    Workouts created from the admin portal have no owning user; user_id is
    only set for workouts that app users built themselves.
    """

    name: str
    description: str | None = None
    is_public: bool = False
    user_id: str | None = None
    id: str | None = None
    created_at: datetime | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "name": self.name,
            "description": self.description,
            "is_public": self.is_public,
            "user_id": self.user_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Workout":
        """Create from a stored row."""
        return cls(
            id=data.get("id"),
            name=data["name"],
            description=data.get("description"),
            is_public=bool(data.get("is_public", False)),
            user_id=data.get("user_id"),
            created_at=datetime.fromisoformat(data["created_at"]) if data.get("created_at") else None,
        )


@dataclass
class WorkoutExercise:
    """Join row placing an exercise inside a workout at a given position."""

    workout_id: str
    exercise_id: str
    order: int
    exercise_name: str = ""
    id: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "workout_id": self.workout_id,
            "exercise_id": self.exercise_id,
            "order": self.order,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutExercise":
        """Create from a stored row with the embedded exercise."""
        exercise = data.get("exercise") or {}
        return cls(
            id=data.get("id"),
            workout_id=data.get("workout_id", ""),
            exercise_id=data["exercise_id"],
            order=data["order"],
            exercise_name=exercise.get("name", ""),
        )
