"""Database layer for armadmin."""

from .repositories import (
    CategoryRepository,
    ExerciseRepository,
    ProfileRepository,
    StatsRepository,
    TableRepository,
    VideoRepository,
    WorkoutExerciseRepository,
    WorkoutRepository,
)

__all__ = [
    "CategoryRepository",
    "ExerciseRepository",
    "ProfileRepository",
    "StatsRepository",
    "TableRepository",
    "VideoRepository",
    "WorkoutExerciseRepository",
    "WorkoutRepository",
]
