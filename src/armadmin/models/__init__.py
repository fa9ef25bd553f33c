"""Data models for armadmin."""

from .category import Category
from .exercise import Exercise, ExerciseOption
from .profile import Profile, Role
from .video import Video
from .workout import Workout, WorkoutExercise

__all__ = [
    "Category",
    "Exercise",
    "ExerciseOption",
    "Profile",
    "Role",
    "Video",
    "Workout",
    "WorkoutExercise",
]
