"""Data access layer for armadmin."""

import asyncio
import logging

from ..clients.base import DataStore, Embed
from ..models.category import Category
from ..models.exercise import Exercise, ExerciseOption
from ..models.profile import Profile, Role
from ..models.video import Video
from ..models.workout import Workout, WorkoutExercise

logger = logging.getLogger(__name__)


class TableRepository:
    """Base repository for one table keyed by ``id``.

    Subclasses name the table, the columns they read, the model they map
    rows to and the column lists are ordered by.
    """

    table: str
    columns: tuple[str, ...]
    model: type
    order_by: str = "name"
    ascending: bool = True
    # Columns the admin never overwrites on update
    update_excludes: tuple[str, ...] = ()

    def __init__(self, store: DataStore):
        self.store = store

    async def list_all(self) -> list:
        """List all rows in display order."""
        rows = await self.store.select(
            self.table, self.columns, order=self.order_by, ascending=self.ascending
        )
        return [self.model.from_dict(row) for row in rows]

    async def get(self, record_id: str):
        """Get one row by ID. Raises StoreError when missing."""
        row = await self.store.select_one(self.table, self.columns, filters={"id": record_id})
        return self.model.from_dict(row)

    async def create(self, record):
        """Insert a record and return it with its assigned ID."""
        rows = await self.store.insert(self.table, [record.to_dict()], returning=True)
        return self.model.from_dict(rows[0])

    async def update(self, record_id: str, record) -> None:
        """Overwrite a row's editable fields."""
        values = {
            key: value
            for key, value in record.to_dict().items()
            if key not in self.update_excludes
        }
        await self.store.update(self.table, values, filters={"id": record_id})

    async def delete(self, record_id: str) -> None:
        """Delete a row by ID."""
        await self.store.delete(self.table, filters={"id": record_id})


class CategoryRepository(TableRepository):
    """Repository for exercise categories."""

    table = "categories"
    columns = ("id", "name", "description")
    model = Category


class ExerciseRepository(TableRepository):
    """Repository for the exercise library."""

    table = "exercises"
    columns = (
        "id",
        "name",
        "description",
        "preview_url",
        "recommended_sets",
        "recommended_reps",
        "recommended_rest_seconds",
    )
    model = Exercise

    async def list_options(self) -> list[ExerciseOption]:
        """List exercise names for pickers."""
        rows = await self.store.select(self.table, ("id", "name"), order="name")
        return [ExerciseOption.from_dict(row) for row in rows]


class WorkoutRepository(TableRepository):
    """Repository for workouts, newest first."""

    table = "workouts"
    columns = ("id", "name", "description", "is_public", "user_id", "created_at")
    model = Workout
    order_by = "created_at"
    ascending = False
    update_excludes = ("user_id",)


class VideoRepository(TableRepository):
    """Repository for videos, newest first."""

    table = "videos"
    columns = ("id", "title", "description", "url", "created_at")
    model = Video
    order_by = "created_at"
    ascending = False


class ProfileRepository(TableRepository):
    """Repository for user profiles."""

    table = "profiles"
    columns = ("id", "role", "is_banned")
    model = Profile
    order_by = "id"

    async def set_role(self, profile_id: str, role: Role) -> None:
        await self.store.update(self.table, {"role": role.value}, filters={"id": profile_id})

    async def set_banned(self, profile_id: str, is_banned: bool) -> None:
        await self.store.update(self.table, {"is_banned": is_banned}, filters={"id": profile_id})


class WorkoutExerciseRepository:
    """Repository for the exercises placed inside a workout."""

    table = "workout_exercises"
    columns = ("id", "workout_id", "exercise_id", "order")
    exercise_embed = Embed(
        alias="exercise",
        table="exercises",
        foreign_key="exercise_id",
        columns=("id", "name"),
    )

    def __init__(self, store: DataStore):
        self.store = store

    async def list_for_workout(self, workout_id: str) -> list[WorkoutExercise]:
        """List a workout's exercises in position order."""
        rows = await self.store.select(
            self.table,
            self.columns,
            filters={"workout_id": workout_id},
            order="order",
            embed=self.exercise_embed,
        )
        return [WorkoutExercise.from_dict(row) for row in rows]

    async def add(self, workout_id: str, exercise_id: str, order: int) -> WorkoutExercise:
        """Place an exercise in a workout and return the stored join row."""
        link = WorkoutExercise(workout_id=workout_id, exercise_id=exercise_id, order=order)
        rows = await self.store.insert(
            self.table, [link.to_dict()], returning=True, embed=self.exercise_embed
        )
        return WorkoutExercise.from_dict(rows[0])

    async def delete(self, link_id: str) -> None:
        await self.store.delete(self.table, filters={"id": link_id})


class StatsRepository:
    """Row counts for the dashboard."""

    tables = {
        "exercises": "exercises",
        "workouts": "workouts",
        "videos": "videos",
        "users": "profiles",
    }

    def __init__(self, store: DataStore):
        self.store = store

    async def counts(self) -> dict[str, int]:
        """Count rows in each table concurrently. A failed count reads as 0."""
        results = await asyncio.gather(
            *(self.store.count(table) for table in self.tables.values()),
            return_exceptions=True,
        )
        counts = {}
        for label, result in zip(self.tables, results):
            if isinstance(result, Exception):
                logger.warning(f"Could not count {label}: {result}")
                counts[label] = 0
            else:
                counts[label] = result
        return counts
