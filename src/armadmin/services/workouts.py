"""Management of the exercises placed inside a workout."""

import logging

from ..clients.base import StoreError
from ..db.repositories import ExerciseRepository, WorkoutExerciseRepository
from ..models.exercise import ExerciseOption
from ..models.workout import WorkoutExercise
from .inflight import ViewLifetime, still_alive

logger = logging.getLogger(__name__)


def next_order(links: list[WorkoutExercise]) -> int:
    """Position for the next exercise: one past the highest, starting at 1.

    Removing an exercise never renumbers the rest, so gaps are expected.
    """
    return max((link.order for link in links), default=0) + 1


class WorkoutExercises:
    """The ordered exercise list on a workout's edit page."""

    def __init__(
        self,
        workout_id: str,
        links_repo: WorkoutExerciseRepository,
        exercise_repo: ExerciseRepository,
        lifetime: ViewLifetime | None = None,
    ):
        self.workout_id = workout_id
        self.links_repo = links_repo
        self.exercise_repo = exercise_repo
        self.lifetime = lifetime
        self.links: list[WorkoutExercise] = []
        self.catalog: list[ExerciseOption] = []

    async def load(self) -> list[WorkoutExercise]:
        try:
            links = await self.links_repo.list_for_workout(self.workout_id)
        except StoreError as e:
            logger.warning(f"Could not list exercises of workout {self.workout_id}: {e}")
            links = []
        if await still_alive(self.lifetime):
            self.links = links
        return self.links

    async def open_picker(self) -> list[ExerciseOption]:
        """Fetch the exercise catalog the first time the picker opens."""
        if self.catalog:
            return self.catalog
        try:
            catalog = await self.exercise_repo.list_options()
        except StoreError as e:
            logger.warning(f"Could not load exercise catalog: {e}")
            return self.catalog
        if await still_alive(self.lifetime):
            self.catalog = catalog
        return self.catalog

    async def add(self, exercise_id: str) -> WorkoutExercise | None:
        """Append an exercise after the current last one.

        Returns the stored join row, or None when nothing was added.
        """
        if not exercise_id:
            return None
        order = next_order(self.links)
        try:
            link = await self.links_repo.add(self.workout_id, exercise_id, order)
        except StoreError as e:
            logger.warning(f"Could not add exercise {exercise_id} to workout {self.workout_id}: {e}")
            return None
        if await still_alive(self.lifetime):
            self.links = [*self.links, link]
        return link

    async def remove(self, link_id: str) -> bool:
        try:
            await self.links_repo.delete(link_id)
        except StoreError as e:
            logger.warning(f"Could not remove {link_id} from workout {self.workout_id}: {e}")
            return False
        if await still_alive(self.lifetime):
            self.links = [link for link in self.links if link.id != link_id]
        return True
