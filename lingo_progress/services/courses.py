"""Course selection and the admin progress reset."""
import logging

from lingo_progress.core.clock import Clock
from lingo_progress.core.errors import AlreadyExists
from lingo_progress.schemas.progress import ProgressState
from lingo_progress.services.catalog import CatalogReader
from lingo_progress.services.store import ProgressStore, retry_on_conflict

logger = logging.getLogger(__name__)


class CourseService:
    def __init__(
        self,
        store: ProgressStore,
        catalog: CatalogReader,
        clock: Clock,
        *,
        max_hearts: int,
        max_retries: int,
    ):
        self.store = store
        self.catalog = catalog
        self.clock = clock
        self.max_hearts = max_hearts
        self.max_retries = max_retries

    async def select_course(self, user_id: str, course_id: int) -> ProgressState:
        """First selection creates the record; later ones switch the active course."""
        await self.catalog.get_course(course_id)
        try:
            state = await self.store.create(user_id, course_id, self.clock.now(), hearts=self.max_hearts)
        except AlreadyExists:
            return await self.switch_course(user_id, course_id)
        logger.info(f"Created progress for user {user_id} in course {course_id}")
        return state

    async def switch_course(self, user_id: str, course_id: int) -> ProgressState:
        """Change the active course. Hearts and points carry over.

        Completions stay keyed by course, so the returned state shows the new
        course's completions (empty unless the user studied it before).
        Raises CourseNotFound or ProgressNotFound.
        """
        await self.catalog.get_course(course_id)

        async def run() -> ProgressState:
            stored = await self.store.load(user_id)
            if stored.active_course_id == course_id:
                return stored
            return await self.store.save(
                stored,
                stored.model_copy(update={"active_course_id": course_id, "completed_challenge_ids": frozenset()}),
            )

        state = await retry_on_conflict(
            run, max_retries=self.max_retries, description=f"switch course user={user_id}"
        )
        logger.info(f"User {user_id} switched to course {course_id}")
        return state

    async def reset_progress(self, user_id: str) -> ProgressState:
        """Admin reset: zero points, full hearts, forget the active course's completions."""

        async def run() -> ProgressState:
            stored = await self.store.load(user_id)
            return await self.store.save(
                stored,
                stored.model_copy(
                    update={
                        "points": 0,
                        "hearts": self.max_hearts,
                        "last_heart_regen_at": self.clock.now(),
                        "completed_challenge_ids": frozenset(),
                    }
                ),
            )

        state = await retry_on_conflict(run, max_retries=self.max_retries, description=f"reset user={user_id}")
        logger.info(f"Reset progress for user {user_id}")
        return state
