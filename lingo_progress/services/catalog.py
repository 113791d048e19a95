"""Read-only catalog lookups used by the engine."""
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker

from lingo_progress.core.errors import ChallengeNotFound, CourseNotFound
from lingo_progress.models.catalog import Challenge, Course, Lesson, Unit
from lingo_progress.schemas.catalog import ChallengeInfo, CourseInfo


class CatalogReader(Protocol):
    async def get_course(self, course_id: int) -> CourseInfo: ...

    async def get_challenge(self, challenge_id: int) -> ChallengeInfo: ...


class SqlCatalogReader:
    """Catalog backed by the courses/units/lessons/challenges tables."""

    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def get_course(self, course_id: int) -> CourseInfo:
        async with self._session_factory() as db:
            result = await db.execute(select(Course).where(Course.id == course_id))
            course = result.scalar_one_or_none()
        if course is None:
            raise CourseNotFound(f"Course {course_id} not found")
        return CourseInfo.model_validate(course)

    async def get_challenge(self, challenge_id: int) -> ChallengeInfo:
        async with self._session_factory() as db:
            result = await db.execute(
                select(Challenge.id, Unit.course_id, Challenge.points)
                .join(Lesson, Challenge.lesson_id == Lesson.id)
                .join(Unit, Lesson.unit_id == Unit.id)
                .where(Challenge.id == challenge_id)
            )
            row = result.one_or_none()
        if row is None:
            raise ChallengeNotFound(f"Challenge {challenge_id} not found")
        challenge_id, course_id, points = row
        if points < 0:
            raise ChallengeNotFound(f"Challenge {challenge_id} has an invalid reward ({points})")
        return ChallengeInfo(id=challenge_id, course_id=course_id, points=points)
