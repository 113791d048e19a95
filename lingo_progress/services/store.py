"""Durable progress records with optimistic concurrency.

Every operation runs in its own short session, so nothing is locked between
`load` and `save`. `save` is a compare-and-swap on the `version` column: the
UPDATE only matches if nobody else wrote the row since it was loaded, and the
completion rows are written in the same transaction.
"""
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import TypeVar

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from lingo_progress.core.clock import as_utc
from lingo_progress.core.errors import AlreadyExists, Busy, Conflict, ProgressNotFound
from lingo_progress.models.completion import ChallengeCompletion
from lingo_progress.models.progress import UserProgress
from lingo_progress.schemas.progress import ProgressState

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _completed_ids(db: AsyncSession, user_id: str, course_id: int | None) -> frozenset[int]:
    if course_id is None:
        return frozenset()
    result = await db.execute(
        select(ChallengeCompletion.challenge_id).where(
            ChallengeCompletion.user_id == user_id,
            ChallengeCompletion.course_id == course_id,
        )
    )
    return frozenset(result.scalars().all())


def _to_state(row: UserProgress, completed: frozenset[int]) -> ProgressState:
    return ProgressState(
        user_id=row.user_id,
        active_course_id=row.active_course_id,
        hearts=row.hearts,
        points=row.points,
        has_active_subscription=row.has_active_subscription,
        last_heart_regen_at=as_utc(row.last_heart_regen_at),
        completed_challenge_ids=completed,
        version=row.version,
    )


class ProgressStore:
    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def load(self, user_id: str) -> ProgressState:
        async with self._session_factory() as db:
            result = await db.execute(select(UserProgress).where(UserProgress.user_id == user_id))
            row = result.scalar_one_or_none()
            if row is None:
                raise ProgressNotFound(f"No progress for user {user_id}")
            completed = await _completed_ids(db, user_id, row.active_course_id)
        return _to_state(row, completed)

    async def create(self, user_id: str, course_id: int, now: datetime, *, hearts: int) -> ProgressState:
        """Insert a fresh record: full hearts, zero points, regen clock at `now`."""
        state = ProgressState(
            user_id=user_id,
            active_course_id=course_id,
            hearts=hearts,
            points=0,
            has_active_subscription=False,
            last_heart_regen_at=now,
            version=1,
        )
        try:
            async with self._session_factory() as db:
                async with db.begin():
                    db.add(
                        UserProgress(
                            user_id=state.user_id,
                            active_course_id=state.active_course_id,
                            hearts=state.hearts,
                            points=state.points,
                            has_active_subscription=state.has_active_subscription,
                            last_heart_regen_at=state.last_heart_regen_at,
                            version=state.version,
                        )
                    )
        except IntegrityError as e:
            raise AlreadyExists(f"Progress for user {user_id} already exists") from e
        return state

    async def save(self, previous: ProgressState, updated: ProgressState) -> ProgressState:
        """Write `updated` iff the row is still at `previous.version`; raise Conflict otherwise.

        Completions are diffed against `previous`. When the active course
        changes, existing completion rows are left alone and the returned
        state carries the new course's completions. Other constraint
        violations (negative points or hearts) propagate as IntegrityError.
        """
        if updated.user_id != previous.user_id:
            raise ValueError("save() cannot change the user id")

        user_id = previous.user_id
        new_version = previous.version + 1
        if updated.active_course_id == previous.active_course_id:
            added = updated.completed_challenge_ids - previous.completed_challenge_ids
            removed = previous.completed_challenge_ids - updated.completed_challenge_ids
        else:
            added = updated.completed_challenge_ids
            removed = frozenset()

        async with self._session_factory() as db:
            async with db.begin():
                result = await db.execute(
                    update(UserProgress)
                    .where(
                        UserProgress.user_id == user_id,
                        UserProgress.version == previous.version,
                    )
                    .values(
                        active_course_id=updated.active_course_id,
                        hearts=updated.hearts,
                        points=updated.points,
                        has_active_subscription=updated.has_active_subscription,
                        last_heart_regen_at=updated.last_heart_regen_at,
                        version=new_version,
                    )
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount != 1:
                    raise Conflict(f"Progress for user {user_id} changed since version {previous.version}")

                if removed:
                    await db.execute(
                        delete(ChallengeCompletion).where(
                            ChallengeCompletion.user_id == user_id,
                            ChallengeCompletion.course_id == previous.active_course_id,
                            ChallengeCompletion.challenge_id.in_(removed),
                        )
                    )
                if added:
                    db.add_all(
                        ChallengeCompletion(
                            user_id=user_id,
                            course_id=updated.active_course_id,
                            challenge_id=challenge_id,
                        )
                        for challenge_id in sorted(added)
                    )
                    try:
                        await db.flush()
                    except IntegrityError as e:
                        raise Conflict(f"Completion for user {user_id} was recorded concurrently") from e

                completed = await _completed_ids(db, user_id, updated.active_course_id)

        return updated.model_copy(update={"completed_challenge_ids": completed, "version": new_version})


async def retry_on_conflict(
    operation: Callable[[], Awaitable[T]],
    *,
    max_retries: int,
    description: str,
) -> T:
    """Run load-compute-save `operation`; rerun it from scratch on lost races.

    Only Conflict and transient database errors are retried. After
    `max_retries` retries the caller gets Busy.
    """
    last_error: Exception | None = None
    for try_number in range(1, max_retries + 2):
        try:
            return await operation()
        except (Conflict, OperationalError) as e:
            last_error = e
            logger.info(f"{description}: try {try_number} failed ({e.__class__.__name__}), retrying")

    logger.warning(f"{description}: giving up after {max_retries + 1} tries")
    raise Busy(f"Too many concurrent updates ({description}); try again") from last_error
