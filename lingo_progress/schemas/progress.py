"""Pydantic schemas for progress state, views and attempt results."""
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

from lingo_progress.schemas.catalog import CourseInfo


class ProgressState(BaseModel):
    """In-memory copy of one user_progress row plus the active course's completions.

    Immutable; the engine derives the next state with `model_copy(update=...)`
    and hands both to the store, which writes only if `version` still matches.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str
    active_course_id: int | None
    hearts: int
    points: int
    has_active_subscription: bool = False
    last_heart_regen_at: datetime
    completed_challenge_ids: frozenset[int] = frozenset()
    version: int


class ProgressView(BaseModel):
    user_id: str
    active_course_id: int | None
    active_course: CourseInfo | None = None
    hearts: int
    max_hearts: int
    points: int
    has_active_subscription: bool
    eligible: bool
    next_heart_at: datetime | None = None
    completed_challenge_ids: list[int]


class AttemptSubmitSchema(BaseModel):
    challenge_id: int
    is_correct: bool


class CourseSelectSchema(BaseModel):
    course_id: int


class AttemptResult(BaseModel):
    challenge_id: int
    outcome: Literal["correct", "incorrect", "replay"]
    hearts: int
    points: int
    points_awarded: int = 0
    eligible: bool
    has_active_subscription: bool
    next_heart_at: datetime | None = None
