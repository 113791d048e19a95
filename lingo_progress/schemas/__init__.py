from lingo_progress.schemas.catalog import ChallengeInfo, CourseInfo
from lingo_progress.schemas.progress import (
    AttemptResult,
    AttemptSubmitSchema,
    CourseSelectSchema,
    ProgressState,
    ProgressView,
)

__all__ = [
    "AttemptResult",
    "AttemptSubmitSchema",
    "ChallengeInfo",
    "CourseInfo",
    "CourseSelectSchema",
    "ProgressState",
    "ProgressView",
]
