from lingo_progress.models.catalog import Challenge, Course, Lesson, Unit
from lingo_progress.models.completion import ChallengeCompletion
from lingo_progress.models.progress import UserProgress
from lingo_progress.models.subscription import UserSubscription

__all__ = [
    "Course",
    "Unit",
    "Lesson",
    "Challenge",
    "UserProgress",
    "ChallengeCompletion",
    "UserSubscription",
]
