"""SQLAlchemy declarative base and model imports for Alembic."""
from lingo_progress.db.session import Base

# Import all models so Alembic can see them
from lingo_progress.models.catalog import Challenge, Course, Lesson, Unit  # noqa: F401
from lingo_progress.models.completion import ChallengeCompletion  # noqa: F401
from lingo_progress.models.progress import UserProgress  # noqa: F401
from lingo_progress.models.subscription import UserSubscription  # noqa: F401

__all__ = [
    "Base",
    "Course",
    "Unit",
    "Lesson",
    "Challenge",
    "UserProgress",
    "ChallengeCompletion",
    "UserSubscription",
]
