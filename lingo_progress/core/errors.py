"""Domain errors of the progress engine; each maps to one HTTP status."""
from typing import Any


class ProgressError(Exception):
    """Base class. `code` is the stable error identifier sent to clients."""

    code = "progress_error"
    status_code = 400

    def __init__(self, message: str | None = None, **extra: Any):
        self.message = message or self.__class__.__doc__ or self.code
        self.extra = extra
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "message": self.message, **self.extra}


class ProgressNotFound(ProgressError):
    """No progress yet; the user has to pick a course first."""

    code = "not_found"
    status_code = 404


class NoActiveCourse(ProgressError):
    """Attempt made before a course was selected."""

    code = "no_active_course"
    status_code = 400


class InsufficientHearts(ProgressError):
    """Out of hearts. Carries the regenerated snapshot for display."""

    code = "insufficient_hearts"
    status_code = 409

    def __init__(self, snapshot: Any, message: str | None = None):
        self.snapshot = snapshot
        super().__init__(message, snapshot=snapshot.model_dump(mode="json"))


class Conflict(ProgressError):
    """The record changed since it was loaded."""

    code = "conflict"
    status_code = 409


class Busy(ProgressError):
    """Too much contention on this record; try again later."""

    code = "busy"
    status_code = 503


class AlreadyExists(ProgressError):
    """A progress record already exists for this user."""

    code = "already_exists"
    status_code = 409


class CourseNotFound(ProgressError):
    """Unknown course."""

    code = "course_not_found"
    status_code = 404


class ChallengeNotFound(ProgressError):
    """Unknown challenge, or not part of the active course."""

    code = "challenge_not_found"
    status_code = 404


class Forbidden(ProgressError):
    """Admin token missing or wrong."""

    code = "forbidden"
    status_code = 403
