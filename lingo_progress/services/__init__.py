from lingo_progress.services.attempts import AttemptCoordinator
from lingo_progress.services.courses import CourseService
from lingo_progress.services.query import ProgressQueryFacade
from lingo_progress.services.seeding import seed_catalog
from lingo_progress.services.store import ProgressStore

__all__ = ["AttemptCoordinator", "CourseService", "ProgressQueryFacade", "ProgressStore", "seed_catalog"]
