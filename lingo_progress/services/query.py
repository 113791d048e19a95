"""Read path: a user's progress with regeneration folded in, joined with catalog data."""
import logging
from datetime import datetime, timedelta

from lingo_progress.core.clock import Clock
from lingo_progress.core.errors import Conflict
from lingo_progress.schemas.catalog import CourseInfo
from lingo_progress.schemas.progress import ProgressState, ProgressView
from lingo_progress.services import hearts as hearts_rules
from lingo_progress.services.billing import BillingFactProvider, fetch_subscription_fact
from lingo_progress.services.catalog import CatalogReader
from lingo_progress.services.store import ProgressStore

logger = logging.getLogger(__name__)


def fold_regeneration(
    state: ProgressState,
    now: datetime,
    has_subscription: bool,
    *,
    max_hearts: int,
    interval: timedelta,
) -> ProgressState:
    """State with the billing fact refreshed and elapsed regeneration applied."""
    hearts, regen_at = hearts_rules.regenerate(
        state.hearts,
        state.last_heart_regen_at,
        now,
        has_subscription,
        max_hearts=max_hearts,
        interval=interval,
    )
    return state.model_copy(
        update={
            "hearts": hearts,
            "last_heart_regen_at": regen_at,
            "has_active_subscription": has_subscription,
        }
    )


def build_view(
    state: ProgressState,
    *,
    max_hearts: int,
    interval: timedelta,
    course: CourseInfo | None = None,
) -> ProgressView:
    return ProgressView(
        user_id=state.user_id,
        active_course_id=state.active_course_id,
        active_course=course,
        hearts=state.hearts,
        max_hearts=max_hearts,
        points=state.points,
        has_active_subscription=state.has_active_subscription,
        eligible=hearts_rules.can_attempt(state.hearts, state.has_active_subscription),
        next_heart_at=hearts_rules.next_heart_at(
            state.hearts,
            state.last_heart_regen_at,
            state.has_active_subscription,
            max_hearts=max_hearts,
            interval=interval,
        ),
        completed_challenge_ids=sorted(state.completed_challenge_ids),
    )


class ProgressQueryFacade:
    def __init__(
        self,
        store: ProgressStore,
        catalog: CatalogReader,
        billing: BillingFactProvider,
        clock: Clock,
        *,
        max_hearts: int,
        regen_interval: timedelta,
        eager_persist: bool = False,
    ):
        self.store = store
        self.catalog = catalog
        self.billing = billing
        self.clock = clock
        self.max_hearts = max_hearts
        self.regen_interval = regen_interval
        self.eager_persist = eager_persist

    async def get_snapshot(self, user_id: str) -> ProgressView:
        """Raises ProgressNotFound when the user never picked a course."""
        stored = await self.store.load(user_id)
        has_subscription = await fetch_subscription_fact(self.billing, user_id)
        state = fold_regeneration(
            stored,
            self.clock.now(),
            has_subscription,
            max_hearts=self.max_hearts,
            interval=self.regen_interval,
        )

        if self.eager_persist and state != stored:
            try:
                state = await self.store.save(stored, state)
            except Conflict:
                # a concurrent writer got there first; the computed view is still accurate
                logger.debug(f"Eager persist skipped for user {user_id}: record changed")

        course = None
        if state.active_course_id is not None:
            course = await self.catalog.get_course(state.active_course_id)

        return build_view(state, max_hearts=self.max_hearts, interval=self.regen_interval, course=course)
