"""Challenge attempts: eligibility, hearts penalty and one-time point rewards."""
import logging
from datetime import timedelta

from lingo_progress.core.clock import Clock
from lingo_progress.core.errors import ChallengeNotFound, InsufficientHearts, NoActiveCourse, ProgressNotFound
from lingo_progress.schemas.progress import AttemptResult, ProgressState
from lingo_progress.services import hearts as hearts_rules
from lingo_progress.services.billing import BillingFactProvider, fetch_subscription_fact
from lingo_progress.services.catalog import CatalogReader
from lingo_progress.services.query import build_view, fold_regeneration
from lingo_progress.services.store import ProgressStore, retry_on_conflict

logger = logging.getLogger(__name__)


class AttemptCoordinator:
    """
    Runs one attempt as load -> regenerate -> validate -> apply -> save.

    The save is conditional on the version read at load time; a lost race
    reruns the whole sequence against fresh state, so two concurrent wrong
    answers cost two hearts and a challenge is rewarded once.
    """

    def __init__(
        self,
        store: ProgressStore,
        catalog: CatalogReader,
        billing: BillingFactProvider,
        clock: Clock,
        *,
        max_hearts: int,
        regen_interval: timedelta,
        max_retries: int,
    ):
        self.store = store
        self.catalog = catalog
        self.billing = billing
        self.clock = clock
        self.max_hearts = max_hearts
        self.regen_interval = regen_interval
        self.max_retries = max_retries

    async def attempt(self, user_id: str, challenge_id: int, is_correct: bool) -> AttemptResult:
        async def run() -> AttemptResult:
            return await self._attempt_once(user_id, challenge_id, is_correct)

        return await retry_on_conflict(
            run,
            max_retries=self.max_retries,
            description=f"attempt user={user_id} challenge={challenge_id}",
        )

    async def _attempt_once(self, user_id: str, challenge_id: int, is_correct: bool) -> AttemptResult:
        try:
            stored = await self.store.load(user_id)
        except ProgressNotFound as e:
            raise NoActiveCourse(f"User {user_id} has not selected a course") from e
        if stored.active_course_id is None:
            raise NoActiveCourse(f"User {user_id} has not selected a course")

        challenge = await self.catalog.get_challenge(challenge_id)
        if challenge.course_id != stored.active_course_id:
            raise ChallengeNotFound(f"Challenge {challenge_id} is not part of course {stored.active_course_id}")

        has_subscription = await fetch_subscription_fact(self.billing, user_id)
        now = self.clock.now()
        state = fold_regeneration(
            stored, now, has_subscription, max_hearts=self.max_hearts, interval=self.regen_interval
        )

        if is_correct and challenge_id in state.completed_challenge_ids:
            logger.debug(f"Replay of completed challenge {challenge_id} for user {user_id}")
            return self._result(state, challenge_id, "replay")

        if not hearts_rules.can_attempt(state.hearts, state.has_active_subscription):
            course = await self.catalog.get_course(state.active_course_id)
            raise InsufficientHearts(
                build_view(state, max_hearts=self.max_hearts, interval=self.regen_interval, course=course),
                f"User {user_id} has no hearts left",
            )

        hearts = hearts_rules.apply_outcome(
            state.hearts, is_correct, state.has_active_subscription, max_hearts=self.max_hearts
        )
        update = {"hearts": hearts}
        if state.hearts >= self.max_hearts and hearts < self.max_hearts:
            # cooldown for the lost heart starts now, not at the last time the bar was full
            update["last_heart_regen_at"] = now
        points_awarded = 0
        if is_correct:
            points_awarded = challenge.points
            update["points"] = state.points + points_awarded
            update["completed_challenge_ids"] = state.completed_challenge_ids | {challenge_id}

        saved = await self.store.save(stored, state.model_copy(update=update))
        outcome = "correct" if is_correct else "incorrect"
        logger.info(
            f"Attempt user={user_id} challenge={challenge_id} outcome={outcome} "
            f"hearts={saved.hearts} points={saved.points}"
        )
        return self._result(saved, challenge_id, outcome, points_awarded)

    def _result(
        self, state: ProgressState, challenge_id: int, outcome: str, points_awarded: int = 0
    ) -> AttemptResult:
        return AttemptResult(
            challenge_id=challenge_id,
            outcome=outcome,
            hearts=state.hearts,
            points=state.points,
            points_awarded=points_awarded,
            eligible=hearts_rules.can_attempt(state.hearts, state.has_active_subscription),
            has_active_subscription=state.has_active_subscription,
            next_heart_at=hearts_rules.next_heart_at(
                state.hearts,
                state.last_heart_regen_at,
                state.has_active_subscription,
                max_hearts=self.max_hearts,
                interval=self.regen_interval,
            ),
        )
