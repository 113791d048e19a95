"""Attempt coordinator tests: penalties, rewards, idempotent replays, retries and concurrency."""
import asyncio
from datetime import timedelta

import pytest

from lingo_progress.core.errors import Busy, ChallengeNotFound, InsufficientHearts, NoActiveCourse
from lingo_progress.models.catalog import Challenge
from lingo_progress.services.attempts import AttemptCoordinator

from conftest import MAX_HEARTS, REGEN, SPANISH, START, InterleavingStore, set_hearts


@pytest.fixture
async def learner(store, catalog_rows):
    await store.create("u1", SPANISH, START, hearts=MAX_HEARTS)
    return "u1"


async def test_wrong_answer_with_full_hearts(coordinator, store, learner):
    result = await coordinator.attempt(learner, 1, False)

    assert result.outcome == "incorrect"
    assert result.hearts == 4
    assert result.points == 0
    assert result.eligible is True
    assert (await store.load(learner)).hearts == 4


async def test_correct_answer_awards_points_once(coordinator, store, learner):
    first = await coordinator.attempt(learner, 1, True)
    assert first.outcome == "correct"
    assert first.points == 10
    assert first.points_awarded == 10
    assert first.hearts == MAX_HEARTS

    replay = await coordinator.attempt(learner, 1, True)
    assert replay.outcome == "replay"
    assert replay.points == 10
    assert replay.points_awarded == 0

    stored = await store.load(learner)
    assert stored.points == 10
    assert stored.completed_challenge_ids == {1}


async def test_replay_writes_nothing(coordinator, store, learner):
    await coordinator.attempt(learner, 1, True)
    version = (await store.load(learner)).version

    await coordinator.attempt(learner, 1, True)
    assert (await store.load(learner)).version == version


async def test_wrong_answer_on_completed_challenge_still_costs_a_heart(coordinator, learner):
    await coordinator.attempt(learner, 1, True)
    result = await coordinator.attempt(learner, 1, False)
    assert result.outcome == "incorrect"
    assert result.hearts == 4
    assert result.points == 10


async def test_out_of_hearts(coordinator, store, learner):
    await set_hearts(store, learner, 0)

    with pytest.raises(InsufficientHearts) as exc_info:
        await coordinator.attempt(learner, 2, True)

    snapshot = exc_info.value.snapshot
    assert snapshot.hearts == 0
    assert snapshot.active_course.title == "Spanish"
    assert snapshot.eligible is False
    assert snapshot.next_heart_at == START + REGEN
    stored = await store.load(learner)
    assert stored.points == 0
    assert stored.completed_challenge_ids == frozenset()


async def test_replay_allowed_without_hearts(coordinator, store, learner):
    await coordinator.attempt(learner, 1, True)
    await set_hearts(store, learner, 0)

    result = await coordinator.attempt(learner, 1, True)
    assert result.outcome == "replay"
    assert result.eligible is False


async def test_regeneration_is_folded_in_before_the_check(coordinator, store, clock, learner):
    await set_hearts(store, learner, 0)
    clock.advance(2 * REGEN + timedelta(minutes=5))

    result = await coordinator.attempt(learner, 1, False)

    assert result.hearts == 1
    stored = await store.load(learner)
    assert stored.last_heart_regen_at == START + 2 * REGEN
    assert result.next_heart_at == START + 3 * REGEN


async def test_losing_a_heart_from_full_restarts_the_cooldown(coordinator, store, clock, learner):
    clock.advance(timedelta(minutes=45))

    result = await coordinator.attempt(learner, 1, False)

    assert result.hearts == 4
    assert result.next_heart_at == clock.now() + REGEN


async def test_subscriber_keeps_hearts(coordinator, store, billing, learner):
    await set_hearts(store, learner, 0)
    billing.subscribers.add(learner)

    result = await coordinator.attempt(learner, 1, False)

    assert result.hearts == MAX_HEARTS
    assert result.has_active_subscription is True
    assert result.eligible is True
    assert result.next_heart_at is None


async def test_billing_failure_counts_as_no_subscription(coordinator, billing, learner):
    billing.subscribers.add(learner)
    billing.broken = True

    result = await coordinator.attempt(learner, 1, False)

    assert result.has_active_subscription is False
    assert result.hearts == 4


async def test_no_progress_means_no_active_course(coordinator, catalog_rows):
    with pytest.raises(NoActiveCourse):
        await coordinator.attempt("stranger", 1, True)


async def test_unknown_challenge(coordinator, learner):
    with pytest.raises(ChallengeNotFound):
        await coordinator.attempt(learner, 999, True)


async def test_challenge_from_another_course(coordinator, store, learner):
    with pytest.raises(ChallengeNotFound):
        await coordinator.attempt(learner, 4, True)
    assert (await store.load(learner)).points == 0


async def test_challenge_with_negative_reward_is_rejected(coordinator, store, session_factory, learner):
    async with session_factory() as db:
        db.add(Challenge(id=9, lesson_id=1, type="SELECT", question="broken", order=9, points=-5))
        await db.commit()

    with pytest.raises(ChallengeNotFound):
        await coordinator.attempt(learner, 9, True)

    stored = await store.load(learner)
    assert stored.points == 0
    assert stored.version == 1


async def test_lost_race_is_retried(session_factory, catalog, billing, clock, learner):
    store = InterleavingStore(session_factory, races=1)
    coordinator = AttemptCoordinator(
        store, catalog, billing, clock, max_hearts=MAX_HEARTS, regen_interval=REGEN, max_retries=3
    )

    result = await coordinator.attempt(learner, 1, True)

    # the competing writer's point survives alongside the reward
    assert result.points == 11
    assert store.saves == 2


async def test_busy_after_retry_budget(session_factory, catalog, billing, clock, learner):
    store = InterleavingStore(session_factory, races=100)
    coordinator = AttemptCoordinator(
        store, catalog, billing, clock, max_hearts=MAX_HEARTS, regen_interval=REGEN, max_retries=3
    )

    with pytest.raises(Busy):
        await coordinator.attempt(learner, 1, True)

    stored = await store.load(learner)
    assert store.saves == 4
    assert stored.points == 4
    assert stored.completed_challenge_ids == frozenset()


async def test_concurrent_attempts_on_different_challenges(coordinator, store, learner):
    first, second = await asyncio.gather(
        coordinator.attempt(learner, 1, True),
        coordinator.attempt(learner, 2, True),
    )

    assert {first.outcome, second.outcome} == {"correct"}
    stored = await store.load(learner)
    assert stored.points == 20
    assert stored.completed_challenge_ids == {1, 2}


async def test_concurrent_wrong_answers_each_cost_a_heart(coordinator, store, learner):
    await asyncio.gather(
        coordinator.attempt(learner, 1, False),
        coordinator.attempt(learner, 2, False),
        coordinator.attempt(learner, 3, False),
    )

    assert (await store.load(learner)).hearts == MAX_HEARTS - 3


async def test_concurrent_replays_reward_once(coordinator, store, learner):
    results = await asyncio.gather(*(coordinator.attempt(learner, 3, True) for _ in range(3)))

    assert sorted(r.outcome for r in results).count("correct") == 1
    assert (await store.load(learner)).points == 10
