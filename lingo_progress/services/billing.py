"""Subscription facts from billing. Failures never block the engine."""
import logging
from datetime import timedelta
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker

from lingo_progress.core.clock import Clock, as_utc
from lingo_progress.models.subscription import UserSubscription

logger = logging.getLogger(__name__)


class BillingFactProvider(Protocol):
    async def has_active_subscription(self, user_id: str) -> bool: ...


class SqlBillingFacts:
    """Active while `current_period_end` plus the grace period lies in the future."""

    def __init__(self, session_factory: async_sessionmaker, clock: Clock, grace: timedelta):
        self._session_factory = session_factory
        self._clock = clock
        self._grace = grace

    async def has_active_subscription(self, user_id: str) -> bool:
        async with self._session_factory() as db:
            result = await db.execute(
                select(UserSubscription.current_period_end).where(UserSubscription.user_id == user_id)
            )
            period_end = result.scalar_one_or_none()
        if period_end is None:
            return False
        return as_utc(period_end) + self._grace > self._clock.now()


async def fetch_subscription_fact(provider: BillingFactProvider, user_id: str) -> bool:
    """Ask billing; on any provider error charge hearts as for a free user."""
    try:
        return bool(await provider.has_active_subscription(user_id))
    except Exception as e:
        logger.warning(f"Billing lookup failed for user {user_id}: {e}. Treating as unsubscribed.")
        return False
