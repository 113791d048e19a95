"""Shared fixtures: a throwaway SQLite database per test, a fake clock and fake billing."""
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from lingo_progress.db.base import Base
from lingo_progress.db.session import get_session_factory, make_engine, make_session_factory
from lingo_progress.main import app
from lingo_progress.models.catalog import Challenge, Course, Lesson, Unit
from lingo_progress.routers.progress import get_billing, get_clock
from lingo_progress.services.attempts import AttemptCoordinator
from lingo_progress.services.catalog import SqlCatalogReader
from lingo_progress.services.courses import CourseService
from lingo_progress.services.query import ProgressQueryFacade
from lingo_progress.services.store import ProgressStore

START = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
REGEN = timedelta(minutes=30)
MAX_HEARTS = 5

SPANISH = 1
FRENCH = 2


class FakeClock:
    def __init__(self, now: datetime):
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current += delta


class FakeBilling:
    def __init__(self):
        self.subscribers: set[str] = set()
        self.broken = False
        self.calls = 0

    async def has_active_subscription(self, user_id: str) -> bool:
        self.calls += 1
        if self.broken:
            raise RuntimeError("billing provider unavailable")
        return user_id in self.subscribers


class InterleavingStore(ProgressStore):
    """Lets a competing writer add one point between load and save, `races` times."""

    def __init__(self, session_factory, races: int = 1):
        super().__init__(session_factory)
        self.races = races
        self.saves = 0

    async def save(self, previous, updated):
        self.saves += 1
        if self.races > 0:
            self.races -= 1
            fresh = await self.load(previous.user_id)
            await super().save(fresh, fresh.model_copy(update={"points": fresh.points + 1}))
        return await super().save(previous, updated)


@pytest.fixture
async def engine(tmp_path):
    engine = make_engine(f"sqlite+aiosqlite:///{tmp_path / 'progress.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
async def catalog_rows(session_factory):
    """Spanish: challenges 1-3 worth 10 points. French: challenge 4 worth 20."""
    async with session_factory() as db:
        db.add_all(
            [
                Course(id=SPANISH, title="Spanish", image_src="/es-flag.svg"),
                Course(id=FRENCH, title="French", image_src="/fr-flag.svg"),
            ]
        )
        db.add_all(
            [
                Unit(id=1, course_id=SPANISH, title="Unit 1", description="Basics", order=1),
                Unit(id=2, course_id=FRENCH, title="Unit 1", description="Basics", order=1),
            ]
        )
        db.add_all([Lesson(id=1, unit_id=1, title="Nouns", order=1), Lesson(id=2, unit_id=2, title="Nouns", order=1)])
        db.add_all(
            [
                Challenge(id=1, lesson_id=1, type="SELECT", question="the man", order=1, points=10),
                Challenge(id=2, lesson_id=1, type="SELECT", question="the woman", order=2, points=10),
                Challenge(id=3, lesson_id=1, type="ASSIST", question="the boy", order=3, points=10),
                Challenge(id=4, lesson_id=2, type="SELECT", question="l'homme", order=1, points=20),
            ]
        )
        await db.commit()


@pytest.fixture
def clock():
    return FakeClock(START)


@pytest.fixture
def billing():
    return FakeBilling()


@pytest.fixture
def store(session_factory):
    return ProgressStore(session_factory)


@pytest.fixture
def catalog(session_factory, catalog_rows):
    return SqlCatalogReader(session_factory)


@pytest.fixture
def coordinator(store, catalog, billing, clock):
    return AttemptCoordinator(store, catalog, billing, clock, max_hearts=MAX_HEARTS, regen_interval=REGEN, max_retries=3)


@pytest.fixture
def courses(store, catalog, clock):
    return CourseService(store, catalog, clock, max_hearts=MAX_HEARTS, max_retries=3)


@pytest.fixture
def facade(store, catalog, billing, clock):
    return ProgressQueryFacade(store, catalog, billing, clock, max_hearts=MAX_HEARTS, regen_interval=REGEN)


@pytest.fixture
async def client(session_factory, catalog_rows, clock, billing):
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_billing] = lambda: billing
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


async def set_hearts(store: ProgressStore, user_id: str, hearts: int):
    stored = await store.load(user_id)
    return await store.save(stored, stored.model_copy(update={"hearts": hearts}))
