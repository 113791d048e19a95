"""API routes: progress snapshot, challenge attempts, course selection, admin reset."""
from typing import Annotated

from fastapi import APIRouter, Depends, Header
from sqlalchemy.ext.asyncio import async_sessionmaker

from lingo_progress.core.clock import Clock, SystemClock
from lingo_progress.core.config import Settings, get_settings
from lingo_progress.core.errors import Forbidden
from lingo_progress.core.security import verify_admin_token
from lingo_progress.db.session import get_session_factory
from lingo_progress.schemas.progress import AttemptResult, AttemptSubmitSchema, CourseSelectSchema, ProgressView
from lingo_progress.services.attempts import AttemptCoordinator
from lingo_progress.services.billing import BillingFactProvider, SqlBillingFacts
from lingo_progress.services.catalog import CatalogReader, SqlCatalogReader
from lingo_progress.services.courses import CourseService
from lingo_progress.services.query import ProgressQueryFacade
from lingo_progress.services.store import ProgressStore

router = APIRouter(prefix="/progress", tags=["progress"])


# ---------- dependencies ----------

def get_clock() -> Clock:
    return SystemClock()


def get_store(
    session_factory: Annotated[async_sessionmaker, Depends(get_session_factory)],
) -> ProgressStore:
    return ProgressStore(session_factory)


def get_catalog(
    session_factory: Annotated[async_sessionmaker, Depends(get_session_factory)],
) -> CatalogReader:
    return SqlCatalogReader(session_factory)


def get_billing(
    session_factory: Annotated[async_sessionmaker, Depends(get_session_factory)],
    clock: Annotated[Clock, Depends(get_clock)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> BillingFactProvider:
    return SqlBillingFacts(session_factory, clock, settings.subscription_grace)


def get_query_facade(
    store: Annotated[ProgressStore, Depends(get_store)],
    catalog: Annotated[CatalogReader, Depends(get_catalog)],
    billing: Annotated[BillingFactProvider, Depends(get_billing)],
    clock: Annotated[Clock, Depends(get_clock)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ProgressQueryFacade:
    return ProgressQueryFacade(
        store,
        catalog,
        billing,
        clock,
        max_hearts=settings.max_hearts,
        regen_interval=settings.heart_regen_interval,
        eager_persist=settings.eager_persist_on_read,
    )


def get_attempt_coordinator(
    store: Annotated[ProgressStore, Depends(get_store)],
    catalog: Annotated[CatalogReader, Depends(get_catalog)],
    billing: Annotated[BillingFactProvider, Depends(get_billing)],
    clock: Annotated[Clock, Depends(get_clock)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AttemptCoordinator:
    return AttemptCoordinator(
        store,
        catalog,
        billing,
        clock,
        max_hearts=settings.max_hearts,
        regen_interval=settings.heart_regen_interval,
        max_retries=settings.attempt_max_retries,
    )


def get_course_service(
    store: Annotated[ProgressStore, Depends(get_store)],
    catalog: Annotated[CatalogReader, Depends(get_catalog)],
    clock: Annotated[Clock, Depends(get_clock)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CourseService:
    return CourseService(
        store,
        catalog,
        clock,
        max_hearts=settings.max_hearts,
        max_retries=settings.attempt_max_retries,
    )


# ---------- routes ----------

@router.get("/{user_id}", response_model=ProgressView)
async def get_progress(
    user_id: str,
    facade: Annotated[ProgressQueryFacade, Depends(get_query_facade)],
):
    """Hearts, points and active course, with regeneration applied."""
    return await facade.get_snapshot(user_id)


@router.post("/{user_id}/attempt", response_model=AttemptResult)
async def submit_attempt(
    user_id: str,
    body: AttemptSubmitSchema,
    coordinator: Annotated[AttemptCoordinator, Depends(get_attempt_coordinator)],
):
    """Record one answer; returns the post-attempt hearts and points."""
    return await coordinator.attempt(user_id, body.challenge_id, body.is_correct)


@router.post("/{user_id}/course", response_model=ProgressView)
async def select_course(
    user_id: str,
    body: CourseSelectSchema,
    courses: Annotated[CourseService, Depends(get_course_service)],
    facade: Annotated[ProgressQueryFacade, Depends(get_query_facade)],
):
    """Start or switch the active course."""
    await courses.select_course(user_id, body.course_id)
    return await facade.get_snapshot(user_id)


@router.post("/{user_id}/reset", response_model=ProgressView)
async def reset_progress(
    user_id: str,
    courses: Annotated[CourseService, Depends(get_course_service)],
    facade: Annotated[ProgressQueryFacade, Depends(get_query_facade)],
    x_admin_token: Annotated[str | None, Header()] = None,
):
    """Admin only: zero points, refill hearts, clear the active course's completions."""
    if not verify_admin_token(x_admin_token):
        raise Forbidden("Admin token required")
    await courses.reset_progress(user_id)
    return await facade.get_snapshot(user_id)
