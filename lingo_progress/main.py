"""Lingo progress service - FastAPI app entry point."""
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from lingo_progress.core.config import get_settings
from lingo_progress.core.errors import ProgressError
from lingo_progress.db.base import Base
from lingo_progress.db.session import AsyncSessionLocal, engine
from lingo_progress.routers import progress
from lingo_progress.services.seeding import seed_catalog

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if settings.seed_catalog:
        async with AsyncSessionLocal() as db:
            await seed_catalog(db, challenge_points=settings.default_challenge_points)

    logger.info(f"{settings.app_name} started")
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Hearts, points and course progress for Lingo learners",
    lifespan=lifespan,
)

app.include_router(progress.router)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every request with its duration."""
    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time
    logger.info(f"{request.method} {request.url.path} - Status: {response.status_code} - Duration: {duration:.3f}s")
    return response


@app.exception_handler(ProgressError)
async def progress_error_handler(request: Request, exc: ProgressError):
    """Render domain errors as {"error", "message", ...} with their status code."""
    if exc.status_code >= 500:
        logger.warning(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/health")
async def health():
    return {"status": "ok"}
