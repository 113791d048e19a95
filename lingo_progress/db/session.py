"""Async engine, session factory and declarative base."""
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from lingo_progress.core.config import get_settings

Base = declarative_base()


def make_engine(url: str) -> AsyncEngine:
    connect_args = {}
    if url.startswith("sqlite"):
        # concurrent writers wait for the file lock instead of failing at once
        connect_args["timeout"] = 30
    return create_async_engine(url, connect_args=connect_args)


def make_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(bind, expire_on_commit=False)


engine = make_engine(get_settings().database_url)
AsyncSessionLocal = make_session_factory(engine)


def get_session_factory() -> async_sessionmaker:
    """FastAPI dependency; services open one short session per operation."""
    return AsyncSessionLocal
