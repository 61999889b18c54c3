from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    create_async_engine,
    async_sessionmaker,
    AsyncSession,
)
from sqlalchemy.pool import StaticPool

from tdd_notes.config.settings import Settings
from .base import Base


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """
    Create the AsyncEngine for `settings.DATABASE_URL`.

    In-memory SQLite databases live inside a single connection, so they get a StaticPool
    (every session shares that connection). Other URLs use the default pool with
    pre-ping health checks.
    """
    url = settings.DATABASE_URL
    if settings.is_sqlite and ":memory:" in url:
        return create_async_engine(
            url,
            echo=settings.SQLALCHEMY_ECHO,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(
        url,
        echo=settings.SQLALCHEMY_ECHO,
        pool_pre_ping=True,
    )


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: objects stay readable after commit (no lazy refresh in async code)
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


async def create_schema(engine: AsyncEngine) -> None:
    """Create all registry tables (no-op for tables that already exist)."""
    # models must be imported so they register with Base.metadata
    from tdd_notes import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_async_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency. Yields a session from the app's sessionmaker and closes it after the request.

    Usage:
        async def endpoint(db: AsyncSession = Depends(get_async_session)):
            await db.execute(...)
    """
    session_maker: async_sessionmaker[AsyncSession] = request.app.state.session_maker
    async with session_maker() as session:
        yield session
