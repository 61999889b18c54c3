"""
Core pytest configuration for the entire test suite.

Only the cross-cutting setup lives here: logging, the in-memory database engine and
the per-test session. Domain fixtures live in tests/test_fixtures/ and are imported
at the bottom of this module so every test package can use them.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator

# -------------------------------
# Early logging tuning
# -------------------------------
# Silence noisy third-party loggers before anything imports them.
NOISY_LOGGERS = (
    "faker",
    "faker.factory",
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "aiosqlite",
    "asyncio",
    "httpx",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from tdd_notes.config.settings import Settings
from tdd_notes.core.logging.builder import setup_logging
from tdd_notes.database.session import (
    create_engine_from_settings,
    create_schema,
    create_session_maker,
)

from .test_fixtures.settings import make_test_settings

logger = logging.getLogger(__name__)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return make_test_settings()


@pytest.fixture(scope="session", autouse=True)
def configure_logging(test_settings: Settings):
    """
    Install application logging for the whole session so formatters and filters used
    by the app are active in tests too.

    pytest attaches its capture handlers to the root logger per test phase, after this
    runs, so `caplog` keeps working.
    """
    setup_logging(test_settings)
    yield


# ------------------------------------------------------------------------------------------------
# DATABASE FIXTURES
# ------------------------------------------------------------------------------------------------


@pytest.fixture()
async def async_engine(test_settings: Settings) -> AsyncGenerator[AsyncEngine, None]:
    """
    A fresh in-memory SQLite database per test.

    The in-memory database lives in one connection (StaticPool), so disposing the
    engine at teardown throws the whole database away; no cleanup is needed.
    """
    engine = create_engine_from_settings(test_settings)
    await create_schema(engine)

    yield engine

    await engine.dispose()


@pytest.fixture()
async def db_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    maker = create_session_maker(async_engine)
    async with maker() as session:
        yield session
        await session.rollback()


# Domain fixtures
from .test_fixtures.registry_fixtures import (  # noqa: E402,F401
    money_table,
    xunit_table,
    empty_table,
    make_reference,
)
from .test_fixtures.repository_fixtures import (  # noqa: E402,F401
    example_repository,
    chapter_repository,
    base_repo,
    sample_example_data,
    money_example,
    registry_service,
)
