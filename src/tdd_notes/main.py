"""
Application factory for the read-only registry API.

Run with an ASGI server, e.g.:
    uvicorn tdd_notes.main:create_app --factory
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from tdd_notes import __version__
from tdd_notes.api.v1.error_handlers import register_exception_handlers
from tdd_notes.api.v1.routes import router as v1_router
from tdd_notes.config.settings import Settings, get_settings
from tdd_notes.core.logging import RequestIDMiddleware, setup_logging
from tdd_notes.database.session import create_engine_from_settings, create_schema, create_session_maker
from tdd_notes.services.registry_service import RegistryService, load_catalog

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: create the engine/sessionmaker, create tables and (optionally) seed the
    chapter tables. Shutdown: dispose the engine.
    """
    settings: Settings = app.state.settings

    engine = create_engine_from_settings(settings)
    app.state.engine = engine
    app.state.session_maker = create_session_maker(engine)

    await create_schema(engine)

    if settings.SEED_ON_STARTUP:
        async with app.state.session_maker() as session:
            reports = await RegistryService(session).seed(load_catalog(settings))
        logger.info(
            "app.startup.seeded",
            extra={"examples": {r.example: r.added for r in reports}},
        )

    try:
        yield
    finally:
        await engine.dispose()
        logger.info("app.shutdown")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title="TDD notes: chapter registry",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestIDMiddleware)
    register_exception_handlers(app)
    app.include_router(v1_router, prefix="/api/v1")

    return app
