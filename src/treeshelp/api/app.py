"""
treeshelp.api.app

FastAPI app factory for the Trees Help backend.

Responsibilities:
- Build the FastAPI application and register routers/middleware/exception handlers.
- Initialize and dispose shared infrastructure (DB engine/session factory).
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from treeshelp import __version__
from treeshelp.api.errors import register_exception_handlers
from treeshelp.api.routers.auth import router as auth_router
from treeshelp.api.routers.files import router as files_router
from treeshelp.api.routers.health import router as health_router
from treeshelp.api.routers.species import router as species_router
from treeshelp.api.routers.trees import router as trees_router
from treeshelp.db.init_db import init_db, seed
from treeshelp.db.session import create_engine, create_sessionmaker
from treeshelp.observability.logging import configure_logging, get_logger
from treeshelp.observability.middleware import RequestContextMiddleware
from treeshelp.settings import Settings, get_settings

log = get_logger(__name__)


def create_app(*, settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(
        service_name=settings.service_name, level=settings.log_level, fmt=settings.log_format
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        # Create the async DB engine and session factory once and stash them on app.state.
        # Routers obtain sessions via dependencies (see `treeshelp.api.deps`).
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically. Prod should use Alembic migrations.
            await init_db(engine)
        await seed(app.state.sessionmaker, settings)
        try:
            yield
        finally:
            # Dispose the engine to close pools/FDs gracefully.
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Trees Help API",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestContextMiddleware)
    register_exception_handlers(app)
    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router)
    app.include_router(trees_router)
    app.include_router(files_router)
    app.include_router(species_router)

    return app


# --- Module Notes -----------------------------------------------------------
# App composition stays here; authorization and persistence decisions stay in services.
