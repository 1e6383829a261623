"""
treeshelp.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings and DB sessions.
- Build request-scoped services.
- Bound path ids and page numbers to what the database can store.
- Encapsulate app.state access patterns (settings/engine/sessionmaker).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends, Path, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from treeshelp.services.auth_service import AuthService
from treeshelp.services.species_service import SpeciesService
from treeshelp.services.tree_service import TreeService
from treeshelp.settings import Settings

# SQLite INTEGER is a signed 64-bit value; ids outside it overflow the driver.
MAX_RECORD_ID = 2**63 - 1
# With max_page_size capped in Settings, (page - 1) * size stays far below 2**63.
MAX_PAGE = 1_000_000

RecordId = Annotated[int, Path(ge=-MAX_RECORD_ID - 1, le=MAX_RECORD_ID)]
PageNumber = Annotated[int, Path(ge=1, le=MAX_PAGE)]
PageSize = Annotated[int, Path(ge=1)]


def settings_dep(request: Request) -> Settings:
    # The app factory stores the settings it was built with on app.state.
    return request.app.state.settings  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # The sessionmaker is created on app startup in `treeshelp.api.app.create_app`.
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit/rollback is managed explicitly by the service layer.
    async with session_factory() as session:
        yield session


def auth_service(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> AuthService:
    return AuthService(session=session, settings=settings)


def tree_service(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> TreeService:
    return TreeService(session=session, settings=settings)


def species_service(session: AsyncSession = Depends(db_session)) -> SpeciesService:
    return SpeciesService(session=session)


# --- Module Notes -----------------------------------------------------------
# FastAPI caches dependencies per request, so a handler that asks for both the
# principal and a service shares one DB session between them.
