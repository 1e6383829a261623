"""
tests.test_bootstrap

Startup seeding: roles, the dev/test bootstrap superuser, and prod behaviour.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import pytest

from tests.helpers import SUPERUSER_PASSWORD
from treeshelp.api.app import create_app
from treeshelp.db.init_db import init_db
from treeshelp.db.session import create_engine
from treeshelp.settings import Settings


@asynccontextmanager
async def running(settings: Settings) -> AsyncIterator[httpx.AsyncClient]:
    app = create_app(settings=settings)
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
            yield c


async def create_schema(settings: Settings) -> None:
    engine = create_engine(settings)
    try:
        await init_db(engine)
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_mixed_case_bootstrap_email_can_log_in(settings: Settings) -> None:
    settings = settings.model_copy(update={"bootstrap_superuser_email": " Admin@Trees.io "})
    async with running(settings) as client:
        r = await client.post(
            "/api/auth/login", json={"email": "Admin@Trees.io", "password": SUPERUSER_PASSWORD}
        )
        assert r.status_code == 200, r.text

        token = r.json()["access_token"]
        r = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert r.json()["email"] == "admin@trees.io"
        assert r.json()["roles"] == ["SUPERUSER"]


@pytest.mark.asyncio
async def test_prod_starts_on_unmigrated_database(settings: Settings) -> None:
    settings = settings.model_copy(update={"env": "prod"})
    async with running(settings) as client:
        assert (await client.get("/healthz")).status_code == 200


@pytest.mark.asyncio
async def test_prod_seeds_roles_but_no_superuser(settings: Settings) -> None:
    await create_schema(settings)
    settings = settings.model_copy(update={"env": "prod"})
    async with running(settings) as client:
        r = await client.post(
            "/api/auth/login",
            json={"email": settings.bootstrap_superuser_email, "password": SUPERUSER_PASSWORD},
        )
        assert r.status_code == 401

        r = await client.post(
            "/api/auth/register", json={"email": "first@example.com", "password": "password-123"}
        )
        assert r.status_code == 201
        assert r.json()["roles"] == ["USER"]
