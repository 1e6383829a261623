"""
tests.conftest

Shared fixtures for API tests.

Responsibilities:
- Build an app against a throwaway SQLite file and upload directory.
- Run the app lifespan explicitly (httpx ASGITransport does not manage it).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import httpx
import pytest
import pytest_asyncio

from tests.helpers import SUPERUSER_EMAIL, SUPERUSER_PASSWORD
from treeshelp.api.app import create_app
from treeshelp.settings import Settings


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'trees.db'}",
        upload_dir=str(tmp_path / "uploads"),
        max_upload_bytes=1024,
        default_page_size=20,
        max_page_size=50,
        bcrypt_rounds=4,
        bootstrap_superuser_email=SUPERUSER_EMAIL,
        bootstrap_superuser_password=SUPERUSER_PASSWORD,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def client(settings: Settings) -> AsyncIterator[httpx.AsyncClient]:
    app = create_app(settings=settings)
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
            yield c
