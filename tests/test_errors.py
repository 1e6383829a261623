"""
tests.test_errors

Domain error → HTTP status translation, checked through a bare app.
"""

from __future__ import annotations

import httpx
import pytest
from fastapi import FastAPI

from treeshelp.api.errors import register_exception_handlers
from treeshelp.errors import (
    AccessDenied,
    Conflict,
    InvalidCredentials,
    InvalidUpload,
    ResourceNotFound,
    RoleRequired,
    TreesError,
)

RAISED: dict[str, TreesError] = {
    "missing": ResourceNotFound("TREE", 1),
    "denied": AccessDenied("TREE", 1, "EDIT"),
    "role": RoleRequired(frozenset({"SUPERUSER"})),
    "login": InvalidCredentials(),
    "dup": Conflict("email already registered"),
    "empty": InvalidUpload("empty file"),
    "big": InvalidUpload("file too large", too_large=True),
    "base": TreesError("unclassified"),
}


@pytest.fixture
def app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/raise/{name}")
    async def raise_named(name: str) -> None:
        raise RAISED[name]

    return app


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("name", "status"),
    [
        ("missing", 404),
        ("denied", 403),
        ("role", 403),
        ("login", 401),
        ("dup", 409),
        ("empty", 400),
        ("big", 413),
        ("base", 500),
    ],
)
async def test_status_mapping(app: FastAPI, name: str, status: int) -> None:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        r = await client.get(f"/raise/{name}")
    assert r.status_code == status
    assert r.json()["detail"] == str(RAISED[name])
    assert ("www-authenticate" in r.headers) == (status == 401)
