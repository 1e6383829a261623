"""
tests.test_auth_api

Auth service endpoints: registration, login, refresh rotation, logout and role assignment.
"""

from __future__ import annotations

import httpx
import pytest

from tests.helpers import bearer, login, promote, register, superuser_token, user_token


@pytest.mark.asyncio
async def test_register_assigns_user_role(client: httpx.AsyncClient) -> None:
    r = await client.post(
        "/api/auth/register",
        json={"email": "Ann@Example.com", "password": "password-123", "first_name": "Ann"},
    )
    assert r.status_code == 201
    body = r.json()
    assert body["email"] == "ann@example.com"
    assert body["roles"] == ["USER"]
    assert "password" not in body and "password_hash" not in body


@pytest.mark.asyncio
async def test_duplicate_email_conflicts(client: httpx.AsyncClient) -> None:
    await register(client, "dup@example.com")
    r = await client.post(
        "/api/auth/register", json={"email": "dup@example.com", "password": "password-123"}
    )
    assert r.status_code == 409


@pytest.mark.asyncio
async def test_wrong_password_is_401(client: httpx.AsyncClient) -> None:
    await register(client, "bob@example.com")
    r = await client.post(
        "/api/auth/login", json={"email": "bob@example.com", "password": "nope-nope"}
    )
    assert r.status_code == 401

    r = await client.post(
        "/api/auth/login", json={"email": "ghost@example.com", "password": "password-123"}
    )
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_me_requires_token(client: httpx.AsyncClient) -> None:
    assert (await client.get("/api/auth/me")).status_code == 401
    assert (await client.get("/api/auth/me", headers=bearer("garbage"))).status_code == 401

    user_id, token = await user_token(client, "me@example.com")
    r = await client.get("/api/auth/me", headers=bearer(token))
    assert r.status_code == 200
    assert r.json()["id"] == user_id


@pytest.mark.asyncio
async def test_refresh_rotates_and_old_refresh_token_dies(client: httpx.AsyncClient) -> None:
    await register(client, "rot@example.com")
    tokens = await login(client, "rot@example.com")

    r = await client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert r.status_code == 200
    fresh = r.json()
    assert (await client.get("/api/auth/me", headers=bearer(fresh["access_token"]))).status_code == 200

    r = await client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_access_token_cannot_refresh(client: httpx.AsyncClient) -> None:
    await register(client, "typ@example.com")
    tokens = await login(client, "typ@example.com")
    r = await client.post("/api/auth/refresh", json={"refresh_token": tokens["access_token"]})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_logout_revokes_tokens(client: httpx.AsyncClient) -> None:
    await register(client, "out@example.com")
    tokens = await login(client, "out@example.com")
    headers = bearer(tokens["access_token"])

    assert (await client.post("/api/auth/logout", headers=headers)).status_code == 204
    assert (await client.get("/api/auth/me", headers=headers)).status_code == 401
    r = await client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_superuser_assigns_roles(client: httpx.AsyncClient) -> None:
    user_id, old_token = await user_token(client, "mod@example.com")
    await promote(client, user_id, "MODERATOR", "USER")

    # Role change invalidates tokens minted with the old role set.
    assert (await client.get("/api/auth/me", headers=bearer(old_token))).status_code == 401

    token = (await login(client, "mod@example.com"))["access_token"]
    r = await client.get("/api/auth/me", headers=bearer(token))
    assert r.json()["roles"] == ["MODERATOR", "USER"]


@pytest.mark.asyncio
async def test_role_assignment_needs_superuser(client: httpx.AsyncClient) -> None:
    user_id, token = await user_token(client, "sneaky@example.com")
    r = await client.put(
        f"/api/auth/users/{user_id}/roles",
        json={"roles": ["SUPERUSER"]},
        headers=bearer(token),
    )
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_unknown_role_or_user_is_404(client: httpx.AsyncClient) -> None:
    user_id = await register(client, "plain@example.com")
    headers = bearer(await superuser_token(client))

    r = await client.put(
        f"/api/auth/users/{user_id}/roles", json={"roles": ["WIZARD"]}, headers=headers
    )
    assert r.status_code == 404

    r = await client.put("/api/auth/users/9999/roles", json={"roles": ["USER"]}, headers=headers)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_password_limit_counts_utf8_bytes(client: httpx.AsyncClient) -> None:
    # 40 Cyrillic characters are 80 bytes: under the character limit, over bcrypt's.
    long_password = "ж" * 40
    r = await client.post(
        "/api/auth/register", json={"email": "cyr@example.com", "password": long_password}
    )
    assert r.status_code == 422

    r = await client.post(
        "/api/auth/login", json={"email": "cyr@example.com", "password": long_password}
    )
    assert r.status_code == 422

    # 36 two-byte characters fit exactly.
    fitting = "ж" * 36
    await register(client, "cyr@example.com", password=fitting)
    assert (await login(client, "cyr@example.com", password=fitting))["access_token"]
