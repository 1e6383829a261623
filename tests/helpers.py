"""
tests.helpers

Helpers to register users, log in and promote users to a role through the API.
"""

from __future__ import annotations

import httpx

SUPERUSER_EMAIL = "root@trees.test"
SUPERUSER_PASSWORD = "root-password"


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def register(client: httpx.AsyncClient, email: str, password: str = "password-123") -> int:
    r = await client.post("/api/auth/register", json={"email": email, "password": password})
    assert r.status_code == 201, r.text
    return r.json()["id"]


async def login(client: httpx.AsyncClient, email: str, password: str = "password-123") -> dict:
    r = await client.post("/api/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return r.json()


async def user_token(client: httpx.AsyncClient, email: str) -> tuple[int, str]:
    user_id = await register(client, email)
    return user_id, (await login(client, email))["access_token"]


async def superuser_token(client: httpx.AsyncClient) -> str:
    return (await login(client, SUPERUSER_EMAIL, SUPERUSER_PASSWORD))["access_token"]


async def promote(client: httpx.AsyncClient, user_id: int, *roles: str) -> None:
    r = await client.put(
        f"/api/auth/users/{user_id}/roles",
        json={"roles": list(roles)},
        headers=bearer(await superuser_token(client)),
    )
    assert r.status_code == 200, r.text


async def moderator_token(client: httpx.AsyncClient, email: str) -> tuple[int, str]:
    user_id = await register(client, email)
    await promote(client, user_id, "MODERATOR")
    return user_id, (await login(client, email))["access_token"]


TREE = {"latitude": 56.84, "longitude": 60.6, "height": 12.5, "condition": "healthy"}


async def create_tree(client: httpx.AsyncClient, token: str, **overrides) -> int:
    r = await client.post("/api/tree", json={**TREE, **overrides}, headers=bearer(token))
    assert r.status_code == 201, r.text
    return r.json()
