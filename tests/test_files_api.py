"""
tests.test_files_api

Attaching, downloading and deleting tree files.
"""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from tests.helpers import bearer, create_tree, moderator_token, user_token
from treeshelp.settings import Settings


def upload(name: str = "bark.jpg", data: bytes = b"\xff\xd8 fake jpeg") -> dict:
    return {"file": (name, data, "image/jpeg")}


@pytest.mark.asyncio
async def test_owner_attaches_and_anyone_downloads(
    client: httpx.AsyncClient, settings: Settings
) -> None:
    _, token = await user_token(client, "photo@example.com")
    tree_id = await create_tree(client, token)

    r = await client.post(f"/api/tree/attachFile/{tree_id}", files=upload(), headers=bearer(token))
    assert r.status_code == 201, r.text
    file_id = r.json()["id"]

    r = await client.get(f"/api/file/{file_id}")
    assert r.status_code == 200
    assert r.content == b"\xff\xd8 fake jpeg"
    assert r.headers["content-type"] == "image/jpeg"

    r = await client.get(f"/api/file/tree/{tree_id}")
    assert [f["filename"] for f in r.json()] == ["bark.jpg"]

    assert len(list(Path(settings.upload_dir).iterdir())) == 1


@pytest.mark.asyncio
async def test_stranger_cannot_attach(client: httpx.AsyncClient) -> None:
    _, owner = await user_token(client, "own@example.com")
    _, stranger = await user_token(client, "other@example.com")
    tree_id = await create_tree(client, owner)

    r = await client.post(
        f"/api/tree/attachFile/{tree_id}", files=upload(), headers=bearer(stranger)
    )
    assert r.status_code == 403

    r = await client.post("/api/tree/attachFile/9999", files=upload(), headers=bearer(owner))
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_upload_limits(client: httpx.AsyncClient) -> None:
    _, token = await user_token(client, "big@example.com")
    tree_id = await create_tree(client, token)

    r = await client.post(
        f"/api/tree/attachFile/{tree_id}", files=upload(data=b""), headers=bearer(token)
    )
    assert r.status_code == 400

    # max_upload_bytes is 1024 in the test settings.
    r = await client.post(
        f"/api/tree/attachFile/{tree_id}", files=upload(data=b"x" * 2048), headers=bearer(token)
    )
    assert r.status_code == 413


@pytest.mark.asyncio
async def test_file_delete_rules(client: httpx.AsyncClient, settings: Settings) -> None:
    _, owner = await user_token(client, "fowner@example.com")
    _, stranger = await user_token(client, "fstranger@example.com")
    _, moderator = await moderator_token(client, "fmod@example.com")
    tree_id = await create_tree(client, owner)

    ids = []
    for _ in range(2):
        r = await client.post(
            f"/api/tree/attachFile/{tree_id}", files=upload(), headers=bearer(owner)
        )
        ids.append(r.json()["id"])

    assert (await client.delete(f"/api/file/{ids[0]}", headers=bearer(stranger))).status_code == 403
    assert (await client.delete(f"/api/file/{ids[0]}", headers=bearer(owner))).status_code == 200
    assert (await client.delete(f"/api/file/{ids[1]}", headers=bearer(moderator))).status_code == 200
    assert (await client.delete(f"/api/file/{ids[1]}", headers=bearer(owner))).status_code == 404

    assert (await client.get(f"/api/file/{ids[0]}")).status_code == 404
    assert list(Path(settings.upload_dir).iterdir()) == []


@pytest.mark.asyncio
async def test_deleting_tree_removes_its_files(
    client: httpx.AsyncClient, settings: Settings
) -> None:
    _, token = await user_token(client, "cascade@example.com")
    tree_id = await create_tree(client, token)
    r = await client.post(f"/api/tree/attachFile/{tree_id}", files=upload(), headers=bearer(token))
    file_id = r.json()["id"]

    assert (await client.delete(f"/api/tree/delete/{tree_id}", headers=bearer(token))).status_code == 200
    assert (await client.get(f"/api/file/{file_id}")).status_code == 404
    assert list(Path(settings.upload_dir).iterdir()) == []
