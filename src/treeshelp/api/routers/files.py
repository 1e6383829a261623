"""
treeshelp.api.routers.files

Endpoints for files attached to trees.

Responsibilities:
- Public download and per-tree listing of attached files.
- Delete a file (gated by the FILE ownership rule in `TreeService`).
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from pydantic import BaseModel

from treeshelp.api.deps import RecordId, tree_service
from treeshelp.auth.deps import get_principal
from treeshelp.auth.models import Principal
from treeshelp.services.tree_service import TreeService

router = APIRouter(prefix="/api/file", tags=["files"])


class FileInfo(BaseModel):
    id: int
    tree_id: int
    author_id: int
    filename: str
    content_type: str
    size: int
    created_at: datetime


@router.get("/tree/{tree_id}", response_model=list[FileInfo])
async def files_of_tree(
    tree_id: RecordId, svc: TreeService = Depends(tree_service)
) -> list[FileInfo]:
    return [
        FileInfo(
            id=f.id,
            tree_id=f.tree_id,
            author_id=f.author_id,
            filename=f.filename,
            content_type=f.content_type,
            size=f.size,
            created_at=f.created_at,
        )
        for f in await svc.list_files(tree_id)
    ]


@router.get("/{file_id}", response_class=FileResponse)
async def download_file(
    file_id: RecordId, svc: TreeService = Depends(tree_service)
) -> FileResponse:
    rec, path = await svc.get_file(file_id)
    return FileResponse(path, media_type=rec.content_type, filename=rec.filename)


@router.delete("/{file_id}")
async def delete_file(
    file_id: RecordId,
    principal: Principal = Depends(get_principal),
    svc: TreeService = Depends(tree_service),
) -> None:
    await svc.delete_file(principal, file_id)
