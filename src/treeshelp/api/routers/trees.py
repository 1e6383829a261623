"""
treeshelp.api.routers.trees

Tree inventory endpoints.

Responsibilities:
- Create trees (authenticated; the caller becomes the author).
- Public reads: single tree, all trees, trees of an author (paged).
- Update/delete/attach-file, each gated by the tree's ownership rule in `TreeService`.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, File, UploadFile
from pydantic import BaseModel, Field, model_validator
from starlette.status import HTTP_201_CREATED

from treeshelp.api.deps import PageNumber, PageSize, RecordId, settings_dep, tree_service
from treeshelp.auth.deps import get_principal
from treeshelp.auth.models import Principal
from treeshelp.db.models import Tree
from treeshelp.services.tree_service import TreeService
from treeshelp.settings import Settings

router = APIRouter(prefix="/api/tree", tags=["trees"])


class TreeFields(BaseModel):
    species_id: int | None = Field(default=None, description="Kind-of-tree id")
    height: float | None = Field(default=None, ge=0, description="Height in metres")
    trunk_girth: float | None = Field(default=None, ge=0, description="Trunk girth in centimetres")
    diameter_of_crown: float | None = Field(default=None, ge=0, description="Crown diameter in metres")
    age: int | None = Field(default=None, ge=0)
    condition: str | None = Field(default=None, max_length=128)
    notes: str | None = Field(default=None, max_length=4000)


class CreateTreeRequest(TreeFields):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class UpdateTreeRequest(TreeFields):
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)

    @model_validator(mode="after")
    def _location_not_null(self) -> UpdateTreeRequest:
        # Omitting the location keeps it; sending null would erase a required column.
        for name in ("latitude", "longitude"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class TreeResponse(BaseModel):
    id: int
    author_id: int
    latitude: float
    longitude: float
    species_id: int | None
    height: float | None
    trunk_girth: float | None
    diameter_of_crown: float | None
    age: int | None
    condition: str | None
    notes: str | None
    created_at: datetime
    updated_at: datetime


class FileIdResponse(BaseModel):
    id: int


def _to_response(tree: Tree) -> TreeResponse:
    return TreeResponse(
        id=tree.id,
        author_id=tree.author_id,
        latitude=tree.latitude,
        longitude=tree.longitude,
        species_id=tree.species_id,
        height=tree.height,
        trunk_girth=tree.trunk_girth,
        diameter_of_crown=tree.diameter_of_crown,
        age=tree.age,
        condition=tree.condition,
        notes=tree.notes,
        created_at=tree.created_at,
        updated_at=tree.updated_at,
    )


def _page_size(size: int | None, settings: Settings) -> int:
    if size is None:
        return settings.default_page_size
    return min(size, settings.max_page_size)


@router.post("", status_code=HTTP_201_CREATED, summary="Save a new tree")
async def create_tree(
    body: CreateTreeRequest,
    principal: Principal = Depends(get_principal),
    svc: TreeService = Depends(tree_service),
) -> int:
    tree = await svc.create(principal, body.model_dump())
    return tree.id


@router.get("/get/{tree_id}", response_model=TreeResponse, summary="Get a tree by id")
async def get_tree(tree_id: RecordId, svc: TreeService = Depends(tree_service)) -> TreeResponse:
    return _to_response(await svc.get(tree_id))


@router.put("/{tree_id}", response_model=TreeResponse, summary="Edit an existing tree")
async def update_tree(
    tree_id: RecordId,
    body: UpdateTreeRequest,
    principal: Principal = Depends(get_principal),
    svc: TreeService = Depends(tree_service),
) -> TreeResponse:
    fields: dict[str, Any] = body.model_dump(exclude_unset=True)
    return _to_response(await svc.update(principal, tree_id, fields))


@router.delete("/delete/{tree_id}", summary="Delete a tree by id")
async def delete_tree(
    tree_id: RecordId,
    principal: Principal = Depends(get_principal),
    svc: TreeService = Depends(tree_service),
) -> None:
    await svc.delete(principal, tree_id)


@router.get("/get", response_model=list[TreeResponse], summary="Trees of the current user")
async def my_trees(
    principal: Principal = Depends(get_principal),
    svc: TreeService = Depends(tree_service),
    settings: Settings = Depends(settings_dep),
) -> list[TreeResponse]:
    trees = await svc.list_by_author(principal.id, page=1, size=_page_size(None, settings))
    return [_to_response(t) for t in trees]


@router.post(
    "/attachFile/{tree_id}",
    response_model=FileIdResponse,
    status_code=HTTP_201_CREATED,
    summary="Upload a file and attach it to a tree",
)
async def attach_file(
    tree_id: RecordId,
    file: UploadFile = File(description="multipart/form-data, a single file under key 'file'"),
    principal: Principal = Depends(get_principal),
    svc: TreeService = Depends(tree_service),
) -> FileIdResponse:
    data = await file.read()
    rec = await svc.attach_file(
        principal,
        tree_id,
        filename=file.filename or "",
        content_type=file.content_type,
        data=data,
    )
    return FileIdResponse(id=rec.id)


@router.get("/getAllByAuthorId/{author_id}", response_model=list[TreeResponse])
async def trees_by_author(
    author_id: RecordId,
    svc: TreeService = Depends(tree_service),
    settings: Settings = Depends(settings_dep),
) -> list[TreeResponse]:
    trees = await svc.list_by_author(author_id, page=1, size=_page_size(None, settings))
    return [_to_response(t) for t in trees]


@router.get("/getAllByAuthorId/{author_id}/{page}/{size}", response_model=list[TreeResponse])
async def trees_by_author_paged(
    author_id: RecordId,
    page: PageNumber,
    size: PageSize,
    svc: TreeService = Depends(tree_service),
    settings: Settings = Depends(settings_dep),
) -> list[TreeResponse]:
    trees = await svc.list_by_author(author_id, page=page, size=_page_size(size, settings))
    return [_to_response(t) for t in trees]


@router.get("/getAll", response_model=list[TreeResponse])
async def all_trees(
    svc: TreeService = Depends(tree_service),
    settings: Settings = Depends(settings_dep),
) -> list[TreeResponse]:
    trees = await svc.list_all(page=1, size=_page_size(None, settings))
    return [_to_response(t) for t in trees]


@router.get("/getAll/{page}/{size}", response_model=list[TreeResponse])
async def all_trees_paged(
    page: PageNumber,
    size: PageSize,
    svc: TreeService = Depends(tree_service),
    settings: Settings = Depends(settings_dep),
) -> list[TreeResponse]:
    trees = await svc.list_all(page=page, size=_page_size(size, settings))
    return [_to_response(t) for t in trees]


# --- Module Notes -----------------------------------------------------------
# Permission checks happen inside TreeService, not as route dependencies, so the
# same rules apply to any other caller of the service.
