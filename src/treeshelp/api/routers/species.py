"""
treeshelp.api.routers.species

Kind-of-tree catalogue endpoints.

Responsibilities:
- Public listing of species.
- Create/update/delete for moderators and superusers.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from starlette.status import HTTP_201_CREATED

from treeshelp.api.deps import RecordId, species_service
from treeshelp.auth.deps import get_principal
from treeshelp.auth.models import Principal
from treeshelp.db.models import Species
from treeshelp.services.species_service import SpeciesService

router = APIRouter(prefix="/api/species", tags=["species"])

_COLOR = r"^#[0-9a-fA-F]{6}$"


class CreateSpeciesRequest(BaseModel):
    name: str = Field(min_length=1, max_length=128, description="Species name")
    color: str | None = Field(default=None, pattern=_COLOR, description="Map color, e.g. #2e8b57")
    diameter_of_crown: float | None = Field(default=None, ge=0, description="Crown diameter in metres")


class UpdateSpeciesRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=128)
    color: str | None = Field(default=None, pattern=_COLOR)
    diameter_of_crown: float | None = Field(default=None, ge=0)


class SpeciesResponse(BaseModel):
    id: int
    name: str
    color: str | None
    diameter_of_crown: float | None


def _to_response(sp: Species) -> SpeciesResponse:
    return SpeciesResponse(
        id=sp.id, name=sp.name, color=sp.color, diameter_of_crown=sp.diameter_of_crown
    )


@router.get("", response_model=list[SpeciesResponse])
async def list_species(svc: SpeciesService = Depends(species_service)) -> list[SpeciesResponse]:
    return [_to_response(sp) for sp in await svc.list_all()]


@router.post("", response_model=SpeciesResponse, status_code=HTTP_201_CREATED)
async def create_species(
    body: CreateSpeciesRequest,
    principal: Principal = Depends(get_principal),
    svc: SpeciesService = Depends(species_service),
) -> SpeciesResponse:
    return _to_response(await svc.create(principal, body.model_dump()))


@router.put("/{species_id}", response_model=SpeciesResponse)
async def update_species(
    species_id: RecordId,
    body: UpdateSpeciesRequest,
    principal: Principal = Depends(get_principal),
    svc: SpeciesService = Depends(species_service),
) -> SpeciesResponse:
    # `name` cannot be cleared; drop explicit nulls for it.
    fields = body.model_dump(exclude_unset=True)
    if fields.get("name", "") is None:
        fields.pop("name")
    return _to_response(await svc.update(principal, species_id, fields))


@router.delete("/{species_id}")
async def delete_species(
    species_id: RecordId,
    principal: Principal = Depends(get_principal),
    svc: SpeciesService = Depends(species_service),
) -> None:
    await svc.delete(principal, species_id)
