"""
treeshelp.services.species_service

Kind-of-tree catalogue service.

Responsibilities:
- Public reads of the species catalogue.
- Create/update/delete species (MODERATOR or SUPERUSER), rejecting duplicate names.
- Detach a deleted species from the trees that referenced it.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from treeshelp.auth.gate import ensure_any_role
from treeshelp.auth.models import Principal, Roles
from treeshelp.db.models import Species
from treeshelp.db.repositories.species import SpeciesRepo
from treeshelp.db.repositories.trees import TreeRepo
from treeshelp.errors import Conflict, ResourceNotFound
from treeshelp.observability.logging import get_logger

log = get_logger(__name__)

SPECIES = "SPECIES"


class SpeciesService:
    """
    Kind-of-tree catalogue. Entries have no owner, so writes are limited to
    moderators and superusers.
    """

    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._species = SpeciesRepo(session)

    async def list_all(self) -> list[Species]:
        return await self._species.list_all()

    async def get(self, species_id: int) -> Species:
        sp = await self._species.get(species_id)
        if sp is None:
            raise ResourceNotFound(SPECIES, species_id)
        return sp

    async def create(self, principal: Principal, fields: dict[str, Any]) -> Species:
        ensure_any_role(principal, Roles.superuser, Roles.moderator)
        if await self._species.get_by_name(fields["name"]) is not None:
            raise Conflict(f"species {fields['name']!r} already exists")
        sp = await self._species.create(**fields)
        await self._session.commit()
        log.info("species_created", species_id=sp.id, name=sp.name)
        return sp

    async def update(self, principal: Principal, species_id: int, fields: dict[str, Any]) -> Species:
        ensure_any_role(principal, Roles.superuser, Roles.moderator)
        sp = await self.get(species_id)
        name = fields.get("name")
        if name is not None and name != sp.name and await self._species.get_by_name(name):
            raise Conflict(f"species {name!r} already exists")
        await self._species.update(sp, fields)
        await self._session.commit()
        return sp

    async def delete(self, principal: Principal, species_id: int) -> None:
        ensure_any_role(principal, Roles.superuser, Roles.moderator)
        sp = await self.get(species_id)
        # Trees keep existing without a species rather than blocking the delete.
        await TreeRepo(self._session).clear_species(species_id)
        await self._species.delete(sp)
        await self._session.commit()
        log.info("species_deleted", species_id=species_id)
