"""
treeshelp.db.repositories.species

Repository for `Species` records.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from treeshelp.db.models import Species


class SpeciesRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self, *, name: str, color: str | None = None, diameter_of_crown: float | None = None
    ) -> Species:
        sp = Species(name=name, color=color, diameter_of_crown=diameter_of_crown)
        self._session.add(sp)
        await self._session.flush()
        return sp

    async def get(self, species_id: int) -> Species | None:
        return await self._session.get(Species, species_id)

    async def get_by_name(self, name: str) -> Species | None:
        stmt = select(Species).where(Species.name == name)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list_all(self) -> list[Species]:
        stmt = select(Species).order_by(Species.name)
        return list((await self._session.execute(stmt)).scalars().all())

    async def update(self, sp: Species, fields: dict[str, Any]) -> Species:
        for key, value in fields.items():
            setattr(sp, key, value)
        await self._session.flush()
        return sp

    async def delete(self, sp: Species) -> None:
        await self._session.delete(sp)
        await self._session.flush()
