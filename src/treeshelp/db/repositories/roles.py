"""
treeshelp.db.repositories.roles

Repository for `Role` records.

Responsibilities:
- Look up roles by name and create the well-known ones on demand.
"""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from treeshelp.db.models import Role


class RoleRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_name(self, name: str) -> Role | None:
        stmt = select(Role).where(Role.name == name)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def get_by_names(self, names: Iterable[str]) -> list[Role]:
        stmt = select(Role).where(Role.name.in_(list(names)))
        return list((await self._session.execute(stmt)).scalars().all())

    async def get_or_create(self, name: str) -> Role:
        existing = await self.get_by_name(name)
        if existing is not None:
            return existing
        role = Role(name=name)
        self._session.add(role)
        await self._session.flush()
        return role