"""
treeshelp.db.repositories.trees

Repository for `Tree` records.

Responsibilities:
- Create, fetch, update and delete trees.
- Page through all trees or the trees of one author.
- Resolve the owner (author) id of a tree for the permission evaluator.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from treeshelp.db.models import Species, Tree


class TreeRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, author_id: int, fields: dict[str, Any]) -> Tree:
        tree = Tree(author_id=author_id, **fields)
        self._session.add(tree)
        await self._session.flush()
        return tree

    async def get(self, tree_id: int) -> Tree | None:
        return await self._session.get(Tree, tree_id)

    async def author_id_of(self, tree_id: int) -> int | None:
        stmt = select(Tree.author_id).where(Tree.id == tree_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def update(self, tree: Tree, fields: dict[str, Any]) -> Tree:
        for key, value in fields.items():
            setattr(tree, key, value)
        await self._session.flush()
        return tree

    async def delete(self, tree: Tree) -> None:
        await self._session.delete(tree)
        await self._session.flush()

    async def clear_species(self, species_id: int) -> None:
        stmt = update(Tree).where(Tree.species_id == species_id).values(species_id=None)
        await self._session.execute(stmt)

    async def list_all(self, *, page: int, size: int) -> list[Tree]:
        stmt = select(Tree).order_by(Tree.id).offset((page - 1) * size).limit(size)
        return list((await self._session.execute(stmt)).scalars().all())

    async def list_by_author(self, author_id: int, *, page: int, size: int) -> list[Tree]:
        stmt = (
            select(Tree)
            .where(Tree.author_id == author_id)
            .order_by(Tree.id)
            .offset((page - 1) * size)
            .limit(size)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def species_exists(self, species_id: int) -> bool:
        return await self._session.get(Species, species_id) is not None


# --- Module Notes -----------------------------------------------------------
# Pages are 1-based; callers validate page/size bounds before reaching the repository.
