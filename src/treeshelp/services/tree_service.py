"""
treeshelp.services.tree_service

Tree inventory service (transaction + persistence owner).

Responsibilities:
- CRUD over trees; the creating principal becomes the tree's author.
- Attach, list, download and delete files of a tree.
- Resolve resource owners for the permission evaluator (TREE and FILE domains).
- Gate every update/delete through `auth.gate.ensure_permitted` before touching data.
"""

from __future__ import annotations

from collections.abc import Hashable
from pathlib import Path
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from treeshelp.auth.gate import ensure_permitted
from treeshelp.auth.models import Principal
from treeshelp.auth.permissions import Domain, Permission
from treeshelp.db.models import FileRecord, Tree
from treeshelp.db.repositories.files import FileRepo
from treeshelp.db.repositories.trees import TreeRepo
from treeshelp.errors import InvalidUpload, ResourceNotFound
from treeshelp.observability.logging import get_logger
from treeshelp.services.species_service import SPECIES
from treeshelp.services.storage import FileStorage
from treeshelp.settings import Settings

log = get_logger(__name__)


class TreeService:
    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings
        self._trees = TreeRepo(session)
        self._files = FileRepo(session)
        self._storage = FileStorage(settings.upload_dir)

    async def owner_of(self, domain: Domain, resource_id: Hashable) -> int:
        # Owner lookup handed to the permission evaluator.
        if domain is Domain.tree:
            owner = await self._trees.author_id_of(int(resource_id))
        elif domain is Domain.file:
            owner = await self._files.author_id_of(int(resource_id))
        else:
            owner = None
        if owner is None:
            raise ResourceNotFound(domain, resource_id)
        return owner

    # --- trees ---------------------------------------------------------------

    async def create(self, principal: Principal, fields: dict[str, Any]) -> Tree:
        await self._check_species(fields.get("species_id"))
        tree = await self._trees.create(author_id=principal.id, fields=fields)
        await self._session.commit()
        log.info("tree_created", tree_id=tree.id, author_id=principal.id)
        return tree

    async def get(self, tree_id: int) -> Tree:
        tree = await self._trees.get(tree_id)
        if tree is None:
            raise ResourceNotFound(Domain.tree, tree_id)
        return tree

    async def update(self, principal: Principal, tree_id: int, fields: dict[str, Any]) -> Tree:
        await ensure_permitted(principal, tree_id, Domain.tree, Permission.edit, self.owner_of)
        tree = await self.get(tree_id)
        await self._check_species(fields.get("species_id"))
        await self._trees.update(tree, fields)
        await self._session.commit()
        log.info("tree_updated", tree_id=tree_id, actor_id=principal.id)
        return tree

    async def delete(self, principal: Principal, tree_id: int) -> None:
        await ensure_permitted(principal, tree_id, Domain.tree, Permission.delete, self.owner_of)
        tree = await self.get(tree_id)
        files = await self._files.list_for_tree(tree_id)
        for rec in files:
            await self._files.delete(rec)
        await self._trees.delete(tree)
        await self._session.commit()
        # Remove blobs only after the rows are gone for good.
        for rec in files:
            self._storage.delete(rec.storage_key)
        log.info("tree_deleted", tree_id=tree_id, actor_id=principal.id, files=len(files))

    async def list_all(self, *, page: int, size: int) -> list[Tree]:
        return await self._trees.list_all(page=page, size=size)

    async def list_by_author(self, author_id: int, *, page: int, size: int) -> list[Tree]:
        return await self._trees.list_by_author(author_id, page=page, size=size)

    # --- files ---------------------------------------------------------------

    async def attach_file(
        self,
        principal: Principal,
        tree_id: int,
        *,
        filename: str,
        content_type: str | None,
        data: bytes,
    ) -> FileRecord:
        await ensure_permitted(principal, tree_id, Domain.tree, Permission.edit, self.owner_of)
        await self.get(tree_id)
        if not data:
            raise InvalidUpload("empty file")
        if len(data) > self._settings.max_upload_bytes:
            raise InvalidUpload("file too large", too_large=True)

        key = self._storage.save(data)
        try:
            rec = await self._files.create(
                tree_id=tree_id,
                author_id=principal.id,
                filename=Path(filename).name or key,
                content_type=content_type or "application/octet-stream",
                size=len(data),
                storage_key=key,
            )
            await self._session.commit()
        except Exception:
            self._storage.delete(key)
            raise
        log.info("file_attached", tree_id=tree_id, file_id=rec.id, size=rec.size)
        return rec

    async def list_files(self, tree_id: int) -> list[FileRecord]:
        await self.get(tree_id)
        return await self._files.list_for_tree(tree_id)

    async def get_file(self, file_id: int) -> tuple[FileRecord, Path]:
        rec = await self._files.get(file_id)
        if rec is None:
            raise ResourceNotFound(Domain.file, file_id)
        path = self._storage.path_for(rec.storage_key)
        if not path.exists():
            raise ResourceNotFound(Domain.file, file_id)
        return rec, path

    async def delete_file(self, principal: Principal, file_id: int) -> None:
        await ensure_permitted(principal, file_id, Domain.file, Permission.delete, self.owner_of)
        rec = await self._files.get(file_id)
        if rec is None:
            raise ResourceNotFound(Domain.file, file_id)
        await self._files.delete(rec)
        await self._session.commit()
        self._storage.delete(rec.storage_key)
        log.info("file_deleted", file_id=file_id, actor_id=principal.id)

    async def _check_species(self, species_id: int | None) -> None:
        if species_id is not None and not await self._trees.species_exists(species_id):
            raise ResourceNotFound(SPECIES, species_id)


# --- Module Notes -----------------------------------------------------------
# Authorization always runs before the first read of the row being mutated, so an
# unknown id surfaces as ResourceNotFound from the owner lookup (or from `get` for
# privileged callers, who skip the lookup).
