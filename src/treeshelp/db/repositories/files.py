"""
treeshelp.db.repositories.files

Repository for `FileRecord` rows (metadata of files attached to trees).

Responsibilities:
- Create, fetch and delete file records; list the files of a tree.
- Resolve the author id of a file for the permission evaluator.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from treeshelp.db.models import FileRecord


class FileRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        tree_id: int,
        author_id: int,
        filename: str,
        content_type: str,
        size: int,
        storage_key: str,
    ) -> FileRecord:
        rec = FileRecord(
            tree_id=tree_id,
            author_id=author_id,
            filename=filename,
            content_type=content_type,
            size=size,
            storage_key=storage_key,
        )
        self._session.add(rec)
        await self._session.flush()
        return rec

    async def get(self, file_id: int) -> FileRecord | None:
        return await self._session.get(FileRecord, file_id)

    async def author_id_of(self, file_id: int) -> int | None:
        stmt = select(FileRecord.author_id).where(FileRecord.id == file_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list_for_tree(self, tree_id: int) -> list[FileRecord]:
        stmt = select(FileRecord).where(FileRecord.tree_id == tree_id).order_by(FileRecord.id)
        return list((await self._session.execute(stmt)).scalars().all())

    async def delete(self, rec: FileRecord) -> None:
        await self._session.delete(rec)
        await self._session.flush()
