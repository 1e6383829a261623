"""
treeshelp.db.repositories.users

Repository for `User` records and their role assignments.

Responsibilities:
- Create and fetch users (by id or email).
- Read and replace the set of role ids assigned to a user.
"""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from treeshelp.db.models import Role, User, UserRole


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        email: str,
        password_hash: str,
        first_name: str | None = None,
        last_name: str | None = None,
        phone: str | None = None,
    ) -> User:
        user = User(
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            enabled=True,
        )
        self._session.add(user)
        await self._session.flush()
        return user

    async def get(self, user_id: int) -> User | None:
        return await self._session.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == email)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def role_names(self, user_id: int) -> list[str]:
        stmt = (
            select(Role.name)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == user_id)
            .order_by(Role.name)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def set_roles(self, user_id: int, role_ids: Iterable[int]) -> None:
        # Replace the whole assignment; callers validate role ids beforehand.
        await self._session.execute(delete(UserRole).where(UserRole.user_id == user_id))
        for role_id in set(role_ids):
            self._session.add(UserRole(user_id=user_id, role_id=role_id))
        await self._session.flush()


# --- Module Notes -----------------------------------------------------------
# Role assignment is the only mutation of the identity store besides registration.
