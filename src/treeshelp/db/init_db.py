"""
treeshelp.db.init_db

DB initialization helpers (dev/test convenience).

Responsibilities:
- Create tables for local development and tests.
- Seed the well-known roles once the schema exists.
- Create the optional bootstrap superuser in dev/test.
"""

from __future__ import annotations

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from treeshelp.auth.models import Roles
from treeshelp.auth.passwords import PasswordHasher
from treeshelp.db import models  # noqa: F401  # register models on Base.metadata
from treeshelp.db.base import Base
from treeshelp.db.models import Role
from treeshelp.db.repositories.roles import RoleRepo
from treeshelp.db.repositories.users import UserRepo
from treeshelp.observability.logging import get_logger
from treeshelp.settings import Settings

log = get_logger(__name__)


async def init_db(engine: AsyncEngine) -> None:
    """
    Dev/test bootstrap: create tables if they don't exist.
    Production should rely on Alembic migrations.
    """

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed(session_factory: async_sessionmaker[AsyncSession], settings: Settings) -> None:
    async with session_factory() as session:
        conn = await session.connection()
        migrated = await conn.run_sync(
            lambda sync_conn: inspect(sync_conn).has_table(Role.__tablename__)
        )
        if not migrated:
            log.warning("seed_skipped", reason="schema not migrated")
            return

        roles = RoleRepo(session)
        for name in Roles:
            await roles.get_or_create(name)

        if settings.env in ("dev", "test"):
            await _bootstrap_superuser(session, settings)

        await session.commit()


async def _bootstrap_superuser(session: AsyncSession, settings: Settings) -> None:
    email = settings.bootstrap_superuser_email
    password = settings.bootstrap_superuser_password
    if not (email and password):
        return

    # Stored the same way registration stores emails, so login finds it.
    email = email.strip().lower()
    users = UserRepo(session)
    if await users.get_by_email(email) is not None:
        return
    hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    user = await users.create(email=email, password_hash=hasher.hash(password))
    su = await RoleRepo(session).get_or_create(Roles.superuser)
    await users.set_roles(user.id, [su.id])
    log.info("bootstrap_superuser_created", user_id=user.id)


# --- Module Notes -----------------------------------------------------------
# Role seeding is idempotent, so it also runs against migrated prod databases.
# Prod never gets a bootstrap superuser; assign SUPERUSER through a migration or the DB.
