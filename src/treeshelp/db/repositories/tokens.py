"""
treeshelp.db.repositories.tokens

Repository for issued `Token` records (token store).

Responsibilities:
- Record every issued access/refresh token by its `jti`.
- Answer revocation lookups and revoke single tokens or all tokens of a user.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from treeshelp.db.models import Token, TokenKind


class TokenRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(
        self, *, jti: str, user_id: int, kind: TokenKind, expires_at: datetime
    ) -> Token:
        token = Token(jti=jti, user_id=user_id, kind=kind, expires_at=expires_at, revoked=False)
        self._session.add(token)
        await self._session.flush()
        return token

    async def get_by_jti(self, jti: str) -> Token | None:
        stmt = select(Token).where(Token.jti == jti)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def is_revoked(self, jti: str) -> bool:
        # Unknown jtis count as revoked: only tokens we issued are honoured.
        token = await self.get_by_jti(jti)
        return token is None or token.revoked

    async def revoke(self, jti: str) -> None:
        await self._session.execute(update(Token).where(Token.jti == jti).values(revoked=True))

    async def revoke_all_for_user(self, user_id: int) -> None:
        stmt = (
            update(Token)
            .where(Token.user_id == user_id, Token.revoked.is_(False))
            .values(revoked=True)
        )
        await self._session.execute(stmt)


# --- Module Notes -----------------------------------------------------------
# Expired rows are harmless (the JWT `exp` claim is checked first); pruning is an ops task.
