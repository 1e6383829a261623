"""
treeshelp.services.auth_service

Authentication service: users, roles and tokens.

Responsibilities:
- Register users (role USER) and verify credentials on login.
- Issue access/refresh token pairs and record them in the token store.
- Rotate refresh tokens, revoke tokens on logout.
- Build a `Principal` from a bearer access token (signature, claims, revocation).
- Replace a user's role set (SUPERUSER only).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from treeshelp.auth.gate import ensure_any_role
from treeshelp.auth.jwt import (
    ACCESS,
    REFRESH,
    JwtConfig,
    JwtValidationError,
    decode_and_validate,
    issue_token,
)
from treeshelp.auth.models import Principal, Roles
from treeshelp.auth.passwords import PasswordHasher
from treeshelp.db.models import TokenKind, User
from treeshelp.db.repositories.roles import RoleRepo
from treeshelp.db.repositories.tokens import TokenRepo
from treeshelp.db.repositories.users import UserRepo
from treeshelp.errors import (
    Conflict,
    InvalidCredentials,
    ResourceNotFound,
    TokenRevoked,
    Unauthenticated,
)
from treeshelp.observability.logging import get_logger
from treeshelp.settings import Settings

log = get_logger(__name__)

USER_RESOURCE = "USER"


def jwt_config(settings: Settings) -> JwtConfig:
    return JwtConfig(
        alg=settings.jwt_alg,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        secret=settings.jwt_secret,
    )


@dataclass(frozen=True, slots=True)
class TokenPair:
    access_token: str
    refresh_token: str


class AuthService:
    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings
        self._cfg = jwt_config(settings)
        self._hasher = PasswordHasher(rounds=settings.bcrypt_rounds)

        self._users = UserRepo(session)
        self._roles = RoleRepo(session)
        self._tokens = TokenRepo(session)

    async def register(
        self,
        *,
        email: str,
        password: str,
        first_name: str | None = None,
        last_name: str | None = None,
        phone: str | None = None,
    ) -> User:
        email = email.strip().lower()
        if await self._users.get_by_email(email) is not None:
            raise Conflict("email already registered")
        user = await self._users.create(
            email=email,
            password_hash=self._hasher.hash(password),
            first_name=first_name,
            last_name=last_name,
            phone=phone,
        )
        role = await self._roles.get_or_create(Roles.user)
        await self._users.set_roles(user.id, [role.id])
        await self._session.commit()
        log.info("user_registered", user_id=user.id)
        return user

    async def login(self, *, email: str, password: str) -> TokenPair:
        user = await self._users.get_by_email(email.strip().lower())
        if user is None or not user.enabled:
            raise InvalidCredentials()
        if not self._hasher.verify(password, user.password_hash):
            raise InvalidCredentials()
        pair = await self._issue_pair(user.id)
        await self._session.commit()
        log.info("user_logged_in", user_id=user.id)
        return pair

    async def refresh(self, *, refresh_token: str) -> TokenPair:
        try:
            payload = decode_and_validate(
                cfg=self._cfg, token=refresh_token, expected_type=REFRESH
            )
        except JwtValidationError as e:
            raise Unauthenticated(f"Invalid token: {e}") from e

        jti = str(payload["jti"])
        if await self._tokens.is_revoked(jti):
            raise TokenRevoked()
        user = await self._users.get(_subject_id(payload))
        if user is None or not user.enabled:
            raise Unauthenticated("user disabled")

        # Rotation: a refresh token is single-use.
        await self._tokens.revoke(jti)
        pair = await self._issue_pair(user.id)
        await self._session.commit()
        return pair

    async def logout(self, principal: Principal) -> None:
        await self._tokens.revoke_all_for_user(principal.id)
        await self._session.commit()
        log.info("token_revoked", user_id=principal.id, scope="all")

    async def principal_from_token(self, token: str) -> Principal:
        try:
            payload = decode_and_validate(cfg=self._cfg, token=token, expected_type=ACCESS)
        except JwtValidationError as e:
            raise Unauthenticated(f"Invalid token: {e}") from e

        roles_raw = payload.get("roles", [])
        if not isinstance(roles_raw, list):
            raise Unauthenticated("Invalid token roles")
        user_id = _subject_id(payload)
        jti = str(payload["jti"])
        if await self._tokens.is_revoked(jti):
            raise TokenRevoked()
        return Principal(id=user_id, roles=frozenset(str(r) for r in roles_raw))

    async def get_user(self, user_id: int) -> tuple[User, list[str]]:
        user = await self._users.get(user_id)
        if user is None:
            raise ResourceNotFound(USER_RESOURCE, user_id)
        return user, await self._users.role_names(user_id)

    async def set_roles(self, principal: Principal, user_id: int, role_names: list[str]) -> list[str]:
        ensure_any_role(principal, Roles.superuser)
        await self.get_user(user_id)
        wanted = set(role_names)
        roles = await self._roles.get_by_names(wanted)
        unknown = wanted - {r.name for r in roles}
        if unknown:
            raise ResourceNotFound("ROLE", ", ".join(sorted(unknown)))
        await self._users.set_roles(user_id, [r.id for r in roles])
        # Existing tokens carry the old role set; force a fresh login.
        await self._tokens.revoke_all_for_user(user_id)
        await self._session.commit()
        log.info("roles_assigned", user_id=user_id, roles=sorted(wanted), actor_id=principal.id)
        return sorted(wanted)

    async def _issue_pair(self, user_id: int) -> TokenPair:
        roles = await self._users.role_names(user_id)
        access = issue_token(
            cfg=self._cfg,
            subject=str(user_id),
            roles=roles,
            token_type=ACCESS,
            ttl=timedelta(minutes=self._settings.access_token_ttl_minutes),
        )
        refresh = issue_token(
            cfg=self._cfg,
            subject=str(user_id),
            roles=roles,
            token_type=REFRESH,
            ttl=timedelta(days=self._settings.refresh_token_ttl_days),
        )
        # Store naive UTC like the rest of the schema.
        await self._tokens.add(
            jti=access.jti,
            user_id=user_id,
            kind=TokenKind.access,
            expires_at=access.expires_at.replace(tzinfo=None),
        )
        await self._tokens.add(
            jti=refresh.jti,
            user_id=user_id,
            kind=TokenKind.refresh,
            expires_at=refresh.expires_at.replace(tzinfo=None),
        )
        return TokenPair(access_token=access.token, refresh_token=refresh.token)


def _subject_id(payload: dict) -> int:
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError) as e:
        raise Unauthenticated("Invalid token subject") from e


# --- Module Notes -----------------------------------------------------------
# Role changes revoke outstanding tokens because the access token is the source of
# the principal's role set for the lifetime of a request.
