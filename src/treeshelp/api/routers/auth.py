"""
treeshelp.api.routers.auth

Authentication service endpoints.

Responsibilities:
- Register users and log them in (access + refresh token pair).
- Rotate refresh tokens and revoke tokens on logout.
- Expose the current user and let superusers replace a user's roles.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import AfterValidator, BaseModel, Field
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from treeshelp.api.deps import RecordId, auth_service
from treeshelp.auth.deps import get_principal
from treeshelp.auth.models import Principal
from treeshelp.db.models import User
from treeshelp.services.auth_service import AuthService, TokenPair

router = APIRouter(prefix="/api/auth", tags=["auth"])


MAX_PASSWORD_BYTES = 72


def _fits_bcrypt(password: str) -> str:
    # bcrypt rejects input longer than 72 bytes; the limit is on UTF-8 bytes, not characters.
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes in UTF-8")
    return password


Password = Annotated[str, AfterValidator(_fits_bcrypt)]


class RegisterRequest(BaseModel):
    email: str = Field(min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    password: Password = Field(min_length=8, max_length=MAX_PASSWORD_BYTES)
    first_name: str | None = Field(default=None, max_length=128)
    last_name: str | None = Field(default=None, max_length=128)
    phone: str | None = Field(default=None, max_length=32)


class LoginRequest(BaseModel):
    email: str = Field(min_length=1, max_length=320)
    password: Password = Field(min_length=1, max_length=MAX_PASSWORD_BYTES)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    id: int
    email: str
    first_name: str | None
    last_name: str | None
    phone: str | None
    enabled: bool
    created_at: datetime
    roles: list[str]


class RolesRequest(BaseModel):
    roles: list[str] = Field(min_length=1, description="Role names, e.g. ['MODERATOR']")


class RolesResponse(BaseModel):
    user_id: int
    roles: list[str]


def _tokens(pair: TokenPair) -> TokenResponse:
    return TokenResponse(access_token=pair.access_token, refresh_token=pair.refresh_token)


def _user_response(user: User, roles: list[str]) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        phone=user.phone,
        enabled=user.enabled,
        created_at=user.created_at,
        roles=roles,
    )


@router.post("/register", response_model=UserResponse, status_code=HTTP_201_CREATED)
async def register(body: RegisterRequest, auth: AuthService = Depends(auth_service)) -> UserResponse:
    user = await auth.register(
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
        phone=body.phone,
    )
    return _user_response(*await auth.get_user(user.id))


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, auth: AuthService = Depends(auth_service)) -> TokenResponse:
    return _tokens(await auth.login(email=body.email, password=body.password))


@router.post("/refresh", response_model=TokenResponse)
async def refresh(body: RefreshRequest, auth: AuthService = Depends(auth_service)) -> TokenResponse:
    return _tokens(await auth.refresh(refresh_token=body.refresh_token))


@router.post("/logout", status_code=HTTP_204_NO_CONTENT)
async def logout(
    principal: Principal = Depends(get_principal),
    auth: AuthService = Depends(auth_service),
) -> None:
    await auth.logout(principal)


@router.get("/me", response_model=UserResponse)
async def me(
    principal: Principal = Depends(get_principal),
    auth: AuthService = Depends(auth_service),
) -> UserResponse:
    return _user_response(*await auth.get_user(principal.id))


@router.put("/users/{user_id}/roles", response_model=RolesResponse)
async def set_user_roles(
    user_id: RecordId,
    body: RolesRequest,
    principal: Principal = Depends(get_principal),
    auth: AuthService = Depends(auth_service),
) -> RolesResponse:
    roles = await auth.set_roles(principal, user_id, body.roles)
    return RolesResponse(user_id=user_id, roles=roles)


# --- Module Notes -----------------------------------------------------------
# Token transport is bearer-only; cookies are not used by this service.
