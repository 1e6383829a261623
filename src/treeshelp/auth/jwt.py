"""
treeshelp.auth.jwt

JWT issuing and validation helpers.

Responsibilities:
- Issue access and refresh tokens carrying a unique `jti` (tracked in the token store).
- Decode and validate JWTs with strict claim requirements (iss/aud/exp/iat/sub/jti/typ).
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError

ACCESS = "access"
REFRESH = "refresh"


@dataclass(frozen=True, slots=True)
class JwtConfig:
    # Algorithm/issuer/audience are enforced during decoding.
    alg: str
    issuer: str
    audience: str
    secret: str


@dataclass(frozen=True, slots=True)
class IssuedToken:
    token: str
    jti: str
    expires_at: datetime


class JwtValidationError(Exception):
    pass


def issue_token(
    *,
    cfg: JwtConfig,
    subject: str,
    roles: list[str],
    token_type: str = ACCESS,
    ttl: timedelta = timedelta(hours=1),
) -> IssuedToken:
    now = datetime.now(tz=UTC)
    expires_at = now + ttl
    jti = uuid.uuid4().hex
    payload: dict[str, Any] = {
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "sub": subject,
        "roles": roles,
        "typ": token_type,
        "jti": jti,
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    return IssuedToken(
        token=jwt.encode(payload, cfg.secret, algorithm=cfg.alg),
        jti=jti,
        expires_at=expires_at,
    )


def decode_and_validate(
    *, cfg: JwtConfig, token: str, expected_type: str = ACCESS
) -> dict[str, Any]:
    try:
        payload = jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            issuer=cfg.issuer,
            audience=cfg.audience,
            options={
                "require": ["exp", "iat", "iss", "aud", "sub", "jti"],
            },
        )
    except InvalidTokenError as e:
        raise JwtValidationError(str(e)) from e

    # A refresh token must never be accepted as a bearer credential and vice versa.
    if payload.get("typ") != expected_type:
        raise JwtValidationError(f"expected {expected_type} token")
    return payload


# --- Module Notes -----------------------------------------------------------
# Token issuing is used by `services.auth_service`; validation by `auth.deps` and refresh.
