"""
treeshelp.auth.deps

FastAPI dependency functions for authentication.

Responsibilities:
- Convert a bearer access token into a typed `Principal`.
- Reject missing, invalid, expired or revoked tokens with 401.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.status import HTTP_401_UNAUTHORIZED

from treeshelp.api.deps import auth_service
from treeshelp.auth.models import Principal
from treeshelp.errors import Unauthenticated
from treeshelp.services.auth_service import AuthService

_bearer = HTTPBearer(auto_error=False)


async def get_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    auth: AuthService = Depends(auth_service),
) -> Principal:
    # Authn: require a bearer token.
    if creds is None or not creds.credentials:
        raise HTTPException(
            status_code=HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        # Authn: signature, registered claims, token type and revocation.
        return await auth.principal_from_token(creds.credentials)
    except Unauthenticated as e:
        raise HTTPException(
            status_code=HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


# --- Module Notes -----------------------------------------------------------
# Authorization is not done here: mutating services call `auth.gate` explicitly.
