"""
treeshelp.api.errors

Exception handlers mapping domain errors to HTTP responses.

Responsibilities:
- 404 for ResourceNotFound, 403 for AccessDenied/RoleRequired, 401 for Unauthenticated.
- 409 for Conflict, 400/413 for InvalidUpload.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_413_CONTENT_TOO_LARGE,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from treeshelp.errors import (
    AccessDenied,
    Conflict,
    InvalidUpload,
    ResourceNotFound,
    RoleRequired,
    TreesError,
    Unauthenticated,
)


def _status_for(exc: TreesError) -> int:
    if isinstance(exc, ResourceNotFound):
        return HTTP_404_NOT_FOUND
    if isinstance(exc, (AccessDenied, RoleRequired)):
        return HTTP_403_FORBIDDEN
    if isinstance(exc, Unauthenticated):
        return HTTP_401_UNAUTHORIZED
    if isinstance(exc, Conflict):
        return HTTP_409_CONFLICT
    if isinstance(exc, InvalidUpload):
        return HTTP_413_CONTENT_TOO_LARGE if exc.too_large else HTTP_400_BAD_REQUEST
    return HTTP_500_INTERNAL_SERVER_ERROR


async def _trees_error_handler(_: Request, exc: TreesError) -> JSONResponse:
    status = _status_for(exc)
    headers = {"WWW-Authenticate": "Bearer"} if status == HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=status, content={"detail": str(exc)}, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    # One handler for the whole hierarchy; Starlette resolves subclasses via the MRO.
    app.add_exception_handler(TreesError, _trees_error_handler)


# --- Module Notes -----------------------------------------------------------
# Services never build HTTP errors themselves; this is the single translation point.
