"""
treeshelp.errors

Domain exception hierarchy shared by services, the authorization gate and the API layer.

Responsibilities:
- Name the failure kinds services can raise (not found, denied, unauthenticated, conflict).
- Carry enough context for the API layer to build a user-visible error.
"""

from __future__ import annotations

from typing import Any


class TreesError(Exception):
    """Base class for all domain errors raised by this service."""


class ResourceNotFound(TreesError):
    def __init__(self, domain: Any, resource_id: Any) -> None:
        self.domain = domain
        self.resource_id = resource_id
        super().__init__(f"{domain} {resource_id} not found")


class AccessDenied(TreesError):
    def __init__(self, domain: Any, resource_id: Any, permission: Any) -> None:
        self.domain = domain
        self.resource_id = resource_id
        self.permission = permission
        super().__init__(f"{permission} on {domain} {resource_id} denied")


class RoleRequired(TreesError):
    def __init__(self, roles: frozenset[str]) -> None:
        self.roles = roles
        super().__init__(f"one of roles {sorted(roles)} required")


class Unauthenticated(TreesError):
    pass


class InvalidCredentials(Unauthenticated):
    def __init__(self) -> None:
        super().__init__("invalid email or password")


class TokenRevoked(Unauthenticated):
    def __init__(self) -> None:
        super().__init__("token revoked")


class Conflict(TreesError):
    pass


class InvalidUpload(TreesError):
    def __init__(self, message: str, *, too_large: bool = False) -> None:
        self.too_large = too_large
        super().__init__(message)


# --- Module Notes -----------------------------------------------------------
# HTTP status mapping for these kinds lives in `treeshelp.api.errors`.
