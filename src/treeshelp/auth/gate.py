"""
treeshelp.auth.gate

Authorization gate called explicitly by mutating handlers before any work is done.

Responsibilities:
- Turn a DENY decision from the evaluator into `AccessDenied`.
- Let `ResourceNotFound` from the owner lookup propagate unchanged.
- Provide a plain role check for resources without an owner (species catalogue, admin ops).
"""

from __future__ import annotations

from collections.abc import Hashable

from treeshelp.auth.models import Principal
from treeshelp.auth.permissions import (
    AsyncOwnerLookup,
    Decision,
    Domain,
    Permission,
    authorize_async,
)
from treeshelp.errors import AccessDenied, RoleRequired
from treeshelp.observability.logging import get_logger

log = get_logger(__name__)


async def ensure_permitted(
    principal: Principal,
    resource_id: Hashable,
    domain: Domain,
    permission: Permission,
    owner_lookup: AsyncOwnerLookup,
) -> None:
    decision = await authorize_async(principal, resource_id, domain, permission, owner_lookup)
    if decision is Decision.deny:
        log.info(
            "access_denied",
            principal_id=principal.id,
            domain=str(domain),
            resource_id=str(resource_id),
            permission=str(permission),
        )
        raise AccessDenied(domain, resource_id, permission)


def ensure_any_role(principal: Principal, *roles: str) -> None:
    if not principal.has_any_role(*roles):
        log.info("role_required", principal_id=principal.id, roles=sorted(roles))
        raise RoleRequired(frozenset(roles))


# --- Module Notes -----------------------------------------------------------
# Read endpoints that are public do not call the gate at all; create endpoints only
# require an authenticated principal (the creator becomes the owner).
