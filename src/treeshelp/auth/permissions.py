"""
treeshelp.auth.permissions

Permission evaluator: decides whether a principal may perform an action on a resource.

Responsibilities:
- Define the domain tags and permissions that mutating endpoints ask about.
- Grant everything to privileged roles without touching storage.
- Otherwise grant only to the resource's recorded owner.

The evaluator is pure: the owner lookup is supplied by the caller, nothing is
logged and no decision is cached.
"""

from __future__ import annotations

import enum
from collections.abc import Awaitable, Callable, Hashable

from treeshelp.auth.models import Principal


class Domain(enum.StrEnum):
    tree = "TREE"
    file = "FILE"


class Permission(enum.StrEnum):
    view = "VIEW"
    edit = "EDIT"
    delete = "DELETE"


class Decision(enum.StrEnum):
    allow = "ALLOW"
    deny = "DENY"


# owner_lookup(domain, resource_id) -> owner id; raises ResourceNotFound for unknown ids.
OwnerLookup = Callable[[Domain, Hashable], int]
AsyncOwnerLookup = Callable[[Domain, Hashable], Awaitable[int]]


def _owner_decision(principal: Principal, owner_id: int) -> Decision:
    return Decision.allow if owner_id == principal.id else Decision.deny


def authorize(
    principal: Principal,
    resource_id: Hashable,
    domain: Domain,
    permission: Permission,
    owner_lookup: OwnerLookup,
) -> Decision:
    """
    Decide ALLOW/DENY for `permission` on `resource_id` under `domain`.

    Privileged principals short-circuit to ALLOW and `owner_lookup` is never called.
    `ResourceNotFound` raised by the lookup propagates unchanged.
    """

    if principal.is_privileged:
        return Decision.allow
    return _owner_decision(principal, owner_lookup(domain, resource_id))


async def authorize_async(
    principal: Principal,
    resource_id: Hashable,
    domain: Domain,
    permission: Permission,
    owner_lookup: AsyncOwnerLookup,
) -> Decision:
    """
    Same decision as `authorize`, for lookups backed by the async DB session.
    """

    if principal.is_privileged:
        return Decision.allow
    return _owner_decision(principal, await owner_lookup(domain, resource_id))


# --- Module Notes -----------------------------------------------------------
# `permission` does not influence the outcome today: privileged roles get every
# permission and owners get every permission on their own resources. It is kept in
# the signature so per-permission rules can be added without touching call sites.
