"""
treeshelp.auth.models

Auth domain models.

Responsibilities:
- Define the well-known role names.
- Define the authenticated identity type (`Principal`) injected into endpoints.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Roles(enum.StrEnum):
    # Role names are stored in the `roles` table and embedded in access tokens.
    superuser = "SUPERUSER"
    moderator = "MODERATOR"
    user = "USER"


PRIVILEGED_ROLES: frozenset[str] = frozenset({Roles.superuser, Roles.moderator})


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity, built once per request from a validated access token.
    """

    id: int
    roles: frozenset[str]

    @property
    def is_privileged(self) -> bool:
        return not PRIVILEGED_ROLES.isdisjoint(self.roles)

    def has_any_role(self, *roles: str) -> bool:
        return not frozenset(roles).isdisjoint(self.roles)


# --- Module Notes -----------------------------------------------------------
# Keep this model minimal; it is used across API, services and the permission evaluator.
