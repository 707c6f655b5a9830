"""
core.domain.roles — Read-only role registry and capability checks.

The registry is built once, at import time, from
``core.permissions_constants.ROLE_PERMISSIONS_MAP`` and exposed as an
immutable mapping of frozen ``RoleDefinition`` records.  Nothing at
runtime can add a role or grant a capability.

``has_permission`` is a pure function of the actor's role id and the
capability codename.  It accepts the registry as a parameter so that
callers (and tests) can evaluate rules against an alternative table
without touching module state::

    from core.domain.roles import has_permission
    from core.permissions_constants import Capability

    if has_permission(actor, Capability.CAN_MANAGE_STATUS):
        ...
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from core.permissions_constants import ROLE_PERMISSIONS_MAP


@dataclass(frozen=True)
class RoleDefinition:
    """One entry of the role table."""

    id: str
    name: str
    description: str
    hierarchy_level: int
    permissions: frozenset[str]

    def grants(self, capability: str) -> bool:
        return capability in self.permissions


RoleRegistry = Mapping[str, RoleDefinition]


def build_registry(
    table: Mapping[tuple[str, str, str, int], Iterable[str]],
) -> RoleRegistry:
    """Freeze a ``(id, name, description, level) -> capabilities`` table."""
    roles = {}
    for (role_id, name, description, level), capabilities in table.items():
        roles[str(role_id)] = RoleDefinition(
            id=str(role_id),
            name=name,
            description=description,
            hierarchy_level=level,
            permissions=frozenset(capabilities),
        )
    return MappingProxyType(roles)


ROLE_REGISTRY: RoleRegistry = build_registry(ROLE_PERMISSIONS_MAP)


def get_role(role_id: str | None, registry: RoleRegistry = ROLE_REGISTRY) -> RoleDefinition | None:
    if role_id is None:
        return None
    return registry.get(str(role_id))


def list_roles(registry: RoleRegistry = ROLE_REGISTRY) -> list[RoleDefinition]:
    """All roles, highest hierarchy level first."""
    return sorted(registry.values(), key=lambda r: -r.hierarchy_level)


def has_permission(actor: Any, capability: str, registry: RoleRegistry = ROLE_REGISTRY) -> bool:
    """
    Return ``True`` iff ``actor``'s role grants ``capability``.

    Never raises: a missing actor, an unknown role id or an unknown
    capability all yield ``False``.
    """
    if actor is None:
        return False
    role = get_role(getattr(actor, "role", None), registry)
    if role is None:
        return False
    return role.grants(capability)


def capabilities_for(actor: Any, registry: RoleRegistry = ROLE_REGISTRY) -> list[str]:
    """Sorted capability codenames held by ``actor``."""
    role = get_role(getattr(actor, "role", None), registry)
    if role is None:
        return []
    return sorted(role.permissions)
