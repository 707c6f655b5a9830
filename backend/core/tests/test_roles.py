"""
Role registry — golden capability table.

Every (role, capability) pair is enumerated so that an accidental grant
or revocation in ``core.permissions_constants`` fails loudly.
"""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from core.domain.roles import (
    ROLE_REGISTRY,
    build_registry,
    capabilities_for,
    get_role,
    has_permission,
    list_roles,
)
from core.permissions_constants import Capability as C
from core.permissions_constants import RoleId

GOLDEN = {
    RoleId.SENTINEL: set(C.ALL),
    RoleId.HIGH_JUDGE: {
        C.CAN_ASSESS_DANGER_LEVEL, C.CAN_OVERRIDE_ASSESSMENTS, C.CAN_MANAGE_STATUS,
        C.CAN_VIEW_SENSITIVE_DATA, C.CAN_CREATE_ORGANIZATIONS, C.CAN_SEARCH_PERSONS,
        C.CAN_VIEW_PERSON_DETAILS, C.CAN_MANAGE_JOURNALS, C.CAN_REPORT_INCIDENTS,
        C.CAN_MANAGE_SHIPS, C.CAN_MANAGE_MANUFACTURERS,
    },
    RoleId.JUDGE: {
        C.CAN_ASSESS_DANGER_LEVEL, C.CAN_MANAGE_STATUS, C.CAN_CREATE_ORGANIZATIONS,
        C.CAN_SEARCH_PERSONS, C.CAN_VIEW_PERSON_DETAILS, C.CAN_MANAGE_JOURNALS,
        C.CAN_REPORT_INCIDENTS, C.CAN_MANAGE_SHIPS,
    },
    RoleId.LEGAL_AUTHORITY: {
        C.CAN_VIEW_SENSITIVE_DATA, C.CAN_SEARCH_PERSONS, C.CAN_VIEW_PERSON_DETAILS,
        C.CAN_REPORT_INCIDENTS,
    },
    RoleId.BOUNTY_HUNTER: {
        C.CAN_SEARCH_PERSONS, C.CAN_VIEW_PERSON_DETAILS, C.CAN_REPORT_INCIDENTS,
    },
    RoleId.CITIZEN: {C.CAN_REPORT_INCIDENTS},
}

PAIRS = [
    (role, capability, capability in GOLDEN[role])
    for role in RoleId.values
    for capability in C.ALL
]


def _actor(role):
    return SimpleNamespace(role=role)


class TestHasPermissionGoldenTable:

    @pytest.mark.parametrize("role, capability, expected", PAIRS)
    def test_matches_table(self, role, capability, expected):
        assert has_permission(_actor(role), capability) is expected

    def test_every_role_is_registered(self):
        assert set(ROLE_REGISTRY) == set(RoleId.values)

    def test_unknown_capability_is_false(self):
        assert has_permission(_actor(RoleId.SENTINEL), "can_fly") is False

    def test_unknown_role_is_false(self):
        assert has_permission(_actor("admiral"), C.CAN_REPORT_INCIDENTS) is False

    def test_missing_actor_or_role_is_false(self):
        assert has_permission(None, C.CAN_REPORT_INCIDENTS) is False
        assert has_permission(SimpleNamespace(), C.CAN_REPORT_INCIDENTS) is False


class TestRegistryImmutability:

    def test_registry_cannot_gain_roles(self):
        with pytest.raises(TypeError):
            ROLE_REGISTRY["admiral"] = get_role(RoleId.SENTINEL)

    def test_role_definitions_are_frozen(self):
        role = get_role(RoleId.CITIZEN)
        with pytest.raises(AttributeError):
            role.permissions = frozenset(C.ALL)
        assert isinstance(role.permissions, frozenset)

    def test_alternative_registry_is_injected_not_global(self):
        table = {("citizen", "Citizen", "", 0): (C.CAN_DELETE,)}
        registry = build_registry(table)

        actor = _actor(RoleId.CITIZEN)
        assert has_permission(actor, C.CAN_DELETE, registry) is True
        assert has_permission(actor, C.CAN_DELETE) is False


class TestRoleHelpers:

    def test_list_roles_highest_first(self):
        levels = [role.hierarchy_level for role in list_roles()]
        assert levels == sorted(levels, reverse=True)
        assert list_roles()[0].id == RoleId.SENTINEL

    def test_capabilities_for_is_sorted(self):
        caps = capabilities_for(_actor(RoleId.BOUNTY_HUNTER))
        assert caps == sorted(GOLDEN[RoleId.BOUNTY_HUNTER])

    def test_capabilities_for_unknown_role(self):
        assert capabilities_for(_actor(None)) == []
