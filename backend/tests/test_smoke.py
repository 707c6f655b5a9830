"""
Smoke tests — verify that Django boots, URL routing resolves, the
OpenAPI schema builds and the core domain modules are importable.

These tests need a DB only where marked; they do NOT require real data.
"""

from __future__ import annotations

import pytest
from django.urls import resolve, reverse


# ════════════════════════════════════════════════════════════════════
#  URL Routing Smoke Tests
# ════════════════════════════════════════════════════════════════════

class TestURLRouting:
    """Ensure all top-level app URL namespaces resolve without 404."""

    EXPECTED_URLS = [
        # (url_name, expected_path)
        ("core:backend-status",        "/api/core/status/"),
        ("core:dashboard-stats",       "/api/core/dashboard/"),
        ("core:global-search",         "/api/core/search/"),
        ("core:system-constants",      "/api/core/constants/"),
        ("accounts:login",             "/api/accounts/auth/login/"),
        ("accounts:me",                "/api/accounts/me/"),
        ("accounts:actor-list",        "/api/accounts/actors/"),
        ("accounts:role-list",         "/api/accounts/roles/"),
        ("registry:person-list",       "/api/registry/persons/"),
        ("registry:organization-list", "/api/registry/organizations/"),
        ("registry:incident-list",     "/api/registry/incidents/"),
        ("registry:manufacturer-list", "/api/registry/manufacturers/"),
        ("registry:ship-list",         "/api/registry/ships/"),
        ("hearings:hearing-list",      "/api/hearings/hearings/"),
        ("hearings:statement-list",    "/api/hearings/statements/"),
    ]

    @pytest.mark.parametrize("url_name,expected_path", EXPECTED_URLS)
    def test_url_reverses(self, url_name: str, expected_path: str):
        assert reverse(url_name) == expected_path

    @pytest.mark.parametrize("url_name,expected_path", EXPECTED_URLS)
    def test_path_resolves_to_view(self, url_name: str, expected_path: str):
        match = resolve(expected_path)
        assert match.func is not None

    def test_assessment_routes(self):
        url = reverse(
            "assessments:assess", kwargs={"target_type": "incident", "pk": 3},
        )
        assert url == "/api/assessments/incident/3/assess/"


# ════════════════════════════════════════════════════════════════════
#  OpenAPI Schema
# ════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
def test_schema_builds(api_client):
    resp = api_client.get(reverse("schema"))
    assert resp.status_code == 200


# ════════════════════════════════════════════════════════════════════
#  Core Domain Module Import Tests
# ════════════════════════════════════════════════════════════════════

class TestCoreDomainImports:
    """Verify that shared domain utility modules are importable."""

    def test_exception_hierarchy(self):
        from core.domain.exceptions import (
            BackendUnavailable,
            Conflict,
            DomainError,
            InvalidTransition,
            InvariantViolation,
            NotFound,
            PermissionDenied,
            ValidationFailed,
        )
        assert issubclass(InvalidTransition, Conflict)
        for exc in (Conflict, PermissionDenied, NotFound, ValidationFailed,
                    InvariantViolation, BackendUnavailable):
            assert issubclass(exc, DomainError)

    def test_import_transactions(self):
        from core.domain.transactions import (
            atomic_transition,
            lock_for_update,
        )
        assert callable(atomic_transition)
        assert callable(lock_for_update)
