"""
Integration tests for the core endpoints.

Scope in this file:
- GET /api/core/status/
- GET /api/core/constants/
- GET /api/core/dashboard/
- GET /api/core/search/
"""

from __future__ import annotations

import datetime
from unittest import mock

from django.db import DatabaseError, OperationalError
from django.db.backends.utils import CursorWrapper
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from accounts.models import Actor
from hearings.models import Hearing
from registry.models import IncidentEntry, Organization, Person


def _client_for(actor: Actor) -> APIClient:
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {RefreshToken.for_user(actor).access_token}")
    return client


class TestBackendStatus(TestCase):

    def test_connected(self):
        resp = APIClient().get(reverse("core:backend-status"))

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data, {"connected": True, "error": None, "retryable": False})

    def test_unreachable_database_is_reported_not_raised(self):
        with mock.patch(
            "core.services.connection.cursor",
            side_effect=DatabaseError("connection refused"),
        ):
            resp = APIClient().get(reverse("core:backend-status"))

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertFalse(resp.data["connected"])
        self.assertTrue(resp.data["retryable"])
        self.assertIn("connection refused", resp.data["error"])


class TestSystemConstants(TestCase):

    def test_public_and_complete(self):
        resp = APIClient().get(reverse("core:system-constants"))

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        levels = resp.data["danger_levels"]
        self.assertEqual([lvl["value"] for lvl in levels], ["1", "2", "3", "4", "5", "6"])
        self.assertEqual(
            [lvl["colour"] for lvl in levels],
            ["green", "green", "yellow", "yellow", "orange", "red"],
        )
        self.assertEqual(
            {c["value"] for c in resp.data["classifications"]},
            {"harmless", "suspicious", "threat"},
        )
        self.assertEqual(
            {s["value"] for s in resp.data["assessment_statuses"]},
            {"pending", "confirmed", "rejected", "reopened"},
        )
        self.assertIn("pad_ramming", {c["value"] for c in resp.data["crime_types"]})
        self.assertIn("capital_ship", {t["value"] for t in resp.data["ship_types"]})
        self.assertEqual(len(resp.data["ship_statuses"]), 6)
        self.assertEqual(resp.data["role_hierarchy"][0]["id"], "sentinel")
        self.assertEqual(len(resp.data["role_hierarchy"]), 6)
        self.assertEqual(resp.data["password_min_length"], 7)


class TestDashboardAndSearch(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.judge = Actor.objects.create_user(
            username="judge", email="judge@bureau.test", password="abc1234", role="judge",
        )
        cls.citizen = Actor.objects.create_user(
            username="citizen", email="citizen@bureau.test", password="abc1234", role="citizen",
        )
        cls.other_citizen = Actor.objects.create_user(
            username="other", email="other@bureau.test", password="abc1234", role="citizen",
        )
        cls.person = Person.objects.create(name="Rex Varga", handle="rexv")
        Organization.objects.create(name="Black Tide", handle="TIDE")

        def incident(reporter, **extra):
            return IncidentEntry.objects.create(
                person=cls.person,
                person_name=cls.person.name,
                occurred_on=datetime.date(2025, 3, 1),
                description="Ship ambushed near Yela",
                reported_by=reporter,
                reported_by_name=reporter.snapshot_name,
                reported_by_role=reporter.role,
                **extra,
            )

        cls.own_incident = incident(cls.citizen)
        incident(cls.other_citizen, status="confirmed")
        Hearing.objects.create(
            entry=cls.own_incident,
            title="Ambush",
            question="Did Rex fire first?",
            created_by=cls.judge,
            created_by_name="judge",
            created_by_role="judge",
        )

    def test_judge_sees_all_incidents(self):
        resp = _client_for(self.judge).get(reverse("core:dashboard-stats"))

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["total_persons"], 1)
        self.assertEqual(resp.data["total_organizations"], 1)
        self.assertEqual(resp.data["total_incidents"], 2)
        self.assertEqual(resp.data["pending_incidents"], 1)
        self.assertEqual(resp.data["active_hearings"], 1)

    def test_citizen_counts_only_own_reports(self):
        resp = _client_for(self.citizen).get(reverse("core:dashboard-stats"))

        self.assertEqual(resp.data["total_incidents"], 1)
        self.assertEqual(resp.data["pending_incidents"], 1)

    def test_dashboard_requires_authentication(self):
        resp = APIClient().get(reverse("core:dashboard-stats"))

        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_database_outage_is_retryable_503(self):
        client = _client_for(self.judge)

        with mock.patch.object(
            CursorWrapper, "execute", side_effect=OperationalError("db down"),
        ):
            resp = client.get(reverse("core:dashboard-stats"))

        self.assertEqual(resp.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(resp.data["code"], "backend_unavailable")
        self.assertTrue(resp.data["retryable"])

    def test_search_is_case_insensitive_across_categories(self):
        resp = _client_for(self.judge).get(reverse("core:global-search"), {"q": "REX"})

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([p["handle"] for p in resp.data["persons"]], ["rexv"])
        self.assertEqual(len(resp.data["incidents"]), 2)

    def test_citizen_search_skips_persons_and_foreign_incidents(self):
        resp = _client_for(self.citizen).get(reverse("core:global-search"), {"q": "rex"})

        self.assertEqual(resp.data["persons"], [])
        self.assertEqual([i["id"] for i in resp.data["incidents"]], [self.own_incident.pk])

    def test_search_organizations_by_handle(self):
        resp = _client_for(self.citizen).get(
            reverse("core:global-search"), {"q": "tide", "category": "organizations"},
        )

        self.assertEqual([o["name"] for o in resp.data["organizations"]], ["Black Tide"])
        self.assertEqual(resp.data["total_results"], 1)

    def test_short_query_rejected(self):
        resp = _client_for(self.judge).get(reverse("core:global-search"), {"q": "r"})

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["code"], "validation_failed")

    def test_unknown_category_rejected(self):
        resp = _client_for(self.judge).get(
            reverse("core:global-search"), {"q": "rex", "category": "starports"},
        )

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
