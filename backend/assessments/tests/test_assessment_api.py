"""
Integration tests for the assessment endpoints.

    GET  /api/assessments/{type}/{pk}/                    assessments:assessment-state
    POST /api/assessments/{type}/{pk}/assess/             assessments:assess
    POST /api/assessments/{type}/{pk}/status/             assessments:status
    GET  /api/assessments/{type}/{pk}/assessment-history/ assessments:assessment-history
    GET  /api/assessments/{type}/{pk}/status-log/         assessments:status-log
"""

from __future__ import annotations

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from accounts.models import Actor
from registry.models import Organization, Person


def _client_for(actor: Actor) -> APIClient:
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {RefreshToken.for_user(actor).access_token}")
    return client


def _url(name: str, target, target_type: str = "person") -> str:
    return reverse(f"assessments:{name}", kwargs={"target_type": target_type, "pk": target.pk})


class TestAssessmentEndpoints(TestCase):

    @classmethod
    def setUpTestData(cls):
        def actor(username, role, real_name=""):
            return Actor.objects.create_user(
                username=username, email=f"{username}@bureau.test",
                password="Vault7key", role=role, real_name=real_name,
            )

        cls.judge = actor("mira", "judge", "Mira Castell")
        cls.other_judge = actor("orrin", "judge")
        cls.high_judge = actor("aldous", "high_judge", "Aldous Varn")
        cls.citizen = actor("pell", "citizen")
        cls.person = Person.objects.create(name="Rex Varga", handle="rexv")
        cls.org = Organization.objects.create(name="Black Tide", handle="TIDE")

    def _assess(self, actor, target=None, target_type="person", **body):
        body.setdefault("danger_level", 4)
        return _client_for(actor).post(
            _url("assess", target or self.person, target_type), body, format="json",
        )

    def test_state_of_fresh_target(self):
        resp = _client_for(self.judge).get(_url("assessment-state", self.person))

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["danger_level"], 1)
        self.assertEqual(resp.data["danger_colour"], "green")
        self.assertFalse(resp.data["is_assessed"])
        self.assertIsNone(resp.data["assessed_by_display"])
        self.assertTrue(resp.data["can_assess"])
        self.assertTrue(resp.data["can_manage_status"])

    def test_citizen_sees_state_without_rights(self):
        resp = _client_for(self.citizen).get(_url("assessment-state", self.person))

        self.assertFalse(resp.data["can_assess"])
        self.assertFalse(resp.data["can_manage_status"])

    def test_assess_returns_updated_state(self):
        resp = self._assess(self.judge, danger_level=6, classification="threat")

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["danger_level"], 6)
        self.assertEqual(resp.data["danger_colour"], "red")
        self.assertEqual(resp.data["classification"], "threat")
        self.assertEqual(resp.data["assessed_by_display"], "Mira Castell")
        self.assertEqual(resp.data["assessed_by_role"], "judge")
        self.assertEqual(resp.data["assessed_by_role_name"], "Judge")
        self.assertTrue(resp.data["can_assess"])

    def test_other_judge_sees_no_assess_right_after_assessment(self):
        self._assess(self.judge)

        resp = _client_for(self.other_judge).get(_url("assessment-state", self.person))
        self.assertFalse(resp.data["can_assess"])

        resp = self._assess(self.other_judge, danger_level=2)
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_out_of_range_level_rejected(self):
        resp = self._assess(self.judge, danger_level=7)

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["code"], "invariant_violation")

    def test_stale_expected_assessor_is_conflict(self):
        self._assess(self.judge)

        resp = self._assess(self.high_judge, danger_level=5, expected_assessed_by=None)

        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.data["code"], "conflict")

    def test_unknown_target_type_not_found(self):
        resp = _client_for(self.judge).get(
            reverse("assessments:assessment-state", kwargs={"target_type": "planet", "pk": 1}),
        )
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_history_newest_first(self):
        self._assess(self.judge, danger_level=3)
        self._assess(self.judge, danger_level=5)

        resp = _client_for(self.citizen).get(_url("assessment-history", self.person))

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(
            [(h["previous_danger_level"], h["new_danger_level"]) for h in resp.data],
            [(3, 5), (1, 3)],
        )
        self.assertEqual(resp.data[0]["assessed_by_display"], "Mira Castell")

    def test_organizations_are_assessable(self):
        resp = self._assess(self.high_judge, target=self.org, target_type="organization", danger_level=5)

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.org.refresh_from_db()
        self.assertEqual(self.org.danger_level, 5)

    def test_status_change_and_log(self):
        resp = _client_for(self.judge).post(
            _url("status", self.person), {"status": "confirmed"}, format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["status"], "confirmed")
        self.assertEqual(resp.data["status_updated_by_name"], "Mira Castell")

        log = _client_for(self.citizen).get(_url("status-log", self.person))
        self.assertEqual(len(log.data), 1)
        self.assertEqual(log.data[0]["from_status"], "pending")
        self.assertEqual(log.data[0]["to_status"], "confirmed")
        self.assertEqual(log.data[0]["changed_by_role_name"], "Judge")

    def test_citizen_cannot_change_status(self):
        resp = _client_for(self.citizen).post(
            _url("status", self.person), {"status": "confirmed"}, format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_unknown_status_rejected(self):
        resp = _client_for(self.judge).post(
            _url("status", self.person), {"status": "archived"}, format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
