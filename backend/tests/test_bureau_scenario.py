"""
End-to-end scenario across apps.

A citizen reports a person nobody has filed yet, a judge assesses and
confirms the report, a high judge overrides the assessment, and a
hearing on the incident collects the witnesses' answers.  Every step
goes through the public API.
"""

from __future__ import annotations

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from accounts.models import Actor
from assessments.models import AssessmentHistory, StatusChangeLog
from registry.models import IncidentEntry, Person


def _client_for(actor: Actor) -> APIClient:
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {RefreshToken.for_user(actor).access_token}")
    return client


class TestReportAssessHearScenario(TestCase):

    @classmethod
    def setUpTestData(cls):
        def actor(username, role, real_name):
            return Actor.objects.create_user(
                username=username, email=f"{username}@bureau.test",
                password="Vault7key", role=role, real_name=real_name,
            )

        cls.citizen = actor("pell", "citizen", "Pell Osric")
        cls.judge = actor("mira", "judge", "Mira Castell")
        cls.high_judge = actor("aldous", "high_judge", "Aldous Varn")
        cls.witness = actor("tobin", "citizen", "Tobin Reyes")

    def test_full_flow(self):
        citizen = _client_for(self.citizen)
        judge = _client_for(self.judge)

        # 1. Citizen reports "jdoe", who is not in the registry yet.
        resp = citizen.post(
            reverse("registry:incident-list"),
            {
                "handle": "jdoe",
                "occurred_on": "2954-03-14",
                "crime_types": ["pad_ramming"],
                "witness_names": "Tobin Reyes",
            },
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        incident_id = resp.data["id"]

        person = Person.objects.get(handle="jdoe")
        self.assertEqual(person.notes, "Auto-created from incident report")
        self.assertEqual(IncidentEntry.objects.filter(person=person).count(), 1)
        self.assertEqual(resp.data["status"], "pending")
        self.assertEqual(resp.data["danger_level"], 1)

        # 2. Judge assesses the incident as a level-5 threat.
        resp = judge.post(
            reverse("assessments:assess", kwargs={"target_type": "incident", "pk": incident_id}),
            {"danger_level": 5, "classification": "threat", "expected_assessed_by": None},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["danger_colour"], "orange")

        # 3. Judge confirms it.
        resp = judge.post(
            reverse("assessments:status", kwargs={"target_type": "incident", "pk": incident_id}),
            {"status": "confirmed"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)

        # 4. The reporter sees the outcome, but cannot assess.
        resp = citizen.get(reverse("registry:incident-detail", kwargs={"pk": incident_id}))
        self.assertEqual(resp.data["danger_level"], 5)
        self.assertEqual(resp.data["classification"], "threat")
        self.assertEqual(resp.data["status"], "confirmed")
        self.assertEqual(resp.data["assessed_by_name"], "Mira Castell")

        resp = citizen.get(
            reverse("assessments:assessment-state", kwargs={"target_type": "incident", "pk": incident_id}),
        )
        self.assertFalse(resp.data["can_assess"])

        # 5. The high judge overrides the judge.
        resp = _client_for(self.high_judge).post(
            reverse("assessments:assess", kwargs={"target_type": "incident", "pk": incident_id}),
            {"danger_level": 6, "expected_assessed_by": self.judge.pk},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["assessed_by_role"], "high_judge")

        # ... after which the judge may no longer revise it.
        resp = judge.post(
            reverse("assessments:assess", kwargs={"target_type": "incident", "pk": incident_id}),
            {"danger_level": 2},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

        self.assertEqual(AssessmentHistory.objects.count(), 2)
        self.assertEqual(StatusChangeLog.objects.count(), 1)

        # 6. A hearing on the incident; the named witness answers twice.
        resp = judge.post(
            reverse("hearings:hearing-list"),
            {
                "entry": incident_id,
                "title": "Pad ramming",
                "question": "Was jdoe the pilot?",
                "witnesses": [self.witness.pk],
            },
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        hearing_id = resp.data["id"]

        witness = _client_for(self.witness)
        respond_url = reverse("hearings:hearing-response-list", kwargs={"hearing_pk": hearing_id})
        witness.post(respond_url, {"agreement": "agree"}, format="json")
        witness.post(respond_url, {"agreement": "disagree"}, format="json")

        resp = witness.get(reverse("hearings:hearing-detail", kwargs={"pk": hearing_id}))
        self.assertEqual(resp.data["tallies"], {"agree": 0, "disagree": 1})

        # 7. The dashboard reflects the work.
        resp = judge.get(reverse("core:dashboard-stats"))
        self.assertEqual(resp.data["total_incidents"], 1)
        self.assertEqual(resp.data["pending_incidents"], 0)
        self.assertEqual(resp.data["active_hearings"], 1)
