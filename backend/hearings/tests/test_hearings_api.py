"""
Integration tests for the hearing and witness statement endpoints.

    /api/hearings/hearings/               hearings:hearing-list
    /api/hearings/hearings/{hearing_pk}/responses/  hearings:hearing-response-list
    /api/hearings/hearings/{id}/close/    hearings:hearing-close
    /api/hearings/statements/             hearings:statement-list
    /api/hearings/statements/{id}/submit/ hearings:statement-submit
"""

from __future__ import annotations

import datetime

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from accounts.models import Actor
from registry.models import IncidentEntry, Person


def _client_for(actor: Actor) -> APIClient:
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {RefreshToken.for_user(actor).access_token}")
    return client


class TestHearingFlow(TestCase):

    @classmethod
    def setUpTestData(cls):
        def actor(username, role="citizen", real_name=""):
            return Actor.objects.create_user(
                username=username, email=f"{username}@bureau.test",
                password="Vault7key", role=role, real_name=real_name,
            )

        cls.judge = actor("mira", "judge", "Mira Castell")
        cls.tobin = actor("tobin", real_name="Tobin Reyes")
        cls.kessa = actor("kessa", "bounty_hunter")
        cls.outsider = actor("orrin")

        person = Person.objects.create(name="Rex Varga", handle="rexv")
        cls.incident = IncidentEntry.objects.create(
            person=person,
            person_name=person.name,
            occurred_on=datetime.date(2954, 3, 14),
            crime_types=["piracy"],
            witness_names="Tobin Reyes",
            reported_by=cls.outsider,
            reported_by_name="orrin",
            reported_by_role="citizen",
        )

    def _open_hearing(self):
        resp = _client_for(self.judge).post(
            reverse("hearings:hearing-list"),
            {
                "entry": self.incident.pk,
                "title": "Piracy near Yela",
                "question": "Was Rex the pilot?",
                "witnesses": [self.tobin.pk, self.kessa.pk],
            },
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        return resp.data

    def _respond(self, actor, hearing_id, agreement, **extra):
        return _client_for(actor).post(
            reverse("hearings:hearing-response-list", kwargs={"hearing_pk": hearing_id}),
            {"agreement": agreement, **extra},
            format="json",
        )

    def test_open_hearing(self):
        data = self._open_hearing()

        self.assertEqual(data["status"], "active")
        self.assertEqual(data["crime_types"], ["piracy"])
        self.assertEqual(sorted(data["witnesses"]), sorted([self.tobin.pk, self.kessa.pk]))
        self.assertEqual(data["tallies"], {"agree": 0, "disagree": 0})

    def test_citizen_cannot_open_hearing(self):
        resp = _client_for(self.tobin).post(
            reverse("hearings:hearing-list"),
            {"entry": self.incident.pk, "title": "t", "question": "q", "witnesses": [self.kessa.pk]},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(resp.data["detail"], "Only judges may perform this action.")

    def test_answers_upserted_and_tallied(self):
        hearing = self._open_hearing()

        self._respond(self.tobin, hearing["id"], "agree")
        self._respond(self.kessa, hearing["id"], "agree")
        resp = self._respond(self.tobin, hearing["id"], "disagree", comment="Second thoughts.")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)

        detail = _client_for(self.judge).get(reverse("hearings:hearing-detail", kwargs={"pk": hearing["id"]}))
        self.assertEqual(len(detail.data["responses"]), 2)
        self.assertEqual(detail.data["tallies"], {"agree": 1, "disagree": 1})

    def test_list_responses(self):
        hearing = self._open_hearing()
        self._respond(self.kessa, hearing["id"], "disagree", comment="Wrong ship.")
        url = reverse("hearings:hearing-response-list", kwargs={"hearing_pk": hearing["id"]})

        resp = _client_for(self.judge).get(url)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(
            [(r["witness"], r["agreement"], r["comment"]) for r in resp.data],
            [(self.kessa.pk, "disagree", "Wrong ship.")],
        )

        resp = _client_for(self.outsider).get(url)
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_outsider_cannot_answer_or_see(self):
        hearing = self._open_hearing()

        resp = self._respond(self.outsider, hearing["id"], "agree")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

        listing = _client_for(self.outsider).get(reverse("hearings:hearing-list"))
        self.assertEqual(listing.data, [])

    def test_close_then_answer_is_conflict(self):
        hearing = self._open_hearing()
        close_url = reverse("hearings:hearing-close", kwargs={"pk": hearing["id"]})

        resp = _client_for(self.judge).post(close_url)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["status"], "closed")

        resp = self._respond(self.tobin, hearing["id"], "agree")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)

        resp = _client_for(self.judge).post(close_url)
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.data["code"], "invalid_transition")

    def test_statement_round_trip(self):
        resp = _client_for(self.judge).post(
            reverse("hearings:statement-list"), {"incident": self.incident.pk}, format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual([s["witness"] for s in resp.data], [self.tobin.pk])
        statement_id = resp.data[0]["id"]

        submit_url = reverse("hearings:statement-submit", kwargs={"pk": statement_id})
        resp = _client_for(self.kessa).post(submit_url, {"statement": "Not me."}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

        resp = _client_for(self.tobin).post(submit_url, {"statement": ""}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

        resp = _client_for(self.tobin).post(submit_url, {"statement": "I saw the ship."}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["statement_status"], "submitted")

        resp = _client_for(self.judge).post(
            reverse("hearings:statement-judge-comment", kwargs={"pk": statement_id}),
            {"comment": "Credible."},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["judge_comment"], "Credible.")
