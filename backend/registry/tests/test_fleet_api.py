"""
Integration tests for the fleet endpoints.

Scope in this file:
- Manufacturers and ship models: catalogue reads, capability gating,
  case-insensitive name conflicts, delete cascade
- Ships: registration with model snapshots, search, delete cascade
- Crew assignments: both lookup directions, defaults, removal rules
- Ship journals
"""

from __future__ import annotations

import datetime

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from accounts.models import Actor
from registry.models import (
    Manufacturer,
    Person,
    Ship,
    ShipAssignment,
    ShipJournal,
    ShipModel,
)


def _client_for(actor: Actor) -> APIClient:
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {RefreshToken.for_user(actor).access_token}")
    return client


class _FleetFixtures(TestCase):

    @classmethod
    def setUpTestData(cls):
        def actor(username, role, **extra):
            return Actor.objects.create_user(
                username=username, email=f"{username}@bureau.test",
                password="Vault7key", role=role, **extra,
            )

        cls.sentinel = actor("overseer", "sentinel")
        cls.high_judge = actor("hale", "high_judge")
        cls.judge = actor("judge", "judge", real_name="Mira Castell")
        cls.hunter = actor("tracker", "bounty_hunter")
        cls.citizen = actor("pell", "citizen")

        cls.drake = Manufacturer.objects.create(name="Drake Interplanetary")
        cls.cutlass = ShipModel.objects.create(
            manufacturer=cls.drake, name="Cutlass Black", ship_type="multi_role",
        )
        cls.caterpillar = ShipModel.objects.create(
            manufacturer=cls.drake, name="Caterpillar", ship_type="cargo",
        )
        cls.heron = Ship.objects.create(
            name="Night Heron",
            serial_number="DRK-0042",
            model=cls.cutlass,
            model_name="Cutlass Black",
            manufacturer_name="Drake Interplanetary",
            location="Grim HEX",
        )

        cls.rex = Person.objects.create(name="Rex Varga", handle="rexv")
        cls.nyx = Person.objects.create(name="Nyx Holloway", handle="nyxh")


class TestManufacturers(_FleetFixtures):

    def test_catalogue_readable_by_citizen(self):
        resp = _client_for(self.citizen).get(reverse("registry:manufacturer-list"))

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([m["name"] for m in resp.data], ["Drake Interplanetary"])
        self.assertEqual(resp.data[0]["model_count"], 2)

    def test_high_judge_creates_manufacturer(self):
        resp = _client_for(self.high_judge).post(
            reverse("registry:manufacturer-list"),
            {"name": "Aegis Dynamics", "description": "Military hulls."},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["model_count"], 0)

    def test_judge_cannot_create_manufacturer(self):
        resp = _client_for(self.judge).post(
            reverse("registry:manufacturer-list"), {"name": "Aegis Dynamics"}, format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Manufacturer.objects.filter(name="Aegis Dynamics").exists())

    def test_duplicate_name_conflicts_case_insensitively(self):
        resp = _client_for(self.high_judge).post(
            reverse("registry:manufacturer-list"), {"name": "drake interplanetary"}, format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)

    def test_models_listed_per_manufacturer(self):
        resp = _client_for(self.citizen).get(
            reverse("registry:manufacturer-ship-models", kwargs={"pk": self.drake.pk}),
        )

        self.assertEqual([m["name"] for m in resp.data], ["Caterpillar", "Cutlass Black"])
        self.assertEqual(resp.data[0]["manufacturer_name"], "Drake Interplanetary")

    def test_removal_needs_delete_capability(self):
        resp = _client_for(self.high_judge).delete(
            reverse("registry:manufacturer-detail", kwargs={"pk": self.drake.pk}),
        )

        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(Manufacturer.objects.filter(pk=self.drake.pk).exists())

    def test_removal_cascades_to_models_and_keeps_ship_snapshot(self):
        resp = _client_for(self.sentinel).delete(
            reverse("registry:manufacturer-detail", kwargs={"pk": self.drake.pk}),
        )

        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(ShipModel.objects.exists())
        self.heron.refresh_from_db()
        self.assertIsNone(self.heron.model)
        self.assertEqual(self.heron.model_name, "Cutlass Black")
        self.assertEqual(self.heron.manufacturer_name, "Drake Interplanetary")


class TestShipModels(_FleetFixtures):

    def test_create_model(self):
        resp = _client_for(self.high_judge).post(
            reverse("registry:ship-model-list"),
            {"manufacturer": self.drake.pk, "name": "Corsair", "ship_type": "gunship"},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["manufacturer_name"], "Drake Interplanetary")

    def test_unknown_ship_type_rejected(self):
        resp = _client_for(self.high_judge).post(
            reverse("registry:ship-model-list"),
            {"manufacturer": self.drake.pk, "name": "Corsair", "ship_type": "yacht"},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_duplicate_name_within_manufacturer_conflicts(self):
        resp = _client_for(self.high_judge).post(
            reverse("registry:ship-model-list"),
            {"manufacturer": self.drake.pk, "name": "cutlass black", "ship_type": "multi_role"},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)

    def test_filter_by_manufacturer(self):
        aegis = Manufacturer.objects.create(name="Aegis Dynamics")
        ShipModel.objects.create(manufacturer=aegis, name="Gladius", ship_type="light_fighter")

        resp = _client_for(self.citizen).get(
            reverse("registry:ship-model-list"), {"manufacturer": aegis.pk},
        )

        self.assertEqual([m["name"] for m in resp.data], ["Gladius"])

    def test_judge_cannot_remove_model(self):
        resp = _client_for(self.judge).delete(
            reverse("registry:ship-model-detail", kwargs={"pk": self.caterpillar.pk}),
        )

        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)


class TestShips(_FleetFixtures):

    def test_register_snapshots_model(self):
        resp = _client_for(self.judge).post(
            reverse("registry:ship-list"),
            {"name": "Red Kestrel", "serial_number": "DRK-0100", "model": self.cutlass.pk, "location": "Yela"},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["model_name"], "Cutlass Black")
        self.assertEqual(resp.data["manufacturer_name"], "Drake Interplanetary")
        self.assertEqual(resp.data["status"], "active")

    def test_hunter_cannot_register(self):
        resp = _client_for(self.hunter).post(
            reverse("registry:ship-list"), {"name": "Red Kestrel"}, format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_duplicate_serial_conflicts(self):
        resp = _client_for(self.judge).post(
            reverse("registry:ship-list"), {"name": "Copycat", "serial_number": "drk-0042"}, format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)

    def test_search_by_serial_is_case_insensitive(self):
        resp = _client_for(self.hunter).get(reverse("registry:ship-list"), {"search": "drk-0042"})

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([s["name"] for s in resp.data], ["Night Heron"])

    def test_filter_by_status(self):
        client = _client_for(self.hunter)

        self.assertEqual(client.get(reverse("registry:ship-list"), {"status": "impounded"}).data, [])
        resp = client.get(reverse("registry:ship-list"), {"status": "sunk"})
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_citizen_cannot_browse_ships(self):
        resp = _client_for(self.citizen).get(reverse("registry:ship-list"))

        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_changing_model_refreshes_snapshot(self):
        resp = _client_for(self.judge).patch(
            reverse("registry:ship-detail", kwargs={"pk": self.heron.pk}),
            {"model": self.caterpillar.pk, "status": "under_maintenance"},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["model_name"], "Caterpillar")
        self.assertEqual(resp.data["status"], "under_maintenance")

    def test_removal_cascades_to_crew_and_journal(self):
        ShipAssignment.objects.create(ship=self.heron, person=self.rex)
        ShipJournal.objects.create(
            ship=self.heron, entry_date=datetime.date(2954, 4, 1), description="Docked.",
        )

        resp = _client_for(self.sentinel).delete(
            reverse("registry:ship-detail", kwargs={"pk": self.heron.pk}),
        )

        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(ShipAssignment.objects.exists())
        self.assertFalse(ShipJournal.objects.exists())
        self.assertTrue(Person.objects.filter(pk=self.rex.pk).exists())


class TestCrew(_FleetFixtures):

    def test_assignment_seen_from_both_sides(self):
        resp = _client_for(self.judge).post(
            reverse("registry:ship-crew", kwargs={"pk": self.heron.pk}),
            {"person": self.rex.pk, "role": "Pilot"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)

        hunter = _client_for(self.hunter)
        crew = hunter.get(reverse("registry:ship-crew", kwargs={"pk": self.heron.pk}))
        self.assertEqual([(a["person_name"], a["role"]) for a in crew.data], [("Rex Varga", "Pilot")])

        ships = hunter.get(reverse("registry:person-ships", kwargs={"pk": self.rex.pk}))
        self.assertEqual([a["ship_name"] for a in ships.data], ["Night Heron"])

    def test_assignment_defaults(self):
        resp = _client_for(self.judge).post(
            reverse("registry:ship-crew", kwargs={"pk": self.heron.pk}),
            {"person": self.nyx.pk},
            format="json",
        )

        self.assertEqual(resp.data["role"], "Crew Member")
        self.assertEqual(resp.data["assigned_on"], timezone.localdate().isoformat())

    def test_duplicate_assignment_conflicts(self):
        ShipAssignment.objects.create(ship=self.heron, person=self.rex)

        resp = _client_for(self.judge).post(
            reverse("registry:ship-crew", kwargs={"pk": self.heron.pk}),
            {"person": self.rex.pk},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)

    def test_unknown_person_rejected(self):
        resp = _client_for(self.judge).post(
            reverse("registry:ship-crew", kwargs={"pk": self.heron.pk}),
            {"person": 999999},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_ships_of_unknown_person_not_found(self):
        resp = _client_for(self.hunter).get(reverse("registry:person-ships", kwargs={"pk": 999999}))

        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_judge_cannot_remove_assignment(self):
        assignment = ShipAssignment.objects.create(ship=self.heron, person=self.rex)

        resp = _client_for(self.judge).delete(
            reverse("registry:ship-assignment-detail", kwargs={"pk": assignment.pk}),
        )

        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_sentinel_removes_assignment(self):
        assignment = ShipAssignment.objects.create(ship=self.heron, person=self.rex)

        resp = _client_for(self.sentinel).delete(
            reverse("registry:ship-assignment-detail", kwargs={"pk": assignment.pk}),
        )

        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(ShipAssignment.objects.exists())


class TestShipJournal(_FleetFixtures):

    def test_journal_records_author(self):
        url = reverse("registry:ship-journal", kwargs={"pk": self.heron.pk})
        resp = _client_for(self.judge).post(
            url, {"entry_date": "2954-05-01", "description": "Refit at Lorville."}, format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["author_name"], "Mira Castell")

        listing = _client_for(self.hunter).get(url)
        self.assertEqual([e["description"] for e in listing.data], ["Refit at Lorville."])

    def test_journal_requires_capability(self):
        resp = _client_for(self.hunter).post(
            reverse("registry:ship-journal", kwargs={"pk": self.heron.pk}),
            {"entry_date": "2954-05-01", "description": "Nope."},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(ShipJournal.objects.exists())

    def test_update_entry(self):
        entry = ShipJournal.objects.create(
            ship=self.heron, entry_date=datetime.date(2954, 4, 1), description="Docked.",
        )

        resp = _client_for(self.judge).patch(
            reverse("registry:ship-journal-entry-detail", kwargs={"pk": entry.pk}),
            {"description": "Docked at Grim HEX."},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["description"], "Docked at Grim HEX.")
