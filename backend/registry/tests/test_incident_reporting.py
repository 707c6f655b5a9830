"""
Tests for incident reporting (``IncidentService.report_incident``) and
the incident scope.
"""

from __future__ import annotations

import datetime
from unittest import mock

import pytest

from core.domain.exceptions import DomainError, NotFound
from registry.models import IncidentEntry, Person
from registry.services import (
    IncidentService,
    default_incident_description,
    split_witness_names,
)

pytestmark = pytest.mark.django_db

TODAY = datetime.date(2954, 3, 14)


def _report(reporter, handle="jdoe", **kwargs):
    kwargs.setdefault("occurred_on", TODAY)
    return IncidentService.report_incident(reporter=reporter, handle=handle, **kwargs)


class TestReportIncident:

    def test_unknown_handle_creates_person(self, create_actor):
        citizen = create_actor(real_name="Pell Osric")

        incident = _report(citizen, crime_types=["piracy"])

        person = Person.objects.get(handle="jdoe")
        assert person.name == "jdoe"
        assert person.notes == "Auto-created from incident report"
        assert IncidentEntry.objects.filter(person=person).count() == 1
        assert incident.person_name == "jdoe"
        assert incident.status == "pending"
        assert incident.danger_level == 1
        assert incident.reported_by == citizen
        assert incident.reported_by_name == "Pell Osric"
        assert incident.reported_by_role == "citizen"

    def test_existing_person_matched_case_insensitively(self, create_actor):
        citizen = create_actor()
        existing = Person.objects.create(name="Rex Varga", handle="RexV")

        incident = _report(citizen, handle="  rexv ")

        assert incident.person == existing
        assert incident.person_name == "Rex Varga"
        assert Person.objects.count() == 1

    def test_second_report_reuses_auto_created_person(self, create_actor):
        citizen = create_actor()
        _report(citizen)
        _report(citizen, handle="JDOE")

        assert Person.objects.count() == 1
        assert IncidentEntry.objects.count() == 2

    def test_concurrent_report_reuses_person_created_meanwhile(self, create_actor):
        citizen = create_actor()
        winner = Person.objects.create(name="jdoe", handle="JDoe")

        # The lookup misses as it would for a report racing the winner's.
        with mock.patch.object(IncidentService, "_lock_person_by_handle", return_value=None):
            incident = _report(citizen, handle="jdoe")

        assert incident.person == winner
        assert Person.objects.count() == 1

    def test_default_description_lists_crime_labels(self, create_actor):
        incident = _report(create_actor(), crime_types=["piracy", "pad_ramming"])
        assert incident.description == "Incident reported involving Piracy, Pad Ramming"

    def test_explicit_description_kept(self, create_actor):
        incident = _report(create_actor(), description="  Rammed my ship at the pad.  ")
        assert incident.description == "Rammed my ship at the pad."

    def test_witness_names_normalised(self, create_actor):
        incident = _report(create_actor(), witness_names=" Mira ,, Tobin ,")
        assert incident.witness_names == "Mira, Tobin"

    def test_blank_handle_rejected(self, create_actor):
        with pytest.raises(DomainError):
            _report(create_actor(), handle="   ")
        assert not Person.objects.exists()


class TestIncidentScope:

    def test_citizen_sees_only_own_reports(self, create_actor):
        alice = create_actor()
        bob = create_actor()
        own = _report(alice)
        other = _report(bob)

        visible = set(IncidentService.list_incidents(alice).values_list("pk", flat=True))

        assert visible == {own.pk}
        with pytest.raises(NotFound):
            IncidentService.get_incident(alice, other.pk)

    def test_searcher_sees_every_report(self, create_actor):
        hunter = create_actor(role="bounty_hunter")
        _report(create_actor())
        _report(create_actor(), handle="other")

        assert IncidentService.list_incidents(hunter).count() == 2

    def test_filters(self, create_actor):
        judge = create_actor(role="judge")
        first = _report(judge)
        _report(judge, handle="other")
        IncidentEntry.objects.filter(pk=first.pk).update(danger_level=5, status="confirmed")

        assert list(IncidentService.list_incidents(judge, {"status": "confirmed"})) == [first]
        assert list(IncidentService.list_incidents(judge, {"min_danger_level": 4})) == [first]
        assert list(IncidentService.list_incidents(judge, {"person": first.person_id})) == [first]


class TestHelpers:

    def test_default_description_without_crime_types(self):
        assert default_incident_description([]) == (
            "Incident reported involving unspecified activities"
        )

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("", []),
            (None, []),
            ("a, b", ["a", "b"]),
            (" , x ,", ["x"]),
        ],
    )
    def test_split_witness_names(self, raw, expected):
        assert split_witness_names(raw) == expected
