"""
Registry app Service Layer.

This module is the **single source of truth** for all business logic
in the ``registry`` app.  Views must remain thin: validate input via
serializers, call a service method, and return the result wrapped in a
DRF ``Response``.

Architecture
------------
- ``PersonService``           — person dossiers, handle lookup, crime stats.
- ``OrganizationService``     — organizations, member crime stats,
                                relationship lookup.
- ``MembershipService``       — person ↔ organization links (removable).
- ``OrgRelationshipService``  — organization ↔ organization links (removable).
- ``JournalService``          — organization journal entries.
- ``IncidentService``         — incident reporting and scoped listing.
- ``ManufacturerService``     — manufacturer catalogue (delete cascades to models).
- ``ShipModelService``        — ship models per manufacturer.
- ``ShipService``             — registered ships with model snapshots.
- ``ShipAssignmentService``   — person ↔ ship crew links, looked up both ways.
- ``ShipJournalService``      — per-ship journal entries.

Capabilities used here (from ``core.permissions_constants.Capability``):
  - CAN_SEARCH_PERSONS        → list / search persons, see every incident
  - CAN_VIEW_PERSON_DETAILS   → create / update persons
  - CAN_CREATE_ORGANIZATIONS  → organizations, memberships, relationships
  - CAN_MANAGE_JOURNALS       → organization journal entries
  - CAN_REPORT_INCIDENTS      → file incident reports
  - CAN_MANAGE_SHIPS          → ships with their crews and journals
  - CAN_MANAGE_MANUFACTURERS  → manufacturers and ship models
  - CAN_DELETE                → (with the above) remove memberships,
                                relationships, crew assignments and
                                fleet records

Assessment fields (danger level, classification, status and their
snapshots) are never written here; see ``assessments.services``.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any

from django.db import IntegrityError, transaction
from django.db.models import Count, Q, QuerySet

from core.constants import AUTO_CREATED_PERSON_NOTE
from core.domain.access import apply_capability_scope, get_actor_role_id, require_capability
from core.domain.exceptions import Conflict, DomainError, NotFound, PermissionDenied
from core.domain.roles import has_permission
from core.permissions_constants import Capability

from .models import (
    CrimeType,
    IncidentEntry,
    Manufacturer,
    Membership,
    Organization,
    OrganizationJournal,
    OrgRelationship,
    Person,
    Ship,
    ShipAssignment,
    ShipJournal,
    ShipModel,
)

logger = logging.getLogger(__name__)


def _get_or_404(model, pk: Any):
    try:
        return model.objects.get(pk=pk)
    except (model.DoesNotExist, ValueError, TypeError):
        raise NotFound(f"{model.__name__} with id {pk} not found.")


def _apply(instance, data: dict[str, Any]):
    for attr, value in data.items():
        setattr(instance, attr, value)
    instance.save()
    return instance


def count_crime_types(crime_type_lists) -> dict[str, int]:
    """Tally crime-type ids across several incidents' ``crime_types`` lists."""
    counter: Counter[str] = Counter()
    for crime_types in crime_type_lists:
        counter.update(crime_types or [])
    return dict(counter)


# ═══════════════════════════════════════════════════════════════════
#  Person Service
# ═══════════════════════════════════════════════════════════════════


class PersonService:

    @staticmethod
    def search(actor, query: str | None = None) -> QuerySet[Person]:
        """
        Persons matching ``query`` in name, handle or aliases
        (case-insensitive).  An empty query lists everyone.
        """
        require_capability(actor, Capability.CAN_SEARCH_PERSONS)
        qs = Person.objects.all()
        if query:
            qs = qs.filter(
                Q(name__icontains=query)
                | Q(handle__icontains=query)
                | Q(aliases__icontains=query)
            )
        return qs

    @staticmethod
    def get_person(person_id: Any) -> Person:
        return _get_or_404(Person, person_id)

    @staticmethod
    def get_dossier(actor, person_id: Any) -> tuple[Person, dict[str, int]]:
        """The person together with their crime statistics."""
        require_capability(actor, Capability.CAN_VIEW_PERSON_DETAILS)
        person = PersonService.get_person(person_id)
        return person, PersonService.crime_stats(person.pk)

    @staticmethod
    def find_by_handle(handle: str) -> Person | None:
        return Person.objects.filter(handle__iexact=handle.strip()).first()

    @staticmethod
    def create_person(validated_data: dict[str, Any], actor) -> Person:
        require_capability(actor, Capability.CAN_VIEW_PERSON_DETAILS)
        handle = validated_data["handle"]
        if PersonService.find_by_handle(handle) is not None:
            raise Conflict(f"A person with handle '{handle}' already exists.")
        try:
            with transaction.atomic():
                person = Person.objects.create(**validated_data)
        except IntegrityError:
            raise Conflict(f"A person with handle '{handle}' already exists.")
        logger.info("Person %s (@%s) created by %s", person.pk, person.handle, actor.pk)
        return person

    @staticmethod
    def update_person(person_id: Any, validated_data: dict[str, Any], actor) -> Person:
        require_capability(actor, Capability.CAN_VIEW_PERSON_DETAILS)
        person = PersonService.get_person(person_id)
        handle = validated_data.get("handle")
        if handle and Person.objects.filter(handle__iexact=handle).exclude(pk=person.pk).exists():
            raise Conflict(f"A person with handle '{handle}' already exists.")
        return _apply(person, validated_data)

    @staticmethod
    def crime_stats(person_id: Any) -> dict[str, int]:
        """``crime_type -> number of incidents`` for one person."""
        return count_crime_types(
            IncidentEntry.objects.filter(person_id=person_id)
            .values_list("crime_types", flat=True)
        )


# ═══════════════════════════════════════════════════════════════════
#  Organization Service
# ═══════════════════════════════════════════════════════════════════


class OrganizationService:

    @staticmethod
    def search(query: str | None = None) -> QuerySet[Organization]:
        qs = Organization.objects.all()
        if query:
            qs = qs.filter(
                Q(name__icontains=query)
                | Q(handle__icontains=query)
                | Q(description__icontains=query)
            )
        return qs

    @staticmethod
    def get_organization(organization_id: Any) -> Organization:
        return _get_or_404(Organization, organization_id)

    @staticmethod
    def create_organization(validated_data: dict[str, Any], actor) -> Organization:
        require_capability(actor, Capability.CAN_CREATE_ORGANIZATIONS)
        organization = Organization.objects.create(**validated_data)
        logger.info("Organization %s created by %s", organization.pk, actor.pk)
        return organization

    @staticmethod
    def update_organization(organization_id: Any, validated_data: dict[str, Any], actor) -> Organization:
        require_capability(actor, Capability.CAN_CREATE_ORGANIZATIONS)
        organization = OrganizationService.get_organization(organization_id)
        return _apply(organization, validated_data)

    @staticmethod
    def crime_stats(organization_id: Any) -> dict[str, int]:
        """Aggregate crime stats over the organization's *active* members."""
        member_ids = Membership.objects.filter(
            organization_id=organization_id, is_active=True,
        ).values_list("person_id", flat=True)
        return count_crime_types(
            IncidentEntry.objects.filter(person_id__in=member_ids)
            .values_list("crime_types", flat=True)
        )

    @staticmethod
    def relationships(organization_id: Any) -> QuerySet[OrgRelationship]:
        """Every relationship with the organization on either side."""
        return OrgRelationship.objects.filter(
            Q(organization_id=organization_id)
            | Q(related_organization_id=organization_id)
        ).select_related("organization", "related_organization")


# ═══════════════════════════════════════════════════════════════════
#  Membership Service
# ═══════════════════════════════════════════════════════════════════


class MembershipService:

    @staticmethod
    def list_memberships(*, person_id: Any = None, organization_id: Any = None) -> QuerySet[Membership]:
        qs = Membership.objects.select_related("person", "organization")
        if person_id is not None:
            qs = qs.filter(person_id=person_id)
        if organization_id is not None:
            qs = qs.filter(organization_id=organization_id)
        return qs

    @staticmethod
    def add_membership(validated_data: dict[str, Any], actor) -> Membership:
        require_capability(actor, Capability.CAN_CREATE_ORGANIZATIONS)
        return Membership.objects.create(**validated_data)

    @staticmethod
    def update_membership(membership_id: Any, validated_data: dict[str, Any], actor) -> Membership:
        require_capability(actor, Capability.CAN_CREATE_ORGANIZATIONS)
        return _apply(_get_or_404(Membership, membership_id), validated_data)

    @staticmethod
    def remove_membership(membership_id: Any, actor) -> None:
        require_capability(actor, Capability.CAN_CREATE_ORGANIZATIONS)
        require_capability(actor, Capability.CAN_DELETE)
        membership = _get_or_404(Membership, membership_id)
        membership.delete()
        logger.info("Membership %s removed by %s", membership_id, actor.pk)


# ═══════════════════════════════════════════════════════════════════
#  Organization Relationship Service
# ═══════════════════════════════════════════════════════════════════


class OrgRelationshipService:

    @staticmethod
    def add_relationship(validated_data: dict[str, Any], actor) -> OrgRelationship:
        require_capability(actor, Capability.CAN_CREATE_ORGANIZATIONS)
        if validated_data["organization"] == validated_data["related_organization"]:
            raise DomainError("An organization cannot be related to itself.")
        return OrgRelationship.objects.create(**validated_data)

    @staticmethod
    def update_relationship(relationship_id: Any, validated_data: dict[str, Any], actor) -> OrgRelationship:
        require_capability(actor, Capability.CAN_CREATE_ORGANIZATIONS)
        relationship = _get_or_404(OrgRelationship, relationship_id)
        org = validated_data.get("organization", relationship.organization)
        related = validated_data.get("related_organization", relationship.related_organization)
        if org == related:
            raise DomainError("An organization cannot be related to itself.")
        return _apply(relationship, validated_data)

    @staticmethod
    def remove_relationship(relationship_id: Any, actor) -> None:
        require_capability(actor, Capability.CAN_CREATE_ORGANIZATIONS)
        require_capability(actor, Capability.CAN_DELETE)
        relationship = _get_or_404(OrgRelationship, relationship_id)
        relationship.delete()
        logger.info("Organization relationship %s removed by %s", relationship_id, actor.pk)


# ═══════════════════════════════════════════════════════════════════
#  Journal Service
# ═══════════════════════════════════════════════════════════════════


class JournalService:

    @staticmethod
    def list_entries(organization_id: Any) -> QuerySet[OrganizationJournal]:
        return OrganizationJournal.objects.filter(organization_id=organization_id)

    @staticmethod
    def add_entry(organization_id: Any, validated_data: dict[str, Any], actor) -> OrganizationJournal:
        require_capability(actor, Capability.CAN_MANAGE_JOURNALS)
        organization = OrganizationService.get_organization(organization_id)
        return OrganizationJournal.objects.create(
            organization=organization,
            author=actor,
            author_name=actor.snapshot_name,
            **validated_data,
        )

    @staticmethod
    def update_entry(entry_id: Any, validated_data: dict[str, Any], actor) -> OrganizationJournal:
        require_capability(actor, Capability.CAN_MANAGE_JOURNALS)
        return _apply(_get_or_404(OrganizationJournal, entry_id), validated_data)


# ═══════════════════════════════════════════════════════════════════
#  Incident Service
# ═══════════════════════════════════════════════════════════════════

#: Ordered broadest → narrowest; citizens only see their own reports.
INCIDENT_SCOPE_RULES = [
    (Capability.CAN_SEARCH_PERSONS, lambda qs, a: qs),
    (Capability.CAN_REPORT_INCIDENTS, lambda qs, a: qs.filter(reported_by=a)),
]


def default_incident_description(crime_types: list[str]) -> str:
    labels = dict(CrimeType.choices)
    if not crime_types:
        return "Incident reported involving unspecified activities"
    names = ", ".join(str(labels.get(ct, ct)) for ct in crime_types)
    return f"Incident reported involving {names}"


def split_witness_names(witness_names: str | None) -> list[str]:
    return [name.strip() for name in (witness_names or "").split(",") if name.strip()]


class IncidentService:

    @staticmethod
    def scoped_queryset(actor) -> QuerySet[IncidentEntry]:
        return apply_capability_scope(
            IncidentEntry.objects.select_related("person", "reported_by"),
            actor,
            scope_rules=INCIDENT_SCOPE_RULES,
        )

    @staticmethod
    def list_incidents(actor, filters: dict[str, Any] | None = None) -> QuerySet[IncidentEntry]:
        """
        Incidents visible to ``actor``, optionally filtered by ``status``,
        ``person`` id or ``min_danger_level``.
        """
        qs = IncidentService.scoped_queryset(actor)
        filters = filters or {}
        if filters.get("status"):
            qs = qs.filter(status=filters["status"])
        if filters.get("person"):
            qs = qs.filter(person_id=filters["person"])
        if filters.get("min_danger_level"):
            qs = qs.filter(danger_level__gte=filters["min_danger_level"])
        return qs

    @staticmethod
    def get_incident(actor, incident_id: Any) -> IncidentEntry:
        try:
            return IncidentService.scoped_queryset(actor).get(pk=incident_id)
        except (IncidentEntry.DoesNotExist, ValueError, TypeError):
            raise NotFound(f"Incident with id {incident_id} not found.")

    @staticmethod
    def _lock_person_by_handle(handle: str) -> Person | None:
        return Person.objects.select_for_update().filter(handle__iexact=handle).first()

    @staticmethod
    def person_for_report(handle: str) -> Person:
        """
        The person known by ``handle``, created bare when unknown.

        Two reports racing on the same new handle both miss the lookup;
        the loser's insert hits the case-insensitive handle constraint
        inside a savepoint and falls back to the winner's row.
        """
        person = IncidentService._lock_person_by_handle(handle)
        if person is not None:
            return person
        try:
            with transaction.atomic():
                person = Person.objects.create(
                    name=handle,
                    handle=handle,
                    notes=AUTO_CREATED_PERSON_NOTE,
                )
        except IntegrityError:
            logger.info("Person @%s was created by a concurrent report; reusing it", handle)
            return Person.objects.get(handle__iexact=handle)
        logger.info("Person %s auto-created from incident report for @%s", person.pk, handle)
        return person

    @staticmethod
    @transaction.atomic
    def report_incident(
        *,
        reporter,
        handle: str,
        occurred_on,
        description: str = "",
        crime_types: list[str] | None = None,
        witness_names: str = "",
    ) -> IncidentEntry:
        """
        File an incident against the person known by ``handle``.

        The person is looked up case-insensitively; when none exists a
        bare record is created (name = handle) in the same transaction as
        the incident.  The new entry starts ``pending`` at danger level 1.

        Raises
        ------
        PermissionDenied
            The reporter lacks ``can_report_incidents``.
        """
        require_capability(reporter, Capability.CAN_REPORT_INCIDENTS)
        handle = handle.strip()
        if not handle:
            raise DomainError("A handle is required to report an incident.")

        person = IncidentService.person_for_report(handle)

        crime_types = list(crime_types or [])
        incident = IncidentEntry.objects.create(
            person=person,
            person_name=person.name,
            occurred_on=occurred_on,
            description=description.strip() or default_incident_description(crime_types),
            crime_types=crime_types,
            witness_names=", ".join(split_witness_names(witness_names)),
            reported_by=reporter,
            reported_by_name=reporter.snapshot_name,
            reported_by_role=get_actor_role_id(reporter),
        )
        logger.info("Incident %s reported against person %s by %s", incident.pk, person.pk, reporter.pk)
        return incident

    @staticmethod
    def update_incident(actor, incident_id: Any, validated_data: dict[str, Any]) -> IncidentEntry:
        """The reporter, or anyone who may edit dossiers, may amend the report."""
        incident = IncidentService.get_incident(actor, incident_id)
        if incident.reported_by_id != actor.pk and not has_permission(
            actor, Capability.CAN_VIEW_PERSON_DETAILS,
        ):
            raise PermissionDenied("Only the reporter may amend this incident.")
        data = dict(validated_data)
        if "witness_names" in data:
            data["witness_names"] = ", ".join(split_witness_names(data["witness_names"]))
        return _apply(incident, data)


# ═══════════════════════════════════════════════════════════════════
#  Manufacturer / Ship Model Service
# ═══════════════════════════════════════════════════════════════════


class ManufacturerService:

    @staticmethod
    def list_manufacturers(query: str | None = None) -> QuerySet[Manufacturer]:
        qs = Manufacturer.objects.annotate(model_count=Count("ship_models"))
        if query:
            qs = qs.filter(Q(name__icontains=query) | Q(description__icontains=query))
        return qs

    @staticmethod
    def get_manufacturer(manufacturer_id: Any) -> Manufacturer:
        return _get_or_404(Manufacturer, manufacturer_id)

    @staticmethod
    def _check_name_free(name: str, exclude_pk: Any = None) -> None:
        qs = Manufacturer.objects.filter(name__iexact=name)
        if exclude_pk is not None:
            qs = qs.exclude(pk=exclude_pk)
        if qs.exists():
            raise Conflict(f"A manufacturer named '{name}' already exists.")

    @staticmethod
    def create_manufacturer(validated_data: dict[str, Any], actor) -> Manufacturer:
        require_capability(actor, Capability.CAN_MANAGE_MANUFACTURERS)
        name = validated_data["name"]
        ManufacturerService._check_name_free(name)
        try:
            with transaction.atomic():
                manufacturer = Manufacturer.objects.create(**validated_data)
        except IntegrityError:
            raise Conflict(f"A manufacturer named '{name}' already exists.")
        logger.info("Manufacturer %s created by %s", manufacturer.pk, actor.pk)
        return manufacturer

    @staticmethod
    def update_manufacturer(manufacturer_id: Any, validated_data: dict[str, Any], actor) -> Manufacturer:
        require_capability(actor, Capability.CAN_MANAGE_MANUFACTURERS)
        manufacturer = ManufacturerService.get_manufacturer(manufacturer_id)
        if validated_data.get("name"):
            ManufacturerService._check_name_free(validated_data["name"], exclude_pk=manufacturer.pk)
        return _apply(manufacturer, validated_data)

    @staticmethod
    def delete_manufacturer(manufacturer_id: Any, actor) -> None:
        """Removes the manufacturer and its ship models; ships keep their name snapshots."""
        require_capability(actor, Capability.CAN_MANAGE_MANUFACTURERS)
        require_capability(actor, Capability.CAN_DELETE)
        manufacturer = ManufacturerService.get_manufacturer(manufacturer_id)
        manufacturer.delete()
        logger.info("Manufacturer %s removed by %s", manufacturer_id, actor.pk)


class ShipModelService:

    @staticmethod
    def list_models(manufacturer_id: Any = None) -> QuerySet[ShipModel]:
        qs = ShipModel.objects.select_related("manufacturer")
        if manufacturer_id is not None:
            qs = qs.filter(manufacturer_id=manufacturer_id)
        return qs

    @staticmethod
    def _check_name_free(manufacturer: Manufacturer, name: str, exclude_pk: Any = None) -> None:
        qs = ShipModel.objects.filter(manufacturer=manufacturer, name__iexact=name)
        if exclude_pk is not None:
            qs = qs.exclude(pk=exclude_pk)
        if qs.exists():
            raise Conflict(f"{manufacturer.name} already has a model named '{name}'.")

    @staticmethod
    def create_model(validated_data: dict[str, Any], actor) -> ShipModel:
        require_capability(actor, Capability.CAN_MANAGE_MANUFACTURERS)
        ShipModelService._check_name_free(validated_data["manufacturer"], validated_data["name"])
        ship_model = ShipModel.objects.create(**validated_data)
        logger.info("Ship model %s created by %s", ship_model.pk, actor.pk)
        return ship_model

    @staticmethod
    def update_model(model_id: Any, validated_data: dict[str, Any], actor) -> ShipModel:
        require_capability(actor, Capability.CAN_MANAGE_MANUFACTURERS)
        ship_model = _get_or_404(ShipModel, model_id)
        manufacturer = validated_data.get("manufacturer", ship_model.manufacturer)
        name = validated_data.get("name", ship_model.name)
        ShipModelService._check_name_free(manufacturer, name, exclude_pk=ship_model.pk)
        return _apply(ship_model, validated_data)

    @staticmethod
    def delete_model(model_id: Any, actor) -> None:
        require_capability(actor, Capability.CAN_MANAGE_MANUFACTURERS)
        require_capability(actor, Capability.CAN_DELETE)
        ship_model = _get_or_404(ShipModel, model_id)
        ship_model.delete()
        logger.info("Ship model %s removed by %s", model_id, actor.pk)


# ═══════════════════════════════════════════════════════════════════
#  Ship Service
# ═══════════════════════════════════════════════════════════════════


def _snapshot_model(data: dict[str, Any]) -> dict[str, Any]:
    """Copy the model and manufacturer names onto ship data carrying ``model``."""
    if "model" not in data:
        return data
    ship_model = data["model"]
    return {
        **data,
        "model_name": ship_model.name if ship_model else "",
        "manufacturer_name": ship_model.manufacturer.name if ship_model else "",
    }


class ShipService:
    """
    Registered ships, readable by anyone who may search persons and
    maintained by holders of ``can_manage_ships``.
    """

    @staticmethod
    def search(actor, query: str | None = None, status: str | None = None) -> QuerySet[Ship]:
        """Ships matching ``query`` in name or serial number (case-insensitive)."""
        require_capability(actor, Capability.CAN_SEARCH_PERSONS)
        qs = Ship.objects.select_related("model")
        if query:
            qs = qs.filter(Q(name__icontains=query) | Q(serial_number__icontains=query))
        if status:
            qs = qs.filter(status=status)
        return qs

    @staticmethod
    def get_ship(actor, ship_id: Any) -> Ship:
        require_capability(actor, Capability.CAN_SEARCH_PERSONS)
        return _get_or_404(Ship, ship_id)

    @staticmethod
    def _check_serial_free(serial_number: str, exclude_pk: Any = None) -> None:
        if not serial_number:
            return
        qs = Ship.objects.filter(serial_number__iexact=serial_number)
        if exclude_pk is not None:
            qs = qs.exclude(pk=exclude_pk)
        if qs.exists():
            raise Conflict(f"A ship with serial number '{serial_number}' already exists.")

    @staticmethod
    def create_ship(validated_data: dict[str, Any], actor) -> Ship:
        require_capability(actor, Capability.CAN_MANAGE_SHIPS)
        serial_number = validated_data.get("serial_number", "")
        ShipService._check_serial_free(serial_number)
        try:
            with transaction.atomic():
                ship = Ship.objects.create(**_snapshot_model(validated_data))
        except IntegrityError:
            raise Conflict(f"A ship with serial number '{serial_number}' already exists.")
        logger.info("Ship %s registered by %s", ship.pk, actor.pk)
        return ship

    @staticmethod
    def update_ship(ship_id: Any, validated_data: dict[str, Any], actor) -> Ship:
        require_capability(actor, Capability.CAN_MANAGE_SHIPS)
        ship = _get_or_404(Ship, ship_id)
        ShipService._check_serial_free(validated_data.get("serial_number", ""), exclude_pk=ship.pk)
        return _apply(ship, _snapshot_model(validated_data))

    @staticmethod
    def delete_ship(ship_id: Any, actor) -> None:
        """Removes the ship together with its crew assignments and journal."""
        require_capability(actor, Capability.CAN_MANAGE_SHIPS)
        require_capability(actor, Capability.CAN_DELETE)
        ship = _get_or_404(Ship, ship_id)
        ship.delete()
        logger.info("Ship %s removed by %s", ship_id, actor.pk)


# ═══════════════════════════════════════════════════════════════════
#  Ship Assignment Service
# ═══════════════════════════════════════════════════════════════════


class ShipAssignmentService:

    @staticmethod
    def crew_for_ship(actor, ship_id: Any) -> QuerySet[ShipAssignment]:
        ship = ShipService.get_ship(actor, ship_id)
        return ship.assignments.select_related("person", "ship")

    @staticmethod
    def ships_for_person(actor, person_id: Any) -> QuerySet[ShipAssignment]:
        require_capability(actor, Capability.CAN_SEARCH_PERSONS)
        person = PersonService.get_person(person_id)
        return person.ship_assignments.select_related("person", "ship")

    @staticmethod
    def assign(ship_id: Any, validated_data: dict[str, Any], actor) -> ShipAssignment:
        require_capability(actor, Capability.CAN_MANAGE_SHIPS)
        ship = _get_or_404(Ship, ship_id)
        person = validated_data["person"]
        if ShipAssignment.objects.filter(ship=ship, person=person).exists():
            raise Conflict(f"{person.name} is already assigned to {ship.name}.")
        try:
            with transaction.atomic():
                assignment = ShipAssignment.objects.create(ship=ship, **validated_data)
        except IntegrityError:
            raise Conflict(f"{person.name} is already assigned to {ship.name}.")
        logger.info("Person %s assigned to ship %s by %s", person.pk, ship.pk, actor.pk)
        return assignment

    @staticmethod
    def remove_assignment(assignment_id: Any, actor) -> None:
        require_capability(actor, Capability.CAN_MANAGE_SHIPS)
        require_capability(actor, Capability.CAN_DELETE)
        assignment = _get_or_404(ShipAssignment, assignment_id)
        assignment.delete()
        logger.info("Ship assignment %s removed by %s", assignment_id, actor.pk)


# ═══════════════════════════════════════════════════════════════════
#  Ship Journal Service
# ═══════════════════════════════════════════════════════════════════


class ShipJournalService:

    @staticmethod
    def list_entries(actor, ship_id: Any) -> QuerySet[ShipJournal]:
        return ShipService.get_ship(actor, ship_id).journal_entries.all()

    @staticmethod
    def add_entry(ship_id: Any, validated_data: dict[str, Any], actor) -> ShipJournal:
        require_capability(actor, Capability.CAN_MANAGE_SHIPS)
        ship = _get_or_404(Ship, ship_id)
        return ShipJournal.objects.create(
            ship=ship,
            author=actor,
            author_name=actor.snapshot_name,
            **validated_data,
        )

    @staticmethod
    def update_entry(entry_id: Any, validated_data: dict[str, Any], actor) -> ShipJournal:
        require_capability(actor, Capability.CAN_MANAGE_SHIPS)
        return _apply(_get_or_404(ShipJournal, entry_id), validated_data)
