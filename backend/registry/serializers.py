"""
Registry app serializers.

Request serializers validate shape and choice values only; everything
else (uniqueness, capabilities, auto-creation) is decided in
``services.py``.  Assessment fields are always read-only here.
"""

from __future__ import annotations

from rest_framework import serializers

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
    ShipStatus,
)

ASSESSMENT_FIELDS = [
    "danger_level",
    "classification",
    "status",
    "assessed_by",
    "assessed_by_name",
    "assessed_by_role",
    "assessed_at",
    "assessment_notes",
    "status_updated_by",
    "status_updated_by_name",
    "status_updated_by_role",
    "status_updated_at",
]


# ═══════════════════════════════════════════════════════════════════
#  Persons
# ═══════════════════════════════════════════════════════════════════


class PersonListSerializer(serializers.ModelSerializer):
    class Meta:
        model = Person
        fields = [
            "id", "name", "handle", "aliases", "location",
            "danger_level", "classification", "status", "created_at",
        ]
        read_only_fields = fields


class PersonDetailSerializer(serializers.ModelSerializer):
    crime_stats = serializers.SerializerMethodField()

    class Meta:
        model = Person
        fields = [
            "id", "name", "handle", "aliases", "location", "language",
            "avatar_url", "citizen_record", "enlisted_on", "bio", "notes",
            "last_scanned_at", *ASSESSMENT_FIELDS, "crime_stats",
            "created_at", "updated_at",
        ]
        read_only_fields = fields

    def get_crime_stats(self, obj) -> dict[str, int]:
        stats = self.context.get("crime_stats")
        return stats if stats is not None else {}


class PersonWriteSerializer(serializers.ModelSerializer):
    aliases = serializers.ListField(
        child=serializers.CharField(max_length=100),
        required=False,
    )

    class Meta:
        model = Person
        fields = [
            "name", "handle", "aliases", "location", "language",
            "avatar_url", "citizen_record", "enlisted_on", "bio", "notes",
            "last_scanned_at",
        ]
        # Handle uniqueness is case-insensitive and checked by the service.
        validators = []


# ═══════════════════════════════════════════════════════════════════
#  Organizations
# ═══════════════════════════════════════════════════════════════════


class OrganizationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Organization
        fields = [
            "id", "name", "handle", "description", "headquarters", "logo_url",
            *ASSESSMENT_FIELDS, "created_at", "updated_at",
        ]
        read_only_fields = ["id", *ASSESSMENT_FIELDS, "created_at", "updated_at"]


class MembershipSerializer(serializers.ModelSerializer):
    person_name = serializers.CharField(source="person.name", read_only=True)
    organization_name = serializers.CharField(source="organization.name", read_only=True)

    class Meta:
        model = Membership
        fields = [
            "id", "person", "person_name", "organization", "organization_name",
            "rank", "is_active", "started_on", "ended_on", "last_verified_at",
            "created_at", "updated_at",
        ]
        read_only_fields = ["id", "person_name", "organization_name", "created_at", "updated_at"]


class OrgRelationshipSerializer(serializers.ModelSerializer):
    organization_name = serializers.CharField(source="organization.name", read_only=True)
    related_organization_name = serializers.CharField(
        source="related_organization.name", read_only=True,
    )

    class Meta:
        model = OrgRelationship
        fields = [
            "id", "organization", "organization_name",
            "related_organization", "related_organization_name",
            "relationship_type", "description", "started_on",
            "last_verified_at", "created_at", "updated_at",
        ]
        read_only_fields = [
            "id", "organization_name", "related_organization_name",
            "created_at", "updated_at",
        ]


class OrganizationJournalSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrganizationJournal
        fields = [
            "id", "organization", "entry_date", "title", "content",
            "author", "author_name", "created_at", "updated_at",
        ]
        read_only_fields = [
            "id", "organization", "author", "author_name", "created_at", "updated_at",
        ]


# ═══════════════════════════════════════════════════════════════════
#  Incidents
# ═══════════════════════════════════════════════════════════════════


class IncidentSerializer(serializers.ModelSerializer):
    person_handle = serializers.CharField(source="person.handle", read_only=True)

    class Meta:
        model = IncidentEntry
        fields = [
            "id", "person", "person_name", "person_handle", "occurred_on",
            "description", "crime_types", "witness_names",
            "reported_by", "reported_by_name", "reported_by_role",
            *ASSESSMENT_FIELDS, "created_at", "updated_at",
        ]
        read_only_fields = fields


class IncidentReportSerializer(serializers.Serializer):
    handle = serializers.CharField(max_length=100)
    occurred_on = serializers.DateField()
    description = serializers.CharField(required=False, allow_blank=True, default="")
    crime_types = serializers.ListField(
        child=serializers.ChoiceField(choices=CrimeType.choices),
        required=False,
        default=list,
    )
    witness_names = serializers.CharField(required=False, allow_blank=True, default="")


class IncidentUpdateSerializer(serializers.Serializer):
    occurred_on = serializers.DateField(required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    crime_types = serializers.ListField(
        child=serializers.ChoiceField(choices=CrimeType.choices),
        required=False,
    )
    witness_names = serializers.CharField(required=False, allow_blank=True)


class IncidentFilterSerializer(serializers.Serializer):
    status = serializers.CharField(required=False)
    person = serializers.IntegerField(required=False)
    min_danger_level = serializers.IntegerField(required=False, min_value=1, max_value=6)


# ═══════════════════════════════════════════════════════════════════
#  Fleet
# ═══════════════════════════════════════════════════════════════════


class ManufacturerSerializer(serializers.ModelSerializer):
    model_count = serializers.SerializerMethodField()

    class Meta:
        model = Manufacturer
        fields = ["id", "name", "logo_url", "description", "model_count", "created_at", "updated_at"]
        read_only_fields = ["id", "model_count", "created_at", "updated_at"]
        # Name uniqueness is case-insensitive and checked by the service.
        validators = []

    def get_model_count(self, obj) -> int:
        count = getattr(obj, "model_count", None)
        return count if count is not None else obj.ship_models.count()


class ShipModelSerializer(serializers.ModelSerializer):
    manufacturer_name = serializers.CharField(source="manufacturer.name", read_only=True)

    class Meta:
        model = ShipModel
        fields = [
            "id", "manufacturer", "manufacturer_name", "name", "ship_type",
            "description", "created_at", "updated_at",
        ]
        read_only_fields = ["id", "manufacturer_name", "created_at", "updated_at"]
        validators = []


class ShipSerializer(serializers.ModelSerializer):
    class Meta:
        model = Ship
        fields = [
            "id", "name", "serial_number", "model", "model_name",
            "manufacturer_name", "location", "status", "description",
            "created_at", "updated_at",
        ]
        read_only_fields = ["id", "model_name", "manufacturer_name", "created_at", "updated_at"]
        validators = []


class ShipModelFilterSerializer(serializers.Serializer):
    manufacturer = serializers.IntegerField(required=False)


class ShipFilterSerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=ShipStatus.choices, required=False)


class ShipAssignmentSerializer(serializers.ModelSerializer):
    ship_name = serializers.CharField(source="ship.name", read_only=True)
    person_name = serializers.CharField(source="person.name", read_only=True)

    class Meta:
        model = ShipAssignment
        fields = [
            "id", "ship", "ship_name", "person", "person_name", "role",
            "assigned_on", "created_at",
        ]
        read_only_fields = ["id", "ship", "ship_name", "person_name", "created_at"]
        validators = []


class ShipJournalSerializer(serializers.ModelSerializer):
    class Meta:
        model = ShipJournal
        fields = [
            "id", "ship", "entry_date", "description",
            "author", "author_name", "created_at", "updated_at",
        ]
        read_only_fields = ["id", "ship", "author", "author_name", "created_at", "updated_at"]
