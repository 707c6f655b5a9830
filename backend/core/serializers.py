"""
Core app serializers.

Read-only response serializers for the aggregation endpoints.  The
services produce plain dicts; these classes only describe their shape
(and feed the OpenAPI schema).
"""

from __future__ import annotations

from rest_framework import serializers


# ════════════════════════════════════════════════════════════════════
#  Backend Status
# ════════════════════════════════════════════════════════════════════

class BackendStatusSerializer(serializers.Serializer):
    connected = serializers.BooleanField()
    error = serializers.CharField(allow_null=True)
    retryable = serializers.BooleanField(
        help_text="True when the client should retry later.",
    )


# ════════════════════════════════════════════════════════════════════
#  Dashboard
# ════════════════════════════════════════════════════════════════════

class DashboardStatsSerializer(serializers.Serializer):
    """
    Response serializer for ``GET /api/core/dashboard/``.

    Incident counts are scoped to what the caller may see.
    """

    total_persons = serializers.IntegerField()
    total_organizations = serializers.IntegerField()
    total_incidents = serializers.IntegerField()
    pending_incidents = serializers.IntegerField()
    active_hearings = serializers.IntegerField()


# ════════════════════════════════════════════════════════════════════
#  Global Search
# ════════════════════════════════════════════════════════════════════

class SearchDossierResultSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    handle = serializers.CharField()
    danger_level = serializers.IntegerField()
    status = serializers.CharField()


class SearchIncidentResultSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    person_name = serializers.CharField()
    occurred_on = serializers.DateField()
    danger_level = serializers.IntegerField()
    status = serializers.CharField()


class GlobalSearchResponseSerializer(serializers.Serializer):
    query = serializers.CharField(help_text="The search term as executed.")
    total_results = serializers.IntegerField()
    persons = SearchDossierResultSerializer(many=True)
    organizations = SearchDossierResultSerializer(many=True)
    incidents = SearchIncidentResultSerializer(many=True)


# ════════════════════════════════════════════════════════════════════
#  System Constants / Enums
# ════════════════════════════════════════════════════════════════════

class ChoiceItemSerializer(serializers.Serializer):
    """
    A single key-label pair representing one choice/enum option.

    Example::

        {"value": "threat", "label": "Threat"}
    """

    value = serializers.CharField(
        help_text="Machine-readable value to send in API requests.",
    )
    label = serializers.CharField(
        help_text="Human-readable display label for the UI.",
    )


class DangerLevelItemSerializer(ChoiceItemSerializer):
    colour = serializers.CharField(help_text="green, yellow, orange or red.")


class RoleHierarchyItemSerializer(serializers.Serializer):
    id = serializers.CharField(help_text="Role id, e.g. ``high_judge``.")
    name = serializers.CharField(help_text="Role display name.")
    hierarchy_level = serializers.IntegerField(
        help_text="Authority level (higher = more authority).",
    )


class SystemConstantsSerializer(serializers.Serializer):
    """
    Top-level response serializer for ``GET /api/core/constants/``.

    Response shape::

        {
            "danger_levels": [
                {"value": "1", "label": "Minimal", "colour": "green"},
                ...
            ],
            "classifications": [...],
            "assessment_statuses": [...],
            "crime_types": [...],
            "relationship_types": [...],
            "ship_types": [...],
            "ship_statuses": [...],
            "hearing_statuses": [...],
            "hearing_agreements": [...],
            "statement_statuses": [...],
            "role_hierarchy": [
                {"id": "sentinel", "name": "Sentinel", "hierarchy_level": 100},
                ...
            ],
            "password_min_length": 7
        }
    """

    danger_levels = DangerLevelItemSerializer(many=True)
    classifications = ChoiceItemSerializer(many=True)
    assessment_statuses = ChoiceItemSerializer(many=True)
    crime_types = ChoiceItemSerializer(many=True)
    relationship_types = ChoiceItemSerializer(many=True)
    ship_types = ChoiceItemSerializer(many=True)
    ship_statuses = ChoiceItemSerializer(many=True)
    hearing_statuses = ChoiceItemSerializer(many=True)
    hearing_agreements = ChoiceItemSerializer(many=True)
    statement_statuses = ChoiceItemSerializer(many=True)
    role_hierarchy = RoleHierarchyItemSerializer(
        many=True,
        help_text="All roles, highest authority first.",
    )
    password_min_length = serializers.IntegerField()
