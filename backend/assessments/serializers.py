"""
Assessments app serializers.

Request serializers check shape only: the danger level range, the
classification / status vocabulary and the override rule are enforced
by ``services.py`` so that every caller gets the same errors.
"""

from __future__ import annotations

from rest_framework import serializers

from accounts.disclosure import get_display_name
from core.domain.roles import get_role

from .models import AssessmentHistory, StatusChangeLog


def _viewer(serializer: serializers.Serializer):
    request = serializer.context.get("request")
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return None
    return user


def _role_label(role_id: str) -> str:
    role = get_role(role_id)
    return role.name if role is not None else ""


class AssessmentUpdateSerializer(serializers.Serializer):
    danger_level = serializers.IntegerField()
    classification = serializers.CharField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
    expected_assessed_by = serializers.IntegerField(
        required=False,
        allow_null=True,
        help_text=(
            "Assessor id seen when the form was loaded (null for an "
            "unassessed target).  When given, a concurrent re-assessment "
            "is reported as 409 instead of being overwritten."
        ),
    )


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.CharField()


class AssessmentStateSerializer(serializers.Serializer):
    """Assessment block of any assessable target, plus the viewer's rights."""

    target_type = serializers.SerializerMethodField()
    id = serializers.IntegerField(source="pk")
    danger_level = serializers.IntegerField()
    danger_label = serializers.CharField(source="get_danger_level_display")
    danger_colour = serializers.CharField()
    classification = serializers.CharField()
    status = serializers.CharField()
    is_assessed = serializers.BooleanField()
    assessed_by = serializers.IntegerField(source="assessed_by_id", allow_null=True)
    assessed_by_display = serializers.SerializerMethodField()
    assessed_by_role = serializers.CharField()
    assessed_by_role_name = serializers.SerializerMethodField()
    assessed_at = serializers.DateTimeField(allow_null=True)
    assessment_notes = serializers.CharField()
    status_updated_by = serializers.IntegerField(source="status_updated_by_id", allow_null=True)
    status_updated_by_name = serializers.CharField()
    status_updated_by_role = serializers.CharField()
    status_updated_at = serializers.DateTimeField(allow_null=True)
    can_assess = serializers.SerializerMethodField()
    can_manage_status = serializers.SerializerMethodField()

    def get_target_type(self, obj) -> str:
        return self.context.get("target_type", "")

    def get_assessed_by_display(self, obj) -> str | None:
        if not obj.is_assessed:
            return None
        return get_display_name(_viewer(self), obj)

    def get_assessed_by_role_name(self, obj) -> str:
        return _role_label(obj.assessed_by_role)

    def get_can_assess(self, obj) -> bool:
        return bool(self.context.get("can_assess", False))

    def get_can_manage_status(self, obj) -> bool:
        return bool(self.context.get("can_manage_status", False))


class AssessmentHistorySerializer(serializers.ModelSerializer):
    assessed_by_display = serializers.SerializerMethodField()
    assessed_by_role_name = serializers.SerializerMethodField()

    class Meta:
        model = AssessmentHistory
        fields = [
            "id", "object_id",
            "previous_danger_level", "new_danger_level",
            "previous_classification", "new_classification",
            "assessed_by", "assessed_by_name", "assessed_by_display",
            "assessed_by_role", "assessed_by_role_name",
            "notes", "created_at",
        ]
        read_only_fields = fields

    def get_assessed_by_display(self, obj) -> str:
        return get_display_name(_viewer(self), obj.assessed_by or obj)

    def get_assessed_by_role_name(self, obj) -> str:
        return _role_label(obj.assessed_by_role)


class StatusChangeLogSerializer(serializers.ModelSerializer):
    changed_by_role_name = serializers.SerializerMethodField()

    class Meta:
        model = StatusChangeLog
        fields = [
            "id", "object_id", "from_status", "to_status",
            "changed_by", "changed_by_name", "changed_by_role",
            "changed_by_role_name", "created_at",
        ]
        read_only_fields = fields

    def get_changed_by_role_name(self, obj) -> str:
        return _role_label(obj.changed_by_role)
