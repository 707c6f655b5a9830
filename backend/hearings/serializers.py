"""
Hearings app serializers.

Response serializers expose each witness once (responses are keyed by
witness) plus agree/disagree tallies.  Request serializers validate
shape only; see ``services.py`` for the rules.
"""

from __future__ import annotations

from rest_framework import serializers

from .models import Agreement, Hearing, HearingResponse, HearingStatus, StatementStatus, WitnessStatement
from .services import HearingService


class HearingResponseSerializer(serializers.ModelSerializer):
    class Meta:
        model = HearingResponse
        fields = [
            "id", "witness", "witness_name", "agreement", "comment",
            "created_at", "updated_at",
        ]
        read_only_fields = fields


class HearingSerializer(serializers.ModelSerializer):
    responses = HearingResponseSerializer(many=True, read_only=True)
    tallies = serializers.SerializerMethodField()

    class Meta:
        model = Hearing
        fields = [
            "id", "entry", "title", "question", "witnesses",
            "crime_types", "entry_description", "status",
            "created_by", "created_by_name", "created_by_role",
            "closed_by", "closed_at", "responses", "tallies",
            "created_at", "updated_at",
        ]
        read_only_fields = fields

    def get_tallies(self, obj) -> dict[str, int]:
        return HearingService.tallies(obj)


class HearingCreateSerializer(serializers.Serializer):
    entry = serializers.IntegerField()
    title = serializers.CharField(max_length=200)
    question = serializers.CharField()
    witnesses = serializers.ListField(child=serializers.IntegerField(), allow_empty=True)


class HearingFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=HearingStatus.choices, required=False)
    entry = serializers.IntegerField(required=False)


class HearingRespondSerializer(serializers.Serializer):
    agreement = serializers.ChoiceField(choices=Agreement.choices)
    comment = serializers.CharField(required=False, allow_blank=True, default="")


class WitnessStatementSerializer(serializers.ModelSerializer):
    class Meta:
        model = WitnessStatement
        fields = [
            "id", "incident", "witness", "witness_name", "statement",
            "statement_status", "submitted_at", "judge", "judge_name",
            "judge_comment", "judge_request", "judge_commented_at",
            "created_at", "updated_at",
        ]
        read_only_fields = fields


class StatementRequestSerializer(serializers.Serializer):
    incident = serializers.IntegerField()
    witnesses = serializers.ListField(
        child=serializers.IntegerField(),
        required=False,
        default=list,
        help_text="Witness actor ids.  Omit to use the names typed on the report.",
    )


class StatementSubmitSerializer(serializers.Serializer):
    statement = serializers.CharField(allow_blank=True)


class JudgeCommentSerializer(serializers.Serializer):
    comment = serializers.CharField(required=False, allow_blank=True, default="")
    request = serializers.CharField(required=False, allow_blank=True, default="")


class StatementFilterSerializer(serializers.Serializer):
    incident = serializers.IntegerField(required=False)
    status = serializers.ChoiceField(choices=StatementStatus.choices, required=False)
