"""
Assessments app views — **Thin Views**.

Every endpoint is addressed by ``<target_type>/<pk>`` where
``target_type`` is one of ``person``, ``organization`` or ``incident``.

Endpoint Map
------------
GET  /api/assessments/{target_type}/{pk}/                    — assessment state + viewer rights
POST /api/assessments/{target_type}/{pk}/assess/             — set danger level / classification
POST /api/assessments/{target_type}/{pk}/status/             — set workflow status
GET  /api/assessments/{target_type}/{pk}/assessment-history/ — history, newest first
GET  /api/assessments/{target_type}/{pk}/status-log/         — status changes, newest first
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import (
    AssessmentHistorySerializer,
    AssessmentStateSerializer,
    AssessmentUpdateSerializer,
    StatusChangeLogSerializer,
    StatusUpdateSerializer,
)
from .services import UNCHECKED, AssessmentService, can_assess, can_manage_status


def _state_response(request: Request, target_type: str, target) -> Response:
    serializer = AssessmentStateSerializer(
        target,
        context={
            "request": request,
            "target_type": target_type,
            "can_assess": can_assess(request.user, target.assessed_by_role, target.assessed_by_id),
            "can_manage_status": can_manage_status(request.user),
        },
    )
    return Response(serializer.data, status=status.HTTP_200_OK)


class AssessmentStateView(APIView):
    """
    **GET /api/assessments/{target_type}/{pk}/**

    The target's assessment block, plus whether the caller may assess it
    and whether they may change its status.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Assessment state",
        responses={
            200: OpenApiResponse(response=AssessmentStateSerializer),
            404: OpenApiResponse(description="Unknown target type or id."),
        },
        tags=["Assessments"],
    )
    def get(self, request: Request, target_type: str, pk: str) -> Response:
        target = AssessmentService.get_target(request.user, target_type, pk)
        return _state_response(request, target_type, target)


class AssessView(APIView):
    """
    **POST /api/assessments/{target_type}/{pk}/assess/**

    Sentinels may always assess; high judges may assess fresh targets or
    override judges; judges may assess fresh targets or revise their
    own assessment.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Assess target",
        request=AssessmentUpdateSerializer,
        responses={
            200: OpenApiResponse(response=AssessmentStateSerializer),
            400: OpenApiResponse(description="Danger level outside 1–6 or unknown classification."),
            403: OpenApiResponse(description="Override rule forbids this actor."),
            409: OpenApiResponse(description="Target re-assessed concurrently."),
        },
        tags=["Assessments"],
    )
    def post(self, request: Request, target_type: str, pk: str) -> Response:
        serializer = AssessmentUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        target = AssessmentService.update_assessment(
            actor=request.user,
            target_type=target_type,
            target_id=pk,
            danger_level=data["danger_level"],
            classification=data.get("classification"),
            notes=data.get("notes"),
            expected_assessed_by_id=data.get("expected_assessed_by", UNCHECKED),
        )
        return _state_response(request, target_type, target)


class StatusView(APIView):
    """**POST /api/assessments/{target_type}/{pk}/status/**"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Change status",
        request=StatusUpdateSerializer,
        responses={
            200: OpenApiResponse(response=AssessmentStateSerializer),
            400: OpenApiResponse(description="Unknown status."),
            403: OpenApiResponse(description="Only sentinels and judges may change statuses."),
        },
        tags=["Assessments"],
    )
    def post(self, request: Request, target_type: str, pk: str) -> Response:
        serializer = StatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        target = AssessmentService.update_status(
            actor=request.user,
            target_type=target_type,
            target_id=pk,
            status=serializer.validated_data["status"],
        )
        return _state_response(request, target_type, target)


class AssessmentHistoryView(APIView):
    """**GET /api/assessments/{target_type}/{pk}/assessment-history/**"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Assessment history",
        responses={200: OpenApiResponse(response=AssessmentHistorySerializer(many=True))},
        tags=["Assessments"],
    )
    def get(self, request: Request, target_type: str, pk: str) -> Response:
        qs = AssessmentService.history_for(request.user, target_type, pk)
        serializer = AssessmentHistorySerializer(qs, many=True, context={"request": request})
        return Response(serializer.data, status=status.HTTP_200_OK)


class StatusLogView(APIView):
    """**GET /api/assessments/{target_type}/{pk}/status-log/**"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Status change log",
        responses={200: OpenApiResponse(response=StatusChangeLogSerializer(many=True))},
        tags=["Assessments"],
    )
    def get(self, request: Request, target_type: str, pk: str) -> Response:
        qs = AssessmentService.status_log_for(request.user, target_type, pk)
        return Response(StatusChangeLogSerializer(qs, many=True).data, status=status.HTTP_200_OK)
