"""
Hearings app ViewSets.

ViewSets
--------
- ``HearingViewSet``          — /hearings/
- ``HearingResponseViewSet``  — /hearings/{hearing_pk}/responses/
- ``WitnessStatementViewSet`` — /statements/

Judge-capable actors see everything; witnesses see what names them.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from .serializers import (
    HearingCreateSerializer,
    HearingFilterSerializer,
    HearingRespondSerializer,
    HearingResponseSerializer,
    HearingSerializer,
    JudgeCommentSerializer,
    StatementFilterSerializer,
    StatementRequestSerializer,
    StatementSubmitSerializer,
    WitnessStatementSerializer,
)
from .services import HearingService, WitnessStatementService


class HearingViewSet(viewsets.ViewSet):
    """/api/hearings/hearings/"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List hearings",
        parameters=[
            OpenApiParameter(name="status", type=str, location=OpenApiParameter.QUERY, description="active | closed"),
            OpenApiParameter(name="entry", type=int, location=OpenApiParameter.QUERY, description="Incident id."),
        ],
        responses={200: OpenApiResponse(response=HearingSerializer(many=True))},
        tags=["Hearings"],
    )
    def list(self, request: Request) -> Response:
        filters = HearingFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        qs = HearingService.list_hearings(
            request.user,
            status=filters.validated_data.get("status"),
            entry_id=filters.validated_data.get("entry"),
        )
        return Response(HearingSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Open hearing",
        request=HearingCreateSerializer,
        responses={
            201: OpenApiResponse(response=HearingSerializer),
            403: OpenApiResponse(description="Judges only."),
        },
        tags=["Hearings"],
    )
    def create(self, request: Request) -> Response:
        serializer = HearingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        hearing = HearingService.create_hearing(
            actor=request.user,
            entry_id=data["entry"],
            title=data["title"],
            question=data["question"],
            witness_ids=data["witnesses"],
        )
        return Response(HearingSerializer(hearing).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Retrieve hearing",
        responses={200: OpenApiResponse(response=HearingSerializer)},
        tags=["Hearings"],
    )
    def retrieve(self, request: Request, pk: str = None) -> Response:
        hearing = HearingService.get_hearing(request.user, pk)
        return Response(HearingSerializer(hearing).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Close hearing",
        request=None,
        responses={
            200: OpenApiResponse(response=HearingSerializer),
            409: OpenApiResponse(description="Already closed."),
        },
        tags=["Hearings"],
    )
    @action(detail=True, methods=["post"], url_path="close")
    def close(self, request: Request, pk: str = None) -> Response:
        hearing = HearingService.close_hearing(actor=request.user, hearing_id=pk)
        return Response(HearingSerializer(hearing).data, status=status.HTTP_200_OK)


class HearingResponseViewSet(viewsets.ViewSet):
    """
    Witness answers to one hearing.

    Nested under ``/api/hearings/hearings/{hearing_pk}/responses/``.

    Endpoints
    ---------
        GET    /api/hearings/hearings/{hearing_pk}/responses/  → list
        POST   /api/hearings/hearings/{hearing_pk}/responses/  → answer (upsert)
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List hearing responses",
        responses={200: OpenApiResponse(response=HearingResponseSerializer(many=True))},
        tags=["Hearings"],
    )
    def list(self, request: Request, hearing_pk: str = None) -> Response:
        qs = HearingService.list_responses(request.user, hearing_pk)
        return Response(HearingResponseSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Answer hearing",
        description="Agree or disagree.  Answering again replaces the earlier answer.",
        request=HearingRespondSerializer,
        responses={
            200: OpenApiResponse(response=HearingResponseSerializer),
            403: OpenApiResponse(description="Not a witness of this hearing."),
            409: OpenApiResponse(description="Hearing closed."),
        },
        tags=["Hearings"],
    )
    def create(self, request: Request, hearing_pk: str = None) -> Response:
        serializer = HearingRespondSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        response = HearingService.submit_response(
            actor=request.user,
            hearing_id=hearing_pk,
            **serializer.validated_data,
        )
        return Response(HearingResponseSerializer(response).data, status=status.HTTP_200_OK)


class WitnessStatementViewSet(viewsets.ViewSet):
    """/api/hearings/statements/"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List witness statements",
        parameters=[
            OpenApiParameter(name="incident", type=int, location=OpenApiParameter.QUERY, description="Incident id."),
            OpenApiParameter(name="status", type=str, location=OpenApiParameter.QUERY, description="pending | submitted"),
        ],
        responses={200: OpenApiResponse(response=WitnessStatementSerializer(many=True))},
        tags=["Witness Statements"],
    )
    def list(self, request: Request) -> Response:
        filters = StatementFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        qs = WitnessStatementService.list_statements(
            request.user,
            incident_id=filters.validated_data.get("incident"),
            status=filters.validated_data.get("status"),
        )
        return Response(WitnessStatementSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Request statements",
        description=(
            "Create one pending statement per witness of an incident.  "
            "Idempotent per incident and witness."
        ),
        request=StatementRequestSerializer,
        responses={201: OpenApiResponse(response=WitnessStatementSerializer(many=True))},
        tags=["Witness Statements"],
    )
    def create(self, request: Request) -> Response:
        serializer = StatementRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        statements = WitnessStatementService.request_statements(
            actor=request.user,
            incident_id=serializer.validated_data["incident"],
            witness_ids=serializer.validated_data["witnesses"],
        )
        return Response(
            WitnessStatementSerializer(statements, many=True).data,
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(
        summary="Retrieve witness statement",
        responses={200: OpenApiResponse(response=WitnessStatementSerializer)},
        tags=["Witness Statements"],
    )
    def retrieve(self, request: Request, pk: str = None) -> Response:
        statement = WitnessStatementService.get_statement(request.user, pk)
        return Response(WitnessStatementSerializer(statement).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Submit statement",
        request=StatementSubmitSerializer,
        responses={
            200: OpenApiResponse(response=WitnessStatementSerializer),
            403: OpenApiResponse(description="Not the named witness."),
        },
        tags=["Witness Statements"],
    )
    @action(detail=True, methods=["post"], url_path="submit")
    def submit(self, request: Request, pk: str = None) -> Response:
        serializer = StatementSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        statement = WitnessStatementService.submit_statement(
            actor=request.user,
            statement_id=pk,
            statement=serializer.validated_data["statement"],
        )
        return Response(WitnessStatementSerializer(statement).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Judge comment",
        request=JudgeCommentSerializer,
        responses={200: OpenApiResponse(response=WitnessStatementSerializer)},
        tags=["Witness Statements"],
    )
    @action(detail=True, methods=["post"], url_path="judge-comment")
    def judge_comment(self, request: Request, pk: str = None) -> Response:
        serializer = JudgeCommentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        statement = WitnessStatementService.add_judge_comment(
            actor=request.user,
            statement_id=pk,
            **serializer.validated_data,
        )
        return Response(WitnessStatementSerializer(statement).data, status=status.HTTP_200_OK)
