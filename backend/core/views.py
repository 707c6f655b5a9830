"""
Core app views — **Thin Views**.

Each view delegates all business logic to the corresponding service in
``core.services``.  Views are responsible only for:

1. Extracting and validating query parameters from the request.
2. Calling the service with the authenticated actor and parameters.
3. Serialising the result and returning an HTTP ``Response``.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from .domain.exceptions import ValidationFailed
from .serializers import (
    BackendStatusSerializer,
    DashboardStatsSerializer,
    GlobalSearchResponseSerializer,
    SystemConstantsSerializer,
)
from .services import (
    BackendStatusService,
    DashboardAggregationService,
    GlobalSearchService,
    SystemConstantsService,
)


class BackendStatusView(APIView):
    """
    **GET /api/core/status/**

    Public connection probe.  Always answers ``200``; the body says
    whether the database is reachable and whether to retry.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        summary="Backend status",
        responses={200: OpenApiResponse(response=BackendStatusSerializer)},
        tags=["Status"],
    )
    def get(self, request: Request) -> Response:
        data = BackendStatusService.probe()
        return Response(BackendStatusSerializer(data).data, status=status.HTTP_200_OK)


class DashboardStatsView(APIView):
    """
    **GET /api/core/dashboard/**

    Headline counts.  Incident totals are scoped: a citizen only counts
    the incidents they reported.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Dashboard statistics",
        responses={200: OpenApiResponse(response=DashboardStatsSerializer)},
        tags=["Dashboard"],
    )
    def get(self, request: Request) -> Response:
        data = DashboardAggregationService(user=request.user).get_stats()
        return Response(DashboardStatsSerializer(data).data, status=status.HTTP_200_OK)


class GlobalSearchView(APIView):
    """
    **GET /api/core/search/?q=<term>[&category=<cat>][&limit=<n>]**

    Unified search across persons, organizations and incidents.

    **Query Parameters**:
        - ``q`` (str, **required**): at least 2 characters.
        - ``category`` (str, optional): ``persons``, ``organizations``
          or ``incidents``.
        - ``limit`` (int, optional): per category, default 10, max 50.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Global search",
        parameters=[
            OpenApiParameter(name="q", type=str, required=True, description="Search term (min 2 chars)."),
            OpenApiParameter(name="category", type=str, required=False, description="persons, organizations or incidents."),
            OpenApiParameter(name="limit", type=int, required=False, description="Max results per category (default 10, max 50)."),
        ],
        responses={
            200: OpenApiResponse(response=GlobalSearchResponseSerializer),
            400: OpenApiResponse(description="Missing or invalid query parameter."),
        },
        tags=["Search"],
    )
    def get(self, request: Request) -> Response:
        query = request.query_params.get("q", "").strip()
        if len(query) < GlobalSearchService.MIN_QUERY_LENGTH:
            raise ValidationFailed(errors=[
                f"Search query must be at least "
                f"{GlobalSearchService.MIN_QUERY_LENGTH} characters.",
            ])

        category = request.query_params.get("category", None)
        if category is not None and category not in GlobalSearchService.CATEGORIES:
            raise ValidationFailed(errors=[
                f"Invalid category '{category}'. "
                f"Must be one of: {', '.join(GlobalSearchService.CATEGORIES)}.",
            ])

        try:
            limit = int(request.query_params.get("limit", GlobalSearchService.DEFAULT_LIMIT))
        except (TypeError, ValueError):
            limit = GlobalSearchService.DEFAULT_LIMIT

        data = GlobalSearchService(
            query=query,
            user=request.user,
            category=category,
            limit=limit,
        ).search()
        return Response(GlobalSearchResponseSerializer(data).data, status=status.HTTP_200_OK)


class SystemConstantsView(APIView):
    """
    **GET /api/core/constants/**

    Every public enumeration plus the role table.  No authentication
    required: these are configuration, not data.
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="System constants",
        responses={200: OpenApiResponse(response=SystemConstantsSerializer)},
        tags=["Constants"],
    )
    def get(self, request: Request) -> Response:
        data = SystemConstantsService.get_constants()
        return Response(SystemConstantsSerializer(data).data, status=status.HTTP_200_OK)
