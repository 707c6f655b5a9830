"""
Accounts app views.

All views follow the **Thin View** pattern: validate input via
serializers, delegate to the service layer, and return the result
wrapped in a DRF ``Response``.  **No business logic** resides here.

View Map
--------
- ``LoginView``              — POST /auth/login/
- ``MeView``                 — GET /me/
- ``ImpersonateView``        — POST /session/impersonate/
- ``StopImpersonationView``  — POST /session/stop/
- ``ActorViewSet``           — /actors/  (list, retrieve, create, update,
                               assign-role, toggle-active, change-password)
- ``RoleViewSet``            — /roles/   (list, retrieve, upload-image)
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from .authentication import OfflineTolerantJWTAuthentication
from .serializers import (
    ActorCreateSerializer,
    ActorDetailSerializer,
    ActorFilterSerializer,
    ActorListSerializer,
    ActorUpdateSerializer,
    AssignRoleSerializer,
    BureauTokenObtainPairSerializer,
    ChangePasswordSerializer,
    ImpersonateSerializer,
    RoleImageUploadSerializer,
    RoleSerializer,
    SessionSerializer,
)
from .services import (
    ActorDirectoryService,
    ActorManagementService,
    AuthenticationService,
    ImpersonationService,
    RoleService,
)


# ═══════════════════════════════════════════════════════════════════
#  Authentication & Session Views
# ═══════════════════════════════════════════════════════════════════


class LoginView(APIView):
    """
    POST /api/accounts/auth/login/

    Public endpoint.  Authenticates an actor by e-mail (or handle) and
    password and returns a token pair plus the actor profile.
    Inactive actors cannot log in.
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Log in",
        request=BureauTokenObtainPairSerializer,
        responses={
            200: OpenApiResponse(response=SessionSerializer, description="Token pair and profile."),
            400: OpenApiResponse(description="Invalid credentials or inactive account."),
        },
        tags=["Auth"],
    )
    def post(self, request: Request) -> Response:
        serializer = BureauTokenObtainPairSerializer(
            data=request.data,
            context={"request": request},
        )
        serializer.is_valid(raise_exception=True)

        payload = dict(serializer.validated_data)
        payload["user"] = serializer.user
        out = SessionSerializer(payload, context={"request": request})
        return Response(out.data, status=status.HTTP_200_OK)


class MeView(APIView):
    """
    GET /api/accounts/me/

    Returns the acting identity's profile and, while impersonating, the
    original actor behind it.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Current session identity",
        responses={200: OpenApiResponse(description="Acting actor and optional original actor.")},
        tags=["Auth"],
    )
    def get(self, request: Request) -> Response:
        identity = AuthenticationService.identity_from_request(request)
        data = {
            "is_impersonating": identity.is_impersonating,
            "actor": ActorDetailSerializer(identity.active, context={"request": request}).data,
            "original": (
                ActorDetailSerializer(identity.original, context={"request": request}).data
                if identity.is_impersonating else None
            ),
        }
        return Response(data, status=status.HTTP_200_OK)


class ImpersonateView(APIView):
    """
    POST /api/accounts/session/impersonate/

    Switch the session to another actor.  Only master actors holding
    ``can_impersonate_actors`` may do this; the original actor stays
    anchored in the returned tokens until impersonation is stopped.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Impersonate an actor",
        request=ImpersonateSerializer,
        responses={
            200: OpenApiResponse(response=SessionSerializer, description="New tokens for the target identity."),
            403: OpenApiResponse(description="Not a master actor."),
            404: OpenApiResponse(description="Target actor not found."),
        },
        tags=["Auth"],
    )
    def post(self, request: Request) -> Response:
        serializer = ImpersonateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        identity = AuthenticationService.identity_from_request(request)
        new_identity, tokens = ImpersonationService.start(
            identity, serializer.validated_data["target_id"],
        )
        out = SessionSerializer({**tokens, "identity": new_identity}, context={"request": request})
        return Response(out.data, status=status.HTTP_200_OK)


class StopImpersonationView(APIView):
    """
    POST /api/accounts/session/stop/

    Restore the original actor.  A no-op (fresh tokens for the same
    actor) when the session is not impersonating.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Stop impersonating",
        request=None,
        responses={200: OpenApiResponse(response=SessionSerializer, description="Tokens for the original actor.")},
        tags=["Auth"],
    )
    def post(self, request: Request) -> Response:
        identity = AuthenticationService.identity_from_request(request)
        restored, tokens = ImpersonationService.stop(identity)
        out = SessionSerializer({**tokens, "identity": restored}, context={"request": request})
        return Response(out.data, status=status.HTTP_200_OK)


# ═══════════════════════════════════════════════════════════════════
#  Actor Management ViewSet
# ═══════════════════════════════════════════════════════════════════


class ActorViewSet(viewsets.ViewSet):
    """
    /api/accounts/actors/

    Actor directory and administration.  Listing is open to every
    authenticated actor (identity fields are masked per viewer); every
    write requires ``can_manage_users``, enforced in the service layer.

    Authentication falls back to token claims when the actor row cannot
    be read, so the listing can still serve the demo actors during a
    database outage.  Every other action then fails with 503.
    """

    permission_classes = [IsAuthenticated]
    authentication_classes = [OfflineTolerantJWTAuthentication]

    @extend_schema(
        summary="List actors",
        description=(
            "List actors, newest first.  Falls back to the demo actor set "
            "with degraded=true when the database is unreachable."
        ),
        parameters=[
            OpenApiParameter(name="role", type=str, location=OpenApiParameter.QUERY, description="Filter by role id."),
            OpenApiParameter(name="is_active", type=bool, location=OpenApiParameter.QUERY, description="Filter by active flag."),
            OpenApiParameter(name="search", type=str, location=OpenApiParameter.QUERY, description="Match handle, e-mail or real name."),
        ],
        responses={200: OpenApiResponse(description="Actors plus degraded flag.")},
        tags=["Actors"],
    )
    def list(self, request: Request) -> Response:
        filters = ActorFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)

        directory = ActorDirectoryService.load(**filters.validated_data)
        data = {
            "degraded": directory.degraded,
            "error": directory.error,
            "results": ActorListSerializer(
                directory.actors, many=True, context={"request": request},
            ).data,
        }
        return Response(data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Retrieve actor",
        responses={
            200: OpenApiResponse(response=ActorDetailSerializer),
            404: OpenApiResponse(description="Actor not found."),
        },
        tags=["Actors"],
    )
    def retrieve(self, request: Request, pk: str = None) -> Response:
        actor = ActorManagementService.get_actor(pk)
        return Response(
            ActorDetailSerializer(actor, context={"request": request}).data,
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        summary="Create actor",
        request=ActorCreateSerializer,
        responses={
            201: OpenApiResponse(response=ActorDetailSerializer, description="Actor created."),
            400: OpenApiResponse(description="Password policy violated (all rules listed in errors)."),
            403: OpenApiResponse(description="Requires can_manage_users."),
            409: OpenApiResponse(description="Handle or e-mail taken."),
        },
        tags=["Actors"],
    )
    def create(self, request: Request) -> Response:
        serializer = ActorCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        actor = ActorManagementService.create_actor(serializer.validated_data, request.user)
        return Response(
            ActorDetailSerializer(actor, context={"request": request}).data,
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(
        summary="Update actor profile",
        request=ActorUpdateSerializer,
        responses={200: OpenApiResponse(response=ActorDetailSerializer)},
        tags=["Actors"],
    )
    def partial_update(self, request: Request, pk: str = None) -> Response:
        serializer = ActorUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        actor = ActorManagementService.update_actor(pk, serializer.validated_data, request.user)
        return Response(
            ActorDetailSerializer(actor, context={"request": request}).data,
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        summary="Assign role",
        request=AssignRoleSerializer,
        responses={
            200: OpenApiResponse(response=ActorDetailSerializer),
            403: OpenApiResponse(description="Requires can_manage_users."),
            404: OpenApiResponse(description="Actor or role not found."),
        },
        tags=["Actors"],
    )
    @action(detail=True, methods=["patch"], url_path="assign-role")
    def assign_role(self, request: Request, pk: str = None) -> Response:
        serializer = AssignRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        actor = ActorManagementService.assign_role(
            actor_id=pk,
            role_id=serializer.validated_data["role"],
            performed_by=request.user,
        )
        return Response(
            ActorDetailSerializer(actor, context={"request": request}).data,
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        summary="Toggle active flag",
        request=None,
        responses={
            200: OpenApiResponse(response=ActorDetailSerializer),
            400: OpenApiResponse(description="Self-deactivation or active master actor."),
        },
        tags=["Actors"],
    )
    @action(detail=True, methods=["post"], url_path="toggle-active")
    def toggle_active(self, request: Request, pk: str = None) -> Response:
        actor = ActorManagementService.toggle_active(pk, performed_by=request.user)
        return Response(
            ActorDetailSerializer(actor, context={"request": request}).data,
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        summary="Change password",
        request=ChangePasswordSerializer,
        responses={
            200: OpenApiResponse(description="Password changed."),
            400: OpenApiResponse(description="Password policy violated."),
            404: OpenApiResponse(description="Actor not found."),
        },
        tags=["Actors"],
    )
    @action(detail=True, methods=["post"], url_path="change-password")
    def change_password(self, request: Request, pk: str = None) -> Response:
        serializer = ChangePasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        ActorManagementService.change_password(
            actor_id=pk,
            new_password=serializer.validated_data["new_password"],
            performed_by=request.user,
        )
        return Response({"success": True}, status=status.HTTP_200_OK)


# ═══════════════════════════════════════════════════════════════════
#  Role ViewSet
# ═══════════════════════════════════════════════════════════════════


class RoleViewSet(viewsets.ViewSet):
    """
    /api/accounts/roles/

    Read-only view of the role registry, with role images merged in.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List roles",
        responses={200: OpenApiResponse(response=RoleSerializer(many=True))},
        tags=["Roles"],
    )
    def list(self, request: Request) -> Response:
        return Response(
            RoleSerializer(RoleService.list_roles(), many=True).data,
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        summary="Retrieve role",
        responses={
            200: OpenApiResponse(response=RoleSerializer),
            404: OpenApiResponse(description="Unknown role id."),
        },
        tags=["Roles"],
    )
    def retrieve(self, request: Request, pk: str = None) -> Response:
        return Response(
            RoleSerializer(RoleService.get_role(pk)).data,
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        summary="Upload role image",
        request=RoleImageUploadSerializer,
        responses={
            200: OpenApiResponse(response=RoleSerializer),
            400: OpenApiResponse(description="Too large or unsupported type."),
            403: OpenApiResponse(description="Requires can_upload_role_images."),
        },
        tags=["Roles"],
    )
    @action(
        detail=True,
        methods=["post"],
        url_path="image",
        parser_classes=[MultiPartParser, FormParser],
    )
    def upload_image(self, request: Request, pk: str = None) -> Response:
        serializer = RoleImageUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        RoleService.upload_image(
            role_id=pk,
            image=serializer.validated_data["image"],
            performed_by=request.user,
        )
        return Response(
            RoleSerializer(RoleService.get_role(pk)).data,
            status=status.HTTP_200_OK,
        )
