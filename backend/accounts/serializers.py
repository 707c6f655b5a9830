"""
Accounts app serializers.

Contains all Request and Response serializers for the accounts API.
Serializers handle field definitions, read/write constraints, and
basic validation.  **No business logic** lives here — all domain
rules are delegated to ``services.py``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from core.constants import ROLE_IMAGE_CONTENT_TYPES, ROLE_IMAGE_MAX_BYTES
from core.domain.roles import get_role
from core.permissions_constants import RoleId

from .disclosure import get_display_email, get_display_name
from .services import AuthenticationService, RoleService, add_actor_claims
from .sessions import Normal

Actor = get_user_model()


def _viewer(serializer: serializers.Serializer):
    request = serializer.context.get("request")
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return None
    return user


def _role_of(obj: Any) -> str | None:
    if isinstance(obj, Mapping):
        return obj.get("role")
    return getattr(obj, "role", None)


# ═══════════════════════════════════════════════════════════════════
#  Role Serializers
# ═══════════════════════════════════════════════════════════════════


class RoleSerializer(serializers.Serializer):
    """
    A role definition from the registry plus its optional image.

    Serialises ``RoleListing`` records as produced by ``RoleService``.
    """

    id = serializers.CharField(source="role.id")
    name = serializers.CharField(source="role.name")
    description = serializers.CharField(source="role.description")
    hierarchy_level = serializers.IntegerField(source="role.hierarchy_level")
    permissions = serializers.SerializerMethodField()
    image_url = serializers.CharField(allow_null=True)

    def get_permissions(self, obj) -> list[str]:
        return sorted(obj.role.permissions)


class RoleImageUploadSerializer(serializers.Serializer):
    """Validates a role image: at most 5 MiB, PNG / JPEG / WebP only."""

    image = serializers.FileField()

    def validate_image(self, value):
        if value.size > ROLE_IMAGE_MAX_BYTES:
            raise serializers.ValidationError("Image must be 5 MB or smaller.")
        content_type = getattr(value, "content_type", None)
        if content_type not in ROLE_IMAGE_CONTENT_TYPES:
            raise serializers.ValidationError(
                "Only PNG, JPEG and WebP images are accepted."
            )
        return value


# ═══════════════════════════════════════════════════════════════════
#  Actor Serializers
# ═══════════════════════════════════════════════════════════════════


class ActorListSerializer(serializers.Serializer):
    """
    Compact actor representation used by listings.

    Works for model instances and for the plain demo records served
    while the directory is degraded.  Identity fields are projected
    through the disclosure rules for the requesting actor.
    """

    id = serializers.IntegerField()
    display_name = serializers.SerializerMethodField()
    display_email = serializers.SerializerMethodField()
    role = serializers.CharField()
    role_name = serializers.SerializerMethodField()
    is_active = serializers.BooleanField()
    is_master_actor = serializers.BooleanField()

    def get_display_name(self, obj) -> str:
        return get_display_name(_viewer(self), obj)

    def get_display_email(self, obj) -> str:
        return get_display_email(_viewer(self), obj)

    def get_role_name(self, obj) -> str:
        role = get_role(_role_of(obj))
        return role.name if role else ""


class ActorDetailSerializer(serializers.ModelSerializer):
    """
    Full actor profile including the role definition and a flat list of
    capability codenames for conditional UI rendering.
    """

    display_name = serializers.SerializerMethodField()
    display_email = serializers.SerializerMethodField()
    role_detail = serializers.SerializerMethodField()
    capabilities = serializers.ListField(child=serializers.CharField(), read_only=True)

    class Meta:
        model = Actor
        fields = [
            "id",
            "username",
            "email",
            "real_name",
            "display_name",
            "display_email",
            "role",
            "role_detail",
            "capabilities",
            "is_active",
            "is_master_actor",
            "date_joined",
        ]
        read_only_fields = fields

    def get_display_name(self, obj) -> str:
        return get_display_name(_viewer(self) or obj, obj)

    def get_display_email(self, obj) -> str:
        viewer = _viewer(self) or obj
        if viewer.pk == obj.pk:
            return obj.email
        return get_display_email(viewer, obj)

    def get_role_detail(self, obj) -> dict | None:
        role = obj.role_definition
        if role is None:
            return None
        return {
            "id": role.id,
            "name": role.name,
            "description": role.description,
            "hierarchy_level": role.hierarchy_level,
            "image_url": RoleService.image_map().get(role.id),
        }


class ActorCreateSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
        help_text="At least 7 characters with one letter and one number.",
    )
    real_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=RoleId.choices, required=False)
    is_master_actor = serializers.BooleanField(required=False)


class ActorUpdateSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150, required=False)
    email = serializers.EmailField(required=False)
    real_name = serializers.CharField(max_length=150, required=False, allow_blank=True)


class AssignRoleSerializer(serializers.Serializer):
    role = serializers.CharField(help_text="Role id, e.g. 'judge'.")


class ChangePasswordSerializer(serializers.Serializer):
    new_password = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
    )


class ActorFilterSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=RoleId.choices, required=False)
    is_active = serializers.BooleanField(required=False, allow_null=True, default=None)
    search = serializers.CharField(required=False, allow_blank=True)


# ═══════════════════════════════════════════════════════════════════
#  Authentication Serializers
# ═══════════════════════════════════════════════════════════════════


class BureauTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    SimpleJWT serializer that:

    1. Accepts ``email`` (or handle) + ``password``.
    2. Resolves the actor via ``EmailOrHandleBackend``; inactive actors
       cannot log in.
    3. Injects ``role`` and ``capabilities`` claims so the frontend can
       render without a separate call.
    """

    username_field = "email"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields[self.username_field] = serializers.CharField(
            help_text="E-mail address or handle.",
        )

    @classmethod
    def get_token(cls, user) -> Any:
        return add_actor_claims(super().get_token(user), user)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        actor = AuthenticationService.authenticate(
            identifier=attrs.get(self.username_field),
            password=attrs.get("password"),
        )
        if actor is None:
            raise serializers.ValidationError(
                {"detail": "Invalid credentials."},
                code="authentication",
            )

        refresh = self.get_token(actor)
        self.user = actor
        return {
            "access": str(refresh.access_token),
            "refresh": str(refresh),
        }


class ImpersonateSerializer(serializers.Serializer):
    target_id = serializers.IntegerField()


class SessionSerializer(serializers.Serializer):
    """
    Token pair plus the session identity it encodes.

    ``original`` is ``null`` unless the session is impersonating.
    """

    access = serializers.CharField(read_only=True)
    refresh = serializers.CharField(read_only=True)
    is_impersonating = serializers.SerializerMethodField()
    actor = serializers.SerializerMethodField()
    original = serializers.SerializerMethodField()

    def _identity(self, obj: dict):
        return obj.get("identity") or Normal(obj.get("user"))

    def get_is_impersonating(self, obj: dict) -> bool:
        return self._identity(obj).is_impersonating

    def get_actor(self, obj: dict) -> dict:
        return ActorDetailSerializer(self._identity(obj).active, context=self.context).data

    def get_original(self, obj: dict) -> dict | None:
        identity = self._identity(obj)
        if not identity.is_impersonating:
            return None
        return ActorDetailSerializer(identity.original, context=self.context).data
