"""
Accounts Service Layer.

This module is the **single source of truth** for all business logic
within the ``accounts`` app.  Views must remain *thin*: they validate
input through serializers, call a service method, and return the result
wrapped in a DRF ``Response``.

Architecture
------------
- ``AuthenticationService``   — handle/e-mail login, JWT issuance and
                                session identity resolution.
- ``ImpersonationService``    — start / stop acting as another actor.
- ``ActorManagementService``  — create, update, role assignment,
                                activation and password changes.
- ``ActorDirectoryService``   — actor listing with offline fallback.
- ``RoleService``             — role listing and role-image uploads.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any

from django.contrib.auth import authenticate as django_authenticate
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.core.files.storage import default_storage
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Q, QuerySet
from rest_framework_simplejwt.tokens import RefreshToken

from core.constants import ROLE_IMAGE_UPLOAD_DIR
from core.domain.access import require_capability
from core.domain.exceptions import (
    Conflict,
    DomainError,
    NotFound,
    PermissionDenied,
    ValidationFailed,
)
from core.domain.roles import RoleDefinition, get_role, list_roles
from core.permissions_constants import Capability

from .fallback import DEMO_ACTORS
from .models import RoleImage
from .sessions import Impersonating, Normal, SessionIdentity, impersonate, stop_impersonation
from .validators import validate_password

Actor = get_user_model()

logger = logging.getLogger(__name__)

#: JWT claim carrying the original actor while impersonating.
ORIGINAL_ACTOR_CLAIM = "original_actor_id"

ROLE_IMAGE_CACHE_KEY = "accounts:role-images"


def add_actor_claims(token, actor):
    """
    Stamp ``role`` and ``capabilities`` onto ``token``.

    Claims set on a refresh token are copied to every access token it
    mints, so requests can be authorized from the token alone while the
    database is unreachable.
    """
    token["role"] = actor.role
    token["capabilities"] = actor.capabilities
    return token


# ═══════════════════════════════════════════════════════════════════
#  Authentication Service
# ═══════════════════════════════════════════════════════════════════


class AuthenticationService:
    """
    Handles login, JWT token generation and the mapping between a
    request's token and its ``SessionIdentity``.
    """

    @staticmethod
    def authenticate(identifier: str, password: str) -> Actor | None:
        """
        Validate credentials and return the actor if successful.

        Returns ``None`` if the credentials are invalid or the actor is
        inactive (``EmailOrHandleBackend`` rejects inactive accounts).
        """
        return django_authenticate(identifier=identifier, password=password)

    @staticmethod
    def generate_tokens(identity: SessionIdentity) -> dict[str, str]:
        """
        Issue a JWT access/refresh pair for the identity's active actor.

        While impersonating, both tokens additionally carry
        ``original_actor_id``.  That claim is the only impersonation
        state the server keeps.
        """
        refresh = add_actor_claims(RefreshToken.for_user(identity.active), identity.active)
        if isinstance(identity, Impersonating):
            refresh[ORIGINAL_ACTOR_CLAIM] = identity.original.pk
        return {
            "access": str(refresh.access_token),
            "refresh": str(refresh),
        }

    @staticmethod
    def identity_from_request(request) -> SessionIdentity:
        """
        Rebuild the session identity from ``request.user`` and the
        validated token in ``request.auth``.

        Raises
        ------
        PermissionDenied
            If the token names an original actor that no longer exists
            or has been deactivated.
        """
        actor = request.user
        token = getattr(request, "auth", None)
        original_id = token.get(ORIGINAL_ACTOR_CLAIM) if hasattr(token, "get") else None

        if original_id is None or original_id == actor.pk:
            return Normal(actor)

        try:
            original = Actor.objects.get(pk=original_id, is_active=True)
        except Actor.DoesNotExist:
            raise PermissionDenied("The impersonation session is no longer valid.")
        return Impersonating(original=original, current=actor)


# ═══════════════════════════════════════════════════════════════════
#  Impersonation Service
# ═══════════════════════════════════════════════════════════════════


class ImpersonationService:
    """
    Start and stop impersonation for the identity behind a request.

    The pure state transitions live in ``accounts.sessions``; this class
    resolves the target actor, logs the switch and issues tokens for
    the resulting identity.
    """

    @staticmethod
    def start(identity: SessionIdentity, target_id: int) -> tuple[SessionIdentity, dict[str, str]]:
        try:
            target = Actor.objects.get(pk=target_id)
        except (Actor.DoesNotExist, ValueError, TypeError):
            raise NotFound(f"Actor with id {target_id} not found.")

        new_identity = impersonate(identity, target)
        logger.info(
            "Actor %s is now acting as %s",
            identity.original.pk,
            new_identity.active.pk,
        )
        return new_identity, AuthenticationService.generate_tokens(new_identity)

    @staticmethod
    def stop(identity: SessionIdentity) -> tuple[SessionIdentity, dict[str, str]]:
        restored = stop_impersonation(identity)
        if identity.is_impersonating:
            logger.info(
                "Actor %s stopped acting as %s",
                restored.actor.pk,
                identity.active.pk,
            )
        return restored, AuthenticationService.generate_tokens(restored)


# ═══════════════════════════════════════════════════════════════════
#  Actor Management Service
# ═══════════════════════════════════════════════════════════════════


class ActorManagementService:
    """
    Administrative operations on actors.

    Every mutating method requires ``can_manage_users`` except
    ``change_password``, which an actor may also call on themselves.
    """

    @staticmethod
    def list_actors(
        *,
        role: str | None = None,
        is_active: bool | None = None,
        search: str | None = None,
    ) -> QuerySet[Actor]:
        """
        Return actors, newest first.

        ``search`` matches ``username``, ``email`` and ``real_name``
        case-insensitively.
        """
        qs = Actor.objects.all().order_by("-date_joined", "-pk")

        if role:
            qs = qs.filter(role=role)
        if is_active is not None:
            qs = qs.filter(is_active=is_active)
        if search:
            qs = qs.filter(
                Q(username__icontains=search)
                | Q(email__icontains=search)
                | Q(real_name__icontains=search)
            )
        return qs

    @staticmethod
    def get_actor(actor_id: int) -> Actor:
        try:
            return Actor.objects.get(pk=actor_id)
        except (Actor.DoesNotExist, ValueError, TypeError):
            raise NotFound(f"Actor with id {actor_id} not found.")

    @staticmethod
    def create_actor(validated_data: dict[str, Any], performed_by: Actor) -> Actor:
        """
        Create an actor on behalf of an administrator.

        Parameters
        ----------
        validated_data : dict
            ``username``, ``email``, ``password`` and optionally
            ``real_name``, ``role``, ``is_master_actor``.
        performed_by : Actor
            Must hold ``can_manage_users``.

        Raises
        ------
        ValidationFailed
            The password violates the policy (every violated rule listed).
        Conflict
            Handle or e-mail already taken.
        """
        require_capability(performed_by, Capability.CAN_MANAGE_USERS)

        data = dict(validated_data)
        password = data.pop("password")
        errors = validate_password(password)
        if errors:
            raise ValidationFailed("Password does not meet the policy.", errors=errors)

        conflicts = []
        if Actor.objects.filter(username=data.get("username")).exists():
            conflicts.append("username")
        if Actor.objects.filter(email__iexact=data.get("email")).exists():
            conflicts.append("email")
        if conflicts:
            raise Conflict(
                f"The following field(s) already exist: {', '.join(conflicts)}."
            )

        try:
            with transaction.atomic():
                actor = Actor.objects.create_user(password=password, **data)
        except IntegrityError:
            raise Conflict("An actor with this handle or e-mail already exists.")

        logger.info("Actor %s created by %s", actor.pk, performed_by.pk)
        return actor

    @staticmethod
    def update_actor(actor_id: int, validated_data: dict[str, Any], performed_by: Actor) -> Actor:
        """Merge profile fields (``real_name``, ``email``, ``username``)."""
        require_capability(performed_by, Capability.CAN_MANAGE_USERS)
        actor = ActorManagementService.get_actor(actor_id)

        email = validated_data.get("email")
        if email and Actor.objects.filter(email__iexact=email).exclude(pk=actor.pk).exists():
            raise Conflict("The following field(s) already exist: email.")
        username = validated_data.get("username")
        if username and Actor.objects.filter(username=username).exclude(pk=actor.pk).exists():
            raise Conflict("The following field(s) already exist: username.")

        for attr, value in validated_data.items():
            setattr(actor, attr, value)
        actor.save()
        return actor

    @staticmethod
    def assign_role(*, actor_id: int, role_id: str, performed_by: Actor) -> Actor:
        """
        Assign (or change) an actor's role.

        A manager may not grant a role ranked above their own.

        Raises
        ------
        NotFound
            Unknown actor or role id.
        PermissionDenied
            Missing ``can_manage_users`` or insufficient rank.
        """
        require_capability(performed_by, Capability.CAN_MANAGE_USERS)
        target = ActorManagementService.get_actor(actor_id)

        new_role = get_role(role_id)
        if new_role is None:
            raise NotFound(f"Role '{role_id}' not found.")
        if new_role.hierarchy_level > performed_by.hierarchy_level:
            raise PermissionDenied(
                "You do not have sufficient authority to assign this role."
            )

        target.role = new_role.id
        target.save(update_fields=["role"])
        logger.info(
            "Actor %s assigned role %s by %s", target.pk, new_role.id, performed_by.pk,
        )
        return target

    @staticmethod
    def toggle_active(actor_id: int, performed_by: Actor) -> Actor:
        """
        Flip ``is_active`` on the target actor.

        Raises
        ------
        DomainError
            Self-deactivation, or deactivating an active master actor.
        """
        require_capability(performed_by, Capability.CAN_MANAGE_USERS)

        with transaction.atomic():
            try:
                target = Actor.objects.select_for_update().get(pk=actor_id)
            except (Actor.DoesNotExist, ValueError, TypeError):
                raise NotFound(f"Actor with id {actor_id} not found.")

            if target.is_active:
                if target.pk == performed_by.pk:
                    raise DomainError("You cannot deactivate your own account.")
                if target.is_master_actor:
                    raise DomainError("Master actors cannot be deactivated.")

            target.is_active = not target.is_active
            target.save(update_fields=["is_active"])

        logger.info(
            "Actor %s %s by %s",
            target.pk,
            "activated" if target.is_active else "deactivated",
            performed_by.pk,
        )
        return target

    @staticmethod
    def change_password(*, actor_id: int, new_password: str, performed_by: Actor) -> Actor:
        """
        Set a new password for ``actor_id``.

        Allowed for the actor themselves or for anyone holding
        ``can_manage_users``.

        Raises
        ------
        NotFound
            Unknown actor.
        ValidationFailed
            The password violates the policy.
        """
        target = ActorManagementService.get_actor(actor_id)
        if target.pk != performed_by.pk:
            require_capability(
                performed_by,
                Capability.CAN_MANAGE_USERS,
                message="You may only change your own password.",
            )

        errors = validate_password(new_password, user=target)
        if errors:
            raise ValidationFailed("Password does not meet the policy.", errors=errors)

        target.set_password(new_password)
        target.save(update_fields=["password"])
        logger.info("Password changed for actor %s by %s", target.pk, performed_by.pk)
        return target


# ═══════════════════════════════════════════════════════════════════
#  Actor Directory (with offline fallback)
# ═══════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class ActorDirectory:
    actors: list = field(default_factory=list)
    degraded: bool = False
    error: str | None = None


class ActorDirectoryService:
    """
    Actor listing that degrades to the demo actor set instead of failing
    when the database is unreachable.
    """

    @staticmethod
    def load(**filters: Any) -> ActorDirectory:
        try:
            actors = list(ActorManagementService.list_actors(**filters))
        except DatabaseError as exc:
            logger.warning("Actor directory unavailable, serving demo actors: %s", exc)
            return ActorDirectory(
                actors=[dict(actor) for actor in DEMO_ACTORS],
                degraded=True,
                error=str(exc),
            )
        return ActorDirectory(actors=actors)


# ═══════════════════════════════════════════════════════════════════
#  Role Service
# ═══════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class RoleListing:
    role: RoleDefinition
    image_url: str | None = None


class RoleService:
    """Role listing (registry + images) and role-image uploads."""

    @staticmethod
    def image_map() -> dict[str, str]:
        """``role_id -> image_url``, cached until the next upload."""
        return cache.get_or_set(
            ROLE_IMAGE_CACHE_KEY,
            lambda: dict(RoleImage.objects.values_list("role", "image_url")),
        )

    @staticmethod
    def refresh_images() -> dict[str, str]:
        cache.delete(ROLE_IMAGE_CACHE_KEY)
        return RoleService.image_map()

    @staticmethod
    def list_roles() -> list[RoleListing]:
        images = RoleService.image_map()
        return [RoleListing(role, images.get(role.id)) for role in list_roles()]

    @staticmethod
    def get_role(role_id: str) -> RoleListing:
        role = get_role(role_id)
        if role is None:
            raise NotFound(f"Role '{role_id}' not found.")
        return RoleListing(role, RoleService.image_map().get(role.id))

    @staticmethod
    def upload_image(*, role_id: str, image, performed_by: Actor) -> RoleImage:
        """
        Store ``image`` and attach its URL to ``role_id``.

        Size and content-type limits are enforced by the upload
        serializer before this is called.
        """
        require_capability(performed_by, Capability.CAN_UPLOAD_ROLE_IMAGES)
        role = get_role(role_id)
        if role is None:
            raise NotFound(f"Role '{role_id}' not found.")

        _, ext = os.path.splitext(getattr(image, "name", "") or "")
        stored_name = default_storage.save(
            f"{ROLE_IMAGE_UPLOAD_DIR}/{role.id}{ext.lower()}", image,
        )
        role_image, _ = RoleImage.objects.update_or_create(
            role=role.id,
            defaults={
                "image_url": default_storage.url(stored_name),
                "uploaded_by": performed_by,
            },
        )
        RoleService.refresh_images()
        logger.info("Role image for %s uploaded by %s", role.id, performed_by.pk)
        return role_image
