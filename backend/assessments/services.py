"""
Assessments app Service Layer.

Owns every write to the assessment block of persons, organizations and
incidents.  Registry services never touch these fields.

Architecture
------------
- ``can_assess``          — pure override rule (who may (re)assess a target).
- ``can_manage_status``   — pure guard for workflow status changes.
- ``AssessmentService``   — danger-level / classification updates with
                            their history record, status changes with
                            their change log, and the read side.

Override rule
-------------
::

    actor role     │ unassessed │ assessed by judge │ by high judge │ by sentinel
    ───────────────┼────────────┼───────────────────┼───────────────┼────────────
    sentinel       │    yes     │        yes        │      yes      │    yes
    high_judge     │    yes     │        yes        │      no       │    no
    judge          │    yes     │   only if self    │      no       │    no
    anyone else    │    no      │        no         │      no       │    no

Every rule above additionally requires ``can_assess_danger_level``; a
high judge overriding a judge also needs ``can_override_assessments``.

An assessment update and its ``AssessmentHistory`` row are written in
one transaction, against the target row locked with
``select_for_update()``; the override rule is evaluated on that locked
row, so two racing assessors can never both pass against a stale
assessor snapshot.
"""

from __future__ import annotations

import logging
from typing import Any

from django.contrib.contenttypes.models import ContentType
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from core.constants import MAX_DANGER_LEVEL, MIN_DANGER_LEVEL
from core.domain.access import get_actor_role_id
from core.domain.exceptions import Conflict, InvariantViolation, NotFound, PermissionDenied
from core.domain.roles import ROLE_REGISTRY, RoleRegistry, has_permission
from core.domain.transactions import atomic_transition, lock_for_update
from core.models import AssessableModel, AssessmentStatus, Classification
from core.permissions_constants import STATUS_MANAGER_ROLES, Capability, RoleId
from registry.models import IncidentEntry, Organization, Person
from registry.services import IncidentService

from .models import AssessmentHistory, StatusChangeLog

logger = logging.getLogger(__name__)

#: URL segment → assessable model.
ASSESSABLE_MODELS: dict[str, type[AssessableModel]] = {
    "person": Person,
    "organization": Organization,
    "incident": IncidentEntry,
}

#: Passed as ``expected_assessed_by_id`` to skip the stale-assessor check.
UNCHECKED = object()


# ═══════════════════════════════════════════════════════════════════
#  Pure rules
# ═══════════════════════════════════════════════════════════════════


def can_assess(
    actor,
    assessed_by_role: str | None,
    assessed_by_id: Any,
    registry: RoleRegistry = ROLE_REGISTRY,
) -> bool:
    """
    Whether ``actor`` may set the danger assessment of a target whose
    current assessor snapshot is ``(assessed_by_role, assessed_by_id)``.

    An empty or ``None`` role means the target has never been assessed.
    """
    if not has_permission(actor, Capability.CAN_ASSESS_DANGER_LEVEL, registry):
        return False

    role = actor.role
    unassessed = not assessed_by_role

    if role == RoleId.SENTINEL:
        return True
    if role == RoleId.HIGH_JUDGE:
        return unassessed or (
            assessed_by_role == RoleId.JUDGE
            and has_permission(actor, Capability.CAN_OVERRIDE_ASSESSMENTS, registry)
        )
    if role == RoleId.JUDGE:
        return unassessed or (
            assessed_by_id is not None and str(assessed_by_id) == str(actor.pk)
        )
    return False


def can_manage_status(actor, registry: RoleRegistry = ROLE_REGISTRY) -> bool:
    """``can_manage_status`` capability held by a sentinel or (high) judge."""
    if not has_permission(actor, Capability.CAN_MANAGE_STATUS, registry):
        return False
    return actor.role in STATUS_MANAGER_ROLES


def validate_danger_level(value: Any) -> int:
    """
    Return ``value`` as a danger level or raise ``InvariantViolation``.

    Out-of-range values are rejected, never clamped.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvariantViolation(f"Danger level must be an integer, got {value!r}.")
    if not MIN_DANGER_LEVEL <= value <= MAX_DANGER_LEVEL:
        raise InvariantViolation(
            f"Danger level must be between {MIN_DANGER_LEVEL} and "
            f"{MAX_DANGER_LEVEL}, got {value}."
        )
    return value


def resolve_target_model(target_type: str) -> type[AssessableModel]:
    try:
        return ASSESSABLE_MODELS[target_type]
    except KeyError:
        raise NotFound(
            f"Unknown assessment target type '{target_type}'. "
            f"Expected one of: {', '.join(sorted(ASSESSABLE_MODELS))}."
        )


# ═══════════════════════════════════════════════════════════════════
#  Assessment Service
# ═══════════════════════════════════════════════════════════════════


class AssessmentService:

    @staticmethod
    def get_target(actor, target_type: str, target_id: Any) -> AssessableModel:
        """
        Fetch the assessable target visible to ``actor``.

        Incidents go through the incident scope (citizens see their own
        reports only); persons and organizations are visible to every
        authenticated actor.
        """
        model = resolve_target_model(target_type)
        if model is IncidentEntry:
            return IncidentService.get_incident(actor, target_id)
        try:
            return model.objects.get(pk=target_id)
        except (model.DoesNotExist, ValueError, TypeError):
            raise NotFound(f"{model.__name__} with id {target_id} not found.")

    @staticmethod
    def update_assessment(
        *,
        actor,
        target_type: str,
        target_id: Any,
        danger_level: Any,
        classification: str | None = None,
        notes: str | None = None,
        expected_assessed_by_id: Any = UNCHECKED,
    ) -> AssessableModel:
        """
        Set the danger level (and optionally classification / notes) of a
        target and append exactly one ``AssessmentHistory`` record.

        Parameters
        ----------
        actor : Actor
            The assessing identity.
        target_type : str
            ``"person"``, ``"organization"`` or ``"incident"``.
        target_id : Any
            Primary key of the target.
        danger_level : int
            New level in ``[1, 6]``.
        classification : str | None
            New classification; ``None`` keeps the current one.
        notes : str | None
            Assessment notes; ``None`` keeps the current ones.
        expected_assessed_by_id : Any
            Assessor id the caller saw when deciding to assess (``None``
            for "unassessed").  When given and the locked row disagrees,
            the update is refused with ``Conflict``.

        Returns
        -------
        AssessableModel
            The updated target.

        Raises
        ------
        InvariantViolation
            Invalid danger level or classification.
        NotFound
            Unknown target type or id.
        PermissionDenied
            The override rule forbids this actor.
        Conflict
            The target was re-assessed since the caller last read it.
        """
        model = resolve_target_model(target_type)
        level = validate_danger_level(danger_level)
        if classification is not None and classification not in Classification.values:
            raise InvariantViolation(
                f"Unknown classification '{classification}'. "
                f"Expected one of: {', '.join(Classification.values)}."
            )

        with transaction.atomic():
            target = lock_for_update(model, target_id)

            if not can_assess(actor, target.assessed_by_role, target.assessed_by_id):
                raise PermissionDenied(
                    "You are not allowed to assess this target."
                    if not target.is_assessed
                    else "You are not allowed to override the current assessment."
                )
            if (
                expected_assessed_by_id is not UNCHECKED
                and str(target.assessed_by_id) != str(expected_assessed_by_id)
            ):
                raise Conflict(
                    "This target was re-assessed by someone else. "
                    "Reload it and try again."
                )

            previous_level = target.danger_level
            previous_classification = target.classification
            now = timezone.now()

            target.danger_level = level
            if classification is not None:
                target.classification = classification
            if notes is not None:
                target.assessment_notes = notes
            target.assessed_by = actor
            target.assessed_by_name = actor.snapshot_name
            target.assessed_by_role = get_actor_role_id(actor)
            target.assessed_at = now
            target.save(update_fields=[
                "danger_level", "classification", "assessment_notes",
                "assessed_by", "assessed_by_name", "assessed_by_role",
                "assessed_at", "updated_at",
            ])

            AssessmentHistory.objects.create(
                content_type=ContentType.objects.get_for_model(model),
                object_id=target.pk,
                previous_danger_level=previous_level,
                new_danger_level=level,
                previous_classification=previous_classification,
                new_classification=target.classification,
                assessed_by=actor,
                assessed_by_name=target.assessed_by_name,
                assessed_by_role=target.assessed_by_role,
                notes=target.assessment_notes,
            )

        logger.info(
            "%s %s assessed by %s: danger %s → %s",
            target_type, target.pk, actor.pk, previous_level, level,
        )
        return target

    @staticmethod
    def update_status(*, actor, target_type: str, target_id: Any, status: str) -> AssessableModel:
        """
        Set the workflow status of a target and log the change.

        Any of the four statuses may be set from any other; the only
        gate is ``can_manage_status``.

        Raises
        ------
        PermissionDenied
            The actor may not manage statuses.
        InvariantViolation
            ``status`` is not a known status.
        NotFound
            Unknown target type or id.
        """
        if not can_manage_status(actor):
            raise PermissionDenied("You are not allowed to change the status.")
        if status not in AssessmentStatus.values:
            raise InvariantViolation(
                f"Unknown status '{status}'. "
                f"Expected one of: {', '.join(AssessmentStatus.values)}."
            )
        model = resolve_target_model(target_type)

        with transaction.atomic():
            target = lock_for_update(model, target_id)
            from_status = target.status
            target = atomic_transition(
                instance=target,
                target_status=status,
                extra_values={
                    "status_updated_by": actor,
                    "status_updated_by_name": actor.snapshot_name,
                    "status_updated_by_role": get_actor_role_id(actor),
                    "status_updated_at": timezone.now(),
                },
            )
            StatusChangeLog.objects.create(
                content_type=ContentType.objects.get_for_model(model),
                object_id=target.pk,
                from_status=from_status,
                to_status=status,
                changed_by=actor,
                changed_by_name=target.status_updated_by_name,
                changed_by_role=target.status_updated_by_role,
            )

        logger.info(
            "%s %s status changed by %s: %s → %s",
            target_type, target.pk, actor.pk, from_status, status,
        )
        return target

    @staticmethod
    def history_for(actor, target_type: str, target_id: Any) -> QuerySet[AssessmentHistory]:
        """Assessment history of a visible target, newest first."""
        target = AssessmentService.get_target(actor, target_type, target_id)
        return AssessmentHistory.objects.filter(
            content_type=ContentType.objects.get_for_model(type(target)),
            object_id=target.pk,
        ).select_related("assessed_by")

    @staticmethod
    def status_log_for(actor, target_type: str, target_id: Any) -> QuerySet[StatusChangeLog]:
        target = AssessmentService.get_target(actor, target_type, target_id)
        return StatusChangeLog.objects.filter(
            content_type=ContentType.objects.get_for_model(type(target)),
            object_id=target.pk,
        ).select_related("changed_by")
