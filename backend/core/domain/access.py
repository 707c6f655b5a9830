"""
core.domain.access — Capability-scoped queryset selectors (shared patterns).

This module provides shared utilities that each app's service layer
calls to obtain querysets filtered by the acting identity's capabilities.

╔══════════════════════════════════════════════════════════════════╗
║  IMPORTANT — Per-app scoping logic does NOT live here.         ║
║  Each app's ``services.py`` owns its own scope-rules list.     ║
║  This module provides:                                         ║
║    1) ``apply_capability_scope`` — ordered capability dispatch.║
║    2) ``require_capability`` — guard built on has_permission.  ║
║    3) ``get_actor_role_id`` — role snapshot helper.            ║
╚══════════════════════════════════════════════════════════════════╝

Usage in an app's service layer::

    from core.domain.access import apply_capability_scope

    INCIDENT_SCOPE_RULES = [
        (Capability.CAN_SEARCH_PERSONS,   lambda qs, a: qs),
        (Capability.CAN_REPORT_INCIDENTS, lambda qs, a: qs.filter(reported_by=a)),
    ]

    qs = apply_capability_scope(
        IncidentEntry.objects.all(), actor, scope_rules=INCIDENT_SCOPE_RULES,
    )
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from django.db.models import QuerySet

from core.domain.exceptions import PermissionDenied
from core.domain.roles import get_role, has_permission

if TYPE_CHECKING:
    from accounts.models import Actor

# Takes (queryset, actor) and returns a filtered queryset.
ScopeFilter = Callable[[QuerySet, "Actor"], QuerySet]

# A single scope rule: (capability_codename, filter_fn).
ScopeRule = tuple[str, ScopeFilter]


def get_actor_role_id(actor: Actor) -> str:
    """
    Registered role id of ``actor`` (``"judge"``), or ``""`` when the
    actor has no known role.  Stored as the role snapshot on
    assessments, status changes and reports.

    Access control must go through ``has_permission``; the assessment
    override rule is the one place that compares snapshot role ids.
    """
    role = get_role(getattr(actor, "role", None))
    if role is None:
        return ""
    return role.id


def apply_capability_scope(
    queryset: QuerySet,
    actor: Actor,
    *,
    scope_rules: list[ScopeRule],
    default: str = "none",
) -> QuerySet:
    """
    Apply the first matching capability-based scope rule.

    Rules are checked **in order** — first capability match wins, so
    order them from broadest to narrowest.

    Args:
        queryset:     Base (unfiltered) queryset.
        actor:        The acting identity.
        scope_rules:  Ordered list of ``(capability, filter_fn)`` tuples.
        default:      ``"none"`` (default) → empty queryset when nothing
                      matches; ``"all"`` → unfiltered.
    """
    for capability, filter_fn in scope_rules:
        if has_permission(actor, capability):
            return filter_fn(queryset, actor)

    if default == "none":
        return queryset.none()
    return queryset


def require_capability(actor: Actor, *capabilities: str, message: str = "") -> None:
    """
    Guard that raises ``PermissionDenied`` unless ``actor`` holds at least
    one of ``capabilities`` (OR-logic).

    Example::

        require_capability(actor, Capability.CAN_MANAGE_USERS)
    """
    for capability in capabilities:
        if has_permission(actor, capability):
            return
    raise PermissionDenied(
        message or f"Missing required capability: {', '.join(capabilities)}."
    )
