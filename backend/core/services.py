"""
Core app services — **Service Layer**.

Cross-app aggregation, search, system constants and the backend
connection probe.  Views delegate all logic to the classes below.

╔══════════════════════════════════════════════════════════════════════╗
║  CROSS-APP IMPORT RULEBOOK                                         ║
║                                                                    ║
║  The core app is imported by every other app, so it must never     ║
║  import their models at module level.                              ║
║                                                                    ║
║  1. Resolve models lazily inside the method that needs them:       ║
║       from django.apps import apps                                 ║
║       Person = apps.get_model("registry", "Person")                ║
║                                                                    ║
║  2. Choice classes (CrimeType, HearingStatus, ...) are imported    ║
║     inside methods too.                                            ║
║                                                                    ║
║  3. Prefer ``.aggregate()`` / ``.count()`` over Python-side loops. ║
╚══════════════════════════════════════════════════════════════════════╝
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from django.apps import apps
from django.db import DatabaseError, connection
from django.db.models import Count, Q

from core.constants import DANGER_LEVEL_COLOURS, PASSWORD_MIN_LENGTH
from core.domain.roles import has_permission, list_roles
from core.permissions_constants import Capability

if TYPE_CHECKING:
    from accounts.models import Actor

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Backend Status Service
# ═══════════════════════════════════════════════════════════════════


class BackendStatusService:
    """
    Probes the persistence backend.

    Never raises: an unreachable database is reported as
    ``connected=False`` with ``retryable=True`` so the client can show a
    connection indicator and try again later.
    """

    @staticmethod
    def probe() -> dict[str, Any]:
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
                cursor.fetchone()
        except DatabaseError as exc:
            logger.warning("Backend status probe failed: %s", exc)
            return {"connected": False, "error": str(exc), "retryable": True}
        return {"connected": True, "error": None, "retryable": False}


# ═══════════════════════════════════════════════════════════════════
#  Dashboard Aggregation Service
# ═══════════════════════════════════════════════════════════════════


class DashboardAggregationService:
    """
    Headline counts for the bureau dashboard.

    Incident counts follow the incident scope: a citizen's totals only
    cover the incidents they reported.
    """

    def __init__(self, user: Actor) -> None:
        self.user = user

    def get_stats(self) -> dict[str, Any]:
        from core.models import AssessmentStatus
        from hearings.models import HearingStatus
        from registry.services import IncidentService

        Person = apps.get_model("registry", "Person")
        Organization = apps.get_model("registry", "Organization")
        Hearing = apps.get_model("hearings", "Hearing")

        incidents = IncidentService.scoped_queryset(self.user).aggregate(
            total=Count("id"),
            pending=Count("id", filter=Q(status=AssessmentStatus.PENDING)),
        )

        return {
            "total_persons": Person.objects.count(),
            "total_organizations": Organization.objects.count(),
            "total_incidents": incidents["total"],
            "pending_incidents": incidents["pending"],
            "active_hearings": Hearing.objects.filter(status=HearingStatus.ACTIVE).count(),
        }


# ═══════════════════════════════════════════════════════════════════
#  Global Search Service
# ═══════════════════════════════════════════════════════════════════


class GlobalSearchService:
    """
    Unified search across persons, organizations and incidents.

    * Persons are only searched for actors holding
      ``can_search_persons``.
    * Incidents go through the incident scope.
    """

    CATEGORIES = ("persons", "organizations", "incidents")

    #: Default maximum results per category.
    DEFAULT_LIMIT: int = 10

    #: Absolute maximum results per category.
    MAX_LIMIT: int = 50

    #: Minimum query length.
    MIN_QUERY_LENGTH: int = 2

    def __init__(
        self,
        query: str,
        user: Actor,
        category: str | None = None,
        limit: int = DEFAULT_LIMIT,
    ) -> None:
        self.query = query.strip()
        self.user = user
        self.category = category
        self.limit = max(1, min(limit, self.MAX_LIMIT))

    def search(self) -> dict[str, Any]:
        persons: list[dict[str, Any]] = []
        organizations: list[dict[str, Any]] = []
        incidents: list[dict[str, Any]] = []

        if len(self.query) >= self.MIN_QUERY_LENGTH:
            if self.category in (None, "persons"):
                persons = self._search_persons()
            if self.category in (None, "organizations"):
                organizations = self._search_organizations()
            if self.category in (None, "incidents"):
                incidents = self._search_incidents()

        return {
            "query": self.query,
            "total_results": len(persons) + len(organizations) + len(incidents),
            "persons": persons,
            "organizations": organizations,
            "incidents": incidents,
        }

    # ── Private helpers ─────────────────────────────────────────────

    def _search_persons(self) -> list[dict[str, Any]]:
        if not has_permission(self.user, Capability.CAN_SEARCH_PERSONS):
            return []
        from registry.services import PersonService

        qs = PersonService.search(self.user, self.query)[: self.limit]
        return [
            {
                "id": p.pk,
                "name": p.name,
                "handle": p.handle,
                "danger_level": p.danger_level,
                "status": p.status,
            }
            for p in qs
        ]

    def _search_organizations(self) -> list[dict[str, Any]]:
        from registry.services import OrganizationService

        qs = OrganizationService.search(self.query)[: self.limit]
        return [
            {
                "id": o.pk,
                "name": o.name,
                "handle": o.handle,
                "danger_level": o.danger_level,
                "status": o.status,
            }
            for o in qs
        ]

    def _search_incidents(self) -> list[dict[str, Any]]:
        from registry.services import IncidentService

        qs = (
            IncidentService.scoped_queryset(self.user)
            .filter(
                Q(person_name__icontains=self.query)
                | Q(person__handle__icontains=self.query)
                | Q(description__icontains=self.query)
            )[: self.limit]
        )
        return [
            {
                "id": i.pk,
                "person_name": i.person_name,
                "occurred_on": i.occurred_on,
                "danger_level": i.danger_level,
                "status": i.status,
            }
            for i in qs
        ]


# ═══════════════════════════════════════════════════════════════════
#  System Constants Service
# ═══════════════════════════════════════════════════════════════════


class SystemConstantsService:
    """
    All public enumerations and the role table, for building dropdowns
    and labels on the client.  Independent of the requesting user.
    """

    @staticmethod
    def get_constants() -> dict[str, Any]:
        from core.models import AssessmentStatus, Classification, DangerLevel
        from hearings.models import Agreement, HearingStatus, StatementStatus
        from registry.models import CrimeType, RelationshipType, ShipStatus, ShipType

        to_list = SystemConstantsService._choices_to_list

        return {
            "danger_levels": [
                {
                    "value": str(value),
                    "label": str(label),
                    "colour": DANGER_LEVEL_COLOURS[value],
                }
                for value, label in DangerLevel.choices
            ],
            "classifications": to_list(Classification),
            "assessment_statuses": to_list(AssessmentStatus),
            "crime_types": to_list(CrimeType),
            "relationship_types": to_list(RelationshipType),
            "ship_types": to_list(ShipType),
            "ship_statuses": to_list(ShipStatus),
            "hearing_statuses": to_list(HearingStatus),
            "hearing_agreements": to_list(Agreement),
            "statement_statuses": to_list(StatementStatus),
            "role_hierarchy": [
                {"id": role.id, "name": role.name, "hierarchy_level": role.hierarchy_level}
                for role in list_roles()
            ],
            "password_min_length": PASSWORD_MIN_LENGTH,
        }

    @staticmethod
    def _choices_to_list(choices_class: type) -> list[dict[str, str]]:
        """
        Convert a Django ``TextChoices`` or ``IntegerChoices`` class to
        a list of ``{"value": ..., "label": ...}`` dicts.
        """
        return [
            {"value": str(value), "label": str(label)}
            for value, label in choices_class.choices
        ]
