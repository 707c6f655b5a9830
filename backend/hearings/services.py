"""
Hearings app Service Layer.

Architecture
------------
- ``HearingService``          — open / list / answer / close hearings.
- ``WitnessStatementService`` — request, submit and annotate statements.

"Judge-capable" means holding ``can_assess_danger_level`` (sentinels,
high judges and judges).  Judge-capable actors see every hearing and
statement; anyone else sees only those that name them as witness.

Responses are keyed by ``(hearing, witness)``: a second answer from the
same witness overwrites the first in place (``update_or_create`` on a
locked hearing, backed by a unique constraint), so tallies count each
witness at most once.
"""

from __future__ import annotations

import logging
from typing import Any

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Count, Q, QuerySet
from django.utils import timezone

from core.domain.access import get_actor_role_id, require_capability
from core.domain.exceptions import Conflict, NotFound, PermissionDenied, ValidationFailed
from core.domain.roles import has_permission
from core.domain.transactions import atomic_transition, lock_for_update
from core.permissions_constants import Capability
from registry.models import IncidentEntry
from registry.services import split_witness_names

from .models import (
    Agreement,
    Hearing,
    HearingResponse,
    HearingStatus,
    StatementStatus,
    WitnessStatement,
)

logger = logging.getLogger(__name__)

Actor = get_user_model()

JUDGE_ONLY = "Only judges may perform this action."


def is_judge_capable(actor) -> bool:
    return has_permission(actor, Capability.CAN_ASSESS_DANGER_LEVEL)


def _get_incident(incident_id: Any) -> IncidentEntry:
    try:
        return IncidentEntry.objects.get(pk=incident_id)
    except (IncidentEntry.DoesNotExist, ValueError, TypeError):
        raise NotFound(f"Incident with id {incident_id} not found.")


def _resolve_witness_ids(witness_ids) -> list:
    """Active actors for ``witness_ids``; unknown or inactive ids fail."""
    wanted = {int(pk) for pk in witness_ids}
    witnesses = list(Actor.objects.filter(pk__in=wanted, is_active=True))
    missing = wanted - {w.pk for w in witnesses}
    if missing:
        raise ValidationFailed(
            "Some witnesses could not be found.",
            errors=[f"No active actor with id {pk}." for pk in sorted(missing)],
        )
    return witnesses


# ═══════════════════════════════════════════════════════════════════
#  Hearing Service
# ═══════════════════════════════════════════════════════════════════


class HearingService:

    @staticmethod
    def visible_hearings(actor) -> QuerySet[Hearing]:
        qs = Hearing.objects.select_related("entry").prefetch_related("witnesses", "responses")
        if is_judge_capable(actor):
            return qs
        return qs.filter(witnesses=actor)

    @staticmethod
    def get_hearing(actor, hearing_id: Any) -> Hearing:
        try:
            return HearingService.visible_hearings(actor).get(pk=hearing_id)
        except (Hearing.DoesNotExist, ValueError, TypeError):
            raise NotFound(f"Hearing with id {hearing_id} not found.")

    @staticmethod
    def list_hearings(actor, *, status: str | None = None, entry_id: Any = None) -> QuerySet[Hearing]:
        qs = HearingService.visible_hearings(actor)
        if status:
            qs = qs.filter(status=status)
        if entry_id:
            qs = qs.filter(entry_id=entry_id)
        return qs

    @staticmethod
    def list_responses(actor, hearing_id: Any) -> QuerySet[HearingResponse]:
        return HearingService.get_hearing(actor, hearing_id).responses.select_related("witness")

    @staticmethod
    @transaction.atomic
    def create_hearing(*, actor, entry_id: Any, title: str, question: str, witness_ids) -> Hearing:
        """
        Open a hearing on an incident.

        The incident's crime types and description are copied onto the
        hearing so later edits of the report do not change what the
        witnesses were asked about.

        Raises
        ------
        PermissionDenied
            The actor is not judge-capable.
        NotFound
            Unknown incident.
        ValidationFailed
            No witnesses, or some witness ids are unknown / inactive.
        """
        require_capability(actor, Capability.CAN_ASSESS_DANGER_LEVEL, message=JUDGE_ONLY)
        entry = _get_incident(entry_id)
        if not witness_ids:
            raise ValidationFailed(errors=["At least one witness is required."])
        witnesses = _resolve_witness_ids(witness_ids)

        hearing = Hearing.objects.create(
            entry=entry,
            title=title,
            question=question,
            crime_types=list(entry.crime_types),
            entry_description=entry.description,
            created_by=actor,
            created_by_name=actor.snapshot_name,
            created_by_role=get_actor_role_id(actor),
        )
        hearing.witnesses.set(witnesses)
        logger.info(
            "Hearing %s opened on incident %s by %s with %d witness(es)",
            hearing.pk, entry.pk, actor.pk, len(witnesses),
        )
        return hearing

    @staticmethod
    def submit_response(*, actor, hearing_id: Any, agreement: str, comment: str = "") -> HearingResponse:
        """
        Record ``actor``'s answer, replacing any earlier answer of theirs.

        Raises
        ------
        Conflict
            The hearing is closed.
        PermissionDenied
            ``actor`` is not one of the hearing's witnesses.
        ValidationFailed
            Unknown agreement value.
        """
        if agreement not in Agreement.values:
            raise ValidationFailed(
                errors=[f"Agreement must be one of: {', '.join(Agreement.values)}."],
            )

        with transaction.atomic():
            hearing = lock_for_update(Hearing, hearing_id)
            if hearing.status != HearingStatus.ACTIVE:
                raise Conflict("This hearing is closed and no longer accepts responses.")
            if not hearing.witnesses.filter(pk=actor.pk).exists():
                raise PermissionDenied("Only witnesses named on this hearing may respond.")

            response, created = HearingResponse.objects.update_or_create(
                hearing=hearing,
                witness=actor,
                defaults={
                    "witness_name": actor.snapshot_name,
                    "agreement": agreement,
                    "comment": comment,
                },
            )

        logger.info(
            "Hearing %s: witness %s %s (%s)",
            hearing.pk, actor.pk, agreement, "new" if created else "replaced",
        )
        return response

    @staticmethod
    def close_hearing(*, actor, hearing_id: Any) -> Hearing:
        require_capability(actor, Capability.CAN_ASSESS_DANGER_LEVEL, message=JUDGE_ONLY)
        hearing = HearingService.get_hearing(actor, hearing_id)
        hearing = atomic_transition(
            instance=hearing,
            target_status=HearingStatus.CLOSED,
            allowed_sources={HearingStatus.ACTIVE},
            extra_values={"closed_by": actor, "closed_at": timezone.now()},
        )
        logger.info("Hearing %s closed by %s", hearing.pk, actor.pk)
        return hearing

    @staticmethod
    def tallies(hearing: Hearing) -> dict[str, int]:
        """``{"agree": n, "disagree": m}`` over the current responses."""
        counts = hearing.responses.aggregate(
            agree=Count("id", filter=Q(agreement=Agreement.AGREE)),
            disagree=Count("id", filter=Q(agreement=Agreement.DISAGREE)),
        )
        return {"agree": counts["agree"], "disagree": counts["disagree"]}


# ═══════════════════════════════════════════════════════════════════
#  Witness Statement Service
# ═══════════════════════════════════════════════════════════════════


class WitnessStatementService:

    @staticmethod
    def visible_statements(actor) -> QuerySet[WitnessStatement]:
        qs = WitnessStatement.objects.select_related("incident", "witness")
        if is_judge_capable(actor):
            return qs
        return qs.filter(witness=actor)

    @staticmethod
    def list_statements(actor, *, incident_id: Any = None, status: str | None = None) -> QuerySet[WitnessStatement]:
        qs = WitnessStatementService.visible_statements(actor)
        if incident_id:
            qs = qs.filter(incident_id=incident_id)
        if status:
            qs = qs.filter(statement_status=status)
        return qs

    @staticmethod
    def get_statement(actor, statement_id: Any) -> WitnessStatement:
        try:
            return WitnessStatementService.visible_statements(actor).get(pk=statement_id)
        except (WitnessStatement.DoesNotExist, ValueError, TypeError):
            raise NotFound(f"Witness statement with id {statement_id} not found.")

    @staticmethod
    def resolve_named_witnesses(incident: IncidentEntry) -> list:
        """
        Active actors matching the names typed on the report, by real
        name or handle, case-insensitively.  Unmatched names are skipped.
        """
        witnesses = []
        seen = set()
        for name in split_witness_names(incident.witness_names):
            match = (
                Actor.objects.filter(is_active=True)
                .filter(Q(real_name__iexact=name) | Q(username__iexact=name))
                .order_by("pk")
                .first()
            )
            if match is None:
                logger.info("Incident %s: witness '%s' matches no active actor", incident.pk, name)
                continue
            if match.pk not in seen:
                seen.add(match.pk)
                witnesses.append(match)
        return witnesses

    @staticmethod
    @transaction.atomic
    def request_statements(*, actor, incident_id: Any, witness_ids=None) -> list[WitnessStatement]:
        """
        Ensure one pending statement exists per witness of an incident.

        ``witness_ids`` selects the witnesses explicitly; when empty the
        names typed on the report are resolved instead.  Calling this
        again never duplicates a statement.
        """
        require_capability(actor, Capability.CAN_ASSESS_DANGER_LEVEL, message=JUDGE_ONLY)
        incident = _get_incident(incident_id)
        if witness_ids:
            witnesses = _resolve_witness_ids(witness_ids)
        else:
            witnesses = WitnessStatementService.resolve_named_witnesses(incident)

        statements = []
        for witness in witnesses:
            statement, created = WitnessStatement.objects.get_or_create(
                incident=incident,
                witness=witness,
                defaults={"witness_name": witness.snapshot_name},
            )
            if created:
                logger.info("Statement requested from %s on incident %s", witness.pk, incident.pk)
            statements.append(statement)
        return statements

    @staticmethod
    def submit_statement(*, actor, statement_id: Any, statement: str) -> WitnessStatement:
        text = (statement or "").strip()
        if not text:
            raise ValidationFailed(errors=["Statement must not be empty."])

        with transaction.atomic():
            record = lock_for_update(WitnessStatement, statement_id)
            if record.witness_id != actor.pk:
                raise PermissionDenied("Only the named witness may submit this statement.")
            record.statement = text
            record.statement_status = StatementStatus.SUBMITTED
            record.submitted_at = timezone.now()
            record.save(update_fields=[
                "statement", "statement_status", "submitted_at", "updated_at",
            ])

        logger.info("Statement %s submitted by %s", record.pk, actor.pk)
        return record

    @staticmethod
    def add_judge_comment(*, actor, statement_id: Any, comment: str = "", request: str = "") -> WitnessStatement:
        require_capability(actor, Capability.CAN_ASSESS_DANGER_LEVEL, message=JUDGE_ONLY)
        with transaction.atomic():
            record = lock_for_update(WitnessStatement, statement_id)
            record.judge = actor
            record.judge_name = actor.snapshot_name
            record.judge_comment = comment
            record.judge_request = request
            record.judge_commented_at = timezone.now()
            record.save(update_fields=[
                "judge", "judge_name", "judge_comment", "judge_request",
                "judge_commented_at", "updated_at",
            ])
        return record
