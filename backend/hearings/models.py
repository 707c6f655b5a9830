"""
Hearings app models.

- ``Hearing``          — a judge's question about one incident, put to a
                         set of witnesses; ``active`` until closed.
- ``HearingResponse``  — a witness's agree/disagree answer.  At most one
                         per (hearing, witness): answering again replaces
                         the earlier answer in place.
- ``WitnessStatement`` — a free-text account requested from one witness
                         for one incident, optionally annotated by a judge.
"""

from django.conf import settings
from django.db import models

from core.models import TimeStampedModel
from registry.models import IncidentEntry


class HearingStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    CLOSED = "closed", "Closed"


class Agreement(models.TextChoices):
    AGREE = "agree", "Agree"
    DISAGREE = "disagree", "Disagree"


class StatementStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    SUBMITTED = "submitted", "Submitted"


class Hearing(TimeStampedModel):
    entry = models.ForeignKey(
        IncidentEntry,
        on_delete=models.PROTECT,
        related_name="hearings",
        verbose_name="Incident",
    )
    title = models.CharField(max_length=200)
    question = models.TextField()
    witnesses = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        related_name="hearings_as_witness",
        blank=True,
    )

    # Snapshot of the incident when the hearing was opened.
    crime_types = models.JSONField(default=list, blank=True)
    entry_description = models.TextField(blank=True, default="")

    status = models.CharField(
        max_length=10,
        choices=HearingStatus.choices,
        default=HearingStatus.ACTIVE,
        db_index=True,
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="hearings_created",
    )
    created_by_name = models.CharField(max_length=150)
    created_by_role = models.CharField(max_length=30)
    closed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    closed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = "Hearing"
        verbose_name_plural = "Hearings"
        ordering = ["-created_at"]

    def __str__(self):
        return f"Hearing #{self.pk}: {self.title} [{self.status}]"


class HearingResponse(TimeStampedModel):
    hearing = models.ForeignKey(
        Hearing,
        on_delete=models.CASCADE,
        related_name="responses",
    )
    witness = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="hearing_responses",
    )
    witness_name = models.CharField(max_length=150)
    agreement = models.CharField(max_length=10, choices=Agreement.choices)
    comment = models.TextField(blank=True, default="")

    class Meta:
        verbose_name = "Hearing Response"
        verbose_name_plural = "Hearing Responses"
        # First answer keeps its place when replaced.
        ordering = ["created_at", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["hearing", "witness"],
                name="hearings_response_one_per_witness",
            ),
        ]

    def __str__(self):
        return f"{self.witness_name}: {self.agreement} (hearing #{self.hearing_id})"


class WitnessStatement(TimeStampedModel):
    incident = models.ForeignKey(
        IncidentEntry,
        on_delete=models.PROTECT,
        related_name="witness_statements",
    )
    witness = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="witness_statements",
    )
    witness_name = models.CharField(max_length=150)
    statement = models.TextField(blank=True, default="")
    statement_status = models.CharField(
        max_length=10,
        choices=StatementStatus.choices,
        default=StatementStatus.PENDING,
        db_index=True,
    )
    submitted_at = models.DateTimeField(null=True, blank=True)

    judge = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    judge_name = models.CharField(max_length=150, blank=True, default="")
    judge_comment = models.TextField(blank=True, default="")
    judge_request = models.TextField(blank=True, default="")
    judge_commented_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = "Witness Statement"
        verbose_name_plural = "Witness Statements"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["incident", "witness"],
                name="hearings_statement_one_per_witness",
            ),
        ]

    def __str__(self):
        return f"Statement by {self.witness_name} on incident #{self.incident_id}"
