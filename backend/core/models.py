"""
Core app models.

Provides abstract base models and the assessment vocabulary shared by
every assessable registry entity (persons, organizations, incidents).
"""

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q

from core.constants import DANGER_LEVEL_COLOURS, MAX_DANGER_LEVEL, MIN_DANGER_LEVEL


class TimeStampedModel(models.Model):
    """
    Abstract base model that provides self-updating ``created_at`` and
    ``updated_at`` timestamp fields for every concrete child model.
    """

    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created At",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name="Updated At",
    )

    class Meta:
        abstract = True


class DangerLevel(models.IntegerChoices):
    MINIMAL = 1, "Minimal"
    LOW = 2, "Low"
    MODERATE = 3, "Moderate"
    ELEVATED = 4, "Elevated"
    HIGH = 5, "High"
    EXTREME = 6, "Extreme"


class Classification(models.TextChoices):
    HARMLESS = "harmless", "Harmless"
    SUSPICIOUS = "suspicious", "Suspicious"
    THREAT = "threat", "Threat"


class AssessmentStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    REJECTED = "rejected", "Rejected"
    REOPENED = "reopened", "Reopened"


class AssessableModel(models.Model):
    """
    Abstract base for entities that carry a danger assessment and a
    workflow status.

    The assessor snapshot (``assessed_by`` / ``assessed_by_name`` /
    ``assessed_by_role``) is either entirely empty (unassessed) or
    entirely present.  ``status_updated_by*`` is a parallel snapshot for
    workflow changes that happen independently of assessments.

    Writes to these fields go through ``assessments.services``; they are
    never edited through generic registry updates.
    """

    danger_level = models.PositiveSmallIntegerField(
        choices=DangerLevel.choices,
        default=DangerLevel.MINIMAL,
        validators=[
            MinValueValidator(MIN_DANGER_LEVEL),
            MaxValueValidator(MAX_DANGER_LEVEL),
        ],
        verbose_name="Danger Level",
    )
    classification = models.CharField(
        max_length=20,
        choices=Classification.choices,
        default=Classification.HARMLESS,
        verbose_name="Classification",
    )
    status = models.CharField(
        max_length=20,
        choices=AssessmentStatus.choices,
        default=AssessmentStatus.PENDING,
        db_index=True,
        verbose_name="Status",
    )

    # ── Assessor snapshot ───────────────────────────────────────────
    assessed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="Assessed By",
    )
    assessed_by_name = models.CharField(max_length=150, blank=True, default="")
    assessed_by_role = models.CharField(max_length=30, blank=True, default="")
    assessed_at = models.DateTimeField(null=True, blank=True)
    assessment_notes = models.TextField(blank=True, default="")

    # ── Status snapshot ─────────────────────────────────────────────
    status_updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="Status Updated By",
    )
    status_updated_by_name = models.CharField(max_length=150, blank=True, default="")
    status_updated_by_role = models.CharField(max_length=30, blank=True, default="")
    status_updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        abstract = True
        constraints = [
            models.CheckConstraint(
                condition=Q(
                    danger_level__gte=MIN_DANGER_LEVEL,
                    danger_level__lte=MAX_DANGER_LEVEL,
                ),
                name="%(app_label)s_%(class)s_danger_level_range",
            ),
            models.CheckConstraint(
                condition=(
                    Q(assessed_by__isnull=True, assessed_by_role="")
                    | (
                        Q(assessed_by__isnull=False)
                        & ~Q(assessed_by_role="")
                        & ~Q(assessed_by_name="")
                    )
                ),
                name="%(app_label)s_%(class)s_assessor_complete",
            ),
        ]

    @property
    def is_assessed(self) -> bool:
        return bool(self.assessed_by_role)

    @property
    def danger_colour(self) -> str:
        return DANGER_LEVEL_COLOURS.get(self.danger_level, "green")
