"""
Assessments app models.

Append-only audit trails for the assessable registry entities:

- ``AssessmentHistory`` — one row per danger-assessment change.
- ``StatusChangeLog``   — one row per workflow status change.

Both point at their target through a generic relation so a single table
serves persons, organizations and incidents alike.  Rows are written by
``assessments.services`` only and can never be edited or deleted.
"""

from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models

from core.domain.exceptions import InvariantViolation
from core.models import AssessmentStatus, Classification, DangerLevel


class AppendOnlyModel(models.Model):
    """Rows may be inserted once and never changed afterwards."""

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if self.pk is not None and not self._state.adding:
            raise InvariantViolation(
                f"{type(self).__name__} records are append-only."
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise InvariantViolation(f"{type(self).__name__} records cannot be deleted.")


class AssessmentHistory(AppendOnlyModel):
    content_type = models.ForeignKey(ContentType, on_delete=models.PROTECT)
    object_id = models.PositiveBigIntegerField()
    target = GenericForeignKey("content_type", "object_id")

    previous_danger_level = models.PositiveSmallIntegerField(choices=DangerLevel.choices)
    new_danger_level = models.PositiveSmallIntegerField(choices=DangerLevel.choices)
    previous_classification = models.CharField(max_length=20, choices=Classification.choices)
    new_classification = models.CharField(max_length=20, choices=Classification.choices)

    assessed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="assessment_history",
        verbose_name="Assessed By",
    )
    assessed_by_name = models.CharField(max_length=150)
    assessed_by_role = models.CharField(max_length=30)
    notes = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True, verbose_name="Created At")

    class Meta:
        verbose_name = "Assessment History Record"
        verbose_name_plural = "Assessment History"
        ordering = ["-created_at", "-id"]
        indexes = [models.Index(fields=["content_type", "object_id"])]

    def __str__(self):
        return (
            f"{self.content_type.model} #{self.object_id}: "
            f"{self.previous_danger_level} → {self.new_danger_level}"
        )


class StatusChangeLog(AppendOnlyModel):
    content_type = models.ForeignKey(ContentType, on_delete=models.PROTECT)
    object_id = models.PositiveBigIntegerField()
    target = GenericForeignKey("content_type", "object_id")

    from_status = models.CharField(max_length=20, choices=AssessmentStatus.choices)
    to_status = models.CharField(max_length=20, choices=AssessmentStatus.choices)
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="status_changes",
        verbose_name="Changed By",
    )
    changed_by_name = models.CharField(max_length=150)
    changed_by_role = models.CharField(max_length=30)
    created_at = models.DateTimeField(auto_now_add=True, verbose_name="Created At")

    class Meta:
        verbose_name = "Status Change"
        verbose_name_plural = "Status Changes"
        ordering = ["-created_at", "-id"]
        indexes = [models.Index(fields=["content_type", "object_id"])]

    def __str__(self):
        return f"{self.content_type.model} #{self.object_id}: {self.from_status} → {self.to_status}"
