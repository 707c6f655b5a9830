"""
Accounts app models.

Defines the bureau ``Actor`` (a custom user model extending Django's
``AbstractUser``) and the ``RoleImage`` attachment.  Roles themselves are
NOT database rows: they live in the read-only registry in
``core.domain.roles`` and actors reference them by id.
"""

from django.contrib.auth.models import AbstractUser
from django.conf import settings
from django.db import models

from core.domain.roles import RoleDefinition, capabilities_for, get_role
from core.models import TimeStampedModel
from core.permissions_constants import RoleId


class Actor(AbstractUser):
    """
    An authenticated bureau account.

    ``username`` is the actor's in-game handle.  Login is supported via
    either the handle or the e-mail address together with the password.

    Each actor holds exactly **one** role id at a time.  New actors are
    citizens until someone with ``can_manage_users`` assigns a role.
    ``is_master_actor`` marks the accounts allowed to impersonate others;
    a master actor cannot be deactivated while active.
    """

    email = models.EmailField(
        unique=True,
        verbose_name="Email Address",
    )
    real_name = models.CharField(
        max_length=150,
        blank=True,
        default="",
        verbose_name="Real Name",
    )
    role = models.CharField(
        max_length=30,
        choices=RoleId.choices,
        default=RoleId.CITIZEN,
        db_index=True,
        verbose_name="Role",
    )
    is_master_actor = models.BooleanField(
        default=False,
        verbose_name="Master Actor",
    )

    REQUIRED_FIELDS = ["email"]

    class Meta:
        verbose_name = "Actor"
        verbose_name_plural = "Actors"
        ordering = ["real_name", "username"]

    def __str__(self):
        return f"{self.username} ({self.real_name or self.email}) - {self.role}"

    @property
    def handle(self) -> str:
        return self.username

    @property
    def role_definition(self) -> RoleDefinition | None:
        return get_role(self.role)

    @property
    def hierarchy_level(self) -> int:
        """Return the hierarchy_level of the actor's role (0 if unknown)."""
        role = self.role_definition
        return role.hierarchy_level if role else 0

    @property
    def snapshot_name(self) -> str:
        """Name stored on assessments, reports and hearings."""
        return self.real_name or self.username or self.email

    @property
    def capabilities(self) -> list[str]:
        """Flat list of capability codenames, for UI rendering."""
        return capabilities_for(self)


class RoleImage(TimeStampedModel):
    """
    Display image attached to a role.

    Kept apart from the role registry: uploading an image never mutates
    a role definition.  One row per role, last writer wins.
    """

    role = models.CharField(
        max_length=30,
        choices=RoleId.choices,
        unique=True,
        verbose_name="Role",
    )
    image_url = models.CharField(max_length=500, verbose_name="Image URL")
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="uploaded_role_images",
        verbose_name="Uploaded By",
    )

    class Meta:
        verbose_name = "Role Image"
        verbose_name_plural = "Role Images"

    def __str__(self):
        return f"{self.role}: {self.image_url}"
