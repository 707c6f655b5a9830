"""
Registry app models.

The bureau's dossiers: persons, organizations, the incidents reported
against persons, and the relations between them (memberships,
organization relationships, organization journals).

The fleet catalogue sits beside them: manufacturers, their ship models,
registered ships, the persons crewing them and per-ship journals.

Persons, organizations and incidents are *assessable*: they inherit the
danger-level / classification / status block from
``core.models.AssessableModel``.
"""

from django.conf import settings
from django.db import models
from django.db.models import F, Q
from django.db.models.functions import Lower
from django.utils import timezone

from core.models import AssessableModel, TimeStampedModel


class CrimeType(models.TextChoices):
    MURDER = "murder", "Murder"
    PIRACY = "piracy", "Piracy"
    GRIEFING = "griefing", "Griefing"
    THEFT = "theft", "Theft"
    BETRAYAL = "betrayal", "Betrayal"
    PAD_RAMMING = "pad_ramming", "Pad Ramming"
    ESPIONAGE = "espionage", "Espionage"
    SMUGGLING = "smuggling", "Smuggling"
    FRAUD = "fraud", "Fraud"


class RelationshipType(models.TextChoices):
    ALLIED = "allied", "Allied"
    SHADOW = "shadow", "Shadow"
    HOSTILE = "hostile", "Hostile"
    NEUTRAL = "neutral", "Neutral"
    SUSPICIOUS = "suspicious", "Suspicious"


class Person(TimeStampedModel, AssessableModel):
    """
    A tracked individual, identified by their in-game handle.

    Handles are unique case-insensitively; incident reports look persons
    up by handle and create a bare record when none exists.
    """

    name = models.CharField(max_length=150, verbose_name="Name")
    handle = models.CharField(max_length=100, db_index=True, verbose_name="Handle")
    aliases = models.JSONField(default=list, blank=True, verbose_name="Aliases")
    location = models.CharField(max_length=150, blank=True, default="")
    language = models.CharField(max_length=100, blank=True, default="")
    avatar_url = models.CharField(max_length=500, blank=True, default="")
    citizen_record = models.CharField(max_length=50, blank=True, default="")
    enlisted_on = models.DateField(null=True, blank=True)
    bio = models.TextField(blank=True, default="")
    notes = models.TextField(blank=True, default="")
    last_scanned_at = models.DateTimeField(null=True, blank=True)

    class Meta(AssessableModel.Meta):
        verbose_name = "Person"
        verbose_name_plural = "Persons"
        ordering = ["-created_at"]
        constraints = [
            *AssessableModel.Meta.constraints,
            models.UniqueConstraint(Lower("handle"), name="registry_person_handle_ci_unique"),
        ]

    def __str__(self):
        return f"{self.name} (@{self.handle})"


class Organization(TimeStampedModel, AssessableModel):
    name = models.CharField(max_length=150, verbose_name="Name")
    handle = models.CharField(max_length=100, blank=True, default="", db_index=True)
    description = models.TextField(blank=True, default="")
    headquarters = models.CharField(max_length=150, blank=True, default="")
    logo_url = models.CharField(max_length=500, blank=True, default="")
    members = models.ManyToManyField(
        Person,
        through="Membership",
        related_name="organizations",
        blank=True,
    )

    class Meta(AssessableModel.Meta):
        verbose_name = "Organization"
        verbose_name_plural = "Organizations"
        ordering = ["name"]

    def __str__(self):
        return self.name


class IncidentEntry(TimeStampedModel, AssessableModel):
    """
    An incident reported against a person.

    The reporter is snapshotted (id, name, role) at report time.
    ``witness_names`` is the free text typed by the reporter; statements
    are requested from resolved witnesses later by a judge.
    """

    person = models.ForeignKey(
        Person,
        on_delete=models.PROTECT,
        related_name="incidents",
        verbose_name="Person",
    )
    person_name = models.CharField(max_length=150, verbose_name="Person Name")
    occurred_on = models.DateField(verbose_name="Date")
    description = models.TextField(blank=True, default="")
    crime_types = models.JSONField(default=list, blank=True, verbose_name="Crime Types")
    witness_names = models.TextField(blank=True, default="")
    reported_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="reported_incidents",
        verbose_name="Reported By",
    )
    reported_by_name = models.CharField(max_length=150)
    reported_by_role = models.CharField(max_length=30)

    class Meta(AssessableModel.Meta):
        verbose_name = "Incident Entry"
        verbose_name_plural = "Incident Entries"
        ordering = ["-occurred_on", "-created_at"]

    def __str__(self):
        return f"Incident #{self.pk} — {self.person_name} ({self.occurred_on})"


class Membership(TimeStampedModel):
    person = models.ForeignKey(
        Person,
        on_delete=models.CASCADE,
        related_name="memberships",
    )
    organization = models.ForeignKey(
        Organization,
        on_delete=models.CASCADE,
        related_name="memberships",
    )
    rank = models.CharField(max_length=100, blank=True, default="")
    is_active = models.BooleanField(default=True)
    started_on = models.DateField(null=True, blank=True)
    ended_on = models.DateField(null=True, blank=True)
    last_verified_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = "Membership"
        verbose_name_plural = "Memberships"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.person} in {self.organization}"


class OrgRelationship(TimeStampedModel):
    """
    A typed link between two organizations.

    Stored once; lookups consider both sides.
    """

    organization = models.ForeignKey(
        Organization,
        on_delete=models.CASCADE,
        related_name="relationships_from",
    )
    related_organization = models.ForeignKey(
        Organization,
        on_delete=models.CASCADE,
        related_name="relationships_to",
    )
    relationship_type = models.CharField(
        max_length=20,
        choices=RelationshipType.choices,
        default=RelationshipType.NEUTRAL,
    )
    description = models.TextField(blank=True, default="")
    started_on = models.DateField(null=True, blank=True)
    last_verified_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = "Organization Relationship"
        verbose_name_plural = "Organization Relationships"
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=~Q(organization=F("related_organization")),
                name="registry_orgrelationship_not_self",
            ),
        ]

    def __str__(self):
        return f"{self.organization} —{self.relationship_type}→ {self.related_organization}"


class OrganizationJournal(TimeStampedModel):
    organization = models.ForeignKey(
        Organization,
        on_delete=models.CASCADE,
        related_name="journal_entries",
    )
    entry_date = models.DateField()
    title = models.CharField(max_length=200)
    content = models.TextField(blank=True, default="")
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="journal_entries",
    )
    author_name = models.CharField(max_length=150, blank=True, default="")

    class Meta:
        verbose_name = "Organization Journal Entry"
        verbose_name_plural = "Organization Journal Entries"
        ordering = ["-entry_date", "-created_at"]

    def __str__(self):
        return f"{self.organization}: {self.title}"


# ════════════════════════════════════════════════════════════════════
#  FLEET
# ════════════════════════════════════════════════════════════════════


class ShipType(models.TextChoices):
    MINING = "mining", "Mining"
    LIGHT_FIGHTER = "light_fighter", "Light Fighter"
    MEDIUM_FIGHTER = "medium_fighter", "Medium Fighter"
    HEAVY_FIGHTER = "heavy_fighter", "Heavy Fighter"
    BOMBER = "bomber", "Bomber"
    INTERCEPTOR = "interceptor", "Interceptor"
    EXPLORATION = "exploration", "Exploration"
    STARTER = "starter", "Starter"
    CARGO = "cargo", "Cargo"
    SALVAGE = "salvage", "Salvage"
    MEDICAL = "medical", "Medical"
    REFUELING = "refueling", "Refueling"
    REPAIR = "repair", "Repair"
    RACING = "racing", "Racing"
    TOURING = "touring", "Touring"
    SCIENCE = "science", "Science"
    DROPSHIP = "dropship", "Dropship"
    GUNSHIP = "gunship", "Gunship"
    STEALTH = "stealth", "Stealth"
    ELECTRONIC_WARFARE = "electronic_warfare", "Electronic Warfare"
    INDUSTRIAL = "industrial", "Industrial"
    CONSTRUCTION = "construction", "Construction"
    PLANT = "plant", "Plant"
    MULTI_ROLE = "multi_role", "Multi-Role"
    TRANSPORT = "transport", "Transport"
    LUXURY = "luxury", "Luxury"
    PATROL = "patrol", "Patrol"
    SUPPORT = "support", "Support"
    COMMAND = "command", "Command"
    CAPITAL_SHIP = "capital_ship", "Capital Ship"
    CORVETTE = "corvette", "Corvette"
    FRIGATE = "frigate", "Frigate"
    CARRIER = "carrier", "Carrier"


class ShipStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    INACTIVE = "inactive", "Inactive"
    UNDER_MAINTENANCE = "under_maintenance", "Under Maintenance"
    DESTROYED = "destroyed", "Destroyed"
    MISSING = "missing", "Missing"
    IMPOUNDED = "impounded", "Impounded"


DEFAULT_CREW_ROLE = "Crew Member"


class Manufacturer(TimeStampedModel):
    name = models.CharField(max_length=150, verbose_name="Name")
    logo_url = models.CharField(max_length=500, blank=True, default="")
    description = models.TextField(blank=True, default="")

    class Meta:
        verbose_name = "Manufacturer"
        verbose_name_plural = "Manufacturers"
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(Lower("name"), name="registry_manufacturer_name_ci_unique"),
        ]

    def __str__(self):
        return self.name


class ShipModel(TimeStampedModel):
    """A hull design. Deleting the manufacturer deletes its models."""

    manufacturer = models.ForeignKey(
        Manufacturer,
        on_delete=models.CASCADE,
        related_name="ship_models",
    )
    name = models.CharField(max_length=150, verbose_name="Name")
    ship_type = models.CharField(max_length=30, choices=ShipType.choices, verbose_name="Type")
    description = models.TextField(blank=True, default="")

    class Meta:
        verbose_name = "Ship Model"
        verbose_name_plural = "Ship Models"
        ordering = ["manufacturer__name", "name"]
        constraints = [
            models.UniqueConstraint(
                "manufacturer", Lower("name"), name="registry_shipmodel_name_ci_unique",
            ),
        ]

    def __str__(self):
        return f"{self.manufacturer} {self.name}"


class Ship(TimeStampedModel):
    """
    A registered vessel.

    ``model_name`` and ``manufacturer_name`` are snapshotted when the
    model is set, so a ship keeps its description after its model is
    removed from the catalogue (``model`` then becomes null).
    """

    name = models.CharField(max_length=150, verbose_name="Name")
    serial_number = models.CharField(max_length=100, blank=True, default="", db_index=True)
    model = models.ForeignKey(
        ShipModel,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="ships",
    )
    model_name = models.CharField(max_length=150, blank=True, default="")
    manufacturer_name = models.CharField(max_length=150, blank=True, default="")
    location = models.CharField(max_length=150, blank=True, default="")
    status = models.CharField(
        max_length=20,
        choices=ShipStatus.choices,
        default=ShipStatus.ACTIVE,
    )
    description = models.TextField(blank=True, default="")
    crew = models.ManyToManyField(
        Person,
        through="ShipAssignment",
        related_name="ships",
        blank=True,
    )

    class Meta:
        verbose_name = "Ship"
        verbose_name_plural = "Ships"
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(
                Lower("serial_number"),
                condition=~Q(serial_number=""),
                name="registry_ship_serial_ci_unique",
            ),
        ]

    def __str__(self):
        return self.name


class ShipAssignment(TimeStampedModel):
    ship = models.ForeignKey(
        Ship,
        on_delete=models.CASCADE,
        related_name="assignments",
    )
    person = models.ForeignKey(
        Person,
        on_delete=models.CASCADE,
        related_name="ship_assignments",
    )
    role = models.CharField(max_length=100, default=DEFAULT_CREW_ROLE)
    assigned_on = models.DateField(default=timezone.localdate)

    class Meta:
        verbose_name = "Ship Assignment"
        verbose_name_plural = "Ship Assignments"
        ordering = ["-assigned_on", "-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["ship", "person"], name="registry_shipassignment_unique"),
        ]

    def __str__(self):
        return f"{self.person} aboard {self.ship} ({self.role})"


class ShipJournal(TimeStampedModel):
    ship = models.ForeignKey(
        Ship,
        on_delete=models.CASCADE,
        related_name="journal_entries",
    )
    entry_date = models.DateField()
    description = models.TextField()
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="ship_journal_entries",
    )
    author_name = models.CharField(max_length=150, blank=True, default="")

    class Meta:
        verbose_name = "Ship Journal Entry"
        verbose_name_plural = "Ship Journal Entries"
        ordering = ["-entry_date", "-created_at"]

    def __str__(self):
        return f"{self.ship} ({self.entry_date})"
