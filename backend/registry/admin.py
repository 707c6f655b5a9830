from django.contrib import admin

from .models import (
    IncidentEntry,
    Manufacturer,
    Membership,
    Organization,
    OrganizationJournal,
    OrgRelationship,
    Person,
    Ship,
    ShipAssignment,
    ShipJournal,
    ShipModel,
)

ASSESSMENT_READONLY = (
    "danger_level", "classification", "status",
    "assessed_by", "assessed_by_name", "assessed_by_role", "assessed_at",
    "status_updated_by", "status_updated_by_name", "status_updated_by_role",
    "status_updated_at",
)


class MembershipInline(admin.TabularInline):
    model = Membership
    extra = 0


class IncidentInline(admin.TabularInline):
    model = IncidentEntry
    extra = 0
    fields = ("occurred_on", "crime_types", "reported_by_name", "status")
    readonly_fields = fields
    can_delete = False


@admin.register(Person)
class PersonAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "handle", "danger_level", "classification", "status")
    list_filter = ("classification", "status", "danger_level")
    search_fields = ("name", "handle")
    readonly_fields = ASSESSMENT_READONLY
    inlines = [MembershipInline, IncidentInline]


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "handle", "danger_level", "classification", "status")
    list_filter = ("classification", "status")
    search_fields = ("name", "handle")
    readonly_fields = ASSESSMENT_READONLY
    inlines = [MembershipInline]


@admin.register(IncidentEntry)
class IncidentEntryAdmin(admin.ModelAdmin):
    list_display = ("id", "person_name", "occurred_on", "reported_by_name", "status")
    list_filter = ("status", "classification")
    search_fields = ("person_name", "description", "reported_by_name")
    readonly_fields = ("reported_by", "reported_by_name", "reported_by_role", *ASSESSMENT_READONLY)


@admin.register(OrgRelationship)
class OrgRelationshipAdmin(admin.ModelAdmin):
    list_display = ("organization", "relationship_type", "related_organization")
    list_filter = ("relationship_type",)


@admin.register(OrganizationJournal)
class OrganizationJournalAdmin(admin.ModelAdmin):
    list_display = ("organization", "entry_date", "title", "author_name")
    search_fields = ("title", "content")


class ShipModelInline(admin.TabularInline):
    model = ShipModel
    extra = 0


class ShipAssignmentInline(admin.TabularInline):
    model = ShipAssignment
    extra = 0


@admin.register(Manufacturer)
class ManufacturerAdmin(admin.ModelAdmin):
    list_display = ("id", "name")
    search_fields = ("name",)
    inlines = [ShipModelInline]


@admin.register(ShipModel)
class ShipModelAdmin(admin.ModelAdmin):
    list_display = ("name", "manufacturer", "ship_type")
    list_filter = ("ship_type",)
    search_fields = ("name", "manufacturer__name")


@admin.register(Ship)
class ShipAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "serial_number", "model_name", "status", "location")
    list_filter = ("status",)
    search_fields = ("name", "serial_number")
    readonly_fields = ("model_name", "manufacturer_name")
    inlines = [ShipAssignmentInline]


@admin.register(ShipJournal)
class ShipJournalAdmin(admin.ModelAdmin):
    list_display = ("ship", "entry_date", "author_name")
    search_fields = ("description",)
