"""
Permissions Constants — **Single Source of Truth**

Every capability referenced in code (services, serializers, views,
``seed_bureau``) MUST use one of the constants defined here.

Organisation
------------
- ``Capability`` lists the capability codenames.  Capabilities are a
  closed set; adding one means adding the constant below and granting it
  to the relevant roles in ``ROLE_PERMISSIONS_MAP``.

- ``RoleId`` enumerates the six bureau roles.  Role ids are stored on
  every actor and snapshotted onto assessments, so they never change.

- ``ROLE_PERMISSIONS_MAP`` is the literal role table.  It is frozen into
  a read-only registry by ``core.domain.roles`` at import time and is
  never loaded from, or written to, the database.
"""

from django.db import models


# ════════════════════════════════════════════════════════════════════
#  CAPABILITIES
# ════════════════════════════════════════════════════════════════════

class Capability:
    """Capability codenames granted to roles."""

    # ── Assessment workflow ─────────────────────────────────────────
    CAN_ASSESS_DANGER_LEVEL = "can_assess_danger_level"
    """Assign a danger level and classification to a target."""

    CAN_OVERRIDE_ASSESSMENTS = "can_override_assessments"
    """Replace an assessment previously made by a lower-ranked assessor."""

    CAN_MANAGE_STATUS = "can_manage_status"
    """Move a target between workflow statuses (pending, confirmed, ...)."""

    # ── Identity & administration ───────────────────────────────────
    CAN_VIEW_SENSITIVE_DATA = "can_view_sensitive_data"
    """See unmasked e-mail addresses and handles of other actors."""

    CAN_IMPERSONATE_ACTORS = "can_impersonate_actors"
    """Act as another actor (master actors only)."""

    CAN_MANAGE_USERS = "can_manage_users"
    """Create actors, assign roles, activate / deactivate accounts."""

    CAN_UPLOAD_ROLE_IMAGES = "can_upload_role_images"
    """Upload the display image attached to a role."""

    CAN_DELETE = "can_delete"
    """Delete registry records."""

    # ── Registry ────────────────────────────────────────────────────
    CAN_CREATE_ORGANIZATIONS = "can_create_organizations"
    """Create organizations and maintain memberships / relationships."""

    CAN_SEARCH_PERSONS = "can_search_persons"
    """Search the person registry and see every incident."""

    CAN_VIEW_PERSON_DETAILS = "can_view_person_details"
    """Open and maintain person dossiers."""

    CAN_MANAGE_JOURNALS = "can_manage_journals"
    """Write organization journal entries."""

    CAN_REPORT_INCIDENTS = "can_report_incidents"
    """File incident reports."""

    # ── Fleet ───────────────────────────────────────────────────────
    CAN_MANAGE_SHIPS = "can_manage_ships"
    """Register ships and maintain their crews and journals."""

    CAN_MANAGE_MANUFACTURERS = "can_manage_manufacturers"
    """Maintain the manufacturer and ship model catalogue."""

    ALL = (
        CAN_ASSESS_DANGER_LEVEL,
        CAN_OVERRIDE_ASSESSMENTS,
        CAN_MANAGE_STATUS,
        CAN_VIEW_SENSITIVE_DATA,
        CAN_IMPERSONATE_ACTORS,
        CAN_MANAGE_USERS,
        CAN_UPLOAD_ROLE_IMAGES,
        CAN_DELETE,
        CAN_CREATE_ORGANIZATIONS,
        CAN_SEARCH_PERSONS,
        CAN_VIEW_PERSON_DETAILS,
        CAN_MANAGE_JOURNALS,
        CAN_REPORT_INCIDENTS,
        CAN_MANAGE_SHIPS,
        CAN_MANAGE_MANUFACTURERS,
    )


# ════════════════════════════════════════════════════════════════════
#  ROLES
# ════════════════════════════════════════════════════════════════════

class RoleId(models.TextChoices):
    SENTINEL = "sentinel", "Sentinel"
    HIGH_JUDGE = "high_judge", "High Judge"
    JUDGE = "judge", "Judge"
    LEGAL_AUTHORITY = "legal_authority", "Legal Authority"
    BOUNTY_HUNTER = "bounty_hunter", "Bounty Hunter"
    CITIZEN = "citizen", "Citizen"


# Roles allowed to change the workflow status of a target, on top of
# holding ``CAN_MANAGE_STATUS``.
STATUS_MANAGER_ROLES = frozenset({
    RoleId.SENTINEL,
    RoleId.JUDGE,
    RoleId.HIGH_JUDGE,
})


_C = Capability

# (role_id, display name, description, hierarchy_level) → capabilities
ROLE_PERMISSIONS_MAP: dict[tuple[str, str, str, int], tuple[str, ...]] = {
    (
        RoleId.SENTINEL, "Sentinel",
        "Bureau overseer with unrestricted access.", 100,
    ): _C.ALL,

    (
        RoleId.HIGH_JUDGE, "High Judge",
        "Senior judge; may override assessments made by judges.", 80,
    ): (
        _C.CAN_ASSESS_DANGER_LEVEL, _C.CAN_OVERRIDE_ASSESSMENTS,
        _C.CAN_MANAGE_STATUS, _C.CAN_VIEW_SENSITIVE_DATA,
        _C.CAN_CREATE_ORGANIZATIONS, _C.CAN_SEARCH_PERSONS,
        _C.CAN_VIEW_PERSON_DETAILS, _C.CAN_MANAGE_JOURNALS,
        _C.CAN_REPORT_INCIDENTS, _C.CAN_MANAGE_SHIPS,
        _C.CAN_MANAGE_MANUFACTURERS,
    ),

    (
        RoleId.JUDGE, "Judge",
        "Assesses unassessed targets and their own prior assessments.", 60,
    ): (
        _C.CAN_ASSESS_DANGER_LEVEL, _C.CAN_MANAGE_STATUS,
        _C.CAN_CREATE_ORGANIZATIONS, _C.CAN_SEARCH_PERSONS,
        _C.CAN_VIEW_PERSON_DETAILS, _C.CAN_MANAGE_JOURNALS,
        _C.CAN_REPORT_INCIDENTS, _C.CAN_MANAGE_SHIPS,
    ),

    (
        RoleId.LEGAL_AUTHORITY, "Legal Authority",
        "Reviews dossiers, including sensitive identity data.", 40,
    ): (
        _C.CAN_VIEW_SENSITIVE_DATA, _C.CAN_SEARCH_PERSONS,
        _C.CAN_VIEW_PERSON_DETAILS, _C.CAN_REPORT_INCIDENTS,
    ),

    (
        RoleId.BOUNTY_HUNTER, "Bounty Hunter",
        "Tracks persons of interest and files reports.", 20,
    ): (
        _C.CAN_SEARCH_PERSONS, _C.CAN_VIEW_PERSON_DETAILS,
        _C.CAN_REPORT_INCIDENTS,
    ),

    (
        RoleId.CITIZEN, "Citizen",
        "May report incidents and follow their own reports.", 0,
    ): (
        _C.CAN_REPORT_INCIDENTS,
    ),
}
