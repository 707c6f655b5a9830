"""
Registry app URL configuration.

All routes are registered under the ``/api/registry/`` prefix.

Route Hierarchy
---------------
  /api/registry/persons/                          → search / create
  /api/registry/persons/{id}/                     → dossier / partial_update
  GET  /api/registry/persons/{id}/memberships/
  GET  /api/registry/persons/{id}/ships/

  /api/registry/organizations/                    → search / create
  /api/registry/organizations/{id}/               → retrieve / partial_update
  GET      /api/registry/organizations/{id}/crime-stats/
  GET      /api/registry/organizations/{id}/relationships/
  GET      /api/registry/organizations/{id}/memberships/
  GET/POST /api/registry/organizations/{id}/journal/

  /api/registry/memberships/{id}/                 → partial_update / destroy
  /api/registry/relationships/{id}/               → partial_update / destroy
  /api/registry/journal-entries/{id}/             → partial_update

  /api/registry/incidents/                        → list (scoped) / report
  /api/registry/incidents/{id}/                   → retrieve / partial_update

  /api/registry/manufacturers/                    → list / create
  /api/registry/manufacturers/{id}/               → retrieve / partial_update / destroy
  GET      /api/registry/manufacturers/{id}/models/
  /api/registry/ship-models/                      → list / create
  /api/registry/ship-models/{id}/                 → partial_update / destroy

  /api/registry/ships/                            → search / register
  /api/registry/ships/{id}/                       → retrieve / partial_update / destroy
  GET/POST /api/registry/ships/{id}/crew/
  GET/POST /api/registry/ships/{id}/journal/
  /api/registry/ship-assignments/{id}/            → destroy
  /api/registry/ship-journal-entries/{id}/        → partial_update
"""

from rest_framework.routers import DefaultRouter

from .views import (
    IncidentViewSet,
    JournalEntryViewSet,
    ManufacturerViewSet,
    MembershipViewSet,
    OrganizationViewSet,
    OrgRelationshipViewSet,
    PersonViewSet,
    ShipAssignmentViewSet,
    ShipJournalEntryViewSet,
    ShipModelViewSet,
    ShipViewSet,
)

app_name = "registry"

router = DefaultRouter()
router.register(r"persons", PersonViewSet, basename="person")
router.register(r"organizations", OrganizationViewSet, basename="organization")
router.register(r"memberships", MembershipViewSet, basename="membership")
router.register(r"relationships", OrgRelationshipViewSet, basename="relationship")
router.register(r"journal-entries", JournalEntryViewSet, basename="journal-entry")
router.register(r"incidents", IncidentViewSet, basename="incident")
router.register(r"manufacturers", ManufacturerViewSet, basename="manufacturer")
router.register(r"ship-models", ShipModelViewSet, basename="ship-model")
router.register(r"ships", ShipViewSet, basename="ship")
router.register(r"ship-assignments", ShipAssignmentViewSet, basename="ship-assignment")
router.register(r"ship-journal-entries", ShipJournalEntryViewSet, basename="ship-journal-entry")

urlpatterns = router.urls
