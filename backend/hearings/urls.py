"""
Hearings app URL configuration.

All routes are registered under the ``/api/hearings/`` prefix.

Route Hierarchy
---------------
  ── Hearings ────────────────────────────────────────────────────
  GET    /api/hearings/hearings/                → list hearings
  POST   /api/hearings/hearings/                → open hearing
  GET    /api/hearings/hearings/{id}/           → retrieve hearing
  POST   /api/hearings/hearings/{id}/close/     → judge closes

  ── Nested: Responses ───────────────────────────────────────────
  GET    /api/hearings/hearings/{hearing_pk}/responses/  → list answers
  POST   /api/hearings/hearings/{hearing_pk}/responses/  → witness answer (upsert)

  ── Witness Statements ──────────────────────────────────────────
  GET    /api/hearings/statements/                     → list statements
  POST   /api/hearings/statements/                     → request statements
  GET    /api/hearings/statements/{id}/                → retrieve statement
  POST   /api/hearings/statements/{id}/submit/         → witness submits
  POST   /api/hearings/statements/{id}/judge-comment/  → judge annotates
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter
from rest_framework_nested.routers import NestedDefaultRouter

from .views import HearingResponseViewSet, HearingViewSet, WitnessStatementViewSet

app_name = "hearings"

# ── Primary Router ──────────────────────────────────────────────────
router = DefaultRouter()
router.register(prefix=r"hearings", viewset=HearingViewSet, basename="hearing")
router.register(prefix=r"statements", viewset=WitnessStatementViewSet, basename="statement")

# ── Nested Router (under /hearings/{hearing_pk}/) ───────────────────
hearings_router = NestedDefaultRouter(
    parent_router=router,
    parent_prefix=r"hearings",
    lookup="hearing",
)
hearings_router.register(
    prefix=r"responses",
    viewset=HearingResponseViewSet,
    basename="hearing-response",
)

urlpatterns = [
    path("", include(router.urls)),
    path("", include(hearings_router.urls)),
]
