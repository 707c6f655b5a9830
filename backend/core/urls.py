"""
Core app URL configuration.

URL prefix (registered in ``backend/urls.py``)::

    path('api/core/', include('core.urls'))

Endpoint summary
----------------
GET  /api/core/status/      — Backend connection probe (public).
GET  /api/core/dashboard/   — Headline counts (incident counts scoped).
GET  /api/core/search/      — Search across persons, organizations, incidents.
GET  /api/core/constants/   — Enumerations and the role table (public).
"""

from django.urls import path

from . import views

app_name = "core"

urlpatterns = [
    path("status/", views.BackendStatusView.as_view(), name="backend-status"),
    path("dashboard/", views.DashboardStatsView.as_view(), name="dashboard-stats"),
    path("search/", views.GlobalSearchView.as_view(), name="global-search"),
    path("constants/", views.SystemConstantsView.as_view(), name="system-constants"),
]
