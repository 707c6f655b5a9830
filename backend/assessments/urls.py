"""
Assessments app URL configuration.

URL prefix (registered in ``backend/urls.py``)::

    path('api/assessments/', include('assessments.urls'))

``target_type`` is one of ``person``, ``organization``, ``incident``.
"""

from django.urls import path

from . import views

app_name = "assessments"

urlpatterns = [
    path(
        "<str:target_type>/<int:pk>/",
        views.AssessmentStateView.as_view(),
        name="assessment-state",
    ),
    path(
        "<str:target_type>/<int:pk>/assess/",
        views.AssessView.as_view(),
        name="assess",
    ),
    path(
        "<str:target_type>/<int:pk>/status/",
        views.StatusView.as_view(),
        name="status",
    ),
    path(
        "<str:target_type>/<int:pk>/assessment-history/",
        views.AssessmentHistoryView.as_view(),
        name="assessment-history",
    ),
    path(
        "<str:target_type>/<int:pk>/status-log/",
        views.StatusLogView.as_view(),
        name="status-log",
    ),
]
