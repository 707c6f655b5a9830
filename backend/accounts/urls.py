"""
Accounts app URL configuration.

All routes are namespaced under ``accounts`` and included in the
project-level ``urls.py`` as::

    path('api/accounts/', include('accounts.urls')),

Endpoint Map
------------
Authentication & session
    POST   /auth/login/                 → LoginView
    POST   /auth/token/refresh/         → TokenRefreshView (SimpleJWT)
    GET    /me/                         → MeView
    POST   /session/impersonate/        → ImpersonateView
    POST   /session/stop/               → StopImpersonationView

Actors
    GET    /actors/                     → ActorViewSet.list
    POST   /actors/                     → ActorViewSet.create
    GET    /actors/{id}/                → ActorViewSet.retrieve
    PATCH  /actors/{id}/                → ActorViewSet.partial_update
    PATCH  /actors/{id}/assign-role/    → ActorViewSet.assign_role
    POST   /actors/{id}/toggle-active/  → ActorViewSet.toggle_active
    POST   /actors/{id}/change-password/ → ActorViewSet.change_password

Roles
    GET    /roles/                      → RoleViewSet.list
    GET    /roles/{id}/                 → RoleViewSet.retrieve
    POST   /roles/{id}/image/           → RoleViewSet.upload_image
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView

from .views import (
    ActorViewSet,
    ImpersonateView,
    LoginView,
    MeView,
    RoleViewSet,
    StopImpersonationView,
)

app_name = "accounts"

router = DefaultRouter()
router.register(r"actors", ActorViewSet, basename="actor")
router.register(r"roles", RoleViewSet, basename="role")

urlpatterns = [
    # ── Authentication ───────────────────────────────────────────────
    path("auth/login/", LoginView.as_view(), name="login"),
    path(
        "auth/token/refresh/",
        TokenRefreshView.as_view(),
        name="token-refresh",
    ),

    # ── Session ─────────────────────────────────────────────────────
    path("me/", MeView.as_view(), name="me"),
    path("session/impersonate/", ImpersonateView.as_view(), name="impersonate"),
    path("session/stop/", StopImpersonationView.as_view(), name="stop-impersonation"),

    # ── Router-registered viewsets (actors/, roles/) ─────────────────
    path("", include(router.urls)),
]
