"""
Root conftest.py — shared fixtures for the entire test suite.

Provides:
  - ``api_client`` fixture returning a DRF ``APIClient``.
  - ``create_actor`` factory fixture for creating test actors.
  - ``auth_client`` fixture returning an ``APIClient`` authenticated as
    a given actor (JWT).
"""

from __future__ import annotations

import pytest
from rest_framework.test import APIClient

DEFAULT_PASSWORD = "TestPass123"


@pytest.fixture()
def api_client() -> APIClient:
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture()
def create_actor(db):
    """
    Factory fixture that creates an actor with sensible defaults.

    Usage::

        def test_something(create_actor):
            judge = create_actor(role="judge")
            master = create_actor(role="sentinel", is_master_actor=True)
    """
    from accounts.models import Actor

    _counter = 0

    def _factory(
        *,
        username: str | None = None,
        password: str = DEFAULT_PASSWORD,
        email: str | None = None,
        real_name: str = "",
        role: str = "citizen",
        is_active: bool = True,
        **kwargs,
    ) -> Actor:
        nonlocal _counter
        _counter += 1
        if username is None:
            username = f"actor{_counter}"
        if email is None:
            email = f"{username}@bureau.test"

        return Actor.objects.create_user(
            username=username,
            password=password,
            email=email,
            real_name=real_name,
            role=role,
            is_active=is_active,
            **kwargs,
        )

    return _factory


@pytest.fixture()
def auth_client():
    """
    Returns a helper that builds an ``APIClient`` carrying a valid JWT
    access token for ``actor``.

    Usage::

        def test_protected(auth_client, create_actor):
            client = auth_client(create_actor(role="judge"))
            resp = client.get("/api/core/dashboard/")
            assert resp.status_code == 200
    """
    from rest_framework_simplejwt.tokens import RefreshToken

    def _make(actor) -> APIClient:
        client = APIClient()
        token = RefreshToken.for_user(actor).access_token
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        return client

    return _make
