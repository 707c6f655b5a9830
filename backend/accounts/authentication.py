"""
DRF authentication that survives a database outage.

``JWTAuthentication`` loads the actor row for every request, so an
unreachable database fails the request before the view runs.  Views
that have an offline fallback (the actor directory) use
``OfflineTolerantJWTAuthentication`` instead: the token is still
verified, and when the actor lookup raises ``DatabaseError`` the request
proceeds as a ``ClaimsActor`` rebuilt from the token's own claims.
"""

from __future__ import annotations

import logging

from django.db import DatabaseError
from django.utils.functional import cached_property
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.models import TokenUser

logger = logging.getLogger(__name__)


class ClaimsActor(TokenUser):
    """
    Stateless actor carrying the ``role`` claim stamped at login.

    Good enough for capability checks and identity disclosure; it has no
    row behind it and cannot be written anywhere.
    """

    is_master_actor = False
    real_name = ""

    @cached_property
    def role(self) -> str | None:
        return self.token.get("role")

    @property
    def snapshot_name(self) -> str:
        return self.username


class OfflineTolerantJWTAuthentication(JWTAuthentication):

    def get_user(self, validated_token):
        try:
            return super().get_user(validated_token)
        except DatabaseError as exc:
            logger.warning(
                "Actor lookup failed, authenticating from token claims: %s", exc,
            )
            return ClaimsActor(validated_token)
