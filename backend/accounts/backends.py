"""
Custom authentication backend for handle-or-email login.

Allows actors to authenticate using either their ``email`` (matched
case-insensitively) or their in-game handle (``username``) together with
their ``password``.

This backend is registered in ``settings.AUTHENTICATION_BACKENDS``
so that Django's ``authenticate()`` call dispatches to it.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend
from django.db.models import Q

Actor = get_user_model()


class EmailOrHandleBackend(ModelBackend):
    """
    Authenticate against ``email`` or ``username``.

    When ``django.contrib.auth.authenticate(identifier=..., password=...)``
    is called, this backend resolves the actor from the ``identifier``
    keyword argument.  Inactive actors are rejected by
    ``user_can_authenticate``.
    """

    def authenticate(self, request, identifier=None, password=None, **kwargs):
        """
        Resolve the actor by *identifier* and verify *password*.

        Parameters
        ----------
        request : HttpRequest | None
        identifier : str
            E-mail address or handle supplied in the login form.
        password : str
            The raw password to verify.

        Returns
        -------
        Actor | None
            The authenticated actor, or ``None`` on failure.
        """
        if identifier is None:
            identifier = kwargs.get(Actor.USERNAME_FIELD)
        if identifier is None or password is None:
            return None

        try:
            actor = Actor.objects.get(
                Q(username=identifier) | Q(email__iexact=identifier)
            )
        except Actor.DoesNotExist:
            # Run the default password hasher to mitigate timing attacks
            Actor().set_password(password)
            return None
        except Actor.MultipleObjectsReturned:
            return None

        if actor.check_password(password) and self.user_can_authenticate(actor):
            return actor
        return None
