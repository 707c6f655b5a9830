"""
Session identity — who is acting, and on whose authority.

A session is in exactly one of two states::

    Normal(actor)  ⇄  Impersonating(original, current)

``impersonate`` and ``stop_impersonation`` are the only transitions and
both are pure: they return a new identity and never mutate the old one.
The *original* anchor is sticky.  Impersonating again while already
impersonating only swaps ``current``, and stopping always returns to the
original actor.

Impersonation authority is always evaluated against the original actor,
so a master actor can chain from one identity to the next without the
intermediate identity needing any capability of its own.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from core.domain.exceptions import DomainError, PermissionDenied
from core.domain.roles import has_permission
from core.permissions_constants import Capability


@dataclass(frozen=True)
class Normal:
    actor: Any

    @property
    def active(self) -> Any:
        return self.actor

    @property
    def original(self) -> Any:
        return self.actor

    @property
    def is_impersonating(self) -> bool:
        return False


@dataclass(frozen=True)
class Impersonating:
    original: Any
    current: Any

    @property
    def active(self) -> Any:
        return self.current

    @property
    def is_impersonating(self) -> bool:
        return True


SessionIdentity = Union[Normal, Impersonating]


def can_impersonate(actor: Any) -> bool:
    return bool(
        actor is not None
        and getattr(actor, "is_master_actor", False)
        and has_permission(actor, Capability.CAN_IMPERSONATE_ACTORS)
    )


def _same_actor(a: Any, b: Any) -> bool:
    return getattr(a, "pk", a) == getattr(b, "pk", b)


def impersonate(identity: SessionIdentity, target: Any) -> SessionIdentity:
    """
    Switch the active identity to ``target``.

    Raises:
        PermissionDenied: the original actor is not an impersonating master.
        DomainError:      ``target`` is missing or inactive.
    """
    if not can_impersonate(identity.original):
        raise PermissionDenied("Only master actors may impersonate other actors.")
    if target is None:
        raise DomainError("No impersonation target given.")
    if not getattr(target, "is_active", True):
        raise DomainError("Inactive actors cannot be impersonated.")

    # Switching back to yourself simply ends the impersonation.
    if _same_actor(target, identity.original):
        return Normal(identity.original)

    return Impersonating(original=identity.original, current=target)


def stop_impersonation(identity: SessionIdentity) -> Normal:
    if isinstance(identity, Impersonating):
        return Normal(identity.original)
    return identity
