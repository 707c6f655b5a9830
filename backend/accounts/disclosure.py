"""
Identity disclosure — what one actor may see of another.

Both projections are pure: they read a few attributes of the viewer and
the subject and never touch the database.  ``subject`` may be an
``Actor``, any model carrying an assessor snapshot, a plain mapping
(e.g. a demo actor record) or ``None``.

A real name, when present, is always shown, whatever the viewer's
capabilities.  Handles and e-mail addresses are the sensitive parts.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from core.constants import UNKNOWN_DISPLAY_EMAIL, UNKNOWN_DISPLAY_NAME
from core.domain.roles import has_permission
from core.permissions_constants import Capability


def _read(subject: Any, *names: str) -> str:
    """First non-empty attribute (or mapping key) among ``names``."""
    for name in names:
        if isinstance(subject, Mapping):
            value = subject.get(name)
        else:
            value = getattr(subject, name, None)
        if value:
            return str(value)
    return ""


def can_view_sensitive(viewer: Any) -> bool:
    return has_permission(viewer, Capability.CAN_VIEW_SENSITIVE_DATA)


def mask_email(email: str) -> str:
    """``"johndoe@bureau.io"`` → ``"jo***@bureau.io"``."""
    local, sep, domain = email.partition("@")
    if not sep:
        return f"{local[:2]}***"
    return f"{local[:2]}***@{domain}"


def get_display_name(viewer: Any, subject: Any) -> str:
    if subject is None:
        return UNKNOWN_DISPLAY_NAME

    name = _read(subject, "real_name", "assessed_by_name")
    if name:
        return name

    handle = _read(subject, "handle", "username")
    email = _read(subject, "email")
    if can_view_sensitive(viewer):
        return handle or email or UNKNOWN_DISPLAY_NAME
    return handle or email.partition("@")[0] or UNKNOWN_DISPLAY_NAME


def get_display_email(viewer: Any, subject: Any) -> str:
    if subject is None:
        return UNKNOWN_DISPLAY_EMAIL

    email = _read(subject, "email")
    if not email:
        return UNKNOWN_DISPLAY_EMAIL
    if can_view_sensitive(viewer):
        return email
    return mask_email(email)
