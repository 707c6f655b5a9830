"""
core.domain.exception_handler — DRF-compatible global exception handler.

Maps domain exceptions from ``core.domain.exceptions`` to explicit result
payloads so that views don't need per-endpoint try/except boilerplate::

    {"success": false, "detail": "...", "code": "...", "errors": [...]}

Register in ``settings.py``::

    REST_FRAMEWORK = {
        ...
        'EXCEPTION_HANDLER': 'core.domain.exception_handler.domain_exception_handler',
    }
"""

from __future__ import annotations

import logging

from django.db import DatabaseError, IntegrityError, InterfaceError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_default_handler

from core.domain.exceptions import (
    BackendUnavailable,
    Conflict,
    DomainError,
    InvalidTransition,
    InvariantViolation,
    NotFound,
    PermissionDenied,
    ValidationFailed,
)

logger = logging.getLogger(__name__)

# Domain exception → HTTP status code
_STATUS_MAP: dict[type, int] = {
    PermissionDenied:   403,
    NotFound:           404,
    InvalidTransition:  409,
    Conflict:           409,
    ValidationFailed:   400,
    InvariantViolation: 400,
    BackendUnavailable: 503,
    DomainError:        400,  # catch-all base class last
}


def build_error_payload(exc: DomainError) -> dict:
    """Explicit failure payload for a domain exception."""
    payload = {
        "success": False,
        "detail": str(exc),
        "code": exc.code,
        "errors": list(getattr(exc, "errors", []) or []),
    }
    if isinstance(exc, BackendUnavailable):
        payload["retryable"] = exc.retryable
    return payload


def domain_exception_handler(exc: Exception, context: dict) -> Response | None:
    """
    DRF exception handler that also handles ``core.domain.exceptions``.

    The default DRF handler is called first.  If it returns ``None``
    (meaning DRF doesn't recognise the exception), we check whether
    it's one of our domain exceptions and return an appropriate response.

    Connectivity failures of the database (``DatabaseError`` other than
    ``IntegrityError``) are reported as a retryable ``BackendUnavailable``.
    """
    response = drf_default_handler(exc, context)
    if response is not None:
        return response

    if isinstance(exc, (DatabaseError, InterfaceError)) and not isinstance(exc, IntegrityError):
        logger.error(
            "Database unavailable in %s: %s", context.get("view", "unknown"), exc,
        )
        return Response(build_error_payload(BackendUnavailable()), status=503)

    # Most specific first
    for exc_class, status_code in _STATUS_MAP.items():
        if isinstance(exc, exc_class):
            logger.warning(
                "Domain exception [%s] in %s: %s",
                exc_class.__name__,
                context.get("view", "unknown"),
                exc,
            )
            return Response(build_error_payload(exc), status=status_code)

    # Not ours; let it propagate
    return None
