"""
core.domain.exceptions — Domain-specific exception hierarchy.

These exceptions represent bureau business-rule violations raised inside
service layers.  They are **not** DRF exceptions, so the domain layer
stays framework-agnostic.  The global handler in
``core.domain.exception_handler`` turns them into explicit result
payloads.

Mapping cheatsheet
------------------
┌─────────────────────┬─────────────────────────────────────────┬──────┐
│ Domain Exception    │ Typical cause                           │ Code │
├─────────────────────┼─────────────────────────────────────────┼──────┤
│ DomainError         │ generic business-rule violation         │ 400  │
│ ValidationFailed    │ input violates one or more constraints  │ 400  │
│ InvariantViolation  │ value outside a hard invariant          │ 400  │
│ PermissionDenied    │ capability check failed                 │ 403  │
│ NotFound            │ actor / target does not exist           │ 404  │
│ Conflict            │ stale read, closed hearing              │ 409  │
│ InvalidTransition   │ disallowed state change                 │ 409  │
│ BackendUnavailable  │ persistence provider unreachable        │ 503  │
└─────────────────────┴─────────────────────────────────────────┴──────┘

Usage inside a service::

    from core.domain.exceptions import InvariantViolation

    if not MIN_DANGER_LEVEL <= level <= MAX_DANGER_LEVEL:
        raise InvariantViolation(
            f"Danger level must be between {MIN_DANGER_LEVEL} and "
            f"{MAX_DANGER_LEVEL}."
        )
"""

from __future__ import annotations


class DomainError(Exception):
    """
    Base class for all domain / business-rule errors.

    Every subclass carries a stable machine-readable ``code`` which the
    exception handler echoes back to the client.
    """

    code = "domain_error"

    def __init__(self, message: str = "A business rule was violated.") -> None:
        self.message = message
        super().__init__(self.message)


class PermissionDenied(DomainError):
    """
    The acting identity lacks the capability (or the role) required for
    this operation.  Maps to HTTP 403.
    """

    code = "permission_denied"

    def __init__(self, message: str = "You do not have permission to perform this action.") -> None:
        super().__init__(message)


class NotFound(DomainError):
    """
    The requested actor or target does not exist (or is not visible to
    the acting identity).  Maps to HTTP 404.
    """

    code = "not_found"

    def __init__(self, message: str = "The requested resource was not found.") -> None:
        super().__init__(message)


class ValidationFailed(DomainError):
    """
    Input violates one or more constraints.

    ``errors`` lists *every* violated rule, not only the first, so that a
    form can show all problems at once (password policy, for example).
    """

    code = "validation_failed"

    def __init__(
        self,
        message: str = "The submitted data is invalid.",
        *,
        errors: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.errors = list(errors or [])


class InvariantViolation(DomainError):
    """
    A hard model invariant would be broken (danger level outside
    ``[1, 6]``, mutation of an append-only record).  Raised before
    anything is persisted.
    """

    code = "invariant_violation"

    def __init__(self, message: str = "A data invariant would be violated.") -> None:
        super().__init__(message)


class Conflict(DomainError):
    """
    The operation conflicts with the current state of the resource.

    Typical usage: optimistic-lock failure on an assessment, a response
    to a hearing that has already been closed.  Maps to HTTP 409.
    """

    code = "conflict"

    def __init__(self, message: str = "The operation conflicts with the current state.") -> None:
        super().__init__(message)


class InvalidTransition(Conflict):
    """
    A state change that is not allowed from the current status.

    Example::

        raise InvalidTransition(
            current="closed",
            target="closed",
            reason="Hearing is already closed.",
        )
    """

    code = "invalid_transition"

    def __init__(
        self,
        message: str | None = None,
        *,
        current: str | None = None,
        target: str | None = None,
        reason: str | None = None,
    ) -> None:
        if message is None:
            parts = ["Invalid state transition"]
            if current and target:
                parts.append(f"from '{current}' to '{target}'")
            message = " ".join(parts) + "."
            if reason:
                message = f"{message} {reason}"
        super().__init__(message)
        self.current = current
        self.target = target
        self.reason = reason


class BackendUnavailable(DomainError):
    """
    The persistence provider could not be reached.

    ``retryable`` tells the client whether trying again later makes sense.
    Maps to HTTP 503.
    """

    code = "backend_unavailable"

    def __init__(
        self,
        message: str = "The bureau database is currently unavailable.",
        *,
        retryable: bool = True,
    ) -> None:
        super().__init__(message)
        self.retryable = retryable
