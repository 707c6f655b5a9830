"""
core.domain — Shared domain utilities for cross-app service layers.

Modules
-------
exceptions     Domain-specific exceptions that map cleanly to HTTP responses.
roles          Read-only role registry and ``has_permission``.
access         Capability-scoped queryset selectors and guards.
transactions   Helpers for ``transaction.atomic`` + ``select_for_update``.

Usage from any app::

    from core.domain.exceptions import DomainError, InvalidTransition
    from core.domain.roles import has_permission
    from core.domain.access import require_capability
    from core.domain.transactions import atomic_transition
"""
