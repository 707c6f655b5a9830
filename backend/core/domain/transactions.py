"""
core.domain.transactions — Helpers for safe state changes.

Wraps ``transaction.atomic`` and ``select_for_update`` into reusable
patterns so that every bureau service follows the same concurrency-safe
approach: read-check-write sequences always lock the row first.

Usage::

    from core.domain.transactions import atomic_transition

    hearing = atomic_transition(
        instance=hearing,
        target_status=HearingStatus.CLOSED,
        allowed_sources={HearingStatus.ACTIVE},
        extra_values={"closed_at": timezone.now()},
    )

    # Read-check-write inside an existing atomic block:
    from core.domain.transactions import lock_for_update

    with transaction.atomic():
        person = lock_for_update(Person, person_id)
        ...
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, TypeVar

from django.db import models, transaction

from core.domain.exceptions import InvalidTransition, NotFound

M = TypeVar("M", bound=models.Model)


def atomic_transition(
    *,
    instance: M,
    status_field: str = "status",
    target_status: str,
    allowed_sources: Iterable[str] | None = None,
    extra_values: Mapping[str, Any] | None = None,
) -> M:
    """
    Atomically move a model instance from one status to another.

    Steps performed inside ``transaction.atomic()``:
        1. Re-fetch the instance with ``select_for_update()``.
        2. If ``allowed_sources`` is provided, verify the current value
           is among them; raise ``InvalidTransition`` otherwise.
        3. Set ``status_field`` (plus any ``extra_values``) and save only
           those columns.

    Args:
        instance:        The model instance to transition.
        status_field:    Name of the status field.  Defaults to ``"status"``.
        target_status:   The desired new value.
        allowed_sources: Optional set of status values from which the
                         transition is permitted.  ``None`` accepts any
                         current value.
        extra_values:    Additional ``field -> value`` pairs written in the
                         same save (who closed it, when, ...).

    Returns:
        The caller's instance, refreshed from the database.

    Raises:
        NotFound:          If the instance no longer exists.
        InvalidTransition: If the current status is not in ``allowed_sources``.
    """
    model_class = type(instance)
    sources = set(allowed_sources) if allowed_sources is not None else None

    with transaction.atomic():
        locked = lock_for_update(model_class, instance.pk)
        current = getattr(locked, status_field)

        if sources is not None and current not in sources:
            raise InvalidTransition(
                current=str(current),
                target=str(target_status),
                reason=(
                    "Allowed source states: "
                    f"{', '.join(sorted(str(s) for s in sources))}."
                ),
            )

        setattr(locked, status_field, target_status)
        update_fields = {status_field, "updated_at"}
        for field_name, value in (extra_values or {}).items():
            setattr(locked, field_name, value)
            update_fields.add(field_name)

        locked.save(update_fields=sorted(update_fields))

    instance.refresh_from_db()
    return instance


def lock_for_update(model_class: type[M], pk: Any) -> M:
    """
    Acquire a row-level lock on ``model_class`` row ``pk``.

    Must be called inside an ``atomic()`` block.

    Raises:
        NotFound: If no row with that PK exists.
    """
    try:
        return model_class.objects.select_for_update().get(pk=pk)
    except (model_class.DoesNotExist, ValueError, TypeError):
        raise NotFound(f"{model_class.__name__} with pk={pk} does not exist.")
