"""
Password validators for the bureau password policy.

Registered in ``settings.AUTH_PASSWORD_VALIDATORS`` next to Django's own
``MinimumLengthValidator``.  Django runs every configured validator and
collects all failures, so each violated rule is reported on its own.

``validate_password`` wraps that machinery into a pure function that
returns the list of messages instead of raising.
"""

from __future__ import annotations

from django.contrib.auth import password_validation
from django.core.exceptions import ValidationError


class ContainsLetterValidator:
    """Require at least one alphabetic character."""

    def validate(self, password, user=None):
        if not any(ch.isalpha() for ch in password):
            raise ValidationError(
                "Password must contain at least one letter.",
                code="password_no_letter",
            )

    def get_help_text(self):
        return "Your password must contain at least one letter."


class ContainsDigitValidator:
    """Require at least one decimal digit."""

    def validate(self, password, user=None):
        if not any(ch.isdigit() for ch in password):
            raise ValidationError(
                "Password must contain at least one number.",
                code="password_no_digit",
            )

    def get_help_text(self):
        return "Your password must contain at least one number."


def validate_password(password: str, user=None) -> list[str]:
    """
    Check ``password`` against every configured validator.

    Returns an empty list when the password is acceptable, otherwise one
    message per violated rule.
    """
    try:
        password_validation.validate_password(password or "", user=user)
    except ValidationError as exc:
        return list(exc.messages)
    return []
