"""
Tests for the bureau password policy.

Every violated rule must be reported, not just the first one.
"""

from __future__ import annotations

import pytest

from accounts.validators import validate_password

pytestmark = pytest.mark.django_db

TOO_SHORT = "This password is too short. It must contain at least 7 characters."
NO_LETTER = "Password must contain at least one letter."
NO_DIGIT = "Password must contain at least one number."


@pytest.mark.parametrize(
    "password, expected",
    [
        ("abc1234", []),
        ("abcdefg", [NO_DIGIT]),
        ("1234567", [NO_LETTER]),
        ("ab1", [TOO_SHORT]),
        ("", [TOO_SHORT, NO_LETTER, NO_DIGIT]),
    ],
)
def test_password_policy(password, expected):
    assert sorted(validate_password(password)) == sorted(expected)


def test_none_is_treated_as_empty():
    assert len(validate_password(None)) == 3
