"""
Unit tests for identity disclosure (``accounts.disclosure``).

Pure functions: viewers and subjects are simple namespaces, no database.
"""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from accounts.disclosure import get_display_email, get_display_name, mask_email


def _actor(role="citizen", **fields):
    defaults = {"real_name": "", "username": "", "email": ""}
    defaults.update(fields)
    return SimpleNamespace(role=role, **defaults)


CITIZEN = _actor("citizen")
LEGAL = _actor("legal_authority")


class TestMaskEmail:

    @pytest.mark.parametrize(
        "email, expected",
        [
            ("johndoe@bureau.io", "jo***@bureau.io"),
            ("ab@x.io", "ab***@x.io"),
            ("a@x.io", "a***@x.io"),
        ],
    )
    def test_keeps_two_leading_characters(self, email, expected):
        assert mask_email(email) == expected


class TestDisplayName:

    def test_missing_subject_is_unknown(self):
        assert get_display_name(CITIZEN, None) == "Unknown"

    @pytest.mark.parametrize("viewer", [CITIZEN, LEGAL, None])
    def test_real_name_always_wins(self, viewer):
        subject = _actor(real_name="Mira Castell", username="mira", email="mira@bureau.io")
        assert get_display_name(viewer, subject) == "Mira Castell"

    def test_handle_shown_when_no_real_name(self):
        subject = _actor(username="rexv", email="rex@bureau.io")
        assert get_display_name(CITIZEN, subject) == "rexv"

    def test_email_local_part_for_plain_viewer(self):
        subject = {"email": "ghost@bureau.io"}
        assert get_display_name(CITIZEN, subject) == "ghost"

    def test_full_email_for_sensitive_viewer(self):
        subject = {"email": "ghost@bureau.io"}
        assert get_display_name(LEGAL, subject) == "ghost@bureau.io"

    def test_assessor_snapshot_name(self):
        target = SimpleNamespace(assessed_by_name="Aldous Varn")
        assert get_display_name(CITIZEN, target) == "Aldous Varn"


class TestDisplayEmail:

    def test_missing_subject_is_hidden(self):
        assert get_display_email(CITIZEN, None) == "unknown@hidden.com"

    def test_subject_without_email_is_hidden(self):
        assert get_display_email(LEGAL, _actor(real_name="Nobody")) == "unknown@hidden.com"

    def test_masked_for_plain_viewer(self):
        subject = _actor(email="johndoe@bureau.io")
        assert get_display_email(CITIZEN, subject) == "jo***@bureau.io"

    def test_anonymous_viewer_gets_masked_email(self):
        subject = _actor(email="johndoe@bureau.io")
        assert get_display_email(None, subject) == "jo***@bureau.io"

    @pytest.mark.parametrize("role", ["sentinel", "high_judge", "legal_authority"])
    def test_sensitive_viewer_sees_full_email(self, role):
        subject = _actor(email="johndoe@bureau.io")
        assert get_display_email(_actor(role), subject) == "johndoe@bureau.io"
