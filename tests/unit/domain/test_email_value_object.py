"""Tests for the Email value object."""

import pytest

from place_identity.core.exceptions import InvalidEmailError
from place_identity.domain.value_objects.email import Email, normalize_email


class TestEmail:
    def test_trims_and_keeps_case(self):
        email = Email("  Jane.Doe@Example.com ")
        assert email.value == "Jane.Doe@Example.com"
        assert str(email) == "Jane.Doe@Example.com"

    def test_normalized_form_is_lowercase(self):
        email = Email("Jane.Doe@Example.COM")
        assert email.normalized == "jane.doe@example.com"
        assert email.domain == "example.com"

    @pytest.mark.parametrize(
        "value",
        ["", "   ", "plainaddress", "@example.com", "jane@", "jane@example", "jane doe@example.com"],
    )
    def test_rejects_malformed(self, value):
        with pytest.raises(InvalidEmailError):
            Email(value)

    def test_rejects_overlong(self):
        with pytest.raises(InvalidEmailError):
            Email("a" * 250 + "@example.com")

    def test_rejects_non_string(self):
        with pytest.raises(InvalidEmailError):
            Email(None)

    def test_masked_for_logging(self):
        assert Email("jane.doe@example.com").mask_for_logging() == "ja***@ex***.com"

    def test_equality_is_by_value(self):
        assert Email("jane@example.com") == Email(" jane@example.com")


def test_normalize_email():
    assert normalize_email("  JANE@Example.com ") == "jane@example.com"
