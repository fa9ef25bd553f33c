"""Tests for form value validation."""

import pytest

from armadmin.services.forms import FormError, optional_text, parse_optional_int, require_text


def test_require_text_trims():
    assert require_text("  Hook  ", "Name") == "Hook"


@pytest.mark.parametrize("value", [None, "", "   "])
def test_require_text_rejects_blank(value):
    with pytest.raises(FormError, match="Name is required"):
        require_text(value, "Name")


def test_optional_text():
    assert optional_text("  ") is None
    assert optional_text(None) is None
    assert optional_text(" Back pressure ") == "Back pressure"


class TestParseOptionalInt:
    """Tests for parse_optional_int."""

    def test_blank_is_none(self):
        assert parse_optional_int("", "Sets") is None
        assert parse_optional_int(None, "Sets") is None

    def test_parses_whole_numbers(self):
        assert parse_optional_int(" 12 ", "Reps") == 12
        assert parse_optional_int("0", "Reps") == 0

    def test_rejects_non_integers(self):
        with pytest.raises(FormError, match="whole number"):
            parse_optional_int("3.5", "Sets")
        with pytest.raises(FormError, match="whole number"):
            parse_optional_int("ten", "Sets")

    def test_rejects_negative(self):
        with pytest.raises(FormError, match="cannot be negative"):
            parse_optional_int("-1", "Rest seconds")
