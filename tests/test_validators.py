import math

import pytest

from expense_core.exceptions import ValidationError
from expense_core.validators import parse_amount, validate_category


@pytest.mark.parametrize("raw, expected", [(10, 10.0), (0.5, 0.5), ("12.25", 12.25), (" 3 ", 3.0)])
def test_parse_amount_accepts_positive_numbers(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", [0, -1, "-2.5", "abc", "", None, True, math.nan, math.inf])
def test_parse_amount_rejects_invalid_values(raw):
    with pytest.raises(ValidationError):
        parse_amount(raw)


def test_parse_amount_names_the_field_in_message():
    with pytest.raises(ValidationError, match="amount must be greater than zero"):
        parse_amount(0)


def test_validate_category_strips_whitespace():
    assert validate_category("  Food ") == "Food"


@pytest.mark.parametrize("raw", ["", "   ", None, 42])
def test_validate_category_rejects_empty_or_non_string(raw):
    with pytest.raises(ValidationError):
        validate_category(raw)
