from decimal import Decimal

import pytest

from loan_calc.validator import InvalidInput, parse_parameters, validate_parameters


class TestValidateParameters:
    def test_numeric_strings(self):
        params = validate_parameters("250,000", "3.5", "30", "50000")
        assert params.principal == Decimal("250000")
        assert params.annual_rate_percent == Decimal("3.5")
        assert params.term_years == 30
        assert params.balloon_amount == Decimal("50000")

    def test_numbers(self):
        params = validate_parameters(250000, 3.5, 30)
        assert params.annual_rate_percent == Decimal("3.5")
        assert params.balloon_amount == Decimal("0")

    def test_blank_balloon_means_none(self):
        params = validate_parameters("1000", "5", "1", "  ")
        assert params.balloon_amount == Decimal("0")

    def test_integral_float_term(self):
        assert validate_parameters(1000, 5, 10.0).term_years == 10

    def test_derived_rate_and_months(self):
        params = validate_parameters(1000, 12, 2)
        assert params.periodic_rate == Decimal("0.01")
        assert params.term_months == 24

    @pytest.mark.parametrize(
        "principal, rate, term, balloon",
        [
            (0, 3.5, 30, 0),
            (-1000, 3.5, 30, 0),
            (250000, 0, 30, 0),
            (250000, -1, 30, 0),
            (250000, 3.5, 0, 0),
            (250000, 3.5, 12.5, 0),
            (250000, 3.5, 30, -1),
            ("abc", 3.5, 30, 0),
            ("", 3.5, 30, 0),
            (None, 3.5, 30, 0),
            (float("nan"), 3.5, 30, 0),
            (250000, float("inf"), 30, 0),
            (250000, 3.5, 30, "NaN"),
            (True, 3.5, 30, 0),
        ],
    )
    def test_rejects_invalid_input(self, principal, rate, term, balloon):
        with pytest.raises(InvalidInput):
            validate_parameters(principal, rate, term, balloon)

    def test_invalid_input_is_value_error(self):
        with pytest.raises(ValueError):
            validate_parameters(0, 3.5, 30)


class TestParseParameters:
    def test_returns_none_instead_of_raising(self):
        assert parse_parameters("0", "3.5", "30") is None
        assert parse_parameters("250000", "3.5", "30", "-5") is None

    def test_valid(self):
        assert parse_parameters("250000", "3.5", "30").term_months == 360
