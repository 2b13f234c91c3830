"""
Tests for Formatter

Checks:
1. Continued-fraction approximation (decimal_to_fraction)
2. Display strings for numbers, errors and status texts (format_result)
"""

import math

import pytest

from PocketCalc import Formatter
from PocketCalc import error as E


def fraction_value(text):
    numerator, denominator = text.split("/")
    return int(numerator) / int(denominator)


class TestDecimalToFraction:
    """Tests for decimal_to_fraction"""

    def test_half(self) -> None:
        assert Formatter.decimal_to_fraction(0.5) == "1/2"

    def test_third_within_tolerance(self) -> None:
        assert Formatter.decimal_to_fraction(0.333333333333) == "1/3"

    def test_negative_sign_on_numerator(self) -> None:
        assert Formatter.decimal_to_fraction(-0.75) == "-3/4"

    def test_improper_fraction(self) -> None:
        assert Formatter.decimal_to_fraction(2.5) == "5/2"
        assert Formatter.decimal_to_fraction(2 / 3) == "2/3"

    def test_integer_and_non_finite_unchanged(self) -> None:
        assert Formatter.decimal_to_fraction(3.0) == 3.0
        assert Formatter.decimal_to_fraction(math.inf) == math.inf
        assert math.isnan(Formatter.decimal_to_fraction(math.nan))

    def test_pi_uses_large_denominator(self) -> None:
        """pi has a convergent within 1e-9 below the cap, so it is returned"""
        result = Formatter.decimal_to_fraction(math.pi)
        assert result == "103993/33102"

    def test_cap_returns_decimal(self) -> None:
        assert Formatter.decimal_to_fraction(math.pi, max_denominator=1000) == math.pi

    def test_tight_tolerance_returns_decimal(self) -> None:
        value = 0.1234567
        assert Formatter.decimal_to_fraction(value, max_denominator=100) == value

    @pytest.mark.parametrize("value", [0.5, 0.25, 0.125, 2 / 3, 0.1, 1.75, -0.6, 0.333333333333, math.pi])
    def test_fraction_reproduces_value(self, value) -> None:
        result = Formatter.decimal_to_fraction(value)
        assert isinstance(result, str)
        assert abs(fraction_value(result) - value) <= 1e-9


class TestFormatResult:
    """Tests for format_result"""

    def test_integer(self) -> None:
        assert Formatter.format_result(E.EvaluationResult.number(4)) == "4"
        assert Formatter.format_result(120.0) == "120"
        assert Formatter.format_result(-7.0) == "-7"

    def test_snaps_noise_to_integer(self) -> None:
        assert Formatter.format_result(3.9999999999999996) == "4"
        assert Formatter.format_result(1.0000000000000002) == "1"

    def test_cleans_representation_noise(self) -> None:
        assert Formatter.format_result(0.30000000000000004, fractions=False) == "0.3"
        assert Formatter.format_result(0.30000000000000004) == "3/10"

    def test_fraction(self) -> None:
        assert Formatter.format_result(-2.5) == "-5/2"

    def test_decimal_without_fractions(self) -> None:
        assert Formatter.format_result(math.pi, fractions=False) == "3.14159265358979"

    def test_non_finite(self) -> None:
        assert Formatter.format_result(math.inf) == "Can't divide by 0"
        assert Formatter.format_result(-math.inf) == "Can't divide by 0"
        assert Formatter.format_result(math.nan) == "Invalid Input"

    def test_error_results(self) -> None:
        failure = E.EvaluationResult.failure
        assert Formatter.format_result(failure(E.ErrorKind.DIVISION_BY_ZERO)) == "Can't divide by 0"
        assert Formatter.format_result(failure(E.ErrorKind.INVALID_INPUT)) == "Invalid Input"
        assert Formatter.format_result(failure(E.ErrorKind.FORMAT_ERROR)) == "Format Error"

    def test_status_text_passes_through(self) -> None:
        assert Formatter.format_result("Format Error") == "Format Error"
        assert Formatter.format_result("Error") == "Error"

    def test_large_integer(self) -> None:
        assert Formatter.format_result(1e21) == "1e+21"
        assert Formatter.format_result(1e20) == "100000000000000000000"
