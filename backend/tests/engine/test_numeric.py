"""Tests for the numeric safety helpers."""
import math

import pytest

from engine.credit.numeric import average, clamp, normalize_rate, round_to, safe_divide, safe_number


class TestSafeNumber:
    def test_finite_numbers_pass_through(self):
        assert safe_number(42) == 42.0
        assert safe_number(-1.5) == -1.5

    def test_numeric_strings_parse(self):
        assert safe_number("42") == 42.0
        assert safe_number(" 1.5 ") == 1.5

    @pytest.mark.parametrize("value", [None, math.nan, math.inf, -math.inf, "abc", "", "inf", [], {}])
    def test_invalid_values_fall_back(self, value):
        assert safe_number(value) == 0.0
        assert safe_number(value, default=7.0) == 7.0

    def test_booleans_are_not_amounts(self):
        assert safe_number(True) == 0.0
        assert safe_number(False, default=3.0) == 3.0


class TestClamp:
    def test_bounds(self):
        assert clamp(5.0, 0.0, 1.0) == 1.0
        assert clamp(-5.0, 0.0, 1.0) == 0.0
        assert clamp(0.4, 0.0, 1.0) == 0.4

    def test_non_finite_treated_as_zero(self):
        assert clamp(math.nan, -1.0, 1.0) == 0.0
        assert clamp(math.inf, -1.0, 1.0) == 0.0
        assert clamp(math.nan, 0.5, 1.0) == 0.5


class TestSafeDivide:
    @pytest.mark.parametrize("numerator", [0.0, 1.0, -3.5, 1e12])
    @pytest.mark.parametrize("default", [0.0, -1.0, 999.0])
    def test_zero_denominator_returns_default(self, numerator, default):
        assert safe_divide(numerator, 0, default) == default

    def test_regular_division(self):
        assert safe_divide(10, 4) == pytest.approx(2.5)

    def test_non_finite_operands(self):
        assert safe_divide(math.inf, 2) == 0.0
        assert safe_divide(1, math.nan, default=5.0) == 5.0

    def test_overflow_returns_default(self):
        assert safe_divide(1e308, 1e-308, default=-1.0) == -1.0


class TestSupplementaryHelpers:
    def test_round_to(self):
        assert round_to(1.23456) == 1.23
        assert round_to("2.5551", 3) == 2.555
        assert round_to(math.nan) == 0.0

    def test_average_ignores_invalid(self):
        assert average([1, 2, math.nan, None, "x", math.inf]) == pytest.approx(1.5)

    def test_average_empty(self):
        assert average([]) == 0.0
        assert average([None, math.nan]) == 0.0

    def test_normalize_rate(self):
        assert normalize_rate(0.12) == pytest.approx(0.12)
        assert normalize_rate(12) == pytest.approx(0.12)
        assert normalize_rate("8.5") == pytest.approx(0.085)
        assert normalize_rate(None) == 0.0
