"""
Tests for money helpers.
"""
import math
from app.core.utils import round_currency, format_amount


def test_round_currency_half_away_from_zero():
    """Test rounding of halves in both directions."""
    assert round_currency(1.005) == 1.01
    assert round_currency(-1.005) == -1.01
    assert math.copysign(1, round_currency(-0.001)) == 1


def test_round_currency_beyond_default_precision():
    """Test amounts with more digits than the default decimal context holds."""
    assert round_currency(1e26) == 1e26
    assert round_currency(1.5e300) == 1.5e300


def test_round_currency_passes_non_finite_values_through():
    """Test that infinities and NaN are returned unchanged."""
    assert round_currency(float("inf")) == float("inf")
    assert round_currency(float("-inf")) == float("-inf")
    assert math.isnan(round_currency(float("nan")))


def test_format_amount():
    """Test negative amounts in parentheses."""
    assert format_amount(-50) == "-50.00"
    assert format_amount(-50, negative_in_parens=True) == "(50.00)"
