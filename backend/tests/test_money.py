"""
Unit tests for fixed-point money helpers.
"""
from decimal import Decimal

import pytest

from fintrack.money import MAX_MONEY, fits_precision, to_money


def test_to_money_quantizes_to_cents() -> None:
    assert to_money("10") == Decimal("10.00")
    assert str(to_money("10")) == "10.00"
    assert to_money(Decimal("2.005")) == Decimal("2.01")
    assert to_money("-1200.5") == Decimal("-1200.50")


def test_to_money_uses_decimal_form_of_floats() -> None:
    assert to_money(0.1) == Decimal("0.10")
    assert to_money(0.1) + to_money(0.2) == Decimal("0.30")


@pytest.mark.parametrize("value", ["abc", "", "NaN", "Infinity"])
def test_to_money_rejects_non_numbers(value) -> None:
    with pytest.raises(ValueError):
        to_money(value)


def test_fits_precision_bounds() -> None:
    assert fits_precision(MAX_MONEY)
    assert fits_precision(-MAX_MONEY)
    assert not fits_precision(MAX_MONEY + Decimal("0.01"))


def test_to_money_rejects_values_beyond_decimal_context() -> None:
    with pytest.raises(ValueError):
        to_money("1e40")
