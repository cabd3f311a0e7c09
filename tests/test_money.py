import math

import pytest

from rentfolio.analysis.finance import calculate_metrics
from rentfolio.domain.money import round_money, safe_pct

from tests.fixtures.properties import ltr_duplex


@pytest.mark.parametrize(
    "value,expected",
    [
        (0.125, 0.13),
        (-0.125, -0.12),
        (2.345, 2.35),
        (-2.345, -2.34),
        (1.005, 1.01),
        (-1.006, -1.01),
        (1199.1010503, 1199.10),
    ],
)
def test_ties_round_toward_positive_infinity(value, expected):
    assert round_money(value) == expected


def test_negative_zero_is_normalized():
    out = round_money(-0.004)
    assert out == 0.0
    assert math.copysign(1.0, out) == 1.0


@pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
def test_non_finite_is_zero(value):
    assert round_money(value) == 0.0


@pytest.mark.parametrize("value", [1e29, 1e300, -1e300, 1.7976931348623157e308])
def test_huge_values_round_without_error(value):
    assert round_money(value) == value


def test_tiny_values_round_to_zero():
    assert round_money(1e-24) == 0.0


def test_near_zero_cash_invested_does_not_break_the_engine():
    # valid input: a microscopic down payment makes cash-on-cash astronomically large
    m = calculate_metrics(ltr_duplex(down_payment=1e-24, loan_amount=250_000.0, closing_costs=0.0))

    assert m.initial_cash_invested == 0.0
    assert math.isfinite(m.cash_on_cash_return)
    assert m.cash_on_cash_return > 1e20


def test_safe_pct():
    assert safe_pct(5, 20) == 25.0
    assert safe_pct(5, 0) == 0.0
    assert safe_pct(5, -1) == 0.0
