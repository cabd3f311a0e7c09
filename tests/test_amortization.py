import pytest

from rentfolio.analysis.finance import active_loan_balance, monthly_mortgage_payment
from rentfolio.domain.property import SharedDetails


def test_standard_30_year_payment():
    # $200k at 6% for 30 years is the textbook $1,199.10
    payment = monthly_mortgage_payment(200_000.0, 6.0, 30)
    assert payment == pytest.approx(1199.10, abs=0.005)


def test_matches_annuity_formula():
    principal, rate, years = 24_000.0, 4.25, 15
    r = rate / 100 / 12
    n = years * 12
    expected = principal * r * (1 + r) ** n / ((1 + r) ** n - 1)

    assert monthly_mortgage_payment(principal, rate, years) == pytest.approx(expected, rel=1e-12)


def test_zero_rate_has_no_payment():
    # no amortized payment is computed for a zero-rate loan
    assert monthly_mortgage_payment(200_000.0, 0.0, 30) == 0.0


def test_zero_principal_has_no_payment():
    assert monthly_mortgage_payment(0.0, 6.0, 30) == 0.0


def test_non_positive_term_has_no_payment():
    assert monthly_mortgage_payment(200_000.0, 6.0, 0) == 0.0


def test_active_balance_prefers_remaining():
    shared = SharedDetails(loan_amount=200_000, loan_remaining=150_000)
    assert active_loan_balance(shared) == 150_000


def test_active_balance_falls_back_to_original_loan():
    shared = SharedDetails(loan_amount=200_000, loan_remaining=0)
    assert active_loan_balance(shared) == 200_000
