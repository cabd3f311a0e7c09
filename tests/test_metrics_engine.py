import dataclasses

import pytest

from rentfolio.analysis.finance import calculate_metrics
from rentfolio.domain.property import ExpenseTiming, Property, SharedDetails

from tests.fixtures.properties import capex, ltr_duplex, str_cabin


def test_ltr_duplex_without_capex():
    m = calculate_metrics(ltr_duplex())

    assert m.gross_monthly_income == 3_000.00
    assert m.total_monthly_expenses == 650.00
    assert m.net_monthly_income == 2_350.00
    assert m.monthly_mortgage_payment == 1_199.10
    assert m.net_monthly_cash_flow == 1_150.90
    assert m.initial_cash_invested == 55_000.00
    assert m.annual_net_cash_flow == 13_810.79
    assert m.cash_on_cash_return == 25.11
    assert m.cap_rate == 11.28
    assert m.annual_gross_income == 36_000.00

    assert not m.has_manual_capex
    assert m.total_manual_capex == 0.0


def test_str_cabin_zero_rate_loan():
    m = calculate_metrics(str_cabin())

    assert m.gross_monthly_income == 4_200.00
    assert m.total_monthly_expenses == 2_140.00
    assert m.monthly_mortgage_payment == 0.0
    assert m.net_monthly_cash_flow == 2_060.00
    # down payment omitted: price - loan
    assert m.initial_cash_invested == 60_000.00
    assert m.annual_net_cash_flow == 24_720.00
    assert m.cash_on_cash_return == 41.20
    assert m.cap_rate == 8.24


def test_year1_capex_reduces_cash_flow_not_cap_rate():
    m = calculate_metrics(ltr_duplex(manual_expenses=[capex(1_200, ExpenseTiming.YEAR_1)]))

    assert m.net_monthly_cash_flow == 1_050.90
    assert m.annual_net_cash_flow == 12_610.79
    assert m.initial_cash_invested == 55_000.00
    assert m.cash_on_cash_return == 22.93
    assert m.cap_rate == 11.28

    # operating figures never see CapEx
    assert m.net_monthly_income == 2_350.00
    assert m.total_monthly_expenses == 650.00


def test_immediate_and_year1_capex_together():
    m = calculate_metrics(
        ltr_duplex(
            manual_expenses=[
                capex(5_000, ExpenseTiming.IMMEDIATE),
                capex(1_200, ExpenseTiming.YEAR_1, "Water heater"),
            ]
        )
    )

    assert m.initial_cash_invested == 60_000.00
    assert m.cash_on_cash_return == 21.02
    assert m.cap_rate == 11.06
    assert m.immediate_capex == 5_000.00
    assert m.year1_capex == 1_200.00
    assert m.total_manual_capex == 6_200.00


def test_primary_fields_switch_together():
    m = calculate_metrics(ltr_duplex(manual_expenses=[capex(5_000, ExpenseTiming.IMMEDIATE)]))

    assert m.has_manual_capex
    assert m.net_monthly_cash_flow == m.adjusted_net_monthly_cash_flow
    assert m.initial_cash_invested == m.adjusted_initial_cash_invested
    assert m.cash_on_cash_return == m.adjusted_cash_on_cash_return
    assert m.cap_rate == m.adjusted_cap_rate
    assert m.annual_net_cash_flow == m.adjusted_annual_net_cash_flow

    # the pre-CapEx view stays available
    assert m.raw_initial_cash_invested == 55_000.00
    assert m.raw_cap_rate == 11.28
    assert m.raw_cash_on_cash_return == 25.11


def test_no_capex_means_raw_fields():
    m = calculate_metrics(ltr_duplex())

    assert m.net_monthly_cash_flow == m.raw_net_monthly_cash_flow
    assert m.initial_cash_invested == m.raw_initial_cash_invested
    assert m.cash_on_cash_return == m.raw_cash_on_cash_return
    assert m.cap_rate == m.raw_cap_rate
    assert m.annual_net_cash_flow == m.raw_annual_net_cash_flow


def test_zero_cost_capex_items_are_ignored():
    m = calculate_metrics(ltr_duplex(manual_expenses=[capex(0, ExpenseTiming.IMMEDIATE)]))

    assert not m.has_manual_capex
    assert m.cash_on_cash_return == 25.11


def test_loan_remaining_drives_the_payment():
    m = calculate_metrics(ltr_duplex(loan_remaining=150_000.0))

    assert m.monthly_mortgage_payment == 899.33
    # cash invested still comes from the original purchase
    assert m.initial_cash_invested == 55_000.00


def test_zero_price_and_cash_give_zero_ratios():
    prop = ltr_duplex(purchase_price=0.0, down_payment=0.0, loan_amount=0.0, closing_costs=0.0)
    m = calculate_metrics(prop)

    assert m.initial_cash_invested == 0.0
    assert m.cash_on_cash_return == 0.0
    assert m.cap_rate == 0.0
    assert m.monthly_mortgage_payment == 0.0


def test_negative_cash_flow_is_reported_as_is():
    # rent far below debt service
    prop = ltr_duplex()
    prop = prop.model_copy(
        update={"details": prop.details.model_copy(update={"gross_rent_per_month": 200.0})}
    )
    m = calculate_metrics(prop)

    assert m.net_monthly_cash_flow < 0
    assert m.cash_on_cash_return < 0


def test_engine_is_pure_and_idempotent():
    prop = ltr_duplex(manual_expenses=[capex(2_500, ExpenseTiming.YEAR_1)])
    before = prop.model_dump()

    first = calculate_metrics(prop)
    second = calculate_metrics(prop)

    assert first == second
    assert prop.model_dump() == before


def test_every_currency_and_percent_field_is_two_decimals():
    m = calculate_metrics(ltr_duplex(manual_expenses=[capex(333.333, ExpenseTiming.YEAR_1)]))

    for f in dataclasses.fields(m):
        value = getattr(m, f.name)
        assert round(value, 2) == pytest.approx(value, abs=1e-9), f.name


def test_missing_variant_details_yield_financing_only_metrics():
    prop = Property.model_construct(
        shared=SharedDetails(purchase_price=100_000, loan_amount=80_000, interest_rate=6.0),
        details=None,
    )
    m = calculate_metrics(prop)

    assert m.gross_monthly_income == 0.0
    assert m.total_monthly_expenses == 0.0
    assert m.monthly_mortgage_payment > 0
    assert m.net_monthly_cash_flow == -m.monthly_mortgage_payment
