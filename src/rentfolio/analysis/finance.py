from __future__ import annotations

from typing import Any, NamedTuple

from rentfolio.analysis.capex import adjust_for_capex
from rentfolio.domain.metrics import FinancialMetrics
from rentfolio.domain.money import round_money, round_pct, safe_pct
from rentfolio.domain.property import LTRDetails, Property, SharedDetails, STRDetails


class IncomeExpense(NamedTuple):
    gross_monthly_income: float
    total_monthly_expenses: float


def monthly_mortgage_payment(principal: float, annual_rate_percent: float, term_years: int) -> float:
    """
    Standard fixed-rate amortization formula:
    M = P * [ r(1+r)^n / ((1+r)^n - 1) ]
    P = loan principal
    r = monthly interest rate (annual % / 12 / 100)
    n = number of payments (months)

    A zero balance or a zero rate has no amortized payment: returns 0.
    """
    r = annual_rate_percent / 100.0 / 12.0
    n = term_years * 12

    if principal <= 0 or r <= 0 or n <= 0:
        return 0.0

    growth = (1 + r) ** n
    return principal * (r * growth) / (growth - 1)


def active_loan_balance(shared: SharedDetails) -> float:
    """
    Remaining balance when one is given, else the original loan amount.

    Lets a user model a loan already partway through its term; the stated
    rate and term are applied to whichever balance is active.
    """
    if shared.loan_remaining > 0:
        return shared.loan_remaining
    return shared.loan_amount


def initial_cash_invested(shared: SharedDetails) -> float:
    down_payment = shared.down_payment
    if down_payment <= 0:
        down_payment = shared.purchase_price - shared.loan_amount
    return down_payment + shared.closing_costs


def _ltr_income_expense(ltr: LTRDetails) -> IncomeExpense:
    gross = ltr.gross_rent_per_month * ltr.number_of_units

    pm_fee = gross * (ltr.pm_fee_percent / 100.0)
    taxes_monthly = ltr.annual_property_tax / 12.0
    ins_monthly = ltr.annual_insurance / 12.0

    total = pm_fee + taxes_monthly + ins_monthly + ltr.monthly_repair_reserve
    return IncomeExpense(gross, total)


def _str_income_expense(str_: STRDetails) -> IncomeExpense:
    booked_nights = str_.days_in_month * (str_.occupancy_rate / 100.0)
    gross = booked_nights * str_.daily_rate

    co_host_fee = gross * (str_.co_host_fee_percent / 100.0)
    cleaning = str_.cleaning_fee_per_stay * str_.avg_stays_per_month
    taxes_monthly = str_.annual_property_tax / 12.0
    ins_monthly = str_.annual_insurance / 12.0

    total = co_host_fee + cleaning + taxes_monthly + ins_monthly + str_.monthly_utilities
    return IncomeExpense(gross, total)


def income_and_expenses(prop: Any) -> IncomeExpense:
    """
    Gross monthly income and monthly operating expenses (no mortgage).

    A property without usable variant details (only reachable through
    model_construct or duck-typed input) degrades to zero income and zero
    expenses instead of failing the whole computation.
    """
    details = getattr(prop, "details", None)
    if isinstance(details, LTRDetails):
        return _ltr_income_expense(details)
    if isinstance(details, STRDetails):
        return _str_income_expense(details)
    return IncomeExpense(0.0, 0.0)


def calculate_metrics(prop: Property) -> FinancialMetrics:
    """
    Core per-property engine. Pure: same Property in, same metrics out.

    Never raises for zero denominators; those ratios come back as 0.
    """
    shared = prop.shared

    # --- debt service ---
    mortgage_monthly = monthly_mortgage_payment(
        principal=active_loan_balance(shared),
        annual_rate_percent=shared.interest_rate,
        term_years=shared.loan_term_years,
    )

    # --- income / operating expenses ---
    gross_monthly, expenses_monthly = income_and_expenses(prop)

    # NOI is before debt service; cash flow is after.
    net_monthly_income = gross_monthly - expenses_monthly
    net_monthly_cash_flow = net_monthly_income - mortgage_monthly

    # --- raw returns ---
    cash_in = initial_cash_invested(shared)
    annual_net_cash_flow = net_monthly_cash_flow * 12.0
    cash_on_cash = safe_pct(annual_net_cash_flow, cash_in)

    annual_noi = net_monthly_income * 12.0
    cap_rate = safe_pct(annual_noi, shared.purchase_price)

    # --- manual CapEx ---
    adj = adjust_for_capex(
        net_monthly_cash_flow=net_monthly_cash_flow,
        annual_net_cash_flow=annual_net_cash_flow,
        initial_cash_invested=cash_in,
        purchase_price=shared.purchase_price,
        annual_noi=annual_noi,
        expenses=getattr(prop, "manual_expenses", None) or (),
    )

    raw = {
        "net_monthly_cash_flow": round_money(net_monthly_cash_flow),
        "initial_cash_invested": round_money(cash_in),
        "cash_on_cash_return": round_pct(cash_on_cash),
        "cap_rate": round_pct(cap_rate),
        "annual_net_cash_flow": round_money(annual_net_cash_flow),
    }
    adjusted = {
        "net_monthly_cash_flow": round_money(adj.net_monthly_cash_flow),
        "initial_cash_invested": round_money(adj.initial_cash_invested),
        "cash_on_cash_return": round_pct(adj.cash_on_cash_return),
        "cap_rate": round_pct(adj.cap_rate),
        "annual_net_cash_flow": round_money(adj.annual_net_cash_flow),
    }

    # All five primary fields switch together; never a per-field blend.
    final = adjusted if adj.totals.total > 0 else raw

    return FinancialMetrics(
        monthly_mortgage_payment=round_money(mortgage_monthly),
        gross_monthly_income=round_money(gross_monthly),
        total_monthly_expenses=round_money(expenses_monthly),
        net_monthly_income=round_money(net_monthly_income),
        net_monthly_cash_flow=final["net_monthly_cash_flow"],
        initial_cash_invested=final["initial_cash_invested"],
        cash_on_cash_return=final["cash_on_cash_return"],
        cap_rate=final["cap_rate"],
        annual_gross_income=round_money(gross_monthly * 12.0),
        annual_net_cash_flow=final["annual_net_cash_flow"],
        total_manual_capex=round_money(adj.totals.total),
        immediate_capex=round_money(adj.totals.immediate),
        year1_capex=round_money(adj.totals.year1),
        adjusted_net_monthly_cash_flow=adjusted["net_monthly_cash_flow"],
        adjusted_initial_cash_invested=adjusted["initial_cash_invested"],
        adjusted_cash_on_cash_return=adjusted["cash_on_cash_return"],
        adjusted_cap_rate=adjusted["cap_rate"],
        adjusted_annual_net_cash_flow=adjusted["annual_net_cash_flow"],
        raw_net_monthly_cash_flow=raw["net_monthly_cash_flow"],
        raw_initial_cash_invested=raw["initial_cash_invested"],
        raw_cash_on_cash_return=raw["cash_on_cash_return"],
        raw_cap_rate=raw["cap_rate"],
        raw_annual_net_cash_flow=raw["annual_net_cash_flow"],
    )
