# src/rentfolio/analysis/capex.py
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from rentfolio.domain.money import safe_pct
from rentfolio.domain.property import ExpenseTiming, ManualExpense


@dataclass(frozen=True)
class CapExTotals:
    immediate: float
    year1: float

    @property
    def total(self) -> float:
        return self.immediate + self.year1


@dataclass(frozen=True)
class CapExAdjustment:
    totals: CapExTotals
    net_monthly_cash_flow: float
    annual_net_cash_flow: float
    initial_cash_invested: float
    cash_on_cash_return: float  # %
    cap_rate: float             # %


def summarize_capex(expenses: Iterable[ManualExpense]) -> CapExTotals:
    immediate = 0.0
    year1 = 0.0
    for e in expenses:
        if e.timing == ExpenseTiming.IMMEDIATE:
            immediate += e.estimated_cost
        elif e.timing == ExpenseTiming.YEAR_1:
            year1 += e.estimated_cost
    return CapExTotals(immediate=immediate, year1=year1)


def adjust_for_capex(
    *,
    net_monthly_cash_flow: float,
    annual_net_cash_flow: float,
    initial_cash_invested: float,
    purchase_price: float,
    annual_noi: float,
    expenses: Iterable[ManualExpense],
) -> CapExAdjustment:
    """
    Fold manual CapEx into the raw (unrounded) metrics.

    - Immediate CapEx is cash the investor puts in at closing: it raises
      initial cash invested and the cost basis used for cap rate.
    - Year-1 CapEx is a one-time hit to first-year cash flow. The monthly
      figure spreads it evenly over 12 months, so it reads as an annualized
      average rather than any particular month.
    """
    totals = summarize_capex(expenses)

    adj_cash_in = initial_cash_invested + totals.immediate
    adj_annual_cf = annual_net_cash_flow - totals.year1
    adj_monthly_cf = net_monthly_cash_flow - totals.year1 / 12.0

    total_property_cost = purchase_price + totals.immediate

    return CapExAdjustment(
        totals=totals,
        net_monthly_cash_flow=adj_monthly_cf,
        annual_net_cash_flow=adj_annual_cf,
        initial_cash_invested=adj_cash_in,
        cash_on_cash_return=safe_pct(adj_annual_cf, adj_cash_in),
        cap_rate=safe_pct(annual_noi, total_property_cost),
    )
