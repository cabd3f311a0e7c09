# src/rentfolio/analysis/valuation.py
from __future__ import annotations

from collections.abc import Sequence

from rentfolio.analysis.frames import metrics_frame
from rentfolio.domain.metrics import PORTFOLIO_DOLLAR_FIELDS, InvestorShare, PortfolioSummary
from rentfolio.domain.money import round_money, round_pct
from rentfolio.domain.portfolio import Investor, PropertyAnalysis


def calculate_valuation(annual_noi: float, market_cap_rate_percent: float) -> float:
    """
    Income approach: value = NOI / cap rate.

    A non-positive market cap rate has no meaningful valuation: returns 0.
    """
    if market_cap_rate_percent <= 0:
        return 0.0
    return round_money(annual_noi / (market_cap_rate_percent / 100.0))


def aggregate_portfolio(
    entries: Sequence[PropertyAnalysis],
    market_cap_rate: float,
) -> PortfolioSummary:
    """
    Reduction step: collapse the final per-property metrics into portfolio totals.

    - Dollar figures are plain sums of the per-property (already rounded) values.
    - Cap rate and cash-on-cash are simple means: every property counts once,
      regardless of size.
    - An empty portfolio reports zeros everywhere.
    """
    df = metrics_frame(entries)
    n = int(len(df))

    def total(col: str) -> float:
        return round_money(float(df[col].sum())) if n else 0.0

    def mean(col: str) -> float:
        return round_pct(float(df[col].mean())) if n else 0.0

    total_purchase_price = total("purchase_price")
    total_loan_amount = total("loan_amount")
    net_monthly_income = total("net_monthly_income")

    annual_noi = round_money(net_monthly_income * 12.0)
    estimated_value = calculate_valuation(annual_noi, market_cap_rate)

    variants = df["variant"]

    return PortfolioSummary(
        property_count=n,
        ltr_count=int((variants == "LTR").sum()),
        str_count=int((variants == "STR").sum()),
        market_cap_rate=market_cap_rate,
        total_purchase_price=total_purchase_price,
        total_loan_amount=total_loan_amount,
        total_equity=round_money(total_purchase_price - total_loan_amount),
        total_cash_invested=total("initial_cash_invested"),
        gross_monthly_income=total("gross_monthly_income"),
        net_monthly_income=net_monthly_income,
        total_monthly_mortgage=total("monthly_mortgage_payment"),
        total_monthly_expenses=total("total_monthly_expenses"),
        net_monthly_cash_flow=total("net_monthly_cash_flow"),
        annual_net_cash_flow=total("annual_net_cash_flow"),
        annual_noi=annual_noi,
        avg_cap_rate=mean("cap_rate"),
        avg_cash_on_cash_return=mean("cash_on_cash_return"),
        estimated_value=estimated_value,
        unrealized_gain=round_money(estimated_value - total_purchase_price),
    )


def investor_share_of(amount: float, stake: float) -> float:
    return round_money(amount * stake)


def investor_shares(
    summary: PortfolioSummary,
    investors: Sequence[Investor],
) -> list[InvestorShare]:
    """
    Flat ownership split: an investor's share of any aggregate dollar figure
    is stake * total. Nothing else about the summary is investor-specific.
    """
    return [
        InvestorShare(
            name=inv.name,
            stake=inv.stake,
            amounts={
                field: investor_share_of(getattr(summary, field), inv.stake)
                for field in PORTFOLIO_DOLLAR_FIELDS
            },
        )
        for inv in investors
    ]
