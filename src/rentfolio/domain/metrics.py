from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FinancialMetrics:
    """
    Per-property result of the metrics engine.

    The five "primary" fields (net_monthly_cash_flow, initial_cash_invested,
    cash_on_cash_return, cap_rate, annual_net_cash_flow) carry the
    CapEx-adjusted values whenever any manual CapEx exists, and the raw values
    otherwise. Both variants are always available through the adjusted_* and
    raw_* fields.

    Currency values are rounded to cents, percentages to 2 decimals.
    """
    monthly_mortgage_payment: float
    gross_monthly_income: float
    total_monthly_expenses: float
    net_monthly_income: float    # before debt service
    net_monthly_cash_flow: float
    initial_cash_invested: float
    cash_on_cash_return: float   # %
    cap_rate: float              # %
    annual_gross_income: float
    annual_net_cash_flow: float

    total_manual_capex: float
    immediate_capex: float
    year1_capex: float

    adjusted_net_monthly_cash_flow: float
    adjusted_initial_cash_invested: float
    adjusted_cash_on_cash_return: float
    adjusted_cap_rate: float
    adjusted_annual_net_cash_flow: float

    raw_net_monthly_cash_flow: float
    raw_initial_cash_invested: float
    raw_cash_on_cash_return: float
    raw_cap_rate: float
    raw_annual_net_cash_flow: float

    @property
    def has_manual_capex(self) -> bool:
        return self.total_manual_capex > 0


@dataclass(frozen=True)
class PortfolioSummary:
    """Roll-up of the final metrics of every property in a portfolio."""
    property_count: int
    ltr_count: int
    str_count: int
    market_cap_rate: float

    total_purchase_price: float
    total_loan_amount: float
    total_equity: float
    total_cash_invested: float

    gross_monthly_income: float
    net_monthly_income: float
    total_monthly_mortgage: float
    total_monthly_expenses: float
    net_monthly_cash_flow: float
    annual_net_cash_flow: float
    annual_noi: float

    avg_cap_rate: float              # simple mean, every property counts once
    avg_cash_on_cash_return: float

    estimated_value: float
    unrealized_gain: float


# Every dollar-denominated aggregate; investor shares scale exactly these.
PORTFOLIO_DOLLAR_FIELDS: tuple[str, ...] = (
    "total_purchase_price",
    "total_loan_amount",
    "total_equity",
    "total_cash_invested",
    "gross_monthly_income",
    "net_monthly_income",
    "total_monthly_mortgage",
    "total_monthly_expenses",
    "net_monthly_cash_flow",
    "annual_net_cash_flow",
    "annual_noi",
    "estimated_value",
    "unrealized_gain",
)


@dataclass(frozen=True)
class InvestorShare:
    name: str
    stake: float                 # fraction, 0.25 means 25%
    amounts: dict[str, float]    # keyed by PORTFOLIO_DOLLAR_FIELDS
