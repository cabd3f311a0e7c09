# src/rentfolio/services/portfolio.py
from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from rentfolio.adapters.config import config
from rentfolio.adapters.logging_utils import get_logger, log_context
from rentfolio.analysis.finance import calculate_metrics
from rentfolio.analysis.valuation import aggregate_portfolio, investor_shares
from rentfolio.domain.errors import PortfolioNotFound, PortfolioValidationError
from rentfolio.domain.metrics import InvestorShare, PortfolioSummary
from rentfolio.domain.portfolio import (
    Investor,
    Portfolio,
    PropertyAnalysis,
    SavedPortfolio,
    equal_stakes,
)
from rentfolio.domain.ports import PortfolioRepository
from rentfolio.domain.property import LTRDetails, Property

logger = get_logger(__name__)

# stakes may add up to slightly more than 1.0 from float splits (e.g. 3 x 1/3)
_STAKE_TOLERANCE = 1e-9


@dataclass(frozen=True)
class PortfolioReport:
    summary: PortfolioSummary
    investor_shares: list[InvestorShare]


def new_portfolio(market_cap_rate: float | None = None) -> Portfolio:
    rate = config.DEFAULT_MARKET_CAP_RATE if market_cap_rate is None else market_cap_rate
    return Portfolio(market_cap_rate=rate)


def analyze_property(prop: Property) -> PropertyAnalysis:
    """Pair a property with freshly computed metrics."""
    return PropertyAnalysis(property=prop, metrics=calculate_metrics(prop))


def add_property(portfolio: Portfolio, prop: Property) -> Portfolio:
    """
    Return a new portfolio with `prop` appended.

    Property ids are assigned once and never reused within a portfolio.
    """
    if prop.id in portfolio.ids():
        raise PortfolioValidationError(f"Property id already in portfolio: {prop.id}")
    entry = analyze_property(prop)
    return portfolio.model_copy(update={"entries": [*portfolio.entries, entry]})


def build_portfolio(properties: Iterable[Property], market_cap_rate: float | None = None) -> Portfolio:
    portfolio = new_portfolio(market_cap_rate)
    for prop in properties:
        portfolio = add_property(portfolio, prop)
    return portfolio


def remove_property(portfolio: Portfolio, property_id: str) -> Portfolio:
    kept = [e for e in portfolio.entries if e.id != property_id]
    return portfolio.model_copy(update={"entries": kept})


def undo_last_property(portfolio: Portfolio) -> tuple[Portfolio, Property | None]:
    """Drop the most recently added property and hand it back (for re-editing)."""
    if not portfolio.entries:
        return portfolio, None
    last = portfolio.entries[-1]
    return portfolio.model_copy(update={"entries": portfolio.entries[:-1]}), last.property


def recompute(portfolio: Portfolio) -> Portfolio:
    """Rebuild every entry's metrics from its inputs (metrics are never patched)."""
    entries = [analyze_property(e.property) for e in portfolio.entries]
    return portfolio.model_copy(update={"entries": entries})


def summarize(
    portfolio: Portfolio,
    investors: Sequence[Investor] | None = None,
) -> PortfolioReport:
    if investors is None:
        investors = equal_stakes(config.DEFAULT_INVESTOR_COUNT)

    total_stake = sum(inv.stake for inv in investors)
    if total_stake > 1.0 + _STAKE_TOLERANCE:
        raise PortfolioValidationError(
            f"Investor stakes add up to {total_stake:.4f}; they cannot exceed 100%"
        )

    summary = aggregate_portfolio(portfolio.entries, portfolio.market_cap_rate)
    return PortfolioReport(summary=summary, investor_shares=investor_shares(summary, investors))


def veteran_occupancy_shortfalls(portfolio: Portfolio) -> list[PropertyAnalysis]:
    """LTR properties whose current veteran occupancy is below their target."""
    out: list[PropertyAnalysis] = []
    for e in portfolio.entries:
        details = e.property.details
        if not isinstance(details, LTRDetails):
            continue
        current = details.current_veteran_occupancy_percent
        if current is not None and current < details.target_veteran_occupancy_percent:
            out.append(e)
    return out


# -----------------------------
# Saved portfolios
# -----------------------------

def save_portfolio(
    repo: PortfolioRepository,
    portfolio: Portfolio,
    name: str,
    *,
    portfolio_id: str | None = None,
) -> SavedPortfolio:
    """
    Save a snapshot under `name`.

    With `portfolio_id`, overwrites that saved portfolio; otherwise creates a
    new one (subject to the repository's cap).
    """
    clean_name = (name or "").strip()
    if not clean_name:
        raise PortfolioValidationError("Please enter a name for the portfolio.")
    if not portfolio.entries:
        raise PortfolioValidationError("Add at least one property before saving.")

    snapshot = SavedPortfolio(
        name=clean_name,
        saved_at=datetime.now(timezone.utc),
        market_cap_rate=portfolio.market_cap_rate,
        properties=list(portfolio.entries),
    )
    if portfolio_id:
        snapshot = snapshot.model_copy(update={"id": portfolio_id})

    saved = repo.save(snapshot)
    logger.info(
        "Portfolio saved",
        extra=log_context(portfolio_id=saved.id, properties=len(saved.properties)),
    )
    return saved


def load_portfolio(repo: PortfolioRepository, portfolio_id: str) -> tuple[SavedPortfolio, Portfolio]:
    """
    Load a saved portfolio and recompute every property's metrics from its inputs.

    Stored metrics are treated as a cache only; they are never trusted.
    """
    saved = repo.load(portfolio_id)
    if saved is None:
        raise PortfolioNotFound(portfolio_id)

    portfolio = recompute(
        Portfolio(entries=saved.properties, market_cap_rate=saved.market_cap_rate)
    )
    refreshed = saved.model_copy(update={"properties": portfolio.entries})
    logger.info(
        "Portfolio loaded",
        extra=log_context(portfolio_id=saved.id, properties=len(portfolio.entries)),
    )
    return refreshed, portfolio


def list_portfolios(repo: PortfolioRepository) -> list[SavedPortfolio]:
    return repo.list()


def delete_portfolio(repo: PortfolioRepository, portfolio_id: str) -> None:
    if not repo.delete(portfolio_id):
        raise PortfolioNotFound(portfolio_id)
    logger.info("Portfolio deleted", extra=log_context(portfolio_id=portfolio_id))
