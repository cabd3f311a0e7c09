# src/rentfolio/api/http.py
from __future__ import annotations

from fastapi import Depends, FastAPI, HTTPException

from rentfolio.adapters.config import config
from rentfolio.adapters.logging_utils import get_logger, log_context
from rentfolio.adapters.sql_repo import SqlPortfolioRepository
from rentfolio.analysis.finance import calculate_metrics
from rentfolio.analysis.valuation import calculate_valuation
from rentfolio.domain.errors import PortfolioNotFound
from rentfolio.domain.metrics import FinancialMetrics
from rentfolio.domain.portfolio import SavedPortfolio
from rentfolio.domain.ports import PortfolioRepository
from rentfolio.domain.property import Property
from rentfolio.services import portfolio as portfolio_service
from .schemas import (
    PortfolioRequest,
    PortfolioResponse,
    SavedPortfolioItem,
    SavePortfolioRequest,
    ValuationRequest,
    ValuationResponse,
)

app = FastAPI(title="rentfolio")
logger = get_logger(__name__)

_portfolio_repo: PortfolioRepository | None = None


def get_portfolio_repository() -> PortfolioRepository:
    """Lazily open the configured store; tests override this dependency."""
    global _portfolio_repo
    if _portfolio_repo is None:
        _portfolio_repo = SqlPortfolioRepository(
            config.DB_URI, max_saved=config.MAX_SAVED_PORTFOLIOS
        )
    return _portfolio_repo


@app.post("/metrics", response_model=FinancialMetrics)
def metrics_endpoint(prop: Property) -> FinancialMetrics:
    return calculate_metrics(prop)


@app.post("/valuation", response_model=ValuationResponse)
def valuation_endpoint(payload: ValuationRequest) -> ValuationResponse:
    return ValuationResponse(
        estimated_value=calculate_valuation(payload.annual_noi, payload.market_cap_rate)
    )


@app.post("/portfolio/summary", response_model=PortfolioResponse)
def portfolio_summary(payload: PortfolioRequest) -> PortfolioResponse:
    try:
        portfolio = portfolio_service.build_portfolio(payload.properties, payload.market_cap_rate)
        report = portfolio_service.summarize(portfolio, payload.investors)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return PortfolioResponse(
        summary=report.summary,
        investor_shares=report.investor_shares,
        properties=portfolio.entries,
    )


# -----------------------------
# Saved portfolios
# -----------------------------

@app.get("/portfolios", response_model=list[SavedPortfolioItem])
def list_saved(
    repo: PortfolioRepository = Depends(get_portfolio_repository),
) -> list[SavedPortfolioItem]:
    return [
        SavedPortfolioItem(
            id=p.id,
            name=p.name,
            saved_at=p.saved_at,
            market_cap_rate=p.market_cap_rate,
            property_count=len(p.properties),
        )
        for p in portfolio_service.list_portfolios(repo)
    ]


@app.get("/portfolios/{portfolio_id}", response_model=SavedPortfolio)
def get_saved(
    portfolio_id: str,
    repo: PortfolioRepository = Depends(get_portfolio_repository),
) -> SavedPortfolio:
    try:
        saved, _ = portfolio_service.load_portfolio(repo, portfolio_id)
    except PortfolioNotFound as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return saved


@app.post("/portfolios", response_model=SavedPortfolio)
def save_saved(
    payload: SavePortfolioRequest,
    repo: PortfolioRepository = Depends(get_portfolio_repository),
) -> SavedPortfolio:
    try:
        portfolio = portfolio_service.build_portfolio(payload.properties, payload.market_cap_rate)
        return portfolio_service.save_portfolio(
            repo, portfolio, payload.name, portfolio_id=payload.portfolio_id
        )
    except ValueError as e:
        logger.warning("Portfolio save rejected", extra=log_context(reason=str(e), name=payload.name))
        raise HTTPException(status_code=400, detail=str(e)) from e


@app.delete("/portfolios/{portfolio_id}")
def delete_saved(
    portfolio_id: str,
    repo: PortfolioRepository = Depends(get_portfolio_repository),
) -> dict:
    try:
        portfolio_service.delete_portfolio(repo, portfolio_id)
    except PortfolioNotFound as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return {"deleted": True, "id": portfolio_id}
