# src/rentfolio/api/schemas.py
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from rentfolio.domain.metrics import InvestorShare, PortfolioSummary
from rentfolio.domain.portfolio import Investor, PropertyAnalysis
from rentfolio.domain.property import Property


# --------------------------------------------
# Valuation
# --------------------------------------------

class ValuationRequest(BaseModel):
    annual_noi: float
    market_cap_rate: float = Field(..., description="Percent, e.g. 6.0")


class ValuationResponse(BaseModel):
    estimated_value: float


# --------------------------------------------
# Portfolio summary
# --------------------------------------------

class PortfolioRequest(BaseModel):
    """
    Properties in display order plus the market cap rate for valuation.

    Keep this permissive so dashboard payloads with extra keys still validate.
    """
    model_config = ConfigDict(extra="allow")

    properties: list[Property] = Field(default_factory=list)
    market_cap_rate: float | None = None
    investors: list[Investor] | None = None


class PortfolioResponse(BaseModel):
    summary: PortfolioSummary
    investor_shares: list[InvestorShare]
    properties: list[PropertyAnalysis]


# --------------------------------------------
# Saved portfolios
# --------------------------------------------

class SavePortfolioRequest(PortfolioRequest):
    name: str
    # set to overwrite an existing saved portfolio
    portfolio_id: str | None = None


class SavedPortfolioItem(BaseModel):
    id: str
    name: str
    saved_at: datetime
    market_cap_rate: float
    property_count: int
