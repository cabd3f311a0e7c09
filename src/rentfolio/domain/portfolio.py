# src/rentfolio/domain/portfolio.py
from __future__ import annotations

import string
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from rentfolio.domain.metrics import FinancialMetrics
from rentfolio.domain.property import Property, PropertyVariant


class PropertyAnalysis(BaseModel):
    property: Property
    metrics: FinancialMetrics

    @property
    def id(self) -> str:
        return self.property.id

    @property
    def variant(self) -> PropertyVariant:
        return self.property.variant


class Portfolio(BaseModel):
    """Ordered (property, metrics) pairs plus the cap rate used for valuation only."""
    entries: list[PropertyAnalysis] = Field(default_factory=list)
    market_cap_rate: float = Field(default=6.0, description="Market cap rate in %, e.g. 6.0")

    def ids(self) -> list[str]:
        return [e.id for e in self.entries]


class SavedPortfolio(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    saved_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    market_cap_rate: float = 6.0
    properties: list[PropertyAnalysis] = Field(default_factory=list)


class Investor(BaseModel):
    name: str
    stake: float = Field(..., description="0.25 means 25% ownership")

    @field_validator("stake", mode="before")
    @classmethod
    def _to_fraction(cls, v: Any) -> Any:
        """
        "25%" and 25 both mean a quarter; 0.25 is already a fraction.
        A "%" suffix always means percent, so "0.5%" is 0.005.
        """
        is_percent = False
        if isinstance(v, str):
            v = v.strip()
            if v.endswith("%"):
                is_percent = True
                v = v[:-1].strip()
        try:
            f = float(v)
        except (TypeError, ValueError) as err:
            raise ValueError("stake must be numeric or percent-like") from err
        if is_percent or f > 1.0:
            f = f / 100.0
        if f < 0:
            raise ValueError("stake must be non-negative")
        return f


def equal_stakes(count: int) -> list[Investor]:
    """Investor A, Investor B, ... each owning 1/count of everything."""
    if count <= 0:
        return []
    labels = string.ascii_uppercase
    return [
        Investor(name=f"Investor {labels[i] if i < len(labels) else i + 1}", stake=1.0 / count)
        for i in range(count)
    ]
