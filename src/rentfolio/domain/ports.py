# src/rentfolio/domain/ports.py
from __future__ import annotations

from typing import Protocol

from rentfolio.domain.portfolio import SavedPortfolio


# ----------------------------
# Saved portfolio storage
# ----------------------------

class PortfolioRepository(Protocol):
    """
    Persistence for named portfolio snapshots.

    Implementations cap the number of saved portfolios: saving a *new* id
    past the cap raises PortfolioLimitReached, overwriting an existing id
    never does.
    """

    def save(self, portfolio: SavedPortfolio) -> SavedPortfolio:
        ...

    def load(self, portfolio_id: str) -> SavedPortfolio | None:
        ...

    def delete(self, portfolio_id: str) -> bool:
        ...

    def list(self) -> list[SavedPortfolio]:
        ...
