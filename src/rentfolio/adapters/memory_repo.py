from __future__ import annotations

from rentfolio.domain.errors import PortfolioLimitReached
from rentfolio.domain.portfolio import SavedPortfolio
from rentfolio.domain.ports import PortfolioRepository


class InMemoryPortfolioRepository(PortfolioRepository):
    def __init__(self, max_saved: int = 5) -> None:
        self.max_saved = max_saved
        self._items: dict[str, SavedPortfolio] = {}

    def save(self, portfolio: SavedPortfolio) -> SavedPortfolio:
        if portfolio.id not in self._items and len(self._items) >= self.max_saved:
            raise PortfolioLimitReached(self.max_saved)
        # store a copy so later edits by the caller don't leak in
        rec = portfolio.model_copy(deep=True)
        self._items[rec.id] = rec
        return rec.model_copy(deep=True)

    def load(self, portfolio_id: str) -> SavedPortfolio | None:
        rec = self._items.get(portfolio_id)
        return rec.model_copy(deep=True) if rec is not None else None

    def delete(self, portfolio_id: str) -> bool:
        return self._items.pop(portfolio_id, None) is not None

    def list(self) -> list[SavedPortfolio]:
        return [rec.model_copy(deep=True) for rec in self._items.values()]
