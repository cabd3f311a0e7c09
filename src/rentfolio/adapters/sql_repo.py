# src/rentfolio/adapters/sql_repo.py
from datetime import datetime, timezone
from typing import Any

from sqlmodel import JSON, Column, Field, Session, SQLModel, create_engine, select

from rentfolio.domain.errors import PortfolioLimitReached
from rentfolio.domain.portfolio import SavedPortfolio


class SavedPortfolioRow(SQLModel, table=True):
    __tablename__ = "saved_portfolios"

    id: str = Field(primary_key=True)
    # first save time; keeps list order stable across updates
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)
    saved_at: datetime = Field(index=True)

    name: str
    market_cap_rate: float
    property_count: int = 0

    payload: dict[str, Any] = Field(sa_column=Column(JSON))


class SqlPortfolioRepository:
    def __init__(self, uri: str = "sqlite:///rentfolio.db", max_saved: int = 5):
        self.engine = create_engine(uri, echo=False)
        self.max_saved = max_saved
        SQLModel.metadata.create_all(self.engine)

    def save(self, portfolio: SavedPortfolio) -> SavedPortfolio:
        payload = portfolio.model_dump(mode="json")
        with Session(self.engine) as session:
            row = session.get(SavedPortfolioRow, portfolio.id)
            if row is None:
                count = len(session.exec(select(SavedPortfolioRow.id)).all())
                if count >= self.max_saved:
                    raise PortfolioLimitReached(self.max_saved)
                row = SavedPortfolioRow(
                    id=portfolio.id,
                    saved_at=portfolio.saved_at,
                    name=portfolio.name,
                    market_cap_rate=portfolio.market_cap_rate,
                    property_count=len(portfolio.properties),
                    payload=payload,
                )
            else:
                row.saved_at = portfolio.saved_at
                row.name = portfolio.name
                row.market_cap_rate = portfolio.market_cap_rate
                row.property_count = len(portfolio.properties)
                row.payload = payload
            session.add(row)
            session.commit()
        return SavedPortfolio.model_validate(payload)

    def load(self, portfolio_id: str) -> SavedPortfolio | None:
        with Session(self.engine) as session:
            row = session.get(SavedPortfolioRow, portfolio_id)
            if row is None:
                return None
            return SavedPortfolio.model_validate(row.payload)

    def delete(self, portfolio_id: str) -> bool:
        with Session(self.engine) as session:
            row = session.get(SavedPortfolioRow, portfolio_id)
            if row is None:
                return False
            session.delete(row)
            session.commit()
            return True

    def list(self) -> list[SavedPortfolio]:
        with Session(self.engine) as session:
            stmt = select(SavedPortfolioRow).order_by(SavedPortfolioRow.created_at)
            return [SavedPortfolio.model_validate(r.payload) for r in session.exec(stmt)]
