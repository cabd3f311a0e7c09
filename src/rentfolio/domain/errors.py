# src/rentfolio/domain/errors.py


class PortfolioValidationError(ValueError):
    """A portfolio operation was given unusable input (blank name, reused id, ...)."""


class PortfolioLimitReached(ValueError):
    """Saving a new portfolio would exceed the repository's saved-item cap."""

    def __init__(self, max_saved: int) -> None:
        super().__init__(
            f"You can save up to {max_saved} portfolios. Delete one to save a new one."
        )
        self.max_saved = max_saved


class PortfolioNotFound(LookupError):
    def __init__(self, portfolio_id: str) -> None:
        super().__init__(f"Saved portfolio not found: {portfolio_id}")
        self.portfolio_id = portfolio_id
