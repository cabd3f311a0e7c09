# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from rentfolio.adapters.memory_repo import InMemoryPortfolioRepository
from rentfolio.api.http import app, get_portfolio_repository


@pytest.fixture
def repo():
    return InMemoryPortfolioRepository(max_saved=5)


@pytest.fixture
def client(repo):
    # keep saved portfolios off disk and isolated per test
    app.dependency_overrides[get_portfolio_repository] = lambda: repo
    yield TestClient(app)
    app.dependency_overrides.clear()
