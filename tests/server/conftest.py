"""Pytest fixtures for FastAPI server tests.

This module provides test fixtures for database sessions, test clients,
and a price oracle backed by a mock quote source.
"""

import os
import tempfile
from typing import Generator
from unittest.mock import Mock

# Keep startup's create_tables() away from the user's real database
os.environ.setdefault(
    "TRACKER_DATABASE_PATH", os.path.join(tempfile.mkdtemp(), "test_positions.db")
)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from src.server.database.session import Base, get_db  # noqa: E402
from src.server.main import app  # noqa: E402
from src.server.services.price_service import get_price_oracle  # noqa: E402
from src.tracker.pricing import StockPriceOracle  # noqa: E402

# Import all models to ensure they're registered with Base
from src.server.database.models import OptionPosition, Setting  # noqa: E402, F401


@pytest.fixture(scope="function")
def test_db() -> Generator[Session, None, None]:
    """Create a test database session.

    Creates an in-memory SQLite database for testing that is
    destroyed after each test function completes.

    Yields:
        SQLAlchemy session for testing
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,  # Keep connection alive for in-memory database
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def quote_source() -> Mock:
    """Quote source returning a fixed price per ticker (None = no data)."""
    prices = {"XYZ": 104.0, "ABC": 50.0}

    def current_price(symbol: str) -> float:
        price = prices.get(symbol)
        if price is None:
            raise ValueError(f"No price data available for {symbol}")
        return price

    source = Mock()
    source.prices = prices
    source.get_current_price.side_effect = current_price
    return source


@pytest.fixture
def oracle(quote_source: Mock) -> StockPriceOracle:
    return StockPriceOracle(source=quote_source)


@pytest.fixture(scope="function")
def client(test_db: Session, oracle: StockPriceOracle) -> TestClient:
    """Create a test client with test database and mocked prices.

    Args:
        test_db: Test database session fixture
        oracle: Price oracle fixture

    Returns:
        FastAPI TestClient for making test requests

    Example:
        >>> def test_endpoint(client):
        >>>     response = client.get("/health")
        >>>     assert response.status_code == 200
    """

    def override_get_db():
        """Override database dependency with test database."""
        # Return the same session for all requests in a test
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_price_oracle] = lambda: oracle

    with TestClient(app) as test_client:
        yield test_client

    test_db.rollback()
    app.dependency_overrides.clear()


@pytest.fixture
def position_payload() -> dict:
    """A cash-secured put on XYZ."""
    return {
        "ticker": "xyz",
        "option_type": "put",
        "contracts": 1,
        "strike": 100.0,
        "premium": 2.00,
        "open_date": "2026-01-05",
        "expiration": "2026-02-20",
    }


@pytest.fixture
def create_position(client: TestClient, position_payload: dict):
    """Factory posting a position with optional field overrides."""

    def _create(**overrides) -> dict:
        response = client.post("/api/v1/positions", json={**position_payload, **overrides})
        assert response.status_code == 201, response.text
        return response.json()

    return _create
