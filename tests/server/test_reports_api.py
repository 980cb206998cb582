"""Integration tests for reporting endpoints.

Tests portfolio metrics, wheel cycles, stock holdings, analytics and stock quotes
against a mocked price source.
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient


class TestMetrics:
    """Tests for GET /api/v1/metrics."""

    def test_empty_portfolio(self, client: TestClient):
        response = client.get("/api/v1/metrics")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["total_positions"] == 0
        assert data["realized_pl"] == 0.0
        assert data["total_capital_allocated"] == 0.0

    def test_counts_and_realized(self, client: TestClient, create_position):
        create_position()
        create_position(open_fees=1.0, close_date="2026-02-01",
                        premium_paid_to_close=0.5, close_fees=1.0)

        data = client.get("/api/v1/metrics").json()

        assert data["total_positions"] == 2
        assert data["open_positions"] == 1
        assert data["closed_positions"] == 1
        assert data["realized_pl"] == 148.0
        assert data["open_premium_collected"] == 200.0
        assert data["total_capital_allocated"] == 10000.0
        assert data["total_fees"] == 2.0

    def test_assigned_stock_marked_to_market(
        self, client: TestClient, create_position, quote_source
    ):
        """Cost 98, price 101, 100 shares: 300 unrealized on the stock."""
        quote_source.prices["XYZ"] = 101.0
        create_position(assigned=True, owns_stock=True, stock_cost_basis=98.0,
                        stock_quantity=100)

        data = client.get("/api/v1/metrics").json()

        assert data["assigned_positions"] == 1
        assert data["stock_unrealized_pl"] == 300.0

    def test_missing_price_leaves_stock_unrealized_at_zero(
        self, client: TestClient, create_position
    ):
        create_position(ticker="NOPE", assigned=True, owns_stock=True, stock_cost_basis=98.0)

        data = client.get("/api/v1/metrics").json()

        assert data["stock_unrealized_pl"] == 0.0


class TestWheelCycles:
    """Tests for GET /api/v1/wheel-cycles."""

    def test_open_and_closed_leg_on_one_ticker(self, client: TestClient, create_position):
        create_position()
        create_position(close_date="2026-02-01", premium_paid_to_close=0.5)

        cycles = client.get("/api/v1/wheel-cycles").json()

        assert len(cycles) == 1
        cycle = cycles[0]
        assert cycle["name"] == "XYZ"
        assert cycle["open_positions"] == 1
        assert cycle["closed_positions"] == 1
        assert cycle["status"] == "active"
        assert cycle["realized_pl"] == 150.0
        assert cycle["unrealized_pl"] == 200.0
        assert cycle["total_pl"] == 350.0

    def test_active_before_completed(self, client: TestClient, create_position):
        create_position(ticker="ABC", close_date="2026-02-01")
        create_position()

        cycles = client.get("/api/v1/wheel-cycles").json()

        assert [(c["name"], c["status"]) for c in cycles] == [
            ("XYZ", "active"),
            ("ABC", "completed"),
        ]


class TestStockHoldings:
    """Tests for GET /api/v1/stock-holdings."""

    def test_holding_with_price(self, client: TestClient, create_position):
        create_position(ticker="ABC", option_type="call", owns_stock=True,
                        stock_cost_basis=48.0, stock_quantity=100)

        holdings = client.get("/api/v1/stock-holdings").json()

        assert holdings == [
            {
                "ticker": "ABC",
                "quantity": 100,
                "cost_basis": 48.0,
                "total_cost_basis": 4800.0,
                "current_price": 50.0,
                "current_value": 5000.0,
                "unrealized_pl": 200.0,
            }
        ]

    def test_no_holdings(self, client: TestClient, create_position):
        create_position()
        assert client.get("/api/v1/stock-holdings").json() == []


class TestAnalytics:
    """Tests for GET /api/v1/analytics."""

    def test_empty_portfolio(self, client: TestClient):
        response = client.get("/api/v1/analytics")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["total_roi"] == 0.0
        assert data["win_rates"] == []
        assert data["cumulative_pl"] == []

    def test_returns_and_breakdowns(self, client: TestClient, create_position, quote_source):
        create_position(close_date="2026-02-01", premium_paid_to_close=0.5)
        create_position(ticker="ABC", option_type="call", strike=50.0, premium=1.0,
                        owns_stock=True, stock_cost_basis=50.0, stock_quantity=100)

        data = client.get("/api/v1/analytics").json()

        assert data["total_realized"] == 150.0
        assert data["total_capital"] == 5000.0
        assert data["total_roi"] == 3.0
        assert data["annualized_roi"] == pytest.approx(36.5)
        assert data["ticker_returns"] == [
            {"ticker": "ABC", "realized_pl": 0.0, "capital": 5000.0, "roi": 0.0}
        ]
        assert data["win_rates"] == [
            {"ticker": "XYZ", "wins": 1, "total": 1, "win_rate": 100.0}
        ]
        assert data["premium_per_ticker"] == [
            {"ticker": "XYZ", "premium": 200.0},
            {"ticker": "ABC", "premium": 100.0},
        ]
        assert data["premium_over_time"] == [
            {"period": "2026-01", "puts": 200.0, "calls": 100.0}
        ]
        assert data["cumulative_pl"] == [
            {"close_date": "2026-02-01", "realized_pl": 150.0, "cumulative_pl": 150.0}
        ]
        quote_source.get_current_price.assert_not_called()

class TestStockPrice:
    """Tests for GET /api/v1/stock-price/{ticker}."""

    def test_price_then_cached(self, client: TestClient, quote_source):
        first = client.get("/api/v1/stock-price/xyz")
        second = client.get("/api/v1/stock-price/XYZ")

        assert first.status_code == status.HTTP_200_OK
        assert first.json()["ticker"] == "XYZ"
        assert first.json()["price"] == 104.0
        assert first.json()["cached"] is False
        assert second.json()["cached"] is True
        quote_source.get_current_price.assert_called_once_with("XYZ")

    def test_unavailable(self, client: TestClient):
        response = client.get("/api/v1/stock-price/nope")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "Price not available for NOPE"
