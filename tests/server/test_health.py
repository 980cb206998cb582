"""Tests for health and info endpoints.

This module tests the core API endpoints including health checks,
system information, and root endpoint.
"""

from unittest.mock import patch

from fastapi import status
from fastapi.testclient import TestClient

import src.server.main as server_main
from src.tracker.pricing import StockPriceOracle


def test_health_endpoint(client: TestClient, oracle: StockPriceOracle):
    """GET /health reports healthy and whether prices are available."""
    with patch.object(server_main, "get_price_oracle", return_value=oracle):
        response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK

    data = response.json()
    assert data["status"] == "healthy"
    assert "timestamp" in data
    assert data["price_provider_configured"] is True


def test_health_without_price_provider(client: TestClient):
    """Without an API key the service is still healthy."""
    with patch.object(
        server_main, "get_price_oracle", return_value=StockPriceOracle(source=None)
    ):
        response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["price_provider_configured"] is False


def test_root_endpoint(client: TestClient):
    """GET / returns the welcome message and links."""
    response = client.get("/")

    assert response.status_code == status.HTTP_200_OK

    data = response.json()
    assert "Options Tracker API" in data["message"]
    assert "version" in data
    assert data["docs"] == "/docs"
    assert data["health"] == "/health"
    assert data["api"] == "/api/v1/info"


def test_info_endpoint(client: TestClient):
    """GET /api/v1/info returns app name and database status."""
    response = client.get("/api/v1/info")

    assert response.status_code == status.HTTP_200_OK

    data = response.json()
    assert data["app_name"] == "Options Tracker API"
    assert data["status"] == "running"
    assert isinstance(data["database_connected"], bool)


def test_openapi_lists_tracker_routes(client: TestClient):
    """The schema exposes the position, report and alert routes."""
    paths = client.get("/openapi.json").json()["paths"]

    assert "/api/v1/positions" in paths
    assert "/api/v1/metrics" in paths
    assert "/api/v1/alerts" in paths
    assert "/api/v1/strategy/config" in paths
