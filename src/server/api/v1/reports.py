"""Reporting API endpoints.

Portfolio metrics, wheel cycles, stock holdings, analytics and single
stock quotes.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.server.database.session import get_db
from src.server.models.reports import (
    AnalyticsResponse,
    PortfolioMetricsResponse,
    StockHoldingResponse,
    StockPriceResponse,
    WheelCycleResponse,
)
from src.server.services.price_service import get_price_oracle
from src.server.services.report_service import ReportService
from src.tracker.pricing import StockPriceOracle

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reports"])


@router.get(
    "/metrics",
    response_model=PortfolioMetricsResponse,
    status_code=status.HTTP_200_OK,
    summary="Get portfolio metrics",
    description="Aggregates every position; assigned stock is marked to market",
)
def get_metrics(
    db: Session = Depends(get_db),
    oracle: StockPriceOracle = Depends(get_price_oracle),
) -> PortfolioMetricsResponse:
    """Portfolio-wide metrics.

    Example:
        >>> GET /api/v1/metrics
        >>> {"total_positions": 4, "open_positions": 2, "realized_pl": 340.5, ...}
    """
    metrics = ReportService(db, oracle).portfolio_metrics()
    return PortfolioMetricsResponse.model_validate(metrics)


@router.get(
    "/wheel-cycles",
    response_model=list[WheelCycleResponse],
    status_code=status.HTTP_200_OK,
    summary="Get wheel cycles",
    description="Active cycles first, then completed, each by total P/L descending",
)
def get_wheel_cycles(
    db: Session = Depends(get_db),
    oracle: StockPriceOracle = Depends(get_price_oracle),
) -> list[WheelCycleResponse]:
    """Wheel cycle summaries."""
    cycles = ReportService(db, oracle).wheel_cycles()
    return [WheelCycleResponse.model_validate(c) for c in cycles]


@router.get(
    "/stock-holdings",
    response_model=list[StockHoldingResponse],
    status_code=status.HTTP_200_OK,
    summary="Get stock holdings",
    description="Stock held by open or assigned positions, grouped by ticker",
)
def get_stock_holdings(
    db: Session = Depends(get_db),
    oracle: StockPriceOracle = Depends(get_price_oracle),
) -> list[StockHoldingResponse]:
    """Current stock holdings with live prices where available."""
    holdings = ReportService(db, oracle).stock_holdings()
    return [StockHoldingResponse.model_validate(h) for h in holdings]


@router.get(
    "/analytics",
    response_model=AnalyticsResponse,
    status_code=status.HTTP_200_OK,
    summary="Get portfolio analytics",
    description="ROI, win rate per ticker, premium breakdowns and cumulative realized P/L",
)
def get_analytics(
    db: Session = Depends(get_db),
    oracle: StockPriceOracle = Depends(get_price_oracle),
) -> AnalyticsResponse:
    """Portfolio analytics.

    Example:
        >>> GET /api/v1/analytics
        >>> {"total_realized": 340.5, "total_roi": 3.4, "win_rates": [...], ...}
    """
    analytics = ReportService(db, oracle).analytics()
    return AnalyticsResponse.model_validate(analytics)


@router.get(
    "/stock-price/{ticker}",
    response_model=StockPriceResponse,
    status_code=status.HTTP_200_OK,
    summary="Get stock price",
    description="Current price for a ticker, served from a 5-minute cache",
)
def get_stock_price(
    ticker: str,
    db: Session = Depends(get_db),
    oracle: StockPriceOracle = Depends(get_price_oracle),
) -> StockPriceResponse:
    """Current stock price.

    Raises:
        HTTPException: 404 if no price is available for the ticker
    """
    quote = ReportService(db, oracle).stock_quote(ticker)
    if quote is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Price not available for {ticker.upper()}",
        )
    return StockPriceResponse.model_validate(quote)
