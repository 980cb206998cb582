"""Pydantic models for reporting endpoints.

Portfolio metrics, wheel cycle summaries, stock holdings and stock
quotes. All are read-only views built from the tracker dataclasses.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.tracker.status import CycleStatus


class PortfolioMetricsResponse(BaseModel):
    """Portfolio-wide metrics snapshot.

    Monetary values are rounded to cents.
    """

    total_positions: int = Field(..., description="Number of positions")
    open_positions: int = Field(..., description="Positions still open")
    closed_positions: int = Field(..., description="Positions closed")
    assigned_positions: int = Field(..., description="Positions assigned")
    realized_pl: float = Field(..., description="Total realized P/L")
    premium_realized_pl: float = Field(..., description="Realized P/L from premium")
    stock_realized_pl: float = Field(..., description="Realized P/L from stock sales")
    unrealized_pl: float = Field(..., description="Premium plus stock unrealized P/L")
    premium_unrealized_pl: float = Field(..., description="Open premium net of fees")
    stock_unrealized_pl: float = Field(..., description="Assigned stock marked to market")
    open_premium_collected: float = Field(..., description="Premium on open positions")
    closed_premium_collected: float = Field(..., description="Premium kept on closed positions")
    total_capital_allocated: float = Field(..., description="Capital tied up")
    total_fees: float = Field(..., description="All commissions paid")

    model_config = {"from_attributes": True}


class WheelCycleResponse(BaseModel):
    """Summary of one wheel cycle."""

    name: str = Field(..., description="Cycle name")
    total_positions: int
    open_positions: int
    closed_positions: int
    realized_pl: float
    unrealized_pl: float
    total_pl: float
    total_premium_collected: float
    status: CycleStatus

    model_config = {"from_attributes": True}


class StockHoldingResponse(BaseModel):
    """Stock held on one ticker, marked to market when a price is known."""

    ticker: str
    quantity: int
    cost_basis: float = Field(..., description="Weighted average cost per share")
    total_cost_basis: float
    current_price: Optional[float] = None
    current_value: Optional[float] = None
    unrealized_pl: Optional[float] = None

    model_config = {"from_attributes": True}


class StockPriceResponse(BaseModel):
    """Current price for a ticker."""

    ticker: str
    price: float
    timestamp: datetime
    cached: bool = Field(..., description="Whether the price came from the cache")

    model_config = {"from_attributes": True}


class TickerWinRateResponse(BaseModel):
    """Win rate over closed positions on one ticker."""

    ticker: str
    wins: int
    total: int
    win_rate: float = Field(..., description="Percent of closed positions with a profit")

    model_config = {"from_attributes": True}


class TickerReturnResponse(BaseModel):
    """Realized P/L on a held ticker against its stock cost basis."""

    ticker: str
    realized_pl: float
    capital: float = Field(..., description="Total cost basis of the stock held")
    roi: float = Field(..., description="Realized P/L as a percent of capital")

    model_config = {"from_attributes": True}


class TickerPremiumResponse(BaseModel):
    """Gross premium collected on one ticker."""

    ticker: str
    premium: float

    model_config = {"from_attributes": True}


class PremiumPeriodResponse(BaseModel):
    """Gross premium for one month of open dates."""

    period: str = Field(..., description="Month as YYYY-MM")
    puts: float
    calls: float

    model_config = {"from_attributes": True}


class CumulativePLPointResponse(BaseModel):
    """Running realized P/L after one closed position."""

    close_date: date
    realized_pl: float
    cumulative_pl: float

    model_config = {"from_attributes": True}


class AnalyticsResponse(BaseModel):
    """Return, win rate and premium statistics for the portfolio.

    Rates are percentages. Capital is the cost basis of stock currently
    held; with none held every rate is zero.
    """

    total_realized: float = Field(..., description="Total realized P/L")
    total_capital: float = Field(..., description="Cost basis of stock held")
    total_roi: float = Field(..., description="Realized P/L over capital")
    daily_roi: float = Field(..., description="Total ROI over a 30 day holding period")
    annualized_roi: float = Field(..., description="Daily ROI scaled to 365 days")
    ticker_returns: list[TickerReturnResponse]
    win_rates: list[TickerWinRateResponse]
    premium_per_ticker: list[TickerPremiumResponse]
    premium_over_time: list[PremiumPeriodResponse]
    cumulative_pl: list[CumulativePLPointResponse]

    model_config = {"from_attributes": True}
