"""Service layer for portfolio reporting.

Builds portfolio metrics, wheel cycle summaries and stock holdings from
the stored positions, pulling live prices from the oracle only where a
report needs them.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from src.server.services.position_service import PositionService
from src.tracker.analytics import calculate_portfolio_analytics
from src.tracker.cycles import calculate_wheel_cycles
from src.tracker.models import PortfolioAnalytics, PortfolioMetrics, StockHolding, WheelCycle
from src.tracker.portfolio import (
    calculate_portfolio_metrics,
    calculate_stock_holdings,
    holding_tickers,
)
from src.tracker.pricing import StockPriceOracle, StockQuote
from src.tracker.status import PositionStatus

logger = logging.getLogger(__name__)


class ReportService:
    """Service for portfolio-level reports.

    Attributes:
        positions: PositionService used to load positions
        oracle: Stock price oracle
    """

    def __init__(self, db: Session, oracle: StockPriceOracle):
        self.positions = PositionService(db)
        self.oracle = oracle

    def portfolio_metrics(self) -> PortfolioMetrics:
        """Portfolio metrics, with assigned stock marked to market."""
        positions = self.positions.list_domain_positions()

        tickers = {
            p.ticker.upper()
            for p in positions
            if p.status == PositionStatus.ASSIGNED and p.owns_stock
        }
        prices = self.oracle.get_prices(tickers) if tickers else {}

        metrics = calculate_portfolio_metrics(positions, prices)
        logger.debug(
            f"Portfolio metrics: {metrics.total_positions} positions, "
            f"realized=${metrics.realized_pl:,.2f}"
        )
        return metrics

    def wheel_cycles(self) -> list[WheelCycle]:
        """Wheel cycle summaries (no live prices)."""
        return calculate_wheel_cycles(self.positions.list_domain_positions())

    def stock_holdings(self) -> list[StockHolding]:
        """Stock currently held, with live prices where available."""
        positions = self.positions.list_domain_positions()
        tickers = holding_tickers(positions)
        prices = self.oracle.get_prices(tickers) if tickers else {}
        return calculate_stock_holdings(positions, prices)

    def analytics(self) -> PortfolioAnalytics:
        """Returns, win rates and premium breakdowns (no live prices)."""
        return calculate_portfolio_analytics(self.positions.list_domain_positions())

    def stock_quote(self, ticker: str) -> Optional[StockQuote]:
        """Current quote for a ticker, or None when unavailable."""
        return self.oracle.get_quote(ticker)
