"""
Portfolio analytics.

Return on capital, win rates and premium breakdowns computed from the
full position set. Stock cost basis is the capital base for returns;
positions that never held stock do not add to it.
"""

import logging
from typing import Iterable

from .metrics import calculate_position_metrics, round_currency
from .models import (
    CumulativePLPoint,
    PortfolioAnalytics,
    Position,
    PremiumPeriod,
    TickerPremium,
    TickerReturn,
    TickerWinRate,
)
from .portfolio import calculate_portfolio_metrics, calculate_stock_holdings
from .status import OptionType, PositionStatus

logger = logging.getLogger(__name__)

# Assumed average holding period when turning total ROI into a daily rate
ASSUMED_HOLDING_DAYS = 30
DAYS_PER_YEAR = 365


def _realized(position: Position) -> float:
    """Stored realized P/L, recomputed if missing; zero while open."""
    realized = position.realized_pl
    if realized is None:
        realized = calculate_position_metrics(position).realized_pl
    return realized or 0.0


def _percent(part: float, whole: float) -> float:
    if whole <= 0:
        return 0.0
    return round(part / whole * 100, 2)


def calculate_win_rates(positions: Iterable[Position]) -> list[TickerWinRate]:
    """
    Win rate per ticker over closed positions.

    A win is a closed position with positive realized P/L. Tickers with no
    closed positions are left out.

    Returns:
        Win rates sorted by rate descending, then ticker
    """
    stats: dict[str, list[int]] = {}  # ticker -> [wins, total]

    for position in positions:
        if position.status != PositionStatus.CLOSED:
            continue
        entry = stats.setdefault(position.ticker.upper(), [0, 0])
        entry[1] += 1
        if _realized(position) > 0:
            entry[0] += 1

    rates = [
        TickerWinRate(ticker=t, wins=w, total=n, win_rate=_percent(w, n))
        for t, (w, n) in stats.items()
    ]
    return sorted(rates, key=lambda r: (-r.win_rate, r.ticker))


def calculate_premium_per_ticker(positions: Iterable[Position]) -> list[TickerPremium]:
    """Gross premium per ticker across every position, largest first."""
    totals: dict[str, float] = {}
    for position in positions:
        ticker = position.ticker.upper()
        totals[ticker] = totals.get(ticker, 0.0) + position.gross_premium

    premiums = [TickerPremium(ticker=t, premium=round_currency(p)) for t, p in totals.items()]
    return sorted(premiums, key=lambda p: (-p.premium, p.ticker))


def calculate_premium_over_time(positions: Iterable[Position]) -> list[PremiumPeriod]:
    """Gross premium per month of the open date, split into puts and calls."""
    periods: dict[str, PremiumPeriod] = {}

    for position in positions:
        key = position.open_date.strftime("%Y-%m")
        period = periods.setdefault(key, PremiumPeriod(period=key))
        if position.option_type == OptionType.PUT:
            period.puts += position.gross_premium
        else:
            period.calls += position.gross_premium

    result = []
    for key in sorted(periods):
        period = periods[key]
        period.puts = round_currency(period.puts)
        period.calls = round_currency(period.calls)
        result.append(period)
    return result


def calculate_cumulative_pl(positions: Iterable[Position]) -> list[CumulativePLPoint]:
    """
    Running realized P/L over closed positions, ordered by close date.

    Positions closed on the same day keep their input order.
    """
    closed = sorted(
        (p for p in positions if p.status == PositionStatus.CLOSED and p.close_date),
        key=lambda p: p.close_date,
    )

    points = []
    cumulative = 0.0
    for position in closed:
        realized = _realized(position)
        cumulative += realized
        points.append(
            CumulativePLPoint(
                close_date=position.close_date,
                realized_pl=round_currency(realized),
                cumulative_pl=round_currency(cumulative),
            )
        )
    return points


def calculate_ticker_returns(positions: list[Position]) -> list[TickerReturn]:
    """
    Realized P/L of every position on a held ticker over its stock cost basis.

    Only tickers with stock currently held appear.

    Returns:
        Returns sorted by ROI descending, then ticker
    """
    realized_by_ticker: dict[str, float] = {}
    for position in positions:
        ticker = position.ticker.upper()
        realized_by_ticker[ticker] = realized_by_ticker.get(ticker, 0.0) + _realized(position)

    returns = []
    for holding in calculate_stock_holdings(positions):
        realized = realized_by_ticker.get(holding.ticker, 0.0)
        returns.append(
            TickerReturn(
                ticker=holding.ticker,
                realized_pl=round_currency(realized),
                capital=holding.total_cost_basis,
                roi=_percent(realized, holding.total_cost_basis),
            )
        )
    return sorted(returns, key=lambda r: (-r.roi, r.ticker))


def calculate_portfolio_analytics(positions: Iterable[Position]) -> PortfolioAnalytics:
    """
    Build every analytics view for the portfolio.

    Total ROI is total realized P/L over the cost basis of stock held.
    The daily rate spreads it over ASSUMED_HOLDING_DAYS and the annual
    rate scales the daily one to a year. With no stock held all three
    rates are zero.

    Args:
        positions: Every position in the portfolio

    Returns:
        PortfolioAnalytics with money rounded to cents, rates to two
        decimals (the daily rate to four)
    """
    positions = list(positions)

    total_realized = calculate_portfolio_metrics(positions).realized_pl
    total_capital = round_currency(
        sum(h.total_cost_basis for h in calculate_stock_holdings(positions))
    )

    total_roi = _percent(total_realized, total_capital)
    daily_roi = total_roi / ASSUMED_HOLDING_DAYS

    analytics = PortfolioAnalytics(
        total_realized=total_realized,
        total_capital=total_capital,
        total_roi=total_roi,
        daily_roi=round(daily_roi, 4),
        annualized_roi=round(daily_roi * DAYS_PER_YEAR, 2),
        ticker_returns=calculate_ticker_returns(positions),
        win_rates=calculate_win_rates(positions),
        premium_per_ticker=calculate_premium_per_ticker(positions),
        premium_over_time=calculate_premium_over_time(positions),
        cumulative_pl=calculate_cumulative_pl(positions),
    )

    logger.debug(
        f"Analytics: realized=${total_realized:,.2f} on ${total_capital:,.2f} "
        f"({total_roi:.2f}%)"
    )
    return analytics
