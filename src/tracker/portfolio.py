"""
Portfolio-level aggregation.

Folds the full position set into a single PortfolioMetrics snapshot and
groups stock currently held into per-ticker holdings. Both functions are
stateless and safe to call repeatedly.
"""

import logging
from dataclasses import fields
from typing import Iterable, Mapping, Optional

from .metrics import calculate_position_metrics, round_currency
from .models import (
    CONTRACT_MULTIPLIER,
    PortfolioMetrics,
    Position,
    PositionMetrics,
    StockHolding,
)
from .status import OptionType, PositionStatus

logger = logging.getLogger(__name__)


def _stored_metrics(position: Position) -> PositionMetrics:
    """Realized P/L as persisted, recomputed if the record predates it."""
    if position.realized_pl is None:
        return calculate_position_metrics(position)
    return PositionMetrics(
        status=position.status,
        realized_pl=position.realized_pl,
        premium_realized_pl=position.premium_realized_pl or 0.0,
        stock_realized_pl=position.stock_realized_pl or 0.0,
    )


def capital_allocated(position: Position) -> float:
    """
    Capital tied up by an open or assigned position.

    - Puts: cash needed to buy the shares if assigned (strike * 100).
    - Covered calls: carrying value of the stock, at cost basis when known
      and at strike otherwise.
    - Naked calls: zero, the risk is unbounded and not counted.
    """
    if position.status not in (PositionStatus.OPEN, PositionStatus.ASSIGNED):
        return 0.0

    if position.option_type == OptionType.PUT:
        return position.strike * position.contracts * CONTRACT_MULTIPLIER

    if position.owns_stock:
        per_share = position.stock_cost_basis or position.strike
        return per_share * position.contracts * CONTRACT_MULTIPLIER

    return 0.0


def calculate_portfolio_metrics(
    positions: Iterable[Position],
    stock_prices: Optional[Mapping[str, float]] = None,
) -> PortfolioMetrics:
    """
    Aggregate all positions into portfolio-wide metrics.

    Args:
        positions: Every position in the portfolio
        stock_prices: Current stock prices keyed by uppercase ticker, used
            to mark assigned stock to market. Missing tickers contribute
            nothing.

    Returns:
        PortfolioMetrics with monetary values rounded to cents
    """
    prices = stock_prices or {}
    metrics = PortfolioMetrics()

    for position in positions:
        metrics.total_positions += 1
        metrics.total_fees += position.total_fees
        gross = position.gross_premium

        if position.status == PositionStatus.CLOSED:
            metrics.closed_positions += 1
            metrics.closed_premium_collected += gross - position.close_cost

            realized = _stored_metrics(position)
            metrics.realized_pl += realized.realized_pl or 0.0
            metrics.premium_realized_pl += realized.premium_realized_pl or 0.0
            metrics.stock_realized_pl += realized.stock_realized_pl or 0.0

        elif position.status == PositionStatus.OPEN:
            metrics.open_positions += 1
            metrics.open_premium_collected += gross
            metrics.premium_unrealized_pl += gross - (position.open_fees or 0.0)

        elif position.status == PositionStatus.ASSIGNED:
            metrics.assigned_positions += 1
            # No closing transaction yet, the full premium was kept
            metrics.closed_premium_collected += gross

            realized = _stored_metrics(position)
            metrics.premium_realized_pl += realized.premium_realized_pl or 0.0
            metrics.realized_pl += realized.premium_realized_pl or 0.0

            if (
                position.owns_stock
                and position.stock_cost_basis
                and position.stock_quantity
            ):
                current_price = prices.get(position.ticker.upper())
                if current_price is not None:
                    metrics.stock_unrealized_pl += (
                        current_price - position.stock_cost_basis
                    ) * position.stock_quantity
                else:
                    logger.debug(
                        f"No price for {position.ticker}, skipping stock unrealized P/L"
                    )

        metrics.total_capital_allocated += capital_allocated(position)

    metrics.unrealized_pl = metrics.premium_unrealized_pl + metrics.stock_unrealized_pl

    for f in fields(metrics):
        value = getattr(metrics, f.name)
        if isinstance(value, float):
            setattr(metrics, f.name, round_currency(value))

    return metrics


def holding_tickers(positions: Iterable[Position]) -> list[str]:
    """Uppercase tickers whose stock is currently held, sorted."""
    return sorted(
        {
            p.ticker.upper()
            for p in positions
            if p.owns_stock
            and p.status in (PositionStatus.OPEN, PositionStatus.ASSIGNED)
        }
    )


def calculate_stock_holdings(
    positions: Iterable[Position],
    stock_prices: Optional[Mapping[str, float]] = None,
) -> list[StockHolding]:
    """
    Group stock held by open or assigned positions into per-ticker holdings.

    Only positions with both a stock quantity and a cost basis count.
    Cost basis is averaged across positions, weighted by quantity.

    Args:
        positions: Every position in the portfolio
        stock_prices: Current prices keyed by uppercase ticker

    Returns:
        Holdings sorted by ticker; value fields are None without a price
    """
    prices = stock_prices or {}
    totals: dict[str, list[float]] = {}  # ticker -> [quantity, total cost]

    for position in positions:
        if not position.owns_stock:
            continue
        if position.status not in (PositionStatus.OPEN, PositionStatus.ASSIGNED):
            continue
        if not (position.stock_quantity and position.stock_cost_basis):
            continue

        entry = totals.setdefault(position.ticker.upper(), [0, 0.0])
        entry[0] += position.stock_quantity
        entry[1] += position.stock_cost_basis * position.stock_quantity

    holdings = []
    for ticker in sorted(totals):
        quantity, total_cost = totals[ticker]
        current_price = prices.get(ticker)
        current_value = current_price * quantity if current_price is not None else None

        holdings.append(
            StockHolding(
                ticker=ticker,
                quantity=int(quantity),
                cost_basis=round_currency(total_cost / quantity),
                total_cost_basis=round_currency(total_cost),
                current_price=current_price,
                current_value=(
                    round_currency(current_value) if current_value is not None else None
                ),
                unrealized_pl=(
                    round_currency(current_value - total_cost)
                    if current_value is not None
                    else None
                ),
            )
        )

    return holdings
