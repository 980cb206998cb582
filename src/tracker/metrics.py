"""
Per-position metrics calculation.

Derives lifecycle status and the realized P/L breakdown for a single
position from its raw trade fields. Everything here is a pure function:
the caller persists the result.
"""

import logging
from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from .models import CONTRACT_MULTIPLIER, Position, PositionMetrics
from .status import PositionStatus, derive_status

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")


def round_currency(value: float) -> float:
    """Round a monetary amount to cents, halves rounding up."""
    return float(Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


def calculate_position_metrics(position: Position) -> PositionMetrics:
    """
    Calculate status and realized P/L for one position.

    Rules:
    - closed: premium P/L is premium received minus premium paid to
      close minus open and close fees; stock P/L is
      (sale price - cost basis) * quantity when all three are known.
    - assigned: premium P/L is premium received minus open fees; the
      stock has not been sold so stock P/L is zero.
    - open: nothing is realized yet, all P/L fields are None.

    Missing optional numbers count as zero. Never raises.

    Args:
        position: Position with raw fields populated

    Returns:
        PositionMetrics with derived status and P/L
    """
    status = derive_status(
        has_close_date=position.close_date is not None,
        assigned=position.assigned,
        owns_stock=position.owns_stock,
    )

    if status == PositionStatus.CLOSED:
        premium_pl = position.gross_premium - position.close_cost - position.total_fees

        if (
            position.stock_sale_price
            and position.stock_cost_basis
            and position.stock_quantity
        ):
            stock_pl = (
                position.stock_sale_price - position.stock_cost_basis
            ) * position.stock_quantity
        else:
            stock_pl = 0.0

        return PositionMetrics(
            status=status,
            realized_pl=premium_pl + stock_pl,
            premium_realized_pl=premium_pl,
            stock_realized_pl=stock_pl,
        )

    if status == PositionStatus.ASSIGNED:
        premium_pl = position.gross_premium - (position.open_fees or 0.0)
        return PositionMetrics(
            status=status,
            realized_pl=premium_pl,
            premium_realized_pl=premium_pl,
            stock_realized_pl=0.0,
        )

    return PositionMetrics(status=status)


def default_stock_quantity(position: Position) -> Optional[int]:
    """
    Stock quantity to store for a position.

    When the stock is owned but no quantity was given, assume one lot of
    100 shares per contract.
    """
    if position.owns_stock and not position.stock_quantity:
        return position.contracts * CONTRACT_MULTIPLIER
    return position.stock_quantity or None


def prepare_position(position: Position) -> Position:
    """
    Recompute every derived field of a position.

    Invoked at each write boundary (create and update) on the fully
    merged record, never on a partial delta.

    Args:
        position: Position carrying the merged raw fields

    Returns:
        A new Position with stock quantity defaulted and status/P/L set
    """
    with_quantity = replace(position, stock_quantity=default_stock_quantity(position))
    metrics = calculate_position_metrics(with_quantity)

    logger.debug(
        f"Recomputed {with_quantity.ticker} {with_quantity.option_type.value} "
        f"${with_quantity.strike}: status={metrics.status.value}, "
        f"realized={metrics.realized_pl}"
    )

    return replace(
        with_quantity,
        status=metrics.status,
        realized_pl=metrics.realized_pl,
        premium_realized_pl=metrics.premium_realized_pl,
        stock_realized_pl=metrics.stock_realized_pl,
    )
