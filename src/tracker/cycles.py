"""Wheel cycle aggregation: group positions by cycle name and summarize."""

from typing import Iterable

from .metrics import round_currency
from .models import Position, WheelCycle
from .status import CycleStatus, PositionStatus


def calculate_wheel_cycles(positions: Iterable[Position]) -> list[WheelCycle]:
    """
    Group positions into wheel cycles and summarize each one.

    Positions are grouped by wheel_cycle_name, with unnamed positions
    under "Uncategorized". Open and assigned positions keep a cycle
    active; unrealized P/L is premium net of open fees and never uses
    live prices.

    A cycle is completed when it has no open positions and at least one
    closed position.

    Args:
        positions: Positions, ideally ordered by open date ascending

    Returns:
        Active cycles first, then completed, each by total P/L descending.
        Ties keep their first-seen order.
    """
    cycles: dict[str, WheelCycle] = {}

    for position in positions:
        name = position.cycle_name
        cycle = cycles.get(name)
        if cycle is None:
            cycle = cycles[name] = WheelCycle(name=name)

        cycle.total_positions += 1
        gross = position.gross_premium

        if position.status in (PositionStatus.OPEN, PositionStatus.ASSIGNED):
            cycle.open_positions += 1
            cycle.unrealized_pl += gross - (position.open_fees or 0.0)
            cycle.total_premium_collected += gross
        elif position.status == PositionStatus.CLOSED:
            cycle.closed_positions += 1
            cycle.realized_pl += position.realized_pl or 0.0
            cycle.total_premium_collected += gross - position.close_cost

    for cycle in cycles.values():
        cycle.total_pl = round_currency(cycle.realized_pl + cycle.unrealized_pl)
        cycle.realized_pl = round_currency(cycle.realized_pl)
        cycle.unrealized_pl = round_currency(cycle.unrealized_pl)
        cycle.total_premium_collected = round_currency(cycle.total_premium_collected)

        if cycle.open_positions == 0 and cycle.closed_positions > 0:
            cycle.status = CycleStatus.COMPLETED
        else:
            cycle.status = CycleStatus.ACTIVE

    return sorted(
        cycles.values(),
        key=lambda c: (c.status != CycleStatus.ACTIVE, -c.total_pl),
    )
