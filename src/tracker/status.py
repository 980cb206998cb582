"""Enums for position lifecycle, option kinds and strategy alerts."""

from enum import Enum


class OptionType(Enum):
    """Kind of option contract that was sold."""

    PUT = "put"
    CALL = "call"


class PositionStatus(Enum):
    """
    Lifecycle status of a position.

    Status is never stored authoritatively. It is derived from the raw
    fields on every write:
    - CLOSED: a close date is present
    - ASSIGNED: the assignment flag is set and the stock is owned
    - OPEN: anything else, still accruing premium
    """

    OPEN = "open"
    CLOSED = "closed"
    ASSIGNED = "assigned"


class CycleStatus(Enum):
    """Status of a wheel cycle (all positions on one ticker)."""

    ACTIVE = "active"
    COMPLETED = "completed"


class AlertType(Enum):
    """Kinds of strategy alerts."""

    ROLL = "roll"  # Stock ran past the roll threshold
    CLOSE = "close"  # Enough premium captured to close for profit
    WARNING = "warning"  # Approaching the roll threshold


class AlertUrgency(Enum):
    """Urgency classification for strategy alerts."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class StrategyType(Enum):
    """Which threshold set drives alert evaluation."""

    STANDARD = "standard"
    CUSTOM = "custom"


# Sort order for ranking alerts (lower sorts first)
URGENCY_ORDER: dict[AlertUrgency, int] = {
    AlertUrgency.HIGH: 0,
    AlertUrgency.MEDIUM: 1,
    AlertUrgency.LOW: 2,
}


def derive_status(has_close_date: bool, assigned: bool, owns_stock: bool) -> PositionStatus:
    """
    Derive the lifecycle status from raw position flags.

    Args:
        has_close_date: Whether a close date is recorded
        assigned: Whether the assignment flag is set
        owns_stock: Whether the underlying stock is owned

    Returns:
        The derived PositionStatus
    """
    if has_close_date:
        return PositionStatus.CLOSED
    if assigned and owns_stock:
        return PositionStatus.ASSIGNED
    return PositionStatus.OPEN
