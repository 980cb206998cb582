"""Data models for option positions, portfolio metrics and strategy alerts."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from .status import (
    AlertType,
    AlertUrgency,
    CycleStatus,
    OptionType,
    PositionStatus,
    StrategyType,
)

# One option contract controls 100 shares
CONTRACT_MULTIPLIER = 100


@dataclass
class Position:
    """
    A single sold option (put or call) on one underlying.

    Raw trade fields are supplied by the user; status and the realized
    P/L fields are derived and recomputed on every write.
    """

    ticker: str
    option_type: OptionType
    contracts: int
    strike: float
    premium: float  # Received per share
    open_date: date
    expiration: date
    id: Optional[str] = None

    # Wheel cycle grouping
    wheel_cycle_name: Optional[str] = None
    continue_existing_wheel: bool = False

    # Stock ownership
    owns_stock: bool = False
    stock_cost_basis: Optional[float] = None
    stock_quantity: Optional[int] = None
    stock_acquisition_date: Optional[date] = None
    stock_sale_price: Optional[float] = None
    stock_sale_date: Optional[date] = None

    # Assignment and closing
    assigned: bool = False
    open_fees: Optional[float] = None
    close_date: Optional[date] = None
    premium_paid_to_close: Optional[float] = None
    close_fees: Optional[float] = None
    notes: Optional[str] = None

    # Derived
    status: PositionStatus = PositionStatus.OPEN
    realized_pl: Optional[float] = None
    premium_realized_pl: Optional[float] = None
    stock_realized_pl: Optional[float] = None
    unrealized_pl: Optional[float] = None

    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    @property
    def gross_premium(self) -> float:
        """Total premium received: premium * contracts * 100."""
        return self.premium * self.contracts * CONTRACT_MULTIPLIER

    @property
    def close_cost(self) -> float:
        """Total premium paid to buy the option back."""
        return (self.premium_paid_to_close or 0.0) * self.contracts * CONTRACT_MULTIPLIER

    @property
    def total_fees(self) -> float:
        """Open plus close fees, missing fees count as zero."""
        return (self.open_fees or 0.0) + (self.close_fees or 0.0)

    @property
    def is_open(self) -> bool:
        """True if the option has not been closed or assigned."""
        return self.status == PositionStatus.OPEN

    @property
    def cycle_name(self) -> str:
        """Name of the wheel cycle this position belongs to."""
        return self.wheel_cycle_name or "Uncategorized"


@dataclass(frozen=True)
class PositionMetrics:
    """Status and realized P/L breakdown derived for one position."""

    status: PositionStatus
    realized_pl: Optional[float] = None
    premium_realized_pl: Optional[float] = None
    stock_realized_pl: Optional[float] = None


@dataclass
class PortfolioMetrics:
    """Portfolio-wide snapshot over all positions."""

    total_positions: int = 0
    open_positions: int = 0
    closed_positions: int = 0
    assigned_positions: int = 0
    realized_pl: float = 0.0
    premium_realized_pl: float = 0.0
    stock_realized_pl: float = 0.0
    unrealized_pl: float = 0.0
    premium_unrealized_pl: float = 0.0  # Open option premiums net of open fees
    stock_unrealized_pl: float = 0.0  # Assigned stock marked to market
    open_premium_collected: float = 0.0
    closed_premium_collected: float = 0.0
    total_capital_allocated: float = 0.0
    total_fees: float = 0.0


@dataclass
class WheelCycle:
    """Summary of all positions grouped under one cycle name."""

    name: str
    total_positions: int = 0
    open_positions: int = 0
    closed_positions: int = 0
    realized_pl: float = 0.0
    unrealized_pl: float = 0.0
    total_pl: float = 0.0
    total_premium_collected: float = 0.0
    status: CycleStatus = CycleStatus.ACTIVE


@dataclass
class StockHolding:
    """Stock currently held across open/assigned positions on one ticker."""

    ticker: str
    quantity: int
    cost_basis: float  # Quantity-weighted average per share
    total_cost_basis: float
    current_price: Optional[float] = None
    current_value: Optional[float] = None
    unrealized_pl: Optional[float] = None


@dataclass
class TickerWinRate:
    """Share of closed positions on one ticker that finished with a profit."""

    ticker: str
    wins: int
    total: int
    win_rate: float  # Percent


@dataclass
class TickerReturn:
    """Realized P/L on one held ticker relative to its stock cost basis."""

    ticker: str
    realized_pl: float
    capital: float
    roi: float  # Percent


@dataclass
class TickerPremium:
    """Gross premium collected on one ticker."""

    ticker: str
    premium: float


@dataclass
class CumulativePLPoint:
    """Running realized P/L after one closed position."""

    close_date: date
    realized_pl: float
    cumulative_pl: float


@dataclass
class PremiumPeriod:
    """Gross premium collected in one calendar month, by option type."""

    period: str  # YYYY-MM of the open date
    puts: float = 0.0
    calls: float = 0.0


@dataclass
class PortfolioAnalytics:
    """Return and premium statistics across the whole portfolio."""

    total_realized: float = 0.0
    total_capital: float = 0.0
    total_roi: float = 0.0
    daily_roi: float = 0.0
    annualized_roi: float = 0.0
    ticker_returns: list[TickerReturn] = field(default_factory=list)
    win_rates: list[TickerWinRate] = field(default_factory=list)
    premium_per_ticker: list[TickerPremium] = field(default_factory=list)
    premium_over_time: list[PremiumPeriod] = field(default_factory=list)
    cumulative_pl: list[CumulativePLPoint] = field(default_factory=list)


@dataclass(frozen=True)
class StrategyConfig:
    """Thresholds driving alert evaluation."""

    strategy_type: StrategyType
    roll_threshold: float  # Percent above strike
    close_threshold: float  # Percent of premium captured


@dataclass
class StrategyAlert:
    """
    An alert raised for one open position during an evaluation pass.

    Never persisted; regenerated from positions, prices and the active
    strategy on every evaluation.
    """

    position_id: Optional[str]
    ticker: str
    option_type: OptionType
    alert_type: AlertType
    title: str
    message: str
    threshold: float
    current_distance: float  # Signed percent
    urgency: AlertUrgency
    target_price: Optional[float] = None


@dataclass
class UserStrategyConfig:
    """
    Persisted user strategy preferences and the alert dismissal set.

    dismissed_alerts and dismissed_at are kept in lockstep: every id in
    the list has a timestamp (epoch milliseconds) and vice versa.
    """

    active_strategy: StrategyType = StrategyType.STANDARD
    custom_roll_threshold: float = 3.0
    custom_close_threshold: float = 75.0
    dismissed_alerts: list[str] = field(default_factory=list)
    dismissed_at: dict[str, int] = field(default_factory=dict)

    def is_dismissed(self, position_id: str) -> bool:
        """True if alerts for this position are currently dismissed."""
        return position_id in self.dismissed_alerts
