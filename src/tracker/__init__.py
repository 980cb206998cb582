"""
Options Tracker - Track wheel strategy option positions.

This package derives lifecycle status and P/L for sold puts and calls,
aggregates them into portfolio metrics, wheel cycles and stock holdings,
and raises roll/close alerts against live stock prices.

Public API:
    Position: One sold option with its derived status and P/L
    calculate_position_metrics: Status and realized P/L for one position
    calculate_portfolio_metrics: Portfolio-wide aggregation
    calculate_wheel_cycles: Per-cycle aggregation
    calculate_portfolio_analytics: Win rates, ROI and premium breakdowns
    calculate_all_alerts: Ranked strategy alerts
    StrategyConfigStore: Strategy settings and alert dismissals
    StockPriceOracle: Cached, best-effort stock prices
"""

from .analytics import calculate_portfolio_analytics
from .alerts import (
    alerts_for_position,
    calculate_all_alerts,
    calculate_close_alert,
    calculate_position_alerts,
    calculate_roll_alert,
    filter_dismissed,
    rank_alerts,
)
from .cycles import calculate_wheel_cycles
from .exceptions import (
    ConfigCorruptError,
    PersistenceError,
    PositionNotFoundError,
    PriceUnavailableError,
    TrackerError,
    ValidationError,
)
from .metrics import calculate_position_metrics, prepare_position, round_currency
from .models import (
    CONTRACT_MULTIPLIER,
    PortfolioAnalytics,
    PortfolioMetrics,
    Position,
    PositionMetrics,
    StockHolding,
    StrategyAlert,
    StrategyConfig,
    UserStrategyConfig,
    WheelCycle,
)
from .portfolio import calculate_portfolio_metrics, calculate_stock_holdings
from .pricing import QuoteCache, StockPriceOracle, StockQuote
from .status import (
    AlertType,
    AlertUrgency,
    CycleStatus,
    OptionType,
    PositionStatus,
    StrategyType,
)
from .strategy import (
    STANDARD_STRATEGY,
    ConfigPersistence,
    InMemoryPersistence,
    JsonFilePersistence,
    StrategyConfigStore,
    get_strategy_config,
)

__all__ = [
    # Data models
    "Position",
    "PositionMetrics",
    "PortfolioMetrics",
    "PortfolioAnalytics",
    "WheelCycle",
    "StockHolding",
    "StrategyAlert",
    "StrategyConfig",
    "UserStrategyConfig",
    "CONTRACT_MULTIPLIER",
    # Enums
    "OptionType",
    "PositionStatus",
    "CycleStatus",
    "AlertType",
    "AlertUrgency",
    "StrategyType",
    # Calculators
    "calculate_position_metrics",
    "prepare_position",
    "round_currency",
    "calculate_portfolio_metrics",
    "calculate_stock_holdings",
    "calculate_wheel_cycles",
    "calculate_portfolio_analytics",
    # Alerts
    "calculate_roll_alert",
    "calculate_close_alert",
    "calculate_position_alerts",
    "calculate_all_alerts",
    "rank_alerts",
    "filter_dismissed",
    "alerts_for_position",
    # Strategy
    "STANDARD_STRATEGY",
    "get_strategy_config",
    "ConfigPersistence",
    "InMemoryPersistence",
    "JsonFilePersistence",
    "StrategyConfigStore",
    # Prices
    "QuoteCache",
    "StockQuote",
    "StockPriceOracle",
    # Exceptions
    "TrackerError",
    "PositionNotFoundError",
    "ValidationError",
    "PriceUnavailableError",
    "ConfigCorruptError",
    "PersistenceError",
]
