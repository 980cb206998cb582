#!/usr/bin/env python3
"""
Options Tracker - CLI and module for tracking wheel strategy positions.

Records sold puts and calls, derives their status and realized P/L,
aggregates portfolio metrics, wheel cycles and analytics, and raises roll alerts
when the stock runs past the strike.

CLI Usage:
    tracker add AAPL put --strike 150 --premium 2.50 --expiration 2026-03-20
    tracker update <id> --close-date 2026-02-01 --close-price 0.40
    tracker list --status open
    tracker metrics
    tracker analytics
    tracker cycles
    tracker alerts
    tracker strategy --custom --roll 5 --close 80

Module Usage:
    from options_tracker import Position, OptionType, prepare_position

    position = prepare_position(Position(
        ticker="AAPL", option_type=OptionType.PUT, contracts=1,
        strike=150.0, premium=2.50,
        open_date=date(2026, 1, 5), expiration=date(2026, 2, 20),
        close_date=date(2026, 2, 1), premium_paid_to_close=0.40,
    ))
    print(position.status, position.realized_pl)

Status:
    close date present            -> closed   (premium and stock P/L realized)
    assigned flag and stock owned -> assigned (premium realized, stock held)
    otherwise                     -> open     (nothing realized yet)
"""

from src.tracker import (
    AlertType,
    AlertUrgency,
    OptionType,
    PortfolioMetrics,
    Position,
    PositionStatus,
    StrategyAlert,
    WheelCycle,
    calculate_all_alerts,
    calculate_portfolio_metrics,
    calculate_position_metrics,
    calculate_wheel_cycles,
    prepare_position,
)

__all__ = [
    # Data models
    "Position",
    "PortfolioMetrics",
    "WheelCycle",
    "StrategyAlert",
    # Enums
    "OptionType",
    "PositionStatus",
    "AlertType",
    "AlertUrgency",
    # Calculators
    "calculate_position_metrics",
    "prepare_position",
    "calculate_portfolio_metrics",
    "calculate_wheel_cycles",
    "calculate_all_alerts",
]


def main() -> None:
    """CLI entry point."""
    from src.tracker.cli import cli

    cli()


if __name__ == "__main__":
    main()
