"""
Strategy alert evaluation.

Checks open positions against current prices and the active strategy
thresholds and produces roll, warning and close alerts.

Roll family (needs the stock price):
- ROLL when the stock is at or past strike * (1 + roll%)
- WARNING when it is within 0.5% below that target

Close (needs the current option price, which nothing supplies yet):
- CLOSE when the option has decayed to premium * (100 - close%) / 100
"""

import logging
from typing import Iterable, Mapping, Optional

from .models import Position, StrategyAlert, StrategyConfig
from .status import URGENCY_ORDER, AlertType, AlertUrgency, OptionType

logger = logging.getLogger(__name__)

# Warning band below the roll target, in percent of strike
WARNING_BAND_PCT = 0.5

# Overshoot past the roll target (percent of strike) for each urgency
HIGH_OVERSHOOT_PCT = 1.0
MEDIUM_OVERSHOOT_PCT = 0.25

# Extra profit beyond the close target that makes a close alert urgent
HIGH_PROFIT_MARGIN_PCT = 5.0


def _roll_urgency(overshoot_pct: float) -> AlertUrgency:
    if overshoot_pct >= HIGH_OVERSHOOT_PCT:
        return AlertUrgency.HIGH
    if overshoot_pct >= MEDIUM_OVERSHOOT_PCT:
        return AlertUrgency.MEDIUM
    return AlertUrgency.LOW


def calculate_roll_alert(
    position: Position,
    current_price: float,
    config: StrategyConfig,
) -> Optional[StrategyAlert]:
    """
    Evaluate the roll threshold for one position.

    Args:
        position: Position to check (only open positions alert)
        current_price: Current price of the underlying stock
        config: Active strategy thresholds

    Returns:
        A ROLL or WARNING alert, or None
    """
    if not position.is_open:
        return None

    target_price = position.strike * (1 + config.roll_threshold / 100)
    distance_pct = (current_price - position.strike) / position.strike * 100

    if current_price >= target_price:
        overshoot_pct = (current_price - target_price) / position.strike * 100
        is_put = position.option_type == OptionType.PUT
        return StrategyAlert(
            position_id=position.id,
            ticker=position.ticker,
            option_type=position.option_type,
            alert_type=AlertType.ROLL,
            title=f"Roll {'Put' if is_put else 'Call'}",
            message=(
                f"Stock at ${current_price:.2f} (+{distance_pct:.2f}% above strike). "
                f"Consider rolling to avoid "
                f"{'assignment' if is_put else 'stock being called away'}."
            ),
            target_price=target_price,
            threshold=config.roll_threshold,
            current_distance=distance_pct,
            urgency=_roll_urgency(overshoot_pct),
        )

    approach_price = position.strike * (
        1 + (config.roll_threshold - WARNING_BAND_PCT) / 100
    )
    if current_price >= approach_price:
        return StrategyAlert(
            position_id=position.id,
            ticker=position.ticker,
            option_type=position.option_type,
            alert_type=AlertType.WARNING,
            title="Approaching Roll Threshold",
            message=(
                f"Stock at ${current_price:.2f} (+{distance_pct:.2f}%). "
                f"Within {WARNING_BAND_PCT}% of roll threshold."
            ),
            target_price=target_price,
            threshold=config.roll_threshold,
            current_distance=distance_pct,
            urgency=AlertUrgency.LOW,
        )

    return None


def calculate_close_alert(
    position: Position,
    current_option_price: Optional[float],
    config: StrategyConfig,
) -> Optional[StrategyAlert]:
    """
    Evaluate the profit-taking threshold for one position.

    Args:
        position: Position to check (only open positions alert)
        current_option_price: Current price of the option per share, or
            None when unknown
        config: Active strategy thresholds

    Returns:
        A CLOSE alert, or None
    """
    if not position.is_open or current_option_price is None:
        return None
    if position.premium <= 0:
        return None

    target_price = position.premium * (100 - config.close_threshold) / 100
    profit_pct = (position.premium - current_option_price) / position.premium * 100

    if current_option_price > target_price:
        return None

    if profit_pct >= config.close_threshold + HIGH_PROFIT_MARGIN_PCT:
        urgency = AlertUrgency.HIGH
    else:
        urgency = AlertUrgency.MEDIUM

    return StrategyAlert(
        position_id=position.id,
        ticker=position.ticker,
        option_type=position.option_type,
        alert_type=AlertType.CLOSE,
        title="Close for Profit",
        message=(
            f"Option at ${current_option_price:.2f} (~{profit_pct:.1f}% profit). "
            "Good time to close position."
        ),
        target_price=target_price,
        threshold=config.close_threshold,
        current_distance=profit_pct,
        urgency=urgency,
    )


def calculate_position_alerts(
    position: Position,
    current_stock_price: Optional[float],
    current_option_price: Optional[float],
    config: StrategyConfig,
) -> list[StrategyAlert]:
    """
    Run every check for one position.

    The roll family and the close check are independent, so a position
    can carry one roll-or-warning alert and one close alert at once.
    """
    alerts = []

    if current_stock_price is not None:
        roll_alert = calculate_roll_alert(position, current_stock_price, config)
        if roll_alert:
            alerts.append(roll_alert)

    if current_option_price is not None:
        close_alert = calculate_close_alert(position, current_option_price, config)
        if close_alert:
            alerts.append(close_alert)

    return alerts


def rank_alerts(alerts: Iterable[StrategyAlert]) -> list[StrategyAlert]:
    """Sort by urgency (high first), then by absolute distance descending."""
    return sorted(
        alerts,
        key=lambda a: (URGENCY_ORDER[a.urgency], -abs(a.current_distance)),
    )


def calculate_all_alerts(
    positions: Iterable[Position],
    stock_prices: Mapping[str, float],
    option_prices: Optional[Mapping[str, float]],
    config: StrategyConfig,
) -> list[StrategyAlert]:
    """
    Evaluate alerts for every open position.

    Args:
        positions: Positions to evaluate; non-open ones are skipped
        stock_prices: Current stock prices keyed by uppercase ticker
        option_prices: Current option prices keyed by position id, or None
        config: Active strategy thresholds

    Returns:
        Ranked list of alerts
    """
    alerts = []

    for position in positions:
        if not position.is_open:
            continue

        stock_price = stock_prices.get(position.ticker.upper())
        option_price = option_prices.get(position.id) if option_prices is not None else None

        alerts.extend(
            calculate_position_alerts(position, stock_price, option_price, config)
        )

    logger.debug(f"Evaluated alerts: {len(alerts)} raised")
    return rank_alerts(alerts)


def filter_dismissed(
    alerts: Iterable[StrategyAlert], dismissed_ids: Iterable[str]
) -> list[StrategyAlert]:
    """Drop alerts whose position is in the dismissal set."""
    dismissed = set(dismissed_ids)
    return [a for a in alerts if a.position_id not in dismissed]


def alerts_for_position(
    alerts: Iterable[StrategyAlert], position_id: str
) -> list[StrategyAlert]:
    """Alerts for one position, regardless of dismissals."""
    return [a for a in alerts if a.position_id == position_id]
