"""Service layer for strategy alerts and their configuration.

Evaluates alerts for every open position against live stock prices and
the active strategy, and manages the persisted dismissal set.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from src.server.repositories.setting import SettingRepository
from src.server.services.position_service import PositionService, to_domain
from src.tracker.alerts import alerts_for_position, calculate_all_alerts, filter_dismissed
from src.tracker.models import StrategyAlert, UserStrategyConfig
from src.tracker.pricing import StockPriceOracle
from src.tracker.strategy import StrategyConfigStore, get_strategy_config

logger = logging.getLogger(__name__)


class AlertService:
    """Service for alert evaluation and dismissal management.

    Attributes:
        positions: PositionService used to load positions
        oracle: Stock price oracle
        store: Strategy configuration store backed by the settings table
    """

    def __init__(
        self,
        db: Session,
        oracle: StockPriceOracle,
        store: Optional[StrategyConfigStore] = None,
    ):
        self.positions = PositionService(db)
        self.oracle = oracle
        self.store = store if store is not None else StrategyConfigStore(SettingRepository(db))

    def _evaluate(self, positions, user_config: UserStrategyConfig) -> list[StrategyAlert]:
        open_positions = [p for p in positions if p.is_open]
        prices = self.oracle.get_prices(p.ticker for p in open_positions)
        # No source of current option prices, so close alerts stay dormant
        return calculate_all_alerts(
            open_positions, prices, None, get_strategy_config(user_config)
        )

    def list_alerts(self, include_dismissed: bool = False) -> tuple[list[StrategyAlert], int]:
        """Ranked alerts for every open position.

        Args:
            include_dismissed: Return dismissed alerts too

        Returns:
            Tuple of (alerts, number of alerts hidden by dismissals)
        """
        user_config = self.store.load()
        alerts = self._evaluate(self.positions.list_domain_positions(), user_config)

        if include_dismissed:
            return alerts, 0

        active = filter_dismissed(alerts, user_config.dismissed_alerts)
        hidden = len(alerts) - len(active)
        logger.debug(f"{len(active)} active alerts, {hidden} dismissed")
        return active, hidden

    def position_alerts(self, position_id: str) -> list[StrategyAlert]:
        """Alerts for one position, dismissals ignored.

        Raises:
            PositionNotFoundError: If no position has this id
        """
        position = to_domain(self.positions.get_position(position_id))
        alerts = self._evaluate([position], self.store.load())
        return alerts_for_position(alerts, position_id)

    def get_config(self) -> UserStrategyConfig:
        """Stored strategy settings, expired dismissals purged."""
        return self.store.load()

    def update_config(self, **changes) -> UserStrategyConfig:
        """Change strategy settings; see StrategyConfigStore.update."""
        return self.store.update(**changes)

    def dismiss(self, position_id: str) -> UserStrategyConfig:
        """Dismiss alerts for an existing position.

        Raises:
            PositionNotFoundError: If no position has this id
        """
        self.positions.get_position(position_id)
        return self.store.dismiss(position_id)

    def undismiss(self, position_id: str) -> UserStrategyConfig:
        """Restore alerts for a position."""
        return self.store.undismiss(position_id)

    def clear_dismissed(self) -> UserStrategyConfig:
        """Restore every dismissed alert."""
        return self.store.clear_dismissed()
