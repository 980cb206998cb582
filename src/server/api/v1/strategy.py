"""Strategy configuration and alert API endpoints.

This module exposes the active strategy thresholds, the ranked alert
list and the alert dismissal controls.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from src.server.database.session import get_db
from src.server.models.strategy import (
    AlertListResponse,
    AlertResponse,
    StrategyConfigResponse,
    StrategyConfigUpdate,
)
from src.server.services.alert_service import AlertService
from src.server.services.price_service import get_price_oracle
from src.tracker.exceptions import PositionNotFoundError, ValidationError
from src.tracker.models import UserStrategyConfig
from src.tracker.pricing import StockPriceOracle
from src.tracker.strategy import get_strategy_config

logger = logging.getLogger(__name__)

router = APIRouter(tags=["strategy"])


def _config_response(config: UserStrategyConfig) -> StrategyConfigResponse:
    effective = get_strategy_config(config)
    return StrategyConfigResponse(
        active_strategy=config.active_strategy,
        custom_roll_threshold=config.custom_roll_threshold,
        custom_close_threshold=config.custom_close_threshold,
        roll_threshold=effective.roll_threshold,
        close_threshold=effective.close_threshold,
        dismissed_alerts=config.dismissed_alerts,
        dismissed_at=config.dismissed_at,
    )


@router.get(
    "/strategy/config",
    response_model=StrategyConfigResponse,
    status_code=status.HTTP_200_OK,
    summary="Get strategy configuration",
)
def get_config(
    db: Session = Depends(get_db),
    oracle: StockPriceOracle = Depends(get_price_oracle),
) -> StrategyConfigResponse:
    """Stored strategy settings and the thresholds in effect."""
    return _config_response(AlertService(db, oracle).get_config())


@router.put(
    "/strategy/config",
    response_model=StrategyConfigResponse,
    status_code=status.HTTP_200_OK,
    summary="Update strategy configuration",
    description="Switches between standard and custom thresholds",
)
def update_config(
    update: StrategyConfigUpdate,
    db: Session = Depends(get_db),
    oracle: StockPriceOracle = Depends(get_price_oracle),
) -> StrategyConfigResponse:
    """Change strategy settings.

    Example:
        >>> PUT /api/v1/strategy/config
        >>> {"active_strategy": "custom", "custom_roll_threshold": 5}
    """
    try:
        config = AlertService(db, oracle).update_config(
            active_strategy=update.active_strategy,
            custom_roll_threshold=update.custom_roll_threshold,
            custom_close_threshold=update.custom_close_threshold,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        ) from e
    return _config_response(config)


@router.get(
    "/alerts",
    response_model=AlertListResponse,
    status_code=status.HTTP_200_OK,
    summary="Get strategy alerts",
    description="Evaluates every open position against live prices",
)
def list_alerts(
    include_dismissed: bool = Query(False, description="Include dismissed alerts"),
    db: Session = Depends(get_db),
    oracle: StockPriceOracle = Depends(get_price_oracle),
) -> AlertListResponse:
    """Ranked alerts, highest urgency first."""
    alerts, hidden = AlertService(db, oracle).list_alerts(include_dismissed)
    return AlertListResponse(
        alerts=[AlertResponse.model_validate(a) for a in alerts],
        total=len(alerts),
        dismissed_count=hidden,
    )


@router.post(
    "/alerts/{position_id}/dismiss",
    response_model=StrategyConfigResponse,
    status_code=status.HTTP_200_OK,
    summary="Dismiss alerts for a position",
    description="Hides the position's alerts for 24 hours",
)
def dismiss_alert(
    position_id: str,
    db: Session = Depends(get_db),
    oracle: StockPriceOracle = Depends(get_price_oracle),
) -> StrategyConfigResponse:
    """Dismiss alerts for a position.

    Raises:
        HTTPException: 404 if the position does not exist
    """
    try:
        config = AlertService(db, oracle).dismiss(position_id)
    except PositionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return _config_response(config)


@router.delete(
    "/alerts/{position_id}/dismiss",
    response_model=StrategyConfigResponse,
    status_code=status.HTTP_200_OK,
    summary="Restore alerts for a position",
)
def undismiss_alert(
    position_id: str,
    db: Session = Depends(get_db),
    oracle: StockPriceOracle = Depends(get_price_oracle),
) -> StrategyConfigResponse:
    """Restore alerts for a position."""
    return _config_response(AlertService(db, oracle).undismiss(position_id))


@router.delete(
    "/alerts/dismissed",
    response_model=StrategyConfigResponse,
    status_code=status.HTTP_200_OK,
    summary="Restore all dismissed alerts",
)
def clear_dismissed(
    db: Session = Depends(get_db),
    oracle: StockPriceOracle = Depends(get_price_oracle),
) -> StrategyConfigResponse:
    """Restore every dismissed alert."""
    return _config_response(AlertService(db, oracle).clear_dismissed())
