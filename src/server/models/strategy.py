"""Pydantic models for strategy configuration and alert endpoints."""

from typing import Optional

from pydantic import BaseModel, Field

from src.tracker.status import AlertType, AlertUrgency, OptionType, StrategyType


class StrategyConfigResponse(BaseModel):
    """Persisted strategy settings plus the thresholds currently in effect."""

    active_strategy: StrategyType
    custom_roll_threshold: float
    custom_close_threshold: float
    roll_threshold: float = Field(..., description="Roll threshold in effect (%)")
    close_threshold: float = Field(..., description="Close threshold in effect (%)")
    dismissed_alerts: list[str] = Field(default_factory=list)
    dismissed_at: dict[str, int] = Field(
        default_factory=dict, description="Dismissal time per position (epoch ms)"
    )


class StrategyConfigUpdate(BaseModel):
    """Request schema for changing strategy settings.

    All fields are optional. Only provided fields will be updated.

    Example:
        >>> StrategyConfigUpdate(active_strategy="custom", custom_roll_threshold=5)
    """

    active_strategy: Optional[StrategyType] = None
    custom_roll_threshold: Optional[float] = Field(None, ge=1, le=10)
    custom_close_threshold: Optional[float] = Field(None, ge=50, le=90)

    model_config = {
        "json_schema_extra": {
            "example": {
                "active_strategy": "custom",
                "custom_roll_threshold": 5.0,
                "custom_close_threshold": 80.0,
            }
        }
    }


class AlertResponse(BaseModel):
    """One strategy alert."""

    position_id: str
    ticker: str
    option_type: OptionType
    alert_type: AlertType
    title: str
    message: str
    target_price: Optional[float] = None
    threshold: float
    current_distance: float = Field(..., description="Signed percent")
    urgency: AlertUrgency

    model_config = {"from_attributes": True}


class AlertListResponse(BaseModel):
    """Ranked alerts with a count of those hidden by dismissals."""

    alerts: list[AlertResponse]
    total: int
    dismissed_count: int = Field(0, description="Alerts hidden by dismissals")
