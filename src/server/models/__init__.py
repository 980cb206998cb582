"""Pydantic request and response models."""

from src.server.models.common import ErrorResponse, HealthResponse, InfoResponse
from src.server.models.position import PositionCreate, PositionResponse, PositionUpdate
from src.server.models.reports import (
    PortfolioMetricsResponse,
    StockHoldingResponse,
    StockPriceResponse,
    WheelCycleResponse,
)
from src.server.models.strategy import (
    AlertListResponse,
    AlertResponse,
    StrategyConfigResponse,
    StrategyConfigUpdate,
)

__all__ = [
    # Common models
    "HealthResponse",
    "InfoResponse",
    "ErrorResponse",
    # Position models
    "PositionCreate",
    "PositionUpdate",
    "PositionResponse",
    # Report models
    "PortfolioMetricsResponse",
    "WheelCycleResponse",
    "StockHoldingResponse",
    "StockPriceResponse",
    # Strategy models
    "StrategyConfigResponse",
    "StrategyConfigUpdate",
    "AlertResponse",
    "AlertListResponse",
]
