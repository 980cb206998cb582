"""Position API endpoints.

This module provides REST API endpoints for recording, listing, editing
and deleting option positions, plus the per-position alert view.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from src.server.database.session import get_db
from src.server.models.position import PositionCreate, PositionResponse, PositionUpdate
from src.server.models.strategy import AlertResponse
from src.server.services.alert_service import AlertService
from src.server.services.position_service import PositionService
from src.server.services.price_service import get_price_oracle
from src.tracker.exceptions import PositionNotFoundError
from src.tracker.pricing import StockPriceOracle
from src.tracker.status import OptionType, PositionStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/positions", tags=["positions"])


def _not_found(e: PositionNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post(
    "",
    response_model=PositionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a new position",
    description="Records a sold put or call; status and realized P/L are derived",
)
def create_position(
    position: PositionCreate,
    db: Session = Depends(get_db),
) -> PositionResponse:
    """Record a new option position.

    Example:
        >>> POST /api/v1/positions
        >>> {
        >>>     "ticker": "AAPL",
        >>>     "option_type": "put",
        >>>     "contracts": 1,
        >>>     "strike": 150.0,
        >>>     "premium": 2.50,
        >>>     "open_date": "2026-01-05",
        >>>     "expiration": "2026-02-20"
        >>> }
    """
    created = PositionService(db).create_position(position)
    return PositionResponse.model_validate(created)


@router.get(
    "",
    response_model=list[PositionResponse],
    status_code=status.HTTP_200_OK,
    summary="List positions",
    description="Lists positions, newest open date first, with optional filters",
)
def list_positions(
    ticker: Optional[str] = Query(None, description="Ticker substring (any case)"),
    option_type: Optional[OptionType] = Query(None, description="put or call"),
    position_status: Optional[PositionStatus] = Query(
        None, alias="status", description="open, closed or assigned"
    ),
    db: Session = Depends(get_db),
) -> list[PositionResponse]:
    """List positions with optional filtering."""
    rows = PositionService(db).list_positions(
        ticker=ticker, option_type=option_type, status=position_status
    )
    return [PositionResponse.model_validate(row) for row in rows]


@router.get(
    "/{position_id}",
    response_model=PositionResponse,
    status_code=status.HTTP_200_OK,
    summary="Get position",
)
def get_position(position_id: str, db: Session = Depends(get_db)) -> PositionResponse:
    """Get one position by id.

    Raises:
        HTTPException: 404 if the position does not exist
    """
    try:
        return PositionResponse.model_validate(PositionService(db).get_position(position_id))
    except PositionNotFoundError as e:
        raise _not_found(e) from e


@router.patch(
    "/{position_id}",
    response_model=PositionResponse,
    status_code=status.HTTP_200_OK,
    summary="Update position",
    description="Partially updates a position and recomputes status and P/L",
)
def update_position(
    position_id: str,
    update: PositionUpdate,
    db: Session = Depends(get_db),
) -> PositionResponse:
    """Update a position.

    Only supplied fields change; explicit nulls clear nullable fields.

    Example:
        >>> PATCH /api/v1/positions/3f2a...
        >>> {"close_date": "2026-02-01", "premium_paid_to_close": 0.40}

    Raises:
        HTTPException: 404 if the position does not exist
    """
    try:
        updated = PositionService(db).update_position(position_id, update)
        return PositionResponse.model_validate(updated)
    except PositionNotFoundError as e:
        raise _not_found(e) from e


@router.delete(
    "/{position_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete position",
)
def delete_position(position_id: str, db: Session = Depends(get_db)) -> Response:
    """Delete a position.

    Raises:
        HTTPException: 404 if the position does not exist
    """
    try:
        PositionService(db).delete_position(position_id)
    except PositionNotFoundError as e:
        raise _not_found(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{position_id}/alerts",
    response_model=list[AlertResponse],
    status_code=status.HTTP_200_OK,
    summary="Get alerts for a position",
    description="Evaluates alerts for one position, including dismissed ones",
)
def get_position_alerts(
    position_id: str,
    db: Session = Depends(get_db),
    oracle: StockPriceOracle = Depends(get_price_oracle),
) -> list[AlertResponse]:
    """Alerts for one position.

    Raises:
        HTTPException: 404 if the position does not exist
    """
    try:
        alerts = AlertService(db, oracle).position_alerts(position_id)
    except PositionNotFoundError as e:
        raise _not_found(e) from e
    return [AlertResponse.model_validate(a) for a in alerts]
