"""Service layer for position bookkeeping.

This module provides the business logic behind position writes: it
merges updates over the stored record, recomputes status and realized
P/L through the tracker's metrics calculator, and converts between ORM
rows and tracker Position dataclasses.
"""

import logging
from dataclasses import asdict
from datetime import datetime
from typing import Any, Optional

from sqlalchemy.orm import Session

from src.server.database.models.position import OptionPosition
from src.server.models.position import PositionCreate, PositionUpdate
from src.server.repositories.position import PositionRepository
from src.tracker.exceptions import PositionNotFoundError
from src.tracker.metrics import prepare_position
from src.tracker.models import Position
from src.tracker.status import OptionType, PositionStatus

logger = logging.getLogger(__name__)

# Columns written from a prepared Position (everything except bookkeeping)
_WRITABLE_FIELDS = (
    "ticker",
    "option_type",
    "contracts",
    "strike",
    "premium",
    "open_date",
    "expiration",
    "wheel_cycle_name",
    "continue_existing_wheel",
    "owns_stock",
    "stock_cost_basis",
    "stock_quantity",
    "stock_acquisition_date",
    "stock_sale_price",
    "stock_sale_date",
    "assigned",
    "open_fees",
    "close_date",
    "premium_paid_to_close",
    "close_fees",
    "notes",
    "status",
    "realized_pl",
    "premium_realized_pl",
    "stock_realized_pl",
    "unrealized_pl",
)


def to_domain(row: OptionPosition) -> Position:
    """Convert an ORM row to a tracker Position.

    Args:
        row: OptionPosition from the database

    Returns:
        Equivalent Position dataclass
    """
    return Position(
        id=row.id,
        ticker=row.ticker,
        option_type=OptionType(row.option_type),
        contracts=row.contracts,
        strike=row.strike,
        premium=row.premium,
        open_date=row.open_date,
        expiration=row.expiration,
        wheel_cycle_name=row.wheel_cycle_name,
        continue_existing_wheel=bool(row.continue_existing_wheel),
        owns_stock=bool(row.owns_stock),
        stock_cost_basis=row.stock_cost_basis,
        stock_quantity=row.stock_quantity,
        stock_acquisition_date=row.stock_acquisition_date,
        stock_sale_price=row.stock_sale_price,
        stock_sale_date=row.stock_sale_date,
        assigned=bool(row.assigned),
        open_fees=row.open_fees,
        close_date=row.close_date,
        premium_paid_to_close=row.premium_paid_to_close,
        close_fees=row.close_fees,
        notes=row.notes,
        status=PositionStatus(row.status),
        realized_pl=row.realized_pl,
        premium_realized_pl=row.premium_realized_pl,
        stock_realized_pl=row.stock_realized_pl,
        unrealized_pl=row.unrealized_pl,
        created_at=row.created_at or datetime.utcnow(),
        updated_at=row.updated_at or datetime.utcnow(),
    )


def to_columns(position: Position) -> dict[str, Any]:
    """Column values for a prepared Position, enums flattened to strings."""
    values = {name: getattr(position, name) for name in _WRITABLE_FIELDS}
    values["option_type"] = position.option_type.value
    values["status"] = position.status.value
    return values


class PositionService:
    """Service for creating, reading, updating and deleting positions.

    Attributes:
        db: SQLAlchemy database session
        repository: Position repository
    """

    def __init__(self, db: Session):
        """Initialize position service.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db
        self.repository = PositionRepository(db)

    def create_position(self, data: PositionCreate) -> OptionPosition:
        """Record a new position with derived fields computed.

        The wheel cycle name defaults to the ticker when not supplied.

        Args:
            data: Validated position fields

        Returns:
            Created position row
        """
        fields = data.model_dump()
        if not fields.get("wheel_cycle_name"):
            fields["wheel_cycle_name"] = fields["ticker"]

        position = prepare_position(Position(**fields))
        return self.repository.create_position(to_columns(position))

    def get_position(self, position_id: str) -> OptionPosition:
        """Get one position.

        Raises:
            PositionNotFoundError: If no position has this id
        """
        row = self.repository.get_position(position_id)
        if row is None:
            raise PositionNotFoundError(position_id)
        return row

    def list_positions(
        self,
        ticker: Optional[str] = None,
        option_type: Optional[OptionType] = None,
        status: Optional[PositionStatus] = None,
    ) -> list[OptionPosition]:
        """List positions, newest open date first."""
        return self.repository.list_positions(
            ticker=ticker,
            option_type=option_type.value if option_type else None,
            status=status.value if status else None,
        )

    def list_domain_positions(self) -> list[Position]:
        """Every position as tracker dataclasses, oldest open date first."""
        return [to_domain(row) for row in self.repository.list_all_chronological()]

    def update_position(self, position_id: str, data: PositionUpdate) -> OptionPosition:
        """Apply a partial update and recompute derived fields.

        Supplied fields are merged over the stored record before the
        recompute, so status always reflects the full merged state.
        Changing the ticker without naming a cycle moves the position to
        the cycle named after the new ticker.

        Raises:
            PositionNotFoundError: If no position has this id
        """
        row = self.get_position(position_id)
        changes = data.changes()

        if "ticker" in changes and "wheel_cycle_name" not in changes:
            changes["wheel_cycle_name"] = changes["ticker"]

        merged = {**asdict(to_domain(row)), **changes}
        position = prepare_position(Position(**merged))

        logger.debug(f"Updating position {position_id}: {sorted(changes)}")
        return self.repository.update_position(row, to_columns(position))

    def delete_position(self, position_id: str) -> None:
        """Delete one position.

        Raises:
            PositionNotFoundError: If no position has this id
        """
        row = self.get_position(position_id)
        self.repository.delete_position(row)
