"""Repository for option position data access.

This module provides data access methods for position CRUD operations
and the filtered listings used by the API and the CLI.
"""

import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from src.server.database.models.position import OptionPosition

logger = logging.getLogger(__name__)


class PositionRepository:
    """Repository for position data access.

    Attributes:
        db: SQLAlchemy database session
    """

    def __init__(self, db: Session):
        """Initialize position repository.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def create_position(self, values: dict[str, Any]) -> OptionPosition:
        """Insert a new position.

        Args:
            values: Column values, derived fields already computed

        Returns:
            Created position instance
        """
        position = OptionPosition(**values)

        self.db.add(position)
        self.db.commit()
        self.db.refresh(position)

        logger.info(
            f"Created position: {position.id} - {position.ticker} "
            f"{position.option_type} ${position.strike} x {position.contracts}"
        )
        return position

    def get_position(self, position_id: str) -> Optional[OptionPosition]:
        """Get position by ID.

        Args:
            position_id: Position identifier

        Returns:
            Position instance if found, None otherwise
        """
        return self.db.query(OptionPosition).filter(OptionPosition.id == position_id).first()

    def list_positions(
        self,
        ticker: Optional[str] = None,
        option_type: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[OptionPosition]:
        """List positions with optional filtering, newest open date first.

        Args:
            ticker: Case-insensitive substring of the ticker
            option_type: "put" or "call"
            status: "open", "closed" or "assigned"

        Returns:
            List of position instances
        """
        query = self.db.query(OptionPosition)

        if ticker:
            query = query.filter(OptionPosition.ticker.contains(ticker.strip().upper()))
        if option_type is not None:
            query = query.filter(OptionPosition.option_type == option_type)
        if status is not None:
            query = query.filter(OptionPosition.status == status)

        return query.order_by(OptionPosition.open_date.desc()).all()

    def list_all_chronological(self) -> list[OptionPosition]:
        """All positions ordered by open date ascending.

        Returns:
            List of position instances, oldest first
        """
        return (
            self.db.query(OptionPosition)
            .order_by(OptionPosition.open_date.asc(), OptionPosition.created_at.asc())
            .all()
        )

    def update_position(
        self, position: OptionPosition, values: dict[str, Any]
    ) -> OptionPosition:
        """Overwrite columns of an existing position.

        Args:
            position: Position instance to update
            values: Column values to set

        Returns:
            Updated position instance
        """
        for column, value in values.items():
            setattr(position, column, value)

        self.db.commit()
        self.db.refresh(position)

        logger.info(f"Updated position: {position.id} (status={position.status})")
        return position

    def delete_position(self, position: OptionPosition) -> None:
        """Delete a position.

        Args:
            position: Position instance to delete
        """
        position_id = position.id
        self.db.delete(position)
        self.db.commit()
        logger.info(f"Deleted position: {position_id}")
