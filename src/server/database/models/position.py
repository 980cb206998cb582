"""Option position database model.

Stores the raw trade fields entered by the user together with the
status and realized P/L derived from them on every write.
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, Float, Integer, String, Text

from src.server.database.session import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class OptionPosition(Base):
    """Option position model.

    Attributes:
        id: Unique identifier (uuid4 string)
        wheel_cycle_name: Cycle grouping label (defaults to the ticker)
        continue_existing_wheel: Informational flag set at entry time
        open_date: Date the option was sold
        expiration: Option expiration date
        ticker: Underlying ticker (uppercase)
        option_type: "put" or "call"
        contracts: Number of contracts (100 shares each)
        strike: Strike price
        premium: Premium received per share
        owns_stock: Whether the underlying stock is held
        stock_cost_basis: Per-share cost of held stock
        stock_quantity: Shares held
        stock_acquisition_date: Date the stock was acquired
        stock_sale_price: Per-share price the stock was sold at
        stock_sale_date: Date the stock was sold
        assigned: Assignment flag
        status: Derived status ("open", "closed", "assigned")
        open_fees: Commission paid to open
        close_date: Date the option was closed
        premium_paid_to_close: Per-share price paid to buy back
        close_fees: Commission paid to close
        notes: Free-form notes
        realized_pl: Derived total realized P/L
        premium_realized_pl: Derived realized P/L from premium
        stock_realized_pl: Derived realized P/L from the stock sale
        unrealized_pl: Reserved for mark-to-market snapshots
        created_at: Timestamp when the record was created
        updated_at: Timestamp when the record was last modified
    """

    __tablename__ = "option_positions"

    # Columns
    id = Column(String(36), primary_key=True, default=_new_id)
    wheel_cycle_name = Column(String, nullable=True, index=True)
    continue_existing_wheel = Column(Boolean, nullable=False, default=False)

    open_date = Column(Date, nullable=False, index=True)
    expiration = Column(Date, nullable=False)
    ticker = Column(String, nullable=False, index=True)
    option_type = Column(String, nullable=False)  # "put" or "call"
    contracts = Column(Integer, nullable=False)
    strike = Column(Float, nullable=False)
    premium = Column(Float, nullable=False)

    owns_stock = Column(Boolean, nullable=False, default=False)
    stock_cost_basis = Column(Float, nullable=True)
    stock_quantity = Column(Integer, nullable=True)
    stock_acquisition_date = Column(Date, nullable=True)
    stock_sale_price = Column(Float, nullable=True)
    stock_sale_date = Column(Date, nullable=True)

    assigned = Column(Boolean, nullable=False, default=False)
    status = Column(String, nullable=False, default="open", index=True)
    open_fees = Column(Float, nullable=True)
    close_date = Column(Date, nullable=True)
    premium_paid_to_close = Column(Float, nullable=True)
    close_fees = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)

    realized_pl = Column(Float, nullable=True)
    premium_realized_pl = Column(Float, nullable=True)
    stock_realized_pl = Column(Float, nullable=True)
    unrealized_pl = Column(Float, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation for debugging.

        Returns:
            Formatted string with position details
        """
        return (
            f"<OptionPosition(id={self.id}, ticker={self.ticker}, "
            f"type={self.option_type}, strike={self.strike}, status={self.status})>"
        )
