"""Pydantic models for position API requests and responses.

This module contains request and response schemas for position endpoints.
Validation here is the boundary: the calculators downstream assume the
numeric invariants checked below.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from src.tracker.status import OptionType, PositionStatus

# Fields the update schema may not clear with an explicit null
_REQUIRED_FIELDS = (
    "ticker",
    "option_type",
    "contracts",
    "strike",
    "premium",
    "open_date",
    "expiration",
    "owns_stock",
    "assigned",
    "continue_existing_wheel",
)


def _clean_ticker(v: str) -> str:
    v = v.strip().upper()
    if not 1 <= len(v) <= 10:
        raise ValueError("Ticker must be 1-10 characters")
    return v


def _clean_option_type(v):
    if isinstance(v, str):
        v = v.strip().lower()
        if v not in ("put", "call"):
            raise ValueError('Option type must be "put" or "call"')
    return v


class PositionCreate(BaseModel):
    """Request schema for recording a new option position.

    Example:
        >>> PositionCreate(
        >>>     ticker="AAPL",
        >>>     option_type="put",
        >>>     contracts=1,
        >>>     strike=150.0,
        >>>     premium=2.50,
        >>>     open_date="2026-01-05",
        >>>     expiration="2026-02-20",
        >>> )
    """

    ticker: str = Field(..., description="Underlying ticker symbol")
    option_type: OptionType = Field(..., description="Option type: 'put' or 'call'")
    contracts: int = Field(..., gt=0, description="Number of contracts")
    strike: float = Field(..., gt=0, description="Strike price")
    premium: float = Field(..., ge=0, description="Premium received per share")
    open_date: date = Field(..., description="Date the option was sold")
    expiration: date = Field(..., description="Option expiration date")

    wheel_cycle_name: Optional[str] = Field(
        None, max_length=100, description="Wheel cycle label (defaults to ticker)"
    )
    continue_existing_wheel: bool = Field(False, description="Continues an existing wheel")

    owns_stock: bool = Field(False, description="Whether the stock is held")
    stock_cost_basis: Optional[float] = Field(None, gt=0, description="Per-share stock cost")
    stock_quantity: Optional[int] = Field(None, gt=0, description="Shares held")
    stock_acquisition_date: Optional[date] = Field(None, description="Stock acquisition date")
    stock_sale_price: Optional[float] = Field(None, gt=0, description="Per-share sale price")
    stock_sale_date: Optional[date] = Field(None, description="Stock sale date")

    assigned: bool = Field(False, description="Whether the option was assigned")
    open_fees: Optional[float] = Field(None, ge=0, description="Commission to open")
    close_date: Optional[date] = Field(None, description="Date the option was closed")
    premium_paid_to_close: Optional[float] = Field(
        None, ge=0, description="Per-share price paid to close"
    )
    close_fees: Optional[float] = Field(None, ge=0, description="Commission to close")
    notes: Optional[str] = Field(None, max_length=1000, description="Free-form notes")

    @field_validator("ticker")
    @classmethod
    def validate_ticker(cls, v: str) -> str:
        """Normalize ticker to uppercase and check its length."""
        return _clean_ticker(v)

    @field_validator("option_type", mode="before")
    @classmethod
    def validate_option_type(cls, v):
        """Accept option type in any case."""
        return _clean_option_type(v)

    model_config = {
        "json_schema_extra": {
            "example": {
                "ticker": "AAPL",
                "option_type": "put",
                "contracts": 1,
                "strike": 150.0,
                "premium": 2.50,
                "open_date": "2026-01-05",
                "expiration": "2026-02-20",
                "open_fees": 0.65,
            }
        }
    }


class PositionUpdate(BaseModel):
    """Request schema for updating a position.

    All fields are optional. Only provided fields will be updated; an
    explicit null clears a nullable field (e.g. close_date reopens a
    closed position).

    Example:
        >>> PositionUpdate(close_date="2026-02-01", premium_paid_to_close=0.40)
    """

    ticker: Optional[str] = None
    option_type: Optional[OptionType] = None
    contracts: Optional[int] = Field(None, gt=0)
    strike: Optional[float] = Field(None, gt=0)
    premium: Optional[float] = Field(None, ge=0)
    open_date: Optional[date] = None
    expiration: Optional[date] = None

    wheel_cycle_name: Optional[str] = Field(None, max_length=100)
    continue_existing_wheel: Optional[bool] = None

    owns_stock: Optional[bool] = None
    stock_cost_basis: Optional[float] = Field(None, gt=0)
    stock_quantity: Optional[int] = Field(None, gt=0)
    stock_acquisition_date: Optional[date] = None
    stock_sale_price: Optional[float] = Field(None, gt=0)
    stock_sale_date: Optional[date] = None

    assigned: Optional[bool] = None
    open_fees: Optional[float] = Field(None, ge=0)
    close_date: Optional[date] = None
    premium_paid_to_close: Optional[float] = Field(None, ge=0)
    close_fees: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator(*_REQUIRED_FIELDS)
    @classmethod
    def reject_null(cls, v):
        """Required position fields can be changed but not cleared."""
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @field_validator("ticker")
    @classmethod
    def validate_ticker(cls, v: str) -> str:
        """Normalize ticker to uppercase and check its length."""
        return _clean_ticker(v)

    @field_validator("option_type", mode="before")
    @classmethod
    def validate_option_type(cls, v):
        """Accept option type in any case."""
        return _clean_option_type(v)

    def changes(self) -> dict:
        """Fields explicitly supplied by the caller, nulls included."""
        return self.model_dump(exclude_unset=True)

    model_config = {
        "json_schema_extra": {
            "example": {
                "close_date": "2026-02-01",
                "premium_paid_to_close": 0.40,
                "close_fees": 0.65,
            }
        }
    }


class PositionResponse(BaseModel):
    """Response schema for position data, derived fields included."""

    id: str = Field(..., description="Unique position identifier")
    ticker: str
    option_type: OptionType
    contracts: int
    strike: float
    premium: float
    open_date: date
    expiration: date

    wheel_cycle_name: Optional[str] = None
    continue_existing_wheel: bool = False

    owns_stock: bool = False
    stock_cost_basis: Optional[float] = None
    stock_quantity: Optional[int] = None
    stock_acquisition_date: Optional[date] = None
    stock_sale_price: Optional[float] = None
    stock_sale_date: Optional[date] = None

    assigned: bool = False
    status: PositionStatus = Field(..., description="Derived lifecycle status")
    open_fees: Optional[float] = None
    close_date: Optional[date] = None
    premium_paid_to_close: Optional[float] = None
    close_fees: Optional[float] = None
    notes: Optional[str] = None

    realized_pl: Optional[float] = None
    premium_realized_pl: Optional[float] = None
    stock_realized_pl: Optional[float] = None
    unrealized_pl: Optional[float] = None

    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
