"""Shared fixtures for tracker unit tests."""

from datetime import date

import pytest

from src.tracker.metrics import prepare_position
from src.tracker.models import Position
from src.tracker.status import OptionType


@pytest.fixture
def make_position():
    """Factory for prepared positions with sensible defaults.

    Example:
        >>> def test_something(make_position):
        >>>     closed = make_position(close_date=date(2026, 2, 1))
    """

    def _make(**overrides) -> Position:
        fields = {
            "id": "pos-1",
            "ticker": "XYZ",
            "option_type": OptionType.PUT,
            "contracts": 1,
            "strike": 100.0,
            "premium": 2.00,
            "open_date": date(2026, 1, 5),
            "expiration": date(2026, 2, 20),
            "wheel_cycle_name": "XYZ",
        }
        fields.update(overrides)
        return prepare_position(Position(**fields))

    return _make
