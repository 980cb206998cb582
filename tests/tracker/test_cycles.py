"""Tests for wheel cycle aggregation."""

from datetime import date

from src.tracker.cycles import calculate_wheel_cycles
from src.tracker.status import CycleStatus


class TestWheelCycles:
    """Test suite for calculate_wheel_cycles."""

    def test_open_and_closed_on_same_ticker(self, make_position):
        positions = [
            make_position(id="a", close_date=date(2026, 1, 20)),
            make_position(id="b"),
        ]

        cycles = calculate_wheel_cycles(positions)

        assert len(cycles) == 1
        cycle = cycles[0]
        assert cycle.name == "XYZ"
        assert cycle.open_positions == 1
        assert cycle.closed_positions == 1
        assert cycle.status == CycleStatus.ACTIVE

    def test_all_closed_is_completed(self, make_position):
        positions = [
            make_position(id="a", close_date=date(2026, 1, 20)),
            make_position(id="b", close_date=date(2026, 2, 20)),
        ]

        cycle = calculate_wheel_cycles(positions)[0]

        assert cycle.status == CycleStatus.COMPLETED
        assert cycle.realized_pl == 400.0
        assert cycle.total_pl == 400.0

    def test_assigned_leg_keeps_cycle_active(self, make_position):
        positions = [
            make_position(id="a", close_date=date(2026, 1, 20)),
            make_position(id="b", assigned=True, owns_stock=True, stock_cost_basis=98.0),
        ]

        cycle = calculate_wheel_cycles(positions)[0]

        assert cycle.open_positions == 1
        assert cycle.status == CycleStatus.ACTIVE

    def test_totals(self, make_position):
        positions = [
            make_position(
                id="a",
                close_date=date(2026, 1, 20),
                premium_paid_to_close=0.50,
                open_fees=1.0,
                close_fees=1.0,
            ),
            make_position(id="b", open_fees=1.0),
        ]

        cycle = calculate_wheel_cycles(positions)[0]

        assert cycle.realized_pl == 148.0
        assert cycle.unrealized_pl == 199.0
        assert cycle.total_pl == 347.0
        assert cycle.total_premium_collected == 350.0

    def test_unnamed_positions_grouped_as_uncategorized(self, make_position):
        cycles = calculate_wheel_cycles([make_position(wheel_cycle_name=None)])
        assert cycles[0].name == "Uncategorized"

    def test_active_first_then_total_pl(self, make_position):
        positions = [
            make_position(id="a", ticker="DONE", wheel_cycle_name="DONE",
                          premium=9.0, close_date=date(2026, 1, 20)),
            make_position(id="b", ticker="LOW", wheel_cycle_name="LOW", premium=1.0),
            make_position(id="c", ticker="HIGH", wheel_cycle_name="HIGH", premium=5.0),
        ]

        names = [c.name for c in calculate_wheel_cycles(positions)]

        assert names == ["HIGH", "LOW", "DONE"]

    def test_ties_keep_first_seen_order(self, make_position):
        positions = [
            make_position(id="a", ticker="BBB", wheel_cycle_name="BBB"),
            make_position(id="b", ticker="AAA", wheel_cycle_name="AAA"),
        ]

        names = [c.name for c in calculate_wheel_cycles(positions)]

        assert names == ["BBB", "AAA"]

    def test_empty_cycle_without_closed_positions_is_active(self, make_position):
        cycle = calculate_wheel_cycles([make_position()])[0]
        assert cycle.status == CycleStatus.ACTIVE
