"""Tests for strategy alert evaluation."""

from datetime import date

import pytest

from src.tracker.alerts import (
    alerts_for_position,
    calculate_all_alerts,
    calculate_close_alert,
    calculate_position_alerts,
    calculate_roll_alert,
    filter_dismissed,
    rank_alerts,
)
from src.tracker.models import StrategyAlert, StrategyConfig
from src.tracker.status import AlertType, AlertUrgency, OptionType, StrategyType
from src.tracker.strategy import STANDARD_STRATEGY


def _alert(position_id: str, urgency: AlertUrgency, distance: float) -> StrategyAlert:
    return StrategyAlert(
        position_id=position_id,
        ticker="XYZ",
        option_type=OptionType.PUT,
        alert_type=AlertType.ROLL,
        title="Roll Put",
        message="",
        threshold=3.0,
        current_distance=distance,
        urgency=urgency,
    )


class TestRollAlert:
    """Test suite for calculate_roll_alert."""

    @pytest.fixture
    def put(self, make_position):
        return make_position(open_fees=1.0)

    def test_roll_alert_high_urgency(self, put):
        """104 is 1% of strike past the 103 target."""
        alert = calculate_roll_alert(put, 104.0, STANDARD_STRATEGY)

        assert alert is not None
        assert alert.alert_type == AlertType.ROLL
        assert alert.urgency == AlertUrgency.HIGH
        assert alert.title == "Roll Put"
        assert alert.target_price == pytest.approx(103.0)
        assert alert.current_distance == pytest.approx(4.0)
        assert alert.threshold == 3.0
        assert "assignment" in alert.message

    def test_warning_inside_band(self, put):
        alert = calculate_roll_alert(put, 102.6, STANDARD_STRATEGY)

        assert alert is not None
        assert alert.alert_type == AlertType.WARNING
        assert alert.urgency == AlertUrgency.LOW
        assert alert.title == "Approaching Roll Threshold"

    def test_below_band_no_alert(self, put):
        assert calculate_roll_alert(put, 102.0, STANDARD_STRATEGY) is None

    @pytest.mark.parametrize(
        "price,urgency",
        [(103.1, AlertUrgency.LOW), (103.5, AlertUrgency.MEDIUM), (105.0, AlertUrgency.HIGH)],
    )
    def test_urgency_by_overshoot(self, put, price, urgency):
        alert = calculate_roll_alert(put, price, STANDARD_STRATEGY)
        assert alert.alert_type == AlertType.ROLL
        assert alert.urgency == urgency

    def test_call_title_and_message(self, make_position):
        call = make_position(option_type=OptionType.CALL)

        alert = calculate_roll_alert(call, 110.0, STANDARD_STRATEGY)

        assert alert.title == "Roll Call"
        assert "called away" in alert.message

    def test_custom_threshold(self, put):
        custom = StrategyConfig(StrategyType.CUSTOM, roll_threshold=5.0, close_threshold=80.0)

        assert calculate_roll_alert(put, 104.0, custom) is None
        assert calculate_roll_alert(put, 104.6, custom).alert_type == AlertType.WARNING
        assert calculate_roll_alert(put, 105.0, custom).alert_type == AlertType.ROLL

    def test_closed_position_never_alerts(self, make_position):
        closed = make_position(close_date=date(2026, 2, 1))
        assert calculate_roll_alert(closed, 150.0, STANDARD_STRATEGY) is None


class TestCloseAlert:
    """Test suite for calculate_close_alert."""

    def test_close_alert_medium(self, make_position):
        """Premium 2.00, option at 0.50: 75% captured."""
        alert = calculate_close_alert(make_position(), 0.50, STANDARD_STRATEGY)

        assert alert.alert_type == AlertType.CLOSE
        assert alert.urgency == AlertUrgency.MEDIUM
        assert alert.target_price == pytest.approx(0.50)
        assert alert.current_distance == pytest.approx(75.0)

    def test_close_alert_high(self, make_position):
        alert = calculate_close_alert(make_position(), 0.30, STANDARD_STRATEGY)
        assert alert.urgency == AlertUrgency.HIGH

    def test_not_enough_profit(self, make_position):
        assert calculate_close_alert(make_position(), 1.00, STANDARD_STRATEGY) is None

    def test_unknown_option_price(self, make_position):
        assert calculate_close_alert(make_position(), None, STANDARD_STRATEGY) is None

    def test_zero_premium_never_alerts(self, make_position):
        position = make_position(premium=0.0)
        assert calculate_close_alert(position, 0.0, STANDARD_STRATEGY) is None


class TestPositionAlerts:
    """Roll family and close checks run independently."""

    def test_roll_and_close_together(self, make_position):
        alerts = calculate_position_alerts(make_position(), 104.0, 0.30, STANDARD_STRATEGY)
        assert {a.alert_type for a in alerts} == {AlertType.ROLL, AlertType.CLOSE}

    def test_no_prices_no_alerts(self, make_position):
        assert calculate_position_alerts(make_position(), None, None, STANDARD_STRATEGY) == []

    def test_worthless_option_is_a_price(self, make_position):
        """An option marked at 0.00 has captured the full premium."""
        alerts = calculate_position_alerts(make_position(), None, 0.0, STANDARD_STRATEGY)

        assert [a.alert_type for a in alerts] == [AlertType.CLOSE]
        assert alerts[0].urgency == AlertUrgency.HIGH
        assert alerts[0].current_distance == pytest.approx(100.0)


class TestRanking:
    """Alerts sort by urgency, then by distance magnitude."""

    def test_rank_by_urgency_then_distance(self):
        alerts = [
            _alert("low", AlertUrgency.LOW, 10.0),
            _alert("med-small", AlertUrgency.MEDIUM, 3.3),
            _alert("high", AlertUrgency.HIGH, 4.0),
            _alert("med-big", AlertUrgency.MEDIUM, -5.0),
        ]

        ranked = [a.position_id for a in rank_alerts(alerts)]

        assert ranked == ["high", "med-big", "med-small", "low"]


class TestAllAlerts:
    """Test suite for calculate_all_alerts and dismissal views."""

    def test_evaluates_open_positions_only(self, make_position):
        positions = [
            make_position(id="open"),
            make_position(id="closed", close_date=date(2026, 2, 1)),
        ]

        alerts = calculate_all_alerts(positions, {"XYZ": 104.0}, None, STANDARD_STRATEGY)

        assert [a.position_id for a in alerts] == ["open"]

    def test_missing_price_skips_position(self, make_position):
        alerts = calculate_all_alerts(
            [make_position(ticker="ABC")], {"XYZ": 104.0}, None, STANDARD_STRATEGY
        )
        assert alerts == []

    def test_ranked_output(self, make_position):
        positions = [
            make_position(id="warn", ticker="AAA"),
            make_position(id="roll", ticker="BBB"),
        ]

        alerts = calculate_all_alerts(
            positions, {"AAA": 102.6, "BBB": 104.0}, None, STANDARD_STRATEGY
        )

        assert [a.position_id for a in alerts] == ["roll", "warn"]

    def test_option_prices_by_position_id(self, make_position):
        alerts = calculate_all_alerts(
            [make_position(id="p1")], {}, {"p1": 0.40}, STANDARD_STRATEGY
        )
        assert [a.alert_type for a in alerts] == [AlertType.CLOSE]

    def test_zero_option_price_by_position_id(self, make_position):
        alerts = calculate_all_alerts(
            [make_position(id="p1")], {}, {"p1": 0.0}, STANDARD_STRATEGY
        )

        assert [(a.alert_type, a.urgency) for a in alerts] == [
            (AlertType.CLOSE, AlertUrgency.HIGH)
        ]

    def test_filter_dismissed_and_detail_view(self):
        alerts = [_alert("a", AlertUrgency.HIGH, 4.0), _alert("b", AlertUrgency.LOW, 2.6)]

        assert [a.position_id for a in filter_dismissed(alerts, ["a"])] == ["b"]
        assert [a.position_id for a in alerts_for_position(alerts, "a")] == ["a"]
