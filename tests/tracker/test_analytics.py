"""Tests for portfolio analytics."""

from datetime import date

import pytest

from src.tracker.analytics import (
    calculate_cumulative_pl,
    calculate_portfolio_analytics,
    calculate_premium_over_time,
    calculate_premium_per_ticker,
    calculate_ticker_returns,
    calculate_win_rates,
)
from src.tracker.status import OptionType


@pytest.fixture
def portfolio(make_position):
    """Two closed XYZ puts, an open ABC covered call and an assigned ABC put.

    Realized: +150 (closed 02-01), -100 (closed 01-20), +150 assigned
    premium. ABC stock held: 200 @ 48 plus 100 @ 50 = $14,600.
    """
    return [
        make_position(id="win", close_date=date(2026, 2, 1), premium_paid_to_close=0.50),
        make_position(id="loss", close_date=date(2026, 1, 20), premium_paid_to_close=3.00),
        make_position(
            id="call",
            ticker="ABC",
            option_type=OptionType.CALL,
            contracts=2,
            strike=50.0,
            premium=1.00,
            open_date=date(2026, 2, 3),
            owns_stock=True,
            stock_cost_basis=48.0,
        ),
        make_position(
            id="assigned",
            ticker="ABC",
            strike=50.0,
            premium=1.50,
            open_date=date(2026, 1, 10),
            assigned=True,
            owns_stock=True,
            stock_cost_basis=50.0,
            stock_quantity=100,
        ),
    ]


class TestWinRates:
    """Test suite for calculate_win_rates."""

    def test_closed_positions_only(self, portfolio):
        rates = calculate_win_rates(portfolio)

        assert len(rates) == 1
        assert rates[0].ticker == "XYZ"
        assert (rates[0].wins, rates[0].total) == (1, 2)
        assert rates[0].win_rate == 50.0

    def test_breakeven_is_not_a_win(self, make_position):
        flat = make_position(close_date=date(2026, 2, 1), premium_paid_to_close=2.00)

        assert calculate_win_rates([flat])[0].win_rate == 0.0

    def test_sorted_by_rate(self, make_position):
        positions = [
            make_position(id="a", ticker="AAA", close_date=date(2026, 2, 1),
                          premium_paid_to_close=3.0),
            make_position(id="b", ticker="BBB", close_date=date(2026, 2, 1)),
        ]

        assert [r.ticker for r in calculate_win_rates(positions)] == ["BBB", "AAA"]


class TestPremiumBreakdowns:
    """Premium per ticker and per month."""

    def test_premium_per_ticker(self, portfolio):
        premiums = calculate_premium_per_ticker(portfolio)

        assert [(p.ticker, p.premium) for p in premiums] == [("XYZ", 400.0), ("ABC", 350.0)]

    def test_premium_over_time_split_by_type(self, portfolio):
        periods = calculate_premium_over_time(portfolio)

        assert [(p.period, p.puts, p.calls) for p in periods] == [
            ("2026-01", 550.0, 0.0),
            ("2026-02", 0.0, 200.0),
        ]


class TestCumulativePL:
    """Test suite for calculate_cumulative_pl."""

    def test_ordered_by_close_date(self, portfolio):
        points = calculate_cumulative_pl(portfolio)

        assert [p.close_date for p in points] == [date(2026, 1, 20), date(2026, 2, 1)]
        assert [p.realized_pl for p in points] == [-100.0, 150.0]
        assert [p.cumulative_pl for p in points] == [-100.0, 50.0]

    def test_open_and_assigned_excluded(self, make_position):
        assigned = make_position(assigned=True, owns_stock=True, stock_cost_basis=100.0)

        assert calculate_cumulative_pl([make_position(), assigned]) == []


class TestReturns:
    """ROI against the cost basis of stock held."""

    def test_ticker_returns(self, portfolio):
        returns = calculate_ticker_returns(portfolio)

        assert len(returns) == 1
        assert returns[0].ticker == "ABC"
        assert returns[0].realized_pl == 150.0
        assert returns[0].capital == 14600.0
        assert returns[0].roi == pytest.approx(1.03)

    def test_portfolio_analytics(self, portfolio):
        analytics = calculate_portfolio_analytics(portfolio)

        assert analytics.total_realized == 200.0
        assert analytics.total_capital == 14600.0
        assert analytics.total_roi == pytest.approx(1.37)
        assert analytics.daily_roi == pytest.approx(0.0457)
        assert analytics.annualized_roi == pytest.approx(16.67)
        assert [r.ticker for r in analytics.win_rates] == ["XYZ"]
        assert len(analytics.cumulative_pl) == 2

    def test_no_stock_held_means_zero_rates(self, make_position):
        closed = make_position(close_date=date(2026, 2, 1))

        analytics = calculate_portfolio_analytics([closed])

        assert analytics.total_realized == 200.0
        assert analytics.total_capital == 0.0
        assert analytics.total_roi == 0.0
        assert analytics.annualized_roi == 0.0
        assert analytics.ticker_returns == []

    def test_empty_portfolio(self):
        analytics = calculate_portfolio_analytics([])

        assert analytics.total_realized == 0.0
        assert analytics.premium_per_ticker == []
        assert analytics.premium_over_time == []
