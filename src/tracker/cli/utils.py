"""
CLI utility functions for the options tracker.

This module provides helper functions for formatting output, displaying
positions, reports and alerts, and reaching the CLI context.
"""

import json
from typing import Any

import click
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..models import (
    PortfolioAnalytics,
    PortfolioMetrics,
    StockHolding,
    StrategyAlert,
    WheelCycle,
)
from ..status import AlertUrgency, PositionStatus

URGENCY_COLORS = {
    AlertUrgency.HIGH: "red",
    AlertUrgency.MEDIUM: "yellow",
    AlertUrgency.LOW: "cyan",
}


def get_cli_context(ctx: click.Context):
    """Get the CLIContext from the click context."""
    return ctx.obj


def print_error(message: str) -> None:
    """Print error message to stderr."""
    click.secho(f"Error: {message}", fg="red", err=True)


def print_success(message: str) -> None:
    """Print success message."""
    click.secho(message, fg="green")


def print_warning(message: str) -> None:
    """Print warning message."""
    click.secho(f"Warning: {message}", fg="yellow")


def print_json(data: Any) -> None:
    """Print a pydantic model, a list of them, or plain data as JSON."""
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json")
    elif isinstance(data, list):
        data = [d.model_dump(mode="json") if isinstance(d, BaseModel) else d for d in data]
    click.echo(json.dumps(data, indent=2, default=str))


def format_validation_error(error: PydanticValidationError) -> str:
    """One line per invalid field, e.g. 'strike: Input should be greater than 0'."""
    lines = []
    for err in error.errors():
        field = ".".join(str(part) for part in err["loc"]) or "input"
        lines.append(f"{field}: {err['msg']}")
    return "; ".join(lines)


def format_money(value) -> str:
    """Format a dollar amount, or '-' when unknown."""
    if value is None:
        return "-"
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def get_status_icon(status: PositionStatus) -> str:
    """Get status tag for a position."""
    return {
        PositionStatus.OPEN: "[OPEN]",
        PositionStatus.CLOSED: "[CLOSED]",
        PositionStatus.ASSIGNED: "[ASSIGNED]",
    }.get(status, "[?]")


def print_position_row(position) -> None:
    """Print one position as a single table row."""
    status = PositionStatus(position.status)
    click.echo(
        f"{position.id[:8]}  {position.ticker:<6} {position.option_type.upper():<4} "
        f"${position.strike:>8.2f} x{position.contracts:<3} "
        f"exp {position.expiration}  {get_status_icon(status):<10} "
        f"{format_money(position.realized_pl)}"
    )


def print_position(position, verbose: bool = False) -> None:
    """Print position details in a formatted way."""
    status = PositionStatus(position.status)
    gross = position.premium * position.contracts * 100

    click.echo()
    click.secho(
        f"=== {position.ticker} {position.option_type.upper()} ${position.strike:.2f} ===",
        bold=True,
    )
    click.echo(f"ID:         {position.id}")
    click.echo(f"Status:     {status.value}")
    click.echo(f"Cycle:      {position.wheel_cycle_name or 'Uncategorized'}")
    click.echo(f"Opened:     {position.open_date}")
    click.echo(f"Expiration: {position.expiration}")
    click.echo(f"Contracts:  {position.contracts}")
    click.echo(f"Premium:    ${position.premium:.2f}/share ({format_money(gross)} total)")

    if position.owns_stock:
        click.echo(
            f"Stock:      {position.stock_quantity or 0} shares @ "
            f"{format_money(position.stock_cost_basis)}"
        )
        if position.stock_sale_price:
            click.echo(f"Sold at:    {format_money(position.stock_sale_price)}")

    if position.close_date:
        click.echo(f"Closed:     {position.close_date}")
        click.echo(f"Paid close: {format_money(position.premium_paid_to_close)}/share")

    if status != PositionStatus.OPEN:
        click.echo()
        click.echo(f"Realized P/L:  {format_money(position.realized_pl)}")
        click.echo(f"  Premium:     {format_money(position.premium_realized_pl)}")
        click.echo(f"  Stock:       {format_money(position.stock_realized_pl)}")

    if verbose:
        click.echo()
        click.echo(f"Open fees:  {format_money(position.open_fees)}")
        click.echo(f"Close fees: {format_money(position.close_fees)}")
        click.echo(f"Created:    {position.created_at.strftime('%Y-%m-%d %H:%M')}")
        click.echo(f"Updated:    {position.updated_at.strftime('%Y-%m-%d %H:%M')}")
        if position.notes:
            click.echo(f"Notes:      {position.notes}")


def print_metrics(metrics: PortfolioMetrics) -> None:
    """Print portfolio metrics in a formatted way."""
    click.echo()
    click.secho("=== Portfolio ===", bold=True)
    click.echo(
        f"Positions:        {metrics.total_positions} "
        f"({metrics.open_positions} open, {metrics.closed_positions} closed, "
        f"{metrics.assigned_positions} assigned)"
    )
    click.echo()
    click.echo(f"Realized P/L:     {format_money(metrics.realized_pl)}")
    click.echo(f"  Premium:        {format_money(metrics.premium_realized_pl)}")
    click.echo(f"  Stock:          {format_money(metrics.stock_realized_pl)}")
    click.echo(f"Unrealized P/L:   {format_money(metrics.unrealized_pl)}")
    click.echo(f"  Premium:        {format_money(metrics.premium_unrealized_pl)}")
    click.echo(f"  Stock:          {format_money(metrics.stock_unrealized_pl)}")
    click.echo()
    click.echo(f"Open Premium:     {format_money(metrics.open_premium_collected)}")
    click.echo(f"Closed Premium:   {format_money(metrics.closed_premium_collected)}")
    click.echo(f"Capital:          {format_money(metrics.total_capital_allocated)}")
    click.echo(f"Fees:             {format_money(metrics.total_fees)}")


def print_analytics(analytics: PortfolioAnalytics) -> None:
    """Print returns, win rates and premium breakdowns."""
    click.echo()
    click.secho("=== Returns ===", bold=True)
    click.echo(f"Realized P/L:     {format_money(analytics.total_realized)}")
    click.echo(f"Stock Capital:    {format_money(analytics.total_capital)}")
    click.echo(f"Total ROI:        {analytics.total_roi:.2f}%")
    click.echo(f"Daily ROI:        {analytics.daily_roi:.4f}%")
    click.echo(f"Annualized ROI:   {analytics.annualized_roi:.2f}%")
    for ret in analytics.ticker_returns:
        click.echo(
            f"  {ret.ticker:<8} {ret.roi:>7.2f}%  "
            f"{format_money(ret.realized_pl):>11} on {format_money(ret.capital)}"
        )

    if analytics.win_rates:
        click.echo()
        click.secho("=== Win Rate ===", bold=True)
        for rate in analytics.win_rates:
            click.echo(
                f"  {rate.ticker:<8} {rate.win_rate:>6.1f}%  ({rate.wins}/{rate.total} closed)"
            )

    if analytics.premium_per_ticker:
        click.echo()
        click.secho("=== Premium by Ticker ===", bold=True)
        for item in analytics.premium_per_ticker:
            click.echo(f"  {item.ticker:<8} {format_money(item.premium):>11}")

    if analytics.premium_over_time:
        click.echo()
        click.secho("=== Premium by Month ===", bold=True)
        for period in analytics.premium_over_time:
            click.echo(
                f"  {period.period}  puts {format_money(period.puts):>11}  "
                f"calls {format_money(period.calls):>11}"
            )

    if analytics.cumulative_pl:
        click.echo()
        click.secho("=== Cumulative Realized P/L ===", bold=True)
        for point in analytics.cumulative_pl:
            click.echo(
                f"  {point.close_date.isoformat()}  {format_money(point.realized_pl):>11}  "
                f"total {format_money(point.cumulative_pl):>11}"
            )


def print_cycle(cycle: WheelCycle) -> None:
    """Print one wheel cycle summary."""
    click.echo(
        f"{cycle.name:<14} {cycle.status.value:<10} "
        f"{cycle.open_positions} open / {cycle.closed_positions} closed  "
        f"premium {format_money(cycle.total_premium_collected):>11}  "
        f"P/L {format_money(cycle.total_pl):>11}"
    )


def print_holding(holding: StockHolding) -> None:
    """Print one stock holding."""
    click.echo(
        f"{holding.ticker:<6} {holding.quantity:>6} sh @ {format_money(holding.cost_basis):>10}  "
        f"price {format_money(holding.current_price):>10}  "
        f"P/L {format_money(holding.unrealized_pl):>11}"
    )


def print_alert(alert: StrategyAlert) -> None:
    """Print one alert, colored by urgency."""
    color = URGENCY_COLORS.get(alert.urgency)
    click.secho(
        f"[{alert.urgency.value.upper()}] {alert.ticker} {alert.title}",
        fg=color,
        bold=alert.urgency == AlertUrgency.HIGH,
    )
    click.echo(f"  {alert.message}")
    if alert.target_price is not None:
        click.echo(f"  Target: ${alert.target_price:.2f} (threshold {alert.threshold:g}%)")
    click.echo(f"  Position: {alert.position_id}")
