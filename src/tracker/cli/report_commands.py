"""
Reporting commands for the tracker CLI.

This module provides portfolio metrics, analytics, wheel cycle and stock
holding reports.
"""

import click

from src.server.models.reports import (
    AnalyticsResponse,
    PortfolioMetricsResponse,
    StockHoldingResponse,
    WheelCycleResponse,
)
from src.server.services.report_service import ReportService

from .utils import (
    get_cli_context,
    print_analytics,
    print_cycle,
    print_holding,
    print_json,
    print_metrics,
)


@click.command()
@click.pass_context
def metrics(ctx: click.Context) -> None:
    """Show portfolio-wide P/L, premium and capital metrics."""
    cli_ctx = get_cli_context(ctx)

    with cli_ctx.session_factory() as db:
        result = ReportService(db, cli_ctx.oracle).portfolio_metrics()

    if cli_ctx.json:
        print_json(PortfolioMetricsResponse.model_validate(result))
        return

    print_metrics(result)


@click.command()
@click.pass_context
def cycles(ctx: click.Context) -> None:
    """Show wheel cycles, active first."""
    cli_ctx = get_cli_context(ctx)

    with cli_ctx.session_factory() as db:
        result = ReportService(db, cli_ctx.oracle).wheel_cycles()

    if cli_ctx.json:
        print_json([WheelCycleResponse.model_validate(c) for c in result])
        return

    if not result:
        click.echo("No wheel cycles yet.")
        return

    for cycle in result:
        print_cycle(cycle)


@click.command()
@click.pass_context
def holdings(ctx: click.Context) -> None:
    """Show stock currently held, marked to market."""
    cli_ctx = get_cli_context(ctx)

    with cli_ctx.session_factory() as db:
        result = ReportService(db, cli_ctx.oracle).stock_holdings()

    if cli_ctx.json:
        print_json([StockHoldingResponse.model_validate(h) for h in result])
        return

    if not result:
        click.echo("No stock holdings.")
        return

    for holding in result:
        print_holding(holding)


@click.command()
@click.pass_context
def analytics(ctx: click.Context) -> None:
    """Show ROI, win rates and premium collected by ticker and month."""
    cli_ctx = get_cli_context(ctx)

    with cli_ctx.session_factory() as db:
        result = ReportService(db, cli_ctx.oracle).analytics()

    if cli_ctx.json:
        print_json(AnalyticsResponse.model_validate(result))
        return

    print_analytics(result)
