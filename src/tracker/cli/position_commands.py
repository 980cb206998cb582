"""
Position management commands for the tracker CLI.

This module provides commands for recording, listing, viewing, editing
and deleting option positions.
"""

import sys
from datetime import date
from typing import Optional

import click
from pydantic import ValidationError as PydanticValidationError

from src.server.models.position import PositionCreate, PositionResponse, PositionUpdate
from src.server.services.position_service import PositionService

from ..exceptions import PositionNotFoundError
from ..status import OptionType, PositionStatus
from .utils import (
    format_validation_error,
    get_cli_context,
    print_error,
    print_json,
    print_position,
    print_position_row,
    print_success,
)

DATE = click.DateTime(formats=["%Y-%m-%d"])


def _as_date(value) -> Optional[date]:
    return value.date() if value is not None else None


@click.command()
@click.argument("ticker")
@click.argument("option_type", type=click.Choice(["put", "call"], case_sensitive=False))
@click.option("--strike", type=float, required=True, help="Strike price ($)")
@click.option("--premium", type=float, required=True, help="Premium received per share ($)")
@click.option("--expiration", type=DATE, required=True, help="Expiration date (YYYY-MM-DD)")
@click.option("--contracts", type=int, default=1, show_default=True, help="Number of contracts")
@click.option("--open-date", type=DATE, help="Date sold (default: today)")
@click.option("--fees", type=float, help="Commission paid to open ($)")
@click.option("--cycle", help="Wheel cycle name (default: ticker)")
@click.option("--owns-stock", is_flag=True, help="Stock is held (covered call)")
@click.option("--cost-basis", type=float, help="Stock cost per share ($)")
@click.option("--quantity", type=int, help="Shares held (default: contracts x 100)")
@click.option("--notes", help="Free-form notes")
@click.pass_context
def add(
    ctx: click.Context,
    ticker: str,
    option_type: str,
    strike: float,
    premium: float,
    expiration,
    contracts: int,
    open_date,
    fees: Optional[float],
    cycle: Optional[str],
    owns_stock: bool,
    cost_basis: Optional[float],
    quantity: Optional[int],
    notes: Optional[str],
) -> None:
    """
    Record a sold put or call.

    \b
    Examples:
      tracker add AAPL put --strike 150 --premium 2.50 --expiration 2026-03-20
      tracker add AAPL call --strike 160 --premium 1.20 --expiration 2026-04-17 \\
          --owns-stock --cost-basis 150
    """
    cli_ctx = get_cli_context(ctx)

    try:
        data = PositionCreate(
            ticker=ticker,
            option_type=option_type,
            contracts=contracts,
            strike=strike,
            premium=premium,
            open_date=_as_date(open_date) or date.today(),
            expiration=_as_date(expiration),
            open_fees=fees,
            wheel_cycle_name=cycle,
            owns_stock=owns_stock,
            stock_cost_basis=cost_basis,
            stock_quantity=quantity,
            notes=notes,
        )
    except PydanticValidationError as e:
        print_error(format_validation_error(e))
        sys.exit(1)

    with cli_ctx.session_factory() as db:
        row = PositionService(db).create_position(data)

        if cli_ctx.json:
            print_json(PositionResponse.model_validate(row))
            return

        print_success(
            f"Recorded {row.ticker} {row.option_type.upper()} ${row.strike:.2f} "
            f"x{row.contracts} (id {row.id})"
        )


@click.command()
@click.option("--ticker", help="Filter by ticker (substring, any case)")
@click.option("--type", "option_type", type=click.Choice(["put", "call"]), help="Filter by type")
@click.option(
    "--status",
    type=click.Choice(["open", "closed", "assigned"]),
    help="Filter by status",
)
@click.pass_context
def list_positions(
    ctx: click.Context,
    ticker: Optional[str],
    option_type: Optional[str],
    status: Optional[str],
) -> None:
    """List positions, newest first."""
    cli_ctx = get_cli_context(ctx)

    with cli_ctx.session_factory() as db:
        rows = PositionService(db).list_positions(
            ticker=ticker,
            option_type=OptionType(option_type) if option_type else None,
            status=PositionStatus(status) if status else None,
        )

        if cli_ctx.json:
            print_json([PositionResponse.model_validate(r) for r in rows])
            return

        if not rows:
            click.echo("No positions found.")
            return

        for row in rows:
            print_position_row(row)


@click.command()
@click.argument("position_id")
@click.pass_context
def show(ctx: click.Context, position_id: str) -> None:
    """Show one position in detail."""
    cli_ctx = get_cli_context(ctx)

    with cli_ctx.session_factory() as db:
        try:
            row = PositionService(db).get_position(position_id)
        except PositionNotFoundError as e:
            print_error(str(e))
            sys.exit(1)

        if cli_ctx.json:
            print_json(PositionResponse.model_validate(row))
            return

        print_position(row, verbose=cli_ctx.verbose)


@click.command()
@click.argument("position_id")
@click.option("--close-date", type=DATE, help="Date the option was closed")
@click.option("--close-price", type=float, help="Premium paid to close, per share ($)")
@click.option("--close-fees", type=float, help="Commission paid to close ($)")
@click.option("--reopen", is_flag=True, help="Clear the close date")
@click.option("--assigned/--not-assigned", default=None, help="Set the assignment flag")
@click.option("--owns-stock/--no-stock", default=None, help="Set stock ownership")
@click.option("--cost-basis", type=float, help="Stock cost per share ($)")
@click.option("--quantity", type=int, help="Shares held")
@click.option("--sale-price", type=float, help="Stock sale price per share ($)")
@click.option("--sale-date", type=DATE, help="Stock sale date")
@click.option("--cycle", help="Wheel cycle name")
@click.option("--notes", help="Free-form notes")
@click.pass_context
def update(
    ctx: click.Context,
    position_id: str,
    close_date,
    close_price: Optional[float],
    close_fees: Optional[float],
    reopen: bool,
    assigned: Optional[bool],
    owns_stock: Optional[bool],
    cost_basis: Optional[float],
    quantity: Optional[int],
    sale_price: Optional[float],
    sale_date,
    cycle: Optional[str],
    notes: Optional[str],
) -> None:
    """
    Update a position; status and P/L are recomputed.

    \b
    Examples:
      tracker update 3f2a... --close-date 2026-02-01 --close-price 0.40
      tracker update 3f2a... --assigned --owns-stock --cost-basis 150
      tracker update 3f2a... --reopen
    """
    cli_ctx = get_cli_context(ctx)

    if reopen and close_date:
        print_error("--reopen and --close-date are mutually exclusive")
        sys.exit(1)

    supplied = {
        "close_date": _as_date(close_date),
        "premium_paid_to_close": close_price,
        "close_fees": close_fees,
        "assigned": assigned,
        "owns_stock": owns_stock,
        "stock_cost_basis": cost_basis,
        "stock_quantity": quantity,
        "stock_sale_price": sale_price,
        "stock_sale_date": _as_date(sale_date),
        "wheel_cycle_name": cycle,
        "notes": notes,
    }
    changes = {k: v for k, v in supplied.items() if v is not None}
    if reopen:
        changes["close_date"] = None

    if not changes:
        print_error("Nothing to update")
        sys.exit(1)

    try:
        data = PositionUpdate(**changes)
    except PydanticValidationError as e:
        print_error(format_validation_error(e))
        sys.exit(1)

    with cli_ctx.session_factory() as db:
        try:
            row = PositionService(db).update_position(position_id, data)
        except PositionNotFoundError as e:
            print_error(str(e))
            sys.exit(1)

        if cli_ctx.json:
            print_json(PositionResponse.model_validate(row))
            return

        print_success(f"Updated {row.ticker} position {row.id} (status: {row.status})")


@click.command()
@click.argument("position_id")
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete(ctx: click.Context, position_id: str, yes: bool) -> None:
    """Delete a position."""
    cli_ctx = get_cli_context(ctx)

    if not yes:
        click.confirm(f"Delete position {position_id}?", abort=True)

    with cli_ctx.session_factory() as db:
        try:
            PositionService(db).delete_position(position_id)
        except PositionNotFoundError as e:
            print_error(str(e))
            sys.exit(1)

    print_success(f"Deleted position {position_id}")
