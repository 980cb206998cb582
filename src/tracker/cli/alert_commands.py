"""
Alert and strategy commands for the tracker CLI.

This module provides commands for viewing strategy alerts, dismissing
them for 24 hours and switching between the standard and a custom
threshold set.
"""

import sys
from datetime import datetime
from typing import Optional

import click

from src.server.models.strategy import AlertResponse
from src.server.services.alert_service import AlertService

from ..exceptions import PersistenceError, PositionNotFoundError, ValidationError
from ..status import StrategyType
from ..strategy import get_strategy_config, user_config_to_dict
from .utils import get_cli_context, print_alert, print_error, print_json, print_success


def _service(cli_ctx, db) -> AlertService:
    return AlertService(db, cli_ctx.oracle, store=cli_ctx.strategy_store)


@click.command()
@click.option("--all", "include_dismissed", is_flag=True, help="Include dismissed alerts")
@click.pass_context
def alerts(ctx: click.Context, include_dismissed: bool) -> None:
    """Evaluate alerts for every open position."""
    cli_ctx = get_cli_context(ctx)

    with cli_ctx.session_factory() as db:
        found, hidden = _service(cli_ctx, db).list_alerts(include_dismissed)

    if cli_ctx.json:
        print_json([AlertResponse.model_validate(a) for a in found])
        return

    if not found:
        click.echo("No alerts.")
    for alert in found:
        click.echo()
        print_alert(alert)

    if hidden:
        click.echo()
        click.echo(f"{hidden} dismissed alert(s) hidden (use --all to show)")


@click.command()
@click.argument("position_id")
@click.pass_context
def dismiss(ctx: click.Context, position_id: str) -> None:
    """Hide alerts for a position for 24 hours."""
    cli_ctx = get_cli_context(ctx)

    with cli_ctx.session_factory() as db:
        try:
            _service(cli_ctx, db).dismiss(position_id)
        except (PositionNotFoundError, PersistenceError) as e:
            print_error(str(e))
            sys.exit(1)

    print_success(f"Dismissed alerts for {position_id} for 24 hours")


@click.command()
@click.argument("position_id")
@click.pass_context
def undismiss(ctx: click.Context, position_id: str) -> None:
    """Show alerts for a position again."""
    cli_ctx = get_cli_context(ctx)

    with cli_ctx.session_factory() as db:
        try:
            _service(cli_ctx, db).undismiss(position_id)
        except PersistenceError as e:
            print_error(str(e))
            sys.exit(1)

    print_success(f"Restored alerts for {position_id}")


@click.command()
@click.pass_context
def clear_dismissed(ctx: click.Context) -> None:
    """Restore every dismissed alert."""
    cli_ctx = get_cli_context(ctx)

    with cli_ctx.session_factory() as db:
        try:
            _service(cli_ctx, db).clear_dismissed()
        except PersistenceError as e:
            print_error(str(e))
            sys.exit(1)

    print_success("All dismissed alerts restored")


@click.command()
@click.option("--standard", "mode", flag_value="standard", help="Use standard thresholds")
@click.option("--custom", "mode", flag_value="custom", help="Use custom thresholds")
@click.option("--roll", type=float, help="Custom roll threshold, % above strike (1-10)")
@click.option("--close", type=float, help="Custom close threshold, % profit (50-90)")
@click.pass_context
def strategy(
    ctx: click.Context,
    mode: Optional[str],
    roll: Optional[float],
    close: Optional[float],
) -> None:
    """
    Show or change the alert strategy.

    \b
    Examples:
      tracker strategy                              # Show current settings
      tracker strategy --custom --roll 5 --close 80
      tracker strategy --standard
    """
    cli_ctx = get_cli_context(ctx)

    with cli_ctx.session_factory() as db:
        service = _service(cli_ctx, db)
        if mode is None and roll is None and close is None:
            config = service.get_config()
        else:
            try:
                config = service.update_config(
                    active_strategy=StrategyType(mode) if mode else None,
                    custom_roll_threshold=roll,
                    custom_close_threshold=close,
                )
            except (ValidationError, PersistenceError) as e:
                print_error(str(e))
                sys.exit(1)

    if cli_ctx.json:
        print_json(user_config_to_dict(config))
        return

    effective = get_strategy_config(config)
    click.echo()
    click.secho(f"=== Strategy: {config.active_strategy.value} ===", bold=True)
    click.echo(f"Roll threshold:  {effective.roll_threshold:g}% above strike")
    click.echo(f"Close threshold: {effective.close_threshold:g}% profit")
    if config.active_strategy == StrategyType.STANDARD:
        click.echo(
            f"Custom (inactive): roll {config.custom_roll_threshold:g}%, "
            f"close {config.custom_close_threshold:g}%"
        )

    if config.dismissed_alerts:
        click.echo()
        click.echo("Dismissed:")
        for position_id in config.dismissed_alerts:
            dismissed_at = datetime.fromtimestamp(config.dismissed_at[position_id] / 1000)
            click.echo(f"  {position_id} (since {dismissed_at:%Y-%m-%d %H:%M})")
