"""
Configuration commands for the tracker CLI.

Shows the effective configuration and writes it out as a config file.
"""

import sys

import click

from ..config import ConfigurationError
from .utils import get_cli_context, print_error, print_json, print_success


@click.command("show")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Show the effective configuration (file, environment and flags)."""
    cli_ctx = get_cli_context(ctx)
    settings = cli_ctx.config.to_dict()

    if cli_ctx.json:
        print_json(settings)
        return

    click.echo(f"Config file: {cli_ctx.config_path}")
    for section, values in settings.items():
        click.echo()
        click.secho(f"[{section}]", bold=True)
        for key, value in values.items():
            click.echo(f"  {key}: {value}")


@click.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
@click.pass_context
def init_config(ctx: click.Context, force: bool) -> None:
    """
    Write the effective configuration to the config file.

    Command-line overrides such as --db are saved too.

    Example: tracker --db ~/trades/positions.db config init
    """
    cli_ctx = get_cli_context(ctx)
    path = cli_ctx.config_path

    if path.exists() and not force:
        print_error(f"{path} already exists (use --force to overwrite)")
        sys.exit(1)

    try:
        cli_ctx.config.save_to_file(path)
    except ConfigurationError as e:
        print_error(str(e))
        sys.exit(1)

    print_success(f"Wrote configuration to {path}")


@click.group("config")
def config():
    """View and save CLI configuration."""
    pass


config.add_command(show_config)
config.add_command(init_config)
