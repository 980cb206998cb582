"""
Click CLI implementation for the options position tracker.

This module provides command-line interface commands for recording
positions, viewing portfolio reports and managing strategy alerts,
split into logical command groups.
"""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import click
from sqlalchemy.orm import sessionmaker

from src.config import FinnhubConfig
from src.finnhub_client import FinnhubClient
from src.server.database.session import build_session_factory
from src.tracker.pricing import QuoteCache, StockPriceOracle
from src.tracker.strategy import JsonFilePersistence, StrategyConfigStore

from ..config import ConfigurationError, TrackerConfig
from .alert_commands import alerts, clear_dismissed, dismiss, strategy, undismiss
from .config_commands import config as config_group
from .position_commands import add, delete, list_positions, show, update
from .report_commands import analytics, cycles, holdings, metrics

logger = logging.getLogger(__name__)


@dataclass
class CLIContext:
    """Context object passed to all CLI commands.

    Attributes:
        config: Configuration settings
        config_path: Config file the settings were loaded from (or would be)
        session_factory: SQLAlchemy session factory for the position database
        oracle: Stock price oracle
        strategy_store: Strategy store when settings live in a JSON file,
            None when they live in the database
        verbose: Verbose output enabled
        json: JSON output enabled
    """

    config: TrackerConfig
    config_path: Path
    session_factory: sessionmaker
    oracle: StockPriceOracle
    strategy_store: Optional[StrategyConfigStore]
    verbose: bool
    json: bool


def build_oracle(config: TrackerConfig) -> StockPriceOracle:
    """Create the price oracle, without a source when no API key is set."""
    source = None
    try:
        source = FinnhubClient(FinnhubConfig.load(config.finnhub_key_file))
    except (FileNotFoundError, ValueError) as e:
        logger.debug(f"Finnhub not configured: {e}")

    return StockPriceOracle(
        source=source,
        cache=QuoteCache(ttl_seconds=config.price_cache_ttl),
        max_workers=config.price_fetch_workers,
    )


@click.group()
@click.option(
    "--db",
    default=None,
    help="Database file path (overrides config)",
    envvar="TRACKER_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.option("--json", "output_json", is_flag=True, help="JSON output")
@click.option(
    "--config-file",
    type=click.Path(exists=True),
    help="Path to configuration file",
)
@click.pass_context
def cli(
    ctx: click.Context,
    db: Optional[str],
    verbose: bool,
    output_json: bool,
    config_file: Optional[str],
) -> None:
    """
    Options Tracker - Track wheel strategy option positions.

    Record sold puts and calls, follow realized and unrealized P/L per
    position, wheel cycle and portfolio, and get roll alerts when the
    stock runs past your strike.
    """
    config_path = Path(config_file) if config_file else TrackerConfig.get_default_config_path()
    try:
        config = TrackerConfig.load_from_file(config_path)
    except ConfigurationError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    # Apply command-line overrides
    if db:
        config.database_path = db
    if verbose:
        config.verbose = True
    if output_json:
        config.json_output = True

    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    strategy_store = None
    if config.strategy_storage == "file":
        strategy_store = StrategyConfigStore(JsonFilePersistence(config.data_dir))

    oracle = build_oracle(config)
    if config.verbose:
        if oracle.source is not None:
            click.echo("+ Finnhub client configured for stock prices")
        else:
            click.echo("! Finnhub not configured, stock prices disabled", err=True)

    ctx.obj = CLIContext(
        config=config,
        config_path=config_path,
        session_factory=build_session_factory(config.database_path),
        oracle=oracle,
        strategy_store=strategy_store,
        verbose=config.verbose,
        json=config.json_output,
    )


# Register position commands
cli.add_command(add)
cli.add_command(list_positions, name="list")
cli.add_command(show)
cli.add_command(update)
cli.add_command(delete)

# Register report commands
cli.add_command(metrics)
cli.add_command(analytics)
cli.add_command(cycles)
cli.add_command(holdings)

# Register alert commands
cli.add_command(alerts)
cli.add_command(dismiss)
cli.add_command(undismiss)
cli.add_command(clear_dismissed, name="clear-dismissed")
cli.add_command(strategy)

# Register configuration commands
cli.add_command(config_group)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


__all__ = ["cli", "main", "CLIContext"]
