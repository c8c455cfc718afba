#!/usr/bin/env python3
"""
Main CLI Entry Point for Cash Map

Every command reads its settings from the environment (see core.config) and
works on the store under the configured data directory.
"""

import logging
import os

import click

from ..core.config import reload_config
from ..core.datastore import DiagnosticStore


@click.group()
@click.option(
    "--config-env",
    type=click.Choice(["development", "test", "production"]),
    help="Override environment configuration",
)
@click.option("--verbose", "-v", is_flag=True, help="Show the active environment and data directory")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_env: str | None, verbose: bool, debug: bool) -> None:
    """
    Cash Map - Cash-crisis diagnostic for small businesses

    Imports bank statements, classifies movements, builds the managerial
    cash-flow statement (DFC) and projects the cash runway.

    Typical session:
      cashmap client add "Padaria Pão Quente"
      cashmap import extrato.csv --client <id> --auto
      cashmap classify pending --client <id>
      cashmap dfc --client <id>
      cashmap simulate --client <id> --scenario pessimist
    """
    ctx.ensure_object(dict)

    if config_env:
        os.environ["CASHMAP_ENV"] = config_env
    if debug:
        os.environ["DEBUG"] = "true"

    config = reload_config()

    # basicConfig is a no-op once the root logger has handlers
    if config.debug:
        logging.getLogger("cashmap").setLevel(logging.DEBUG)

    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = config.debug
    ctx.obj["config"] = config

    if verbose:
        click.echo(f"Environment: {config.environment.value}", err=True)
        click.echo(f"Data directory: {config.data_dir}", err=True)


@main.command()
def version() -> None:
    """Show version information."""
    from cashmap import __author__, __version__

    click.echo(f"Cash Map v{__version__}")
    click.echo(f"Author: {__author__}")


@main.command()
@click.pass_context
def config(ctx: click.Context) -> None:
    """Show current configuration and store status."""
    settings = ctx.obj["config"]
    analysis = settings.analysis
    status = DiagnosticStore(settings.store.store_dir, schema_version=settings.store.schema_version).status()

    click.echo("Current Configuration:")
    click.echo(f"  Environment: {settings.environment.value}")
    click.echo(f"  Data Directory: {settings.data_dir}")
    click.echo(f"  Output Directory: {settings.output_dir}")
    click.echo(f"  Log Level: {'DEBUG' if settings.debug else settings.log_level}")

    click.echo("\nAnalysis:")
    click.echo(f"  Drain Rule: top {analysis.drain_top_n} or share > {analysis.drain_share_threshold:.0%}")
    click.echo(f"  Medium Risk Below: {analysis.medium_risk_debt_multiple}x monthly debt service")
    click.echo(f"  Default Horizon: {analysis.default_horizon_days} days")
    click.echo(f"  Default Starting Balance: {analysis.default_starting_balance:.2f}")

    click.echo("\nStore:")
    click.echo(f"  Store Directory: {settings.store.store_dir}")
    click.echo(f"  Schema Version: {settings.store.schema_version}")
    click.echo(f"  {status.summary_text}")
    if status.exists:
        click.echo(f"  Last Saved: {status.last_modified:%Y-%m-%d %H:%M} ({status.age_days} days ago)")
        click.echo(f"  Size: {status.size_bytes} bytes")


from .actions import action  # noqa: E402
from .analysis import dfc, simulate, status  # noqa: E402
from .clients import client  # noqa: E402
from .debts import debt  # noqa: E402
from .statements import classify, import_statement  # noqa: E402

for command in (client, import_statement, classify, dfc, simulate, status, debt, action):
    main.add_command(command)


if __name__ == "__main__":
    main()
