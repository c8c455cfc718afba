#!/usr/bin/env python3
"""
Statement CLI - Importing bank exports and classifying movements.
"""

from pathlib import Path

import click

from .common import category_option, service_session


@click.command("import")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--client", "client_id", required=True, help="Client id")
@click.option("--encoding", default="utf-8", help="File encoding (default: utf-8)")
@click.option("--auto/--no-auto", default=False, help="Auto-classify right after importing")
@click.pass_context
def import_statement(ctx: click.Context, file: Path, client_id: str, encoding: str, auto: bool) -> None:
    """
    Import a bank statement export (CSV with ";" or ",").

    Examples:
      cashmap import extrato.csv --client client-1a2b3c
      cashmap import extrato.csv --client client-1a2b3c --auto
    """
    try:
        raw_text = file.read_text(encoding=encoding)
    except UnicodeDecodeError as e:
        raise click.ClickException(f"{file} is not valid {encoding} text; try --encoding latin-1") from e

    with service_session(ctx) as service:
        parsed = service.import_statement(client_id, raw_text)
        classified = service.auto_classify(client_id) if auto else 0
        status = service.get_client(client_id).status

    click.echo(f"Imported {len(parsed.movements)} movements ({parsed.date_from} to {parsed.date_to})")
    if auto:
        click.echo(f"Auto-classified {classified} movements")
    click.echo(f"Status: {status.value}")


@click.group()
def classify() -> None:
    """Movement classification commands."""
    pass


@classify.command("set")
@click.argument("movement_id")
@click.argument("category")
@click.option("--client", "client_id", required=True, help="Client id")
@click.pass_context
def classify_set(ctx: click.Context, movement_id: str, category: str, client_id: str) -> None:
    """Assign CATEGORY (code, name or label) to one movement."""
    target = category_option(category)
    with service_session(ctx) as service:
        service.set_category(client_id, movement_id, target)
    click.echo(f"{movement_id} -> {target.label}")


@classify.command("bulk")
@click.argument("category")
@click.argument("movement_ids", nargs=-1, required=True)
@click.option("--client", "client_id", required=True, help="Client id")
@click.pass_context
def classify_bulk(ctx: click.Context, category: str, movement_ids: tuple, client_id: str) -> None:
    """Assign CATEGORY to several movements; all ids must exist."""
    target = category_option(category)
    with service_session(ctx) as service:
        count = service.bulk_set_category(client_id, movement_ids, target)
    click.echo(f"Classified {count} movements as {target.label}")


@classify.command("auto")
@click.option("--client", "client_id", required=True, help="Client id")
@click.pass_context
def classify_auto(ctx: click.Context, client_id: str) -> None:
    """Keyword-classify every uncategorized movement of a client."""
    with service_session(ctx) as service:
        count = service.auto_classify(client_id)
        remaining = sum(1 for m in service.movements_for(client_id) if m.is_uncategorized)
    click.echo(f"Auto-classified {count} movements ({remaining} still uncategorized)")


@classify.command("pending")
@click.option("--client", "client_id", required=True, help="Client id")
@click.pass_context
def classify_pending(ctx: click.Context, client_id: str) -> None:
    """List movements still waiting for a category."""
    with service_session(ctx, commit=False) as service:
        pending = [m for m in service.movements_for(client_id) if m.is_uncategorized]

    for m in pending:
        click.echo(f"{m.id}  {m.date}  {m.direction.value:<3} {m.magnitude:>12.2f}  {m.description}")
    click.echo(f"{len(pending)} uncategorized movements")
