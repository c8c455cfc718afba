#!/usr/bin/env python3
"""
Client CLI - Registering and inspecting diagnostic clients.
"""

import click

from ..core.currency import format_brl
from ..core.models import DocumentType
from .common import enum_choice, service_session, to_enum


@click.group()
def client() -> None:
    """Client registration and notes."""
    pass


@client.command("add")
@click.argument("name")
@click.option("--sector", default="", help="Business sector")
@click.option("--document-type", type=enum_choice(DocumentType), default=DocumentType.CNPJ.value)
@click.option("--document", default="", help="CNPJ/CPF or foreign document number")
@click.option("--contact", default="", help="Contact person name")
@click.option("--role", default=None, help="Contact person role")
@click.pass_context
def add_client(
    ctx: click.Context, name: str, sector: str, document_type: str, document: str, contact: str, role: str | None
) -> None:
    """Register a new client and print its id."""
    with service_session(ctx) as service:
        new_client = service.add_client(
            name,
            sector=sector,
            document_type=to_enum(DocumentType, document_type),
            document=document,
            contact_name=contact,
            contact_role=role,
        )
    click.echo(new_client.id)


@client.command("list")
@click.pass_context
def list_clients(ctx: click.Context) -> None:
    """List all clients with their status."""
    with service_session(ctx, commit=False) as service:
        clients = service.list_clients()

    if not clients:
        click.echo("No clients registered")
        return

    for c in clients:
        risk = c.last_risk_level.value if c.last_risk_level else "-"
        click.echo(f"{c.id}  {c.name:<30} {c.status.value:<16} risk: {risk}")


@client.command("show")
@click.argument("client_id")
@click.pass_context
def show_client(ctx: click.Context, client_id: str) -> None:
    """Show a client's record and data counts."""
    with service_session(ctx, commit=False) as service:
        c = service.get_client(client_id)
        movement_count = len(service.movements_for(client_id))
        debts = service.debt_summary(client_id)

    click.echo(f"Client: {c.name} ({c.id})")
    click.echo(f"  Sector: {c.sector or '-'}")
    click.echo(f"  Document: {c.document_type.value} {c.document or '-'}")
    click.echo(f"  Contact: {c.contact_name or '-'}" + (f" ({c.contact_role})" if c.contact_role else ""))
    click.echo(f"  Status: {c.status.value}")
    if c.last_risk_level:
        click.echo(f"  Last risk: {c.last_risk_level.value} at {c.last_analysis_at:%Y-%m-%d %H:%M}")
    click.echo(f"  Movements: {movement_count}")
    click.echo(f"  Debts: {debts.debt_count} ({format_brl(debts.total_balance)})")
    if c.report_notes:
        click.echo(f"  Notes: {c.report_notes}")


@client.command("notes")
@click.argument("client_id")
@click.argument("notes", required=False)
@click.option("--clear", is_flag=True, help="Remove the report notes")
@click.pass_context
def client_notes(ctx: click.Context, client_id: str, notes: str | None, clear: bool) -> None:
    """Set, clear or print the report notes of a client."""
    with service_session(ctx) as service:
        if clear:
            service.set_report_notes(client_id, None)
            click.echo("Notes cleared")
        elif notes is not None:
            service.set_report_notes(client_id, notes)
            click.echo("Notes saved")
        else:
            click.echo(service.get_client(client_id).report_notes or "(no notes)")
