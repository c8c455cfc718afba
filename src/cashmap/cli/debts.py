#!/usr/bin/env python3
"""
Debt CLI - Mapping the client's debt portfolio.
"""

import click

from ..core.currency import format_brl
from ..core.models import DebtType
from .common import date_option, enum_choice, service_session, to_enum


@click.group()
def debt() -> None:
    """Debt portfolio commands."""
    pass


@debt.command("add")
@click.option("--client", "client_id", required=True, help="Client id")
@click.option("--institution", required=True, help="Creditor name")
@click.option("--type", "debt_type", type=enum_choice(DebtType), default=DebtType.LOAN.value)
@click.option("--balance", type=float, required=True, help="Outstanding balance")
@click.option("--rate", type=float, default=0.0, help="Monthly interest rate in percent")
@click.option("--payment", type=float, default=0.0, help="Monthly payment")
@click.option("--due", help="Due date (YYYY-MM-DD)")
@click.pass_context
def add_debt(
    ctx: click.Context,
    client_id: str,
    institution: str,
    debt_type: str,
    balance: float,
    rate: float,
    payment: float,
    due: str | None,
) -> None:
    """Register a debt and print its id."""
    with service_session(ctx) as service:
        new_debt = service.add_debt(
            client_id,
            institution,
            to_enum(DebtType, debt_type),
            balance,
            monthly_rate_pct=rate,
            monthly_payment=payment,
            due_date=date_option(due),
        )
    click.echo(new_debt.id)


@debt.command("remove")
@click.argument("debt_id")
@click.option("--client", "client_id", required=True, help="Client id")
@click.pass_context
def remove_debt(ctx: click.Context, debt_id: str, client_id: str) -> None:
    """Remove a debt."""
    with service_session(ctx) as service:
        service.remove_debt(client_id, debt_id)
    click.echo(f"Removed {debt_id}")


@debt.command("list")
@click.option("--client", "client_id", required=True, help="Client id")
@click.pass_context
def list_debts(ctx: click.Context, client_id: str) -> None:
    """List debts with the portfolio totals."""
    with service_session(ctx, commit=False) as service:
        debts = service.debts_for(client_id)
        summary = service.debt_summary(client_id)

    for d in debts:
        click.echo(
            f"{d.id}  {d.institution:<24} {d.debt_type.value:<9} "
            f"{format_brl(d.outstanding_balance):>16}  {d.monthly_rate_pct:.2f}% a.m.  "
            f"{format_brl(d.monthly_payment)}/month"
        )
    click.echo(f"Total: {format_brl(summary.total_balance)} in {summary.debt_count} debts")
    click.echo(f"Monthly service: {format_brl(summary.total_monthly_payment)}")
    click.echo(f"Weighted rate: {summary.weighted_monthly_rate_pct:.2f}% a.m.")
