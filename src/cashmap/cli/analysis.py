#!/usr/bin/env python3
"""
Analysis CLI - Cash-flow statement, projection and status.
"""

import click

from ..analysis.projection import Scenario
from ..core.currency import format_brl, format_percent
from ..core.json_utils import format_json, write_json
from ..core.models import WorkingCapital
from .common import date_option, enum_choice, service_session, to_enum

STATEMENT_LABELS = {
    "revenue": "Receita",
    "sales_taxes": "(-) Impostos sobre vendas",
    "variable_costs": "(-) Custos variáveis",
    "contribution_margin": "= Margem de contribuição",
    "fixed_expenses": "(-) Despesas fixas",
    "operating_result": "= Resultado operacional",
    "financial_expenses": "(-) Despesas financeiras",
    "investing_outflows": "(-) Investimentos e não operacionais",
    "net_result": "= Resultado líquido",
}


def save_report(ctx: click.Context, filename: str, data: dict) -> None:
    output_file = ctx.obj["config"].output_dir / filename
    write_json(output_file, data)
    click.echo(f"Report saved to: {output_file}", err=True)


@click.command()
@click.option("--client", "client_id", required=True, help="Client id")
@click.option("--pmr", type=float, help="Average days to collect receivables")
@click.option("--pmp", type=float, help="Average days to pay suppliers")
@click.option("--from", "date_from", help="First day to include (YYYY-MM-DD)")
@click.option("--to", "date_to", help="Last day to include (YYYY-MM-DD)")
@click.option("--save-cycle", is_flag=True, help="Store --pmr/--pmp on the client")
@click.option("--json", "as_json", is_flag=True, help="Print the full summary as JSON")
@click.option("--save", is_flag=True, help="Write the JSON summary to the reports directory")
@click.pass_context
def dfc(
    ctx: click.Context,
    client_id: str,
    pmr: float | None,
    pmp: float | None,
    date_from: str | None,
    date_to: str | None,
    save_cycle: bool,
    as_json: bool,
    save: bool,
) -> None:
    """
    Show the managerial cash-flow statement (DFC) of a client.

    Examples:
      cashmap dfc --client client-1a2b3c
      cashmap dfc --client client-1a2b3c --pmr 45 --pmp 30 --save-cycle
      cashmap dfc --client client-1a2b3c --from 2024-03-01 --to 2024-03-31
    """
    if (pmr is None) != (pmp is None):
        raise click.UsageError("--pmr and --pmp must be given together")

    with service_session(ctx, commit=save_cycle) as service:
        working_capital = WorkingCapital(pmr, pmp) if pmr is not None and pmp is not None else None
        if save_cycle and working_capital is not None:
            service.set_working_capital(client_id, working_capital.pmr_days, working_capital.pmp_days)
        summary = service.aggregate(client_id, working_capital, date_option(date_from), date_option(date_to))

    if save:
        save_report(ctx, f"{client_id}_dfc.json", summary.to_dict())

    if as_json:
        click.echo(format_json(summary.to_dict()))
        return

    click.echo(f"Period: {summary.period_days} days")
    click.echo(f"  Total in:  {format_brl(summary.total_in)}")
    click.echo(f"  Total out: {format_brl(summary.total_out)}")
    click.echo(f"  Net:       {format_brl(summary.net_change)}")

    click.echo("\nFlow by nature:")
    for nature, value in summary.flow_by_nature.items():
        click.echo(f"  {nature.value:<10} {format_brl(value)}")

    click.echo("\nStatement:")
    for name, value, percent in summary.statement.lines():
        click.echo(f"  {STATEMENT_LABELS[name]:<38} {format_brl(value):>16}  {format_percent(percent):>8}")

    click.echo(f"\nDrains ({format_percent(summary.drain_concentration)} of outflows):")
    for row in summary.drains:
        click.echo(f"  {row.category.label:<38} {format_brl(row.value):>16}  {format_percent(row.share):>8}")

    if summary.working_capital:
        cycle = summary.working_capital
        state = "locked in the cycle" if cycle.is_cash_locked else "financed by suppliers"
        click.echo(f"\nWorking capital: gap {cycle.cycle_gap_days:.0f} days, {format_brl(cycle.cash_impact)} {state}")

    if summary.has_uncategorized:
        click.echo(f"\n⚠️  {summary.uncategorized_count} movements are still uncategorized")


@click.command()
@click.option("--client", "client_id", required=True, help="Client id")
@click.option("--scenario", type=enum_choice(Scenario), default=Scenario.REALIST.value, help="Projection scenario")
@click.option("--horizon", type=int, help="Days to simulate (default: client assumptions)")
@click.option("--injection", type=float, help="One-time liquidity injection to store in the assumptions")
@click.option("--start-date", help="Calendar date of day 0 (YYYY-MM-DD), defaults to today")
@click.option("--complete", is_flag=True, help="Mark the projection as complete and record its risk")
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON")
@click.option("--save", is_flag=True, help="Write the JSON result to the reports directory")
@click.pass_context
def simulate(
    ctx: click.Context,
    client_id: str,
    scenario: str,
    horizon: int | None,
    injection: float | None,
    start_date: str | None,
    complete: bool,
    as_json: bool,
    save: bool,
) -> None:
    """
    Project the cash balance day by day and classify the risk.

    Examples:
      cashmap simulate --client client-1a2b3c
      cashmap simulate --client client-1a2b3c --scenario PESSIMIST --horizon 90 --complete
    """
    with service_session(ctx) as service:
        if injection is not None:
            assumptions = service.get_assumptions(client_id)
            assumptions.liquidity_injection = injection
            service.set_assumptions(client_id, assumptions)
        result = service.simulate(
            client_id,
            scenario=to_enum(Scenario, scenario),
            horizon_days=horizon,
            start_date=date_option(start_date),
        )
        if complete:
            service.mark_projection_complete(client_id, result.risk_level)

    if save:
        save_report(ctx, f"{client_id}_projection_{result.scenario.value.lower()}.json", result.to_dict())

    if as_json:
        click.echo(format_json(result.to_dict()))
        return

    click.echo(f"Scenario {result.scenario.value}, {result.horizon_days} days")
    click.echo(f"  Starting balance:  {format_brl(result.starting_balance)}")
    click.echo(f"  Daily change:      {format_brl(result.effective_daily_change)}")
    click.echo(f"  Daily burn rate:   {format_brl(result.daily_burn_rate)}")
    click.echo(f"  Lowest balance:    {format_brl(result.lowest_balance)}")
    click.echo(f"  Ending balance:    {format_brl(result.ending_balance)}")
    if result.rupture_day is not None:
        click.echo(f"  Cash rupture on day {result.rupture_day} ({result.rupture_date})")
    click.echo(f"  Risk: {result.risk_level.value}")

    if result.break_even.is_defined:
        click.echo(f"  Break-even revenue: {format_brl(result.break_even_revenue)}/month")
        click.echo(f"  Revenue gap:        {format_brl(result.revenue_gap)}/month")
    else:
        click.echo("  Break-even revenue: undefined (no positive contribution margin)")

    if complete:
        click.echo("Projection marked complete")


@click.command()
@click.option("--client", "client_id", required=True, help="Client id")
@click.pass_context
def status(ctx: click.Context, client_id: str) -> None:
    """Recompute and show the lifecycle status of a client."""
    with service_session(ctx) as service:
        current = service.recompute_status(client_id)
        c = service.get_client(client_id)

    click.echo(f"Status: {current.value}")
    if c.last_risk_level:
        click.echo(f"Last risk: {c.last_risk_level.value}")
