#!/usr/bin/env python3
"""
Action CLI - Corrective actions proposed in the diagnostic.
"""

import click

from ..core.models import ActionHorizon, ActionImpact, ActionType
from .common import category_option, enum_choice, service_session, to_enum


@click.group()
def action() -> None:
    """Action plan commands."""
    pass


@action.command("add")
@click.argument("title")
@click.option("--client", "client_id", required=True, help="Client id")
@click.option("--type", "action_type", type=enum_choice(ActionType), required=True)
@click.option("--impact", type=enum_choice(ActionImpact), default=ActionImpact.MEDIUM.value)
@click.option("--horizon", type=enum_choice(ActionHorizon), default=ActionHorizon.SHORT.value)
@click.option("--description", help="Longer description")
@click.option("--category", help="Related category (code, name or label)")
@click.pass_context
def add_action(
    ctx: click.Context,
    title: str,
    client_id: str,
    action_type: str,
    impact: str,
    horizon: str,
    description: str | None,
    category: str | None,
) -> None:
    """Add an action item and print its id."""
    related = category_option(category) if category else None
    with service_session(ctx) as service:
        item = service.add_action(
            client_id,
            to_enum(ActionType, action_type),
            title,
            impact=to_enum(ActionImpact, impact),
            horizon=to_enum(ActionHorizon, horizon),
            description=description,
            related_category=related,
        )
    click.echo(item.id)


@action.command("remove")
@click.argument("action_id")
@click.option("--client", "client_id", required=True, help="Client id")
@click.pass_context
def remove_action(ctx: click.Context, action_id: str, client_id: str) -> None:
    """Remove an action item."""
    with service_session(ctx) as service:
        service.remove_action(client_id, action_id)
    click.echo(f"Removed {action_id}")


@action.command("list")
@click.option("--client", "client_id", required=True, help="Client id")
@click.pass_context
def list_actions(ctx: click.Context, client_id: str) -> None:
    """List the action plan of a client."""
    with service_session(ctx, commit=False) as service:
        items = service.list_actions(client_id)

    if not items:
        click.echo("No actions planned")
        return
    for item in items:
        click.echo(
            f"{item.id}  [{item.action_type.value}] {item.title} "
            f"(impact {item.impact.value}, horizon {item.horizon.value})"
        )
