#!/usr/bin/env python3
"""
Client Lifecycle Status

Derives a client's diagnostic stage from its data:

    NO_DATA -> IMPORTED -> CLASSIFIED -> DEBTS_MAPPED -> PROJECTION_DONE

Status is a pure function of the movements, the debts and the previous
status. Two transitions are explicit signals rather than data shape:
adding a debt lifts the status to at least DEBTS_MAPPED, and only a
completed projection sets PROJECTION_DONE.

An UNCATEGORIZED movement always brings the client back to IMPORTED, even
from PROJECTION_DONE.
"""

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime

from ..core.models import Client, ClientStatus, Debt, Movement, RiskLevel

logger = logging.getLogger(__name__)


def derive_status(
    movements: Sequence[Movement], debts: Sequence[Debt], previous: ClientStatus = ClientStatus.NO_DATA
) -> ClientStatus:
    """
    Compute the status implied by the current data.

    Args:
        movements: All movements of the client
        debts: All debts of the client
        previous: Status before the mutation (only PROJECTION_DONE carries over)

    Returns:
        The recomputed status
    """
    if not movements:
        return ClientStatus.NO_DATA
    if any(m.is_uncategorized for m in movements):
        return ClientStatus.IMPORTED
    if previous is ClientStatus.PROJECTION_DONE:
        return ClientStatus.PROJECTION_DONE
    if debts:
        return ClientStatus.DEBTS_MAPPED
    return ClientStatus.CLASSIFIED


def recompute_status(client: Client, movements: Iterable[Movement], debts: Iterable[Debt]) -> ClientStatus:
    """Recompute and store the client's status; returns the new value."""
    new_status = derive_status(list(movements), list(debts), client.status)
    if new_status is not client.status:
        logger.info("Client %s status %s -> %s", client.id, client.status.value, new_status.value)
        client.status = new_status
    return new_status


def status_after_debt_added(current: ClientStatus) -> ClientStatus:
    """Adding a debt never leaves the client below DEBTS_MAPPED."""
    if current.rank < ClientStatus.DEBTS_MAPPED.rank:
        return ClientStatus.DEBTS_MAPPED
    return current


def mark_projection_complete(
    client: Client, movements: Sequence[Movement], risk_level: RiskLevel, when: datetime | None = None
) -> None:
    """
    Record a finished projection: PROJECTION_DONE plus the latest risk.

    Raises:
        ValueError: If the client has no movements or still has UNCATEGORIZED
            ones
    """
    if not movements:
        raise ValueError(f"Client {client.id} has no movements to project")
    pending = sum(1 for m in movements if m.is_uncategorized)
    if pending:
        raise ValueError(f"Client {client.id} still has {pending} uncategorized movements")

    client.status = ClientStatus.PROJECTION_DONE
    client.last_risk_level = risk_level
    client.last_analysis_at = when or datetime.now()
    logger.info("Client %s projection complete (risk %s)", client.id, risk_level.value)
