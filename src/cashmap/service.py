#!/usr/bin/env python3
"""
Diagnostic Service

Owns the in-memory collections of every client (movements, debts, action
items and the client records with their assumptions) and exposes the
operations a consultant runs during a diagnostic.

Every mutating operation recomputes the client's status before returning.
Nothing touches disk until `commit()` is called; analytics always read the
in-memory state.
"""

import logging
import uuid
from collections.abc import Iterable
from datetime import datetime
from typing import Optional

from .analysis.cash_flow import CashFlowAggregator, CashFlowConfig, DFCSummary
from .analysis.debts import DebtPortfolio, summarize_debts
from .analysis.projection import ProjectionResult, Scenario, derive_assumptions, simulate
from .classification.classifier import KeywordClassifier, set_category
from .classification.taxonomy import Category
from .core.config import AnalysisConfig
from .core.dates import FinancialDate
from .core.datastore import DiagnosticStore, StoreSnapshot
from .core.models import (
    ActionHorizon,
    ActionImpact,
    ActionItem,
    ActionType,
    Client,
    ClientStatus,
    Debt,
    DebtType,
    DocumentType,
    Movement,
    ProjectionAssumptions,
    RiskLevel,
    WorkingCapital,
)
from .ingest.parser import ParsedStatement, parse_statement
from .lifecycle import status as lifecycle

logger = logging.getLogger(__name__)


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


class DiagnosticService:
    """
    Explicit owner of all diagnostic state.

    Unknown client, movement, debt or action ids raise KeyError. Invalid
    values raise ValueError. A failed operation leaves the state unchanged.
    """

    def __init__(
        self,
        snapshot: Optional[StoreSnapshot] = None,
        store: Optional[DiagnosticStore] = None,
        analysis: Optional[AnalysisConfig] = None,
        classifier: Optional[KeywordClassifier] = None,
    ):
        snapshot = snapshot or StoreSnapshot()
        self.store = store
        self.analysis = analysis or AnalysisConfig()
        self.classifier = classifier or KeywordClassifier()
        self.aggregator = CashFlowAggregator(CashFlowConfig.from_analysis_config(self.analysis))

        self._clients: dict[str, Client] = {c.id: c for c in snapshot.clients}
        self._movements: list[Movement] = list(snapshot.movements)
        self._debts: list[Debt] = list(snapshot.debts)
        self._actions: list[ActionItem] = list(snapshot.actions)

    @classmethod
    def from_store(cls, store: DiagnosticStore, analysis: Optional[AnalysisConfig] = None) -> "DiagnosticService":
        """Load the service state from a store; `commit()` writes back to it."""
        return cls(snapshot=store.load(), store=store, analysis=analysis)

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            clients=list(self._clients.values()),
            movements=list(self._movements),
            debts=list(self._debts),
            actions=list(self._actions),
        )

    def commit(self) -> None:
        """Persist all collections to the attached store."""
        if self.store is None:
            raise RuntimeError("No store attached to this service")
        self.store.save(self.snapshot())

    # Clients

    def add_client(
        self,
        name: str,
        sector: str = "",
        document_type: DocumentType = DocumentType.CNPJ,
        document: str = "",
        contact_name: str = "",
        contact_role: str | None = None,
    ) -> Client:
        if not name.strip():
            raise ValueError("Client name must not be empty")
        client = Client(
            id=_new_id("client"),
            name=name.strip(),
            sector=sector,
            document_type=document_type,
            document=document,
            contact_name=contact_name,
            contact_role=contact_role,
        )
        self._clients[client.id] = client
        logger.info("Added client %s (%s)", client.id, client.name)
        return client

    def get_client(self, client_id: str) -> Client:
        try:
            return self._clients[client_id]
        except KeyError:
            raise KeyError(f"Unknown client: {client_id}") from None

    def list_clients(self) -> list[Client]:
        return sorted(self._clients.values(), key=lambda c: c.created_at)

    def remove_client(self, client_id: str) -> None:
        """Remove a client together with its movements, debts and actions."""
        self.get_client(client_id)
        del self._clients[client_id]
        self._movements = [m for m in self._movements if m.client_id != client_id]
        self._debts = [d for d in self._debts if d.client_id != client_id]
        self._actions = [a for a in self._actions if a.client_id != client_id]
        logger.info("Removed client %s", client_id)

    def set_report_notes(self, client_id: str, notes: str | None) -> Client:
        client = self.get_client(client_id)
        client.report_notes = notes
        return client

    # Movements

    def movements_for(self, client_id: str) -> list[Movement]:
        self.get_client(client_id)
        return [m for m in self._movements if m.client_id == client_id]

    def import_statement(self, client_id: str, raw_text: str) -> ParsedStatement:
        """
        Parse a statement and append its movements to the client.

        Raises:
            ParseError: If the file is unusable; nothing is added
        """
        self.get_client(client_id)
        parsed = parse_statement(raw_text, client_id)
        self._movements.extend(parsed.movements)
        logger.info(
            "Imported %d movements for %s (%s to %s)",
            len(parsed.movements),
            client_id,
            parsed.date_from,
            parsed.date_to,
        )
        self.recompute_status(client_id)
        return parsed

    def add_movements(self, client_id: str, movements: Iterable[Movement]) -> int:
        """Append manually built movements; ids must be new."""
        self.get_client(client_id)
        movements = list(movements)
        known = {m.id for m in self._movements}
        for movement in movements:
            if movement.client_id != client_id:
                raise ValueError(f"Movement {movement.id} belongs to {movement.client_id}, not {client_id}")
            if movement.id in known:
                raise ValueError(f"Duplicate movement id: {movement.id}")
            known.add(movement.id)
        self._movements.extend(movements)
        self.recompute_status(client_id)
        return len(movements)

    def _find_movement(self, client_id: str, movement_id: str) -> Movement:
        for movement in self._movements:
            if movement.id == movement_id and movement.client_id == client_id:
                return movement
        raise KeyError(f"Unknown movement: {movement_id}")

    def set_category(self, client_id: str, movement_id: str, category: Category) -> Movement:
        """Manually categorize one movement (always clears auto_classified)."""
        movement = self._find_movement(client_id, movement_id)
        set_category(movement, category)
        self.recompute_status(client_id)
        return movement

    def bulk_set_category(self, client_id: str, movement_ids: Iterable[str], category: Category) -> int:
        """
        Manually categorize several movements at once.

        All ids are resolved before anything changes, so an unknown id leaves
        every movement as it was.
        """
        targets = [self._find_movement(client_id, movement_id) for movement_id in dict.fromkeys(movement_ids)]
        for movement in targets:
            set_category(movement, category)
        self.recompute_status(client_id)
        return len(targets)

    def auto_classify(self, client_id: str) -> int:
        """Keyword-classify the client's UNCATEGORIZED movements; returns how many changed."""
        classified = self.classifier.apply(self.movements_for(client_id))
        self.recompute_status(client_id)
        return classified

    # Debts

    def debts_for(self, client_id: str) -> list[Debt]:
        self.get_client(client_id)
        return [d for d in self._debts if d.client_id == client_id]

    def add_debt(
        self,
        client_id: str,
        institution: str,
        debt_type: DebtType,
        outstanding_balance: float,
        monthly_rate_pct: float = 0.0,
        monthly_payment: float = 0.0,
        due_date: FinancialDate | None = None,
    ) -> Debt:
        """
        Register a debt; the client is lifted to at least DEBTS_MAPPED.

        The lift applies even while UNCATEGORIZED movements remain; the next
        recompute_status brings such a client back to IMPORTED.
        """
        client = self.get_client(client_id)
        if monthly_rate_pct < 0 or monthly_payment < 0:
            raise ValueError("Debt rate and payment must be non-negative")
        debt = Debt(
            id=_new_id("debt"),
            client_id=client_id,
            institution=institution,
            debt_type=debt_type,
            outstanding_balance=outstanding_balance,
            monthly_rate_pct=monthly_rate_pct,
            monthly_payment=monthly_payment,
            due_date=due_date,
        )
        self._debts.append(debt)
        client.status = lifecycle.status_after_debt_added(client.status)
        return debt

    def remove_debt(self, client_id: str, debt_id: str) -> None:
        before = len(self._debts)
        self.get_client(client_id)
        self._debts = [d for d in self._debts if not (d.id == debt_id and d.client_id == client_id)]
        if len(self._debts) == before:
            raise KeyError(f"Unknown debt: {debt_id}")
        self.recompute_status(client_id)

    def debt_summary(self, client_id: str) -> DebtPortfolio:
        return summarize_debts(self.debts_for(client_id))

    # Analytics

    def set_working_capital(self, client_id: str, pmr_days: float, pmp_days: float) -> WorkingCapital:
        client = self.get_client(client_id)
        client.working_capital = WorkingCapital(pmr_days=pmr_days, pmp_days=pmp_days)
        return client.working_capital

    def aggregate(
        self,
        client_id: str,
        working_capital: Optional[WorkingCapital] = None,
        date_from: Optional[FinancialDate] = None,
        date_to: Optional[FinancialDate] = None,
    ) -> DFCSummary:
        """DFC summary of the client, optionally limited to a date range; falls back to the stored PMR/PMP."""
        client = self.get_client(client_id)
        return self.aggregator.aggregate(
            self.movements_for(client_id), working_capital or client.working_capital, date_from, date_to
        )

    def get_assumptions(self, client_id: str) -> ProjectionAssumptions:
        """Stored assumptions, derived from history (and stored) on first use."""
        client = self.get_client(client_id)
        if client.assumptions is None:
            client.assumptions = derive_assumptions(
                self.movements_for(client_id),
                default_starting_balance=self.analysis.default_starting_balance,
                horizon_days=self.analysis.default_horizon_days,
            )
            logger.debug("Derived projection assumptions for %s", client_id)
        return client.assumptions

    def set_assumptions(self, client_id: str, assumptions: ProjectionAssumptions) -> ProjectionAssumptions:
        client = self.get_client(client_id)
        if assumptions.horizon_days <= 0:
            raise ValueError("Projection horizon must be positive")
        assumptions.updated_at = datetime.now()
        client.assumptions = assumptions
        return assumptions

    def simulate(
        self,
        client_id: str,
        scenario: Scenario = Scenario.REALIST,
        horizon_days: Optional[int] = None,
        start_date: Optional[FinancialDate] = None,
    ) -> ProjectionResult:
        """Run the projection; does not change the client's status."""
        return simulate(
            self.movements_for(client_id),
            self.debts_for(client_id),
            self.get_assumptions(client_id),
            scenario=scenario,
            horizon_days=horizon_days,
            start_date=start_date,
            debt_multiple=self.analysis.medium_risk_debt_multiple,
        )

    def mark_projection_complete(self, client_id: str, risk_level: RiskLevel) -> Client:
        client = self.get_client(client_id)
        lifecycle.mark_projection_complete(client, self.movements_for(client_id), risk_level)
        return client

    def recompute_status(self, client_id: str) -> ClientStatus:
        client = self.get_client(client_id)
        return lifecycle.recompute_status(client, self.movements_for(client_id), self.debts_for(client_id))

    # Action items

    def list_actions(self, client_id: str) -> list[ActionItem]:
        self.get_client(client_id)
        return [a for a in self._actions if a.client_id == client_id]

    def add_action(
        self,
        client_id: str,
        action_type: ActionType,
        title: str,
        impact: ActionImpact = ActionImpact.MEDIUM,
        horizon: ActionHorizon = ActionHorizon.SHORT,
        description: str | None = None,
        related_category: Category | None = None,
    ) -> ActionItem:
        self.get_client(client_id)
        if not title.strip():
            raise ValueError("Action title must not be empty")
        action = ActionItem(
            id=_new_id("action"),
            client_id=client_id,
            action_type=action_type,
            title=title.strip(),
            impact=impact,
            horizon=horizon,
            description=description,
            related_category=related_category,
        )
        self._actions.append(action)
        return action

    def remove_action(self, client_id: str, action_id: str) -> None:
        before = len(self._actions)
        self.get_client(client_id)
        self._actions = [a for a in self._actions if not (a.id == action_id and a.client_id == client_id)]
        if len(self._actions) == before:
            raise KeyError(f"Unknown action: {action_id}")
