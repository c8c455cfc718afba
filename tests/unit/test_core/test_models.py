#!/usr/bin/env python3
"""Tests for core data models."""

import pytest

from cashmap.classification.taxonomy import Category, Direction, Nature
from cashmap.core.dates import FinancialDate
from cashmap.core.models import (
    ActionItem,
    ActionType,
    Client,
    ClientStatus,
    Debt,
    DebtType,
    Movement,
    ProjectionAssumptions,
    RiskLevel,
    WorkingCapital,
)


class TestMovement:
    """Test Movement invariants and serialization."""

    def test_negative_magnitude_rejected(self, movement_factory):
        with pytest.raises(ValueError):
            movement_factory(-1.0)

    def test_nature_follows_category(self, movement_factory):
        """Changing the category re-derives the nature."""
        movement = movement_factory(100.0, Direction.IN, Category.REV_SALES)
        assert movement.nature is Nature.OPERATING

        movement.category = Category.REV_LOAN
        assert movement.nature is Nature.FINANCING

        movement.category = Category.TRANSFER
        assert movement.nature is None

    def test_signed_amount(self, movement_factory):
        assert movement_factory(10.0, Direction.IN).signed_amount == 10.0
        assert movement_factory(10.0, Direction.OUT).signed_amount == -10.0

    def test_stored_nature_is_ignored(self, movement_factory):
        """A tampered nature in stored data cannot override the taxonomy."""
        data = movement_factory(50.0, Direction.OUT, Category.OUT_CAPEX).to_dict()
        assert data["nature"] == "INVESTING"

        data["nature"] = "FINANCING"
        restored = Movement.from_dict(data)
        assert restored.nature is Nature.INVESTING
        assert restored.date == FinancialDate.from_string("2024-03-01")


class TestDebtAndAssumptions:
    """Test Debt validation and assumption figures."""

    def test_debt_requires_positive_balance(self):
        with pytest.raises(ValueError):
            Debt(id="d1", client_id="c1", institution="Banco", debt_type=DebtType.LOAN, outstanding_balance=0)

    def test_debt_round_trip_with_due_date(self):
        debt = Debt(
            id="d1",
            client_id="c1",
            institution="Banco",
            debt_type=DebtType.FIDC,
            outstanding_balance=1000.0,
            monthly_rate_pct=2.5,
            monthly_payment=300.0,
            due_date=FinancialDate.from_string("2024-12-10"),
        )
        assert Debt.from_dict(debt.to_dict()) == debt

    def test_assumption_results(self):
        a = ProjectionAssumptions(revenue=50000, variable_cost=20000, fixed_cost=15000, financial_cost=5000)
        assert a.contribution_margin == 30000
        assert a.margin_ratio == pytest.approx(0.6)
        assert a.operating_result == 15000
        assert a.net_result == 10000
        assert a.total_fixed_obligations == 20000

    def test_zero_revenue_margin_ratio(self):
        assert ProjectionAssumptions(variable_cost=100).margin_ratio == 0.0

    def test_working_capital_rejects_negative_days(self):
        with pytest.raises(ValueError):
            WorkingCapital(pmr_days=-1, pmp_days=10)


class TestClient:
    """Test Client serialization."""

    def test_client_round_trip(self):
        client = Client(id="c1", name="Oficina", status=ClientStatus.PROJECTION_DONE)
        client.last_risk_level = RiskLevel.MEDIUM
        client.assumptions = ProjectionAssumptions(revenue=10.0, horizon_days=60)
        client.working_capital = WorkingCapital(pmr_days=30, pmp_days=15)

        restored = Client.from_dict(client.to_dict())

        assert restored.status is ClientStatus.PROJECTION_DONE
        assert restored.last_risk_level is RiskLevel.MEDIUM
        assert restored.assumptions.horizon_days == 60
        assert restored.working_capital.pmr_days == 30
        assert restored.created_at == client.created_at

    def test_status_rank_is_funnel_order(self):
        ranks = [status.rank for status in ClientStatus]
        assert ranks == sorted(ranks)
        assert ClientStatus.NO_DATA.rank == 0

    def test_action_item_round_trip(self):
        item = ActionItem(
            id="a1",
            client_id="c1",
            action_type=ActionType.COST,
            title="Renegociar aluguel",
            related_category=Category.EXP_OCCUPANCY,
        )
        assert ActionItem.from_dict(item.to_dict()) == item
