#!/usr/bin/env python3
"""Tests for the debt portfolio summary."""

import pytest

from cashmap.analysis.debts import monthly_debt_service, summarize_debts
from cashmap.core.models import Debt, DebtType


def make_debt(balance: float, rate: float, payment: float, debt_type: DebtType = DebtType.LOAN) -> Debt:
    return Debt(
        id=f"d-{balance}-{rate}",
        client_id="c1",
        institution="Banco",
        debt_type=debt_type,
        outstanding_balance=balance,
        monthly_rate_pct=rate,
        monthly_payment=payment,
    )


class TestDebtPortfolio:
    """Test totals and the balance-weighted rate."""

    def test_weighted_rate(self):
        debts = [make_debt(10000.0, 2.0, 1000.0), make_debt(30000.0, 4.0, 2000.0, DebtType.FIDC)]
        summary = summarize_debts(debts)

        assert summary.debt_count == 2
        assert summary.total_balance == 40000.0
        assert summary.total_monthly_payment == 3000.0
        assert summary.weighted_monthly_rate_pct == pytest.approx(3.5)
        assert summary.daily_debt_service == pytest.approx(100.0)
        assert summary.balance_by_type == {DebtType.LOAN: 10000.0, DebtType.FIDC: 30000.0}

    def test_empty_portfolio(self):
        summary = summarize_debts([])

        assert summary.total_balance == 0
        assert summary.weighted_monthly_rate_pct == 0.0
        assert monthly_debt_service([]) == 0.0

    def test_to_dict(self):
        data = summarize_debts([make_debt(100.0, 1.0, 10.0, DebtType.CARD)]).to_dict()
        assert data["balance_by_type"] == {"CARD": 100.0}
