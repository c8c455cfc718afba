#!/usr/bin/env python3
"""
Debt Portfolio Summary

Totals and the balance-weighted average rate of a client's debts.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from ..core.currency import safe_divide
from ..core.models import Debt, DebtType


@dataclass
class DebtPortfolio:
    """Aggregate view of a client's outstanding debts."""

    debt_count: int
    total_balance: float
    total_monthly_payment: float
    weighted_monthly_rate_pct: float
    balance_by_type: dict[DebtType, float] = field(default_factory=dict)

    @property
    def daily_debt_service(self) -> float:
        return self.total_monthly_payment / 30

    def to_dict(self) -> dict[str, Any]:
        return {
            "debt_count": self.debt_count,
            "total_balance": self.total_balance,
            "total_monthly_payment": self.total_monthly_payment,
            "weighted_monthly_rate_pct": self.weighted_monthly_rate_pct,
            "balance_by_type": {t.value: v for t, v in self.balance_by_type.items()},
        }


def monthly_debt_service(debts: Iterable[Debt]) -> float:
    """Sum of the monthly payments of all debts."""
    return float(sum(debt.monthly_payment for debt in debts))


def summarize_debts(debts: Iterable[Debt]) -> DebtPortfolio:
    """
    Summarize a debt list.

    The average rate is weighted by outstanding balance and is 0 for an
    empty portfolio.
    """
    debts = list(debts)
    total_balance = sum(d.outstanding_balance for d in debts)
    weighted = sum(d.outstanding_balance * d.monthly_rate_pct for d in debts)

    by_type: dict[DebtType, float] = {}
    for debt in debts:
        by_type[debt.debt_type] = by_type.get(debt.debt_type, 0.0) + debt.outstanding_balance

    return DebtPortfolio(
        debt_count=len(debts),
        total_balance=total_balance,
        total_monthly_payment=monthly_debt_service(debts),
        weighted_monthly_rate_pct=safe_divide(weighted, total_balance),
        balance_by_type=by_type,
    )
