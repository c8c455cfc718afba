"""
Analysis Package

Cash-flow aggregation (DFC), debt portfolio summary and the projection
simulator.
"""

from .cash_flow import (
    CashFlowAggregator,
    CashFlowConfig,
    CategoryShare,
    DFCSummary,
    MonthlyStatement,
    SimplifiedStatement,
    WorkingCapitalCycle,
    aggregate,
)
from .debts import DebtPortfolio, monthly_debt_service, summarize_debts
from .projection import (
    BreakEven,
    ProjectionDay,
    ProjectionResult,
    Scenario,
    classify_risk,
    compute_break_even,
    derive_assumptions,
    simulate,
)

__all__ = [
    "BreakEven",
    "CashFlowAggregator",
    "CashFlowConfig",
    "CategoryShare",
    "DFCSummary",
    "DebtPortfolio",
    "MonthlyStatement",
    "ProjectionDay",
    "ProjectionResult",
    "Scenario",
    "SimplifiedStatement",
    "WorkingCapitalCycle",
    "aggregate",
    "classify_risk",
    "compute_break_even",
    "derive_assumptions",
    "monthly_debt_service",
    "simulate",
    "summarize_debts",
]
