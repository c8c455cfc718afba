#!/usr/bin/env python3
"""
Cash Projection Simulator

Projects a client's day-by-day cash balance from historical daily averages,
debt service and a scenario, then classifies insolvency risk.

The daily change is constant over the horizon, so the balance curve is a
straight line computed in one numpy step. Break-even revenue comes from the
monthly assumptions and does not depend on the scenario or on injections.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Optional

import numpy as np

from ..classification.taxonomy import Direction
from ..core.currency import safe_divide
from ..core.dates import FinancialDate, inclusive_span_days
from ..core.models import Debt, Movement, ProjectionAssumptions, RiskLevel
from .cash_flow import build_statement, movements_to_frame
from .debts import monthly_debt_service

logger = logging.getLogger(__name__)

DAYS_PER_MONTH = 30


class Scenario(Enum):
    """Projection scenario with its (inflow, outflow) multipliers."""

    REALIST = "REALIST"
    OPTIMIST = "OPTIMIST"
    PESSIMIST = "PESSIMIST"

    @property
    def multipliers(self) -> tuple[float, float]:
        return SCENARIO_MULTIPLIERS[self]


SCENARIO_MULTIPLIERS: dict[Scenario, tuple[float, float]] = {
    Scenario.REALIST: (1.0, 1.0),
    Scenario.OPTIMIST: (1.10, 0.85),
    Scenario.PESSIMIST: (0.80, 1.0),
}


@dataclass
class ProjectionDay:
    """Simulated end-of-day balance."""

    day: int
    date: FinancialDate
    balance: float

    def to_dict(self) -> dict[str, Any]:
        return {"day": self.day, "date": self.date.to_iso_string(), "balance": self.balance}


@dataclass
class BreakEven:
    """Revenue needed to cover fixed obligations at the current margin."""

    total_fixed_obligations: float
    margin_ratio: float
    break_even_revenue: float
    revenue_gap: float

    @property
    def is_defined(self) -> bool:
        """False when there is no positive margin to cover obligations with."""
        return self.margin_ratio > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_fixed_obligations": self.total_fixed_obligations,
            "margin_ratio": self.margin_ratio,
            "break_even_revenue": self.break_even_revenue,
            "revenue_gap": self.revenue_gap,
            "is_defined": self.is_defined,
        }


@dataclass
class ProjectionResult:
    """Outcome of one simulation run."""

    scenario: Scenario
    horizon_days: int
    period_days: int
    daily_in: float
    daily_out: float
    projected_daily_in: float
    projected_daily_out: float
    daily_debt_service: float
    monthly_debt_service: float
    effective_daily_change: float
    daily_burn_rate: float
    starting_balance: float
    lowest_balance: float
    rupture_day: int | None
    risk_level: RiskLevel
    break_even: BreakEven
    assumptions: ProjectionAssumptions
    days: list[ProjectionDay] = field(default_factory=list)

    @property
    def ending_balance(self) -> float:
        return self.days[-1].balance if self.days else self.starting_balance

    @property
    def rupture_date(self) -> FinancialDate | None:
        if self.rupture_day is None:
            return None
        return self.days[self.rupture_day - 1].date

    @property
    def break_even_revenue(self) -> float:
        return self.break_even.break_even_revenue

    @property
    def revenue_gap(self) -> float:
        return self.break_even.revenue_gap

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        a = self.assumptions
        return {
            "scenario": self.scenario.value,
            "horizon_days": self.horizon_days,
            "period_days": self.period_days,
            "daily_in": self.daily_in,
            "daily_out": self.daily_out,
            "projected_daily_in": self.projected_daily_in,
            "projected_daily_out": self.projected_daily_out,
            "daily_debt_service": self.daily_debt_service,
            "effective_daily_change": self.effective_daily_change,
            "daily_burn_rate": self.daily_burn_rate,
            "starting_balance": self.starting_balance,
            "lowest_balance": self.lowest_balance,
            "ending_balance": self.ending_balance,
            "rupture_day": self.rupture_day,
            "rupture_date": self.rupture_date.to_iso_string() if self.rupture_date else None,
            "risk_level": self.risk_level.value,
            "break_even": self.break_even.to_dict(),
            "contribution_margin": a.contribution_margin,
            "margin_ratio": a.margin_ratio,
            "operating_result": a.operating_result,
            "net_result": a.net_result,
            "days": [day.to_dict() for day in self.days],
        }


def compute_break_even(assumptions: ProjectionAssumptions) -> BreakEven:
    """
    Break-even revenue of the monthly assumptions.

    With a margin ratio of 0 or less the break-even is undefined and both
    the revenue and the gap are reported as 0.

    Example:
        revenue 50,000, variable 20,000, fixed 15,000, financial 5,000
        -> margin 0.6, obligations 20,000, break-even ~33,333.33
    """
    obligations = assumptions.total_fixed_obligations
    ratio = assumptions.margin_ratio
    if ratio <= 0:
        return BreakEven(obligations, ratio, 0.0, 0.0)
    break_even = obligations / ratio
    return BreakEven(obligations, ratio, break_even, break_even - assumptions.revenue)


def classify_risk(
    rupture_day: int | None, lowest_balance: float, monthly_service: float, debt_multiple: float = 1.5
) -> RiskLevel:
    """HIGH on rupture, MEDIUM when the low point does not cover the debt buffer, else LOW."""
    if rupture_day is not None:
        return RiskLevel.HIGH
    if lowest_balance < debt_multiple * monthly_service:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def simulate(
    movements: Iterable[Movement],
    debts: Iterable[Debt],
    assumptions: ProjectionAssumptions,
    scenario: Scenario = Scenario.REALIST,
    horizon_days: Optional[int] = None,
    start_date: Optional[FinancialDate] = None,
    debt_multiple: float = 1.5,
) -> ProjectionResult:
    """
    Simulate the cash balance day by day.

    Args:
        movements: Historical movements (transfers are ignored)
        debts: Debts whose monthly payments are serviced daily
        assumptions: Starting balance, injection and break-even inputs
        scenario: Multipliers applied to historical daily in/out
        horizon_days: Days to simulate (defaults to assumptions.horizon_days)
        start_date: Calendar date of day 0 (defaults to today)
        debt_multiple: Debt-service multiple below which risk is MEDIUM

    Returns:
        ProjectionResult with the balance series, rupture day and risk

    Raises:
        ValueError: If the horizon is not positive
    """
    horizon = assumptions.horizon_days if horizon_days is None else horizon_days
    if horizon <= 0:
        raise ValueError(f"Projection horizon must be positive, got {horizon}")

    history = [m for m in movements if not m.is_transfer]
    period_days = inclusive_span_days(m.date for m in history)
    total_in = sum(m.magnitude for m in history if m.direction is Direction.IN)
    total_out = sum(m.magnitude for m in history if m.direction is Direction.OUT)
    daily_in = total_in / period_days
    daily_out = total_out / period_days

    monthly_service = monthly_debt_service(debts)
    daily_service = monthly_service / DAYS_PER_MONTH

    in_factor, out_factor = scenario.multipliers
    projected_in = daily_in * in_factor
    projected_out = daily_out * out_factor

    change = (projected_in - projected_out) - daily_service
    burn_rate = projected_out + daily_service
    starting = assumptions.starting_balance + assumptions.liquidity_injection

    balances = starting + change * np.arange(1, horizon + 1, dtype=float)
    lowest = float(min(starting, balances.min()))
    negative = np.flatnonzero(balances < 0)
    rupture_day = int(negative[0]) + 1 if negative.size else None

    risk = classify_risk(rupture_day, lowest, monthly_service, debt_multiple)

    origin = (start_date or FinancialDate.today()).date
    days = [
        ProjectionDay(day=d, date=FinancialDate(origin + timedelta(days=d)), balance=float(balances[d - 1]))
        for d in range(1, horizon + 1)
    ]

    logger.debug(
        "Simulated %s over %d days: change %.2f/day, lowest %.2f, rupture %s",
        scenario.value,
        horizon,
        change,
        lowest,
        rupture_day,
    )

    return ProjectionResult(
        scenario=scenario,
        horizon_days=horizon,
        period_days=period_days,
        daily_in=daily_in,
        daily_out=daily_out,
        projected_daily_in=projected_in,
        projected_daily_out=projected_out,
        daily_debt_service=daily_service,
        monthly_debt_service=monthly_service,
        effective_daily_change=change,
        daily_burn_rate=burn_rate,
        starting_balance=starting,
        lowest_balance=lowest,
        rupture_day=rupture_day,
        risk_level=risk,
        break_even=compute_break_even(assumptions),
        assumptions=assumptions,
        days=days,
    )


def derive_assumptions(
    movements: Iterable[Movement],
    default_starting_balance: float = 10000.0,
    horizon_days: int = 30,
) -> ProjectionAssumptions:
    """
    Rebuild monthly assumptions from a client's history.

    Every flow is scaled by 30 / period_days. The starting balance is the
    historical net change, floored at the default starting balance.
    """
    history = [m for m in movements if not m.is_transfer]
    period_days = inclusive_span_days(m.date for m in history)
    factor = DAYS_PER_MONTH / period_days

    statement = build_statement(movements_to_frame(history))
    net = sum(m.signed_amount for m in history)

    return ProjectionAssumptions(
        revenue=statement.revenue * factor,
        variable_cost=(statement.variable_costs + statement.sales_taxes) * factor,
        fixed_cost=statement.fixed_expenses * factor,
        financial_cost=statement.financial_expenses * factor,
        investments=statement.investing_outflows * factor,
        starting_balance=max(default_starting_balance, net),
        liquidity_injection=0.0,
        horizon_days=horizon_days,
        updated_at=datetime.now(),
    )
