#!/usr/bin/env python3
"""
Cash Flow Aggregation Module

Builds the managerial cash-flow statement (DFC) for a client's classified
movements:
- Totals in/out and the net change of the period
- Outflow breakdown by category and the "drain" ranking
- Net flow by nature (operating / investing / financing)
- A simplified income statement with vertical analysis
- Month-by-month comparison of that statement
- Working-capital cycle impact when PMR/PMP are known

TRANSFER movements are dropped before anything is summed.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Optional

import pandas as pd

from ..classification.taxonomy import (
    FINANCIAL_EXPENSE_CATEGORIES,
    FIXED_EXPENSE_CATEGORIES,
    NON_OPERATING_CATEGORIES,
    REVENUE_CATEGORIES,
    SALES_TAX_CATEGORIES,
    VARIABLE_COST_CATEGORIES,
    Category,
    Direction,
    Nature,
)
from ..core.config import AnalysisConfig
from ..core.currency import safe_divide
from ..core.dates import FinancialDate, inclusive_span_days
from ..core.models import Movement, WorkingCapital

logger = logging.getLogger(__name__)

FRAME_COLUMNS = ["date", "month", "category", "direction", "nature", "magnitude", "signed"]


@dataclass
class CashFlowConfig:
    """Configuration for cash flow aggregation."""

    drain_top_n: int = 5
    drain_share_threshold: float = 0.10

    @classmethod
    def default(cls) -> "CashFlowConfig":
        """Create default configuration."""
        return cls()

    @classmethod
    def from_analysis_config(cls, analysis: AnalysisConfig) -> "CashFlowConfig":
        return cls(drain_top_n=analysis.drain_top_n, drain_share_threshold=analysis.drain_share_threshold)


@dataclass
class CategoryShare:
    """Total of one category and its share of a reference amount."""

    category: Category
    value: float
    share: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "label": self.category.label,
            "value": self.value,
            "share": self.share,
        }


@dataclass
class SimplifiedStatement:
    """
    Cash-basis income statement.

    Each group is netted in its natural direction: a refund received in a
    cost category reduces that cost instead of counting as revenue.
    """

    revenue: float = 0.0
    sales_taxes: float = 0.0
    variable_costs: float = 0.0
    fixed_expenses: float = 0.0
    financial_expenses: float = 0.0
    investing_outflows: float = 0.0
    category_rows: list[CategoryShare] = field(default_factory=list)

    @property
    def contribution_margin(self) -> float:
        return self.revenue - self.sales_taxes - self.variable_costs

    @property
    def operating_result(self) -> float:
        return self.contribution_margin - self.fixed_expenses

    @property
    def net_result(self) -> float:
        return self.operating_result - self.financial_expenses - self.investing_outflows

    def percent_of_revenue(self, value: float) -> float:
        """Vertical analysis ratio (0 when there is no revenue)."""
        return safe_divide(value, self.revenue)

    def lines(self) -> list[tuple[str, float, float]]:
        """Statement lines as (name, value, share of revenue), in report order."""
        values = [
            ("revenue", self.revenue),
            ("sales_taxes", self.sales_taxes),
            ("variable_costs", self.variable_costs),
            ("contribution_margin", self.contribution_margin),
            ("fixed_expenses", self.fixed_expenses),
            ("operating_result", self.operating_result),
            ("financial_expenses", self.financial_expenses),
            ("investing_outflows", self.investing_outflows),
            ("net_result", self.net_result),
        ]
        return [(name, value, self.percent_of_revenue(value)) for name, value in values]

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            name: {"value": value, "percent_of_revenue": percent} for name, value, percent in self.lines()
        }
        result["categories"] = [row.to_dict() for row in self.category_rows]
        return result


@dataclass
class MonthlyStatement:
    """Simplified statement of a single calendar month."""

    month: str
    statement: SimplifiedStatement

    @property
    def variable_cost_pct(self) -> float:
        s = self.statement
        return s.percent_of_revenue(s.sales_taxes + s.variable_costs)

    @property
    def fixed_cost_pct(self) -> float:
        return self.statement.percent_of_revenue(self.statement.fixed_expenses)

    @property
    def net_pct(self) -> float:
        return self.statement.percent_of_revenue(self.statement.net_result)

    def to_dict(self) -> dict[str, Any]:
        s = self.statement
        return {
            "month": self.month,
            "revenue": s.revenue,
            "variable_costs": s.sales_taxes + s.variable_costs,
            "contribution_margin": s.contribution_margin,
            "fixed_expenses": s.fixed_expenses,
            "operating_result": s.operating_result,
            "financial_expenses": s.financial_expenses,
            "investing_outflows": s.investing_outflows,
            "net_result": s.net_result,
            "variable_cost_pct": self.variable_cost_pct,
            "fixed_cost_pct": self.fixed_cost_pct,
            "net_pct": self.net_pct,
        }


@dataclass
class WorkingCapitalCycle:
    """
    Cash tied up by the gap between collecting and paying.

    A positive cash impact means money is locked in the operating cycle;
    a negative one means suppliers finance the cycle.
    """

    pmr_days: float
    pmp_days: float
    period_days: int
    daily_revenue: float
    daily_cogs: float

    @property
    def cycle_gap_days(self) -> float:
        return self.pmr_days - self.pmp_days

    @property
    def cash_impact(self) -> float:
        return self.pmr_days * self.daily_revenue - self.pmp_days * self.daily_cogs

    @property
    def is_cash_locked(self) -> bool:
        return self.cash_impact > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "pmr_days": self.pmr_days,
            "pmp_days": self.pmp_days,
            "cycle_gap_days": self.cycle_gap_days,
            "period_days": self.period_days,
            "daily_revenue": self.daily_revenue,
            "daily_cogs": self.daily_cogs,
            "cash_impact": self.cash_impact,
        }


@dataclass
class DFCSummary:
    """Full result of aggregating a movement set."""

    total_in: float
    total_out: float
    period_days: int
    flow_by_nature: dict[Nature, float]
    category_breakdown: list[CategoryShare]
    drains: list[CategoryShare]
    drain_concentration: float
    statement: SimplifiedStatement
    monthly: list[MonthlyStatement] = field(default_factory=list)
    working_capital: WorkingCapitalCycle | None = None
    uncategorized_count: int = 0

    @property
    def net_change(self) -> float:
        return self.total_in - self.total_out

    @property
    def operating_flow(self) -> float:
        return self.flow_by_nature[Nature.OPERATING]

    @property
    def investing_flow(self) -> float:
        return self.flow_by_nature[Nature.INVESTING]

    @property
    def financing_flow(self) -> float:
        return self.flow_by_nature[Nature.FINANCING]

    @property
    def has_uncategorized(self) -> bool:
        return self.uncategorized_count > 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "total_in": self.total_in,
            "total_out": self.total_out,
            "net_change": self.net_change,
            "period_days": self.period_days,
            "flow_by_nature": {nature.value: value for nature, value in self.flow_by_nature.items()},
            "category_breakdown": [row.to_dict() for row in self.category_breakdown],
            "drains": [row.to_dict() for row in self.drains],
            "drain_concentration": self.drain_concentration,
            "statement": self.statement.to_dict(),
            "monthly": [month.to_dict() for month in self.monthly],
            "working_capital": self.working_capital.to_dict() if self.working_capital else None,
            "uncategorized_count": self.uncategorized_count,
        }


def movements_to_frame(movements: Iterable[Movement]) -> pd.DataFrame:
    """
    Tabulate movements for aggregation.

    Enum columns hold their string values so pandas can group and sort them.
    """
    rows = []
    for movement in movements:
        nature = movement.nature
        rows.append(
            {
                "date": movement.date.date,
                "month": movement.date.month_key(),
                "category": movement.category.value,
                "direction": movement.direction.value,
                "nature": nature.value if nature else None,
                "magnitude": float(movement.magnitude),
                "signed": movement.signed_amount,
            }
        )
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def build_statement(frame: pd.DataFrame) -> SimplifiedStatement:
    """Build the simplified statement from a frame without transfers."""
    classified = frame[frame["category"] != Category.UNCATEGORIZED.value]
    net_by_category = classified.groupby("category")["signed"].sum()

    def inflow_total(categories: tuple[Category, ...]) -> float:
        return float(sum(net_by_category.get(c.value, 0.0) for c in categories))

    def outflow_total(categories: tuple[Category, ...]) -> float:
        return -float(sum(net_by_category.get(c.value, 0.0) for c in categories))

    statement = SimplifiedStatement(
        revenue=inflow_total(REVENUE_CATEGORIES),
        sales_taxes=outflow_total(SALES_TAX_CATEGORIES),
        variable_costs=outflow_total(VARIABLE_COST_CATEGORIES),
        fixed_expenses=outflow_total(FIXED_EXPENSE_CATEGORIES),
        financial_expenses=outflow_total(FINANCIAL_EXPENSE_CATEGORIES),
        investing_outflows=outflow_total(NON_OPERATING_CATEGORIES),
    )

    rows = []
    for category in REVENUE_CATEGORIES:
        value = float(net_by_category.get(category.value, 0.0))
        if value:
            rows.append(CategoryShare(category, value, statement.percent_of_revenue(value)))
    for group in (
        SALES_TAX_CATEGORIES,
        VARIABLE_COST_CATEGORIES,
        FIXED_EXPENSE_CATEGORIES,
        FINANCIAL_EXPENSE_CATEGORIES,
        NON_OPERATING_CATEGORIES,
    ):
        for category in group:
            value = -float(net_by_category.get(category.value, 0.0))
            if value:
                rows.append(CategoryShare(category, value, statement.percent_of_revenue(value)))
    statement.category_rows = rows

    return statement


def rank_outflows(frame: pd.DataFrame, total_out: float) -> list[CategoryShare]:
    """Outflow totals per category, largest first (ties broken by category code)."""
    outflows = frame[frame["direction"] == Direction.OUT.value]
    totals = outflows.groupby("category")["magnitude"].sum()

    ranked = [
        CategoryShare(Category(code), float(value), safe_divide(float(value), total_out))
        for code, value in totals.items()
    ]
    ranked.sort(key=lambda row: (-row.value, row.category.value))
    return ranked


def select_drains(
    ranked: list[CategoryShare], top_n: int, share_threshold: float
) -> list[CategoryShare]:
    """
    Keep the top-N categories plus any category above the share threshold.

    A category qualifying by both rules appears once.
    """
    return [row for index, row in enumerate(ranked) if index < top_n or row.share > share_threshold]


class CashFlowAggregator:
    """
    Managerial cash-flow aggregator.

    Stateless apart from its configuration: the same movements always
    produce the same summary.
    """

    def __init__(self, config: Optional[CashFlowConfig] = None):
        """Initialize aggregator with configuration."""
        self.config = config or CashFlowConfig.default()

    def aggregate(
        self,
        movements: Iterable[Movement],
        working_capital: Optional[WorkingCapital] = None,
        date_from: Optional[FinancialDate] = None,
        date_to: Optional[FinancialDate] = None,
    ) -> DFCSummary:
        """
        Aggregate movements into a DFC summary.

        Args:
            movements: Client movements (any classification state)
            working_capital: Optional PMR/PMP parameters
            date_from: First day to include (inclusive)
            date_to: Last day to include (inclusive)

        Returns:
            DFCSummary for the non-transfer movements inside the range
        """
        if date_from is not None and date_to is not None and date_from > date_to:
            raise ValueError(f"Start date {date_from.to_iso_string()} is after end date {date_to.to_iso_string()}")

        relevant = [
            m
            for m in movements
            if not m.is_transfer
            and (date_from is None or m.date >= date_from)
            and (date_to is None or m.date <= date_to)
        ]
        frame = movements_to_frame(relevant)

        total_in = float(frame.loc[frame["direction"] == Direction.IN.value, "magnitude"].sum())
        total_out = float(frame.loc[frame["direction"] == Direction.OUT.value, "magnitude"].sum())
        period_days = inclusive_span_days(m.date for m in relevant)

        ranked = rank_outflows(frame, total_out)
        drains = select_drains(ranked, self.config.drain_top_n, self.config.drain_share_threshold)
        drain_concentration = safe_divide(sum(row.value for row in drains), total_out)

        by_nature = frame.groupby("nature")["signed"].sum()
        flow_by_nature = {nature: float(by_nature.get(nature.value, 0.0)) for nature in Nature}

        statement = build_statement(frame)
        monthly = [
            MonthlyStatement(month=str(month), statement=build_statement(month_frame))
            for month, month_frame in frame.groupby("month", sort=True)
        ]

        cycle = None
        if working_capital is not None:
            cycle = WorkingCapitalCycle(
                pmr_days=working_capital.pmr_days,
                pmp_days=working_capital.pmp_days,
                period_days=period_days,
                daily_revenue=statement.revenue / period_days,
                daily_cogs=statement.variable_costs / period_days,
            )

        uncategorized = sum(1 for m in relevant if m.is_uncategorized)
        if uncategorized:
            logger.info("%d movements still uncategorized; statement may be incomplete", uncategorized)

        return DFCSummary(
            total_in=total_in,
            total_out=total_out,
            period_days=period_days,
            flow_by_nature=flow_by_nature,
            category_breakdown=ranked,
            drains=drains,
            drain_concentration=drain_concentration,
            statement=statement,
            monthly=monthly,
            working_capital=cycle,
            uncategorized_count=uncategorized,
        )


def aggregate(
    movements: Iterable[Movement],
    working_capital: Optional[WorkingCapital] = None,
    config: Optional[CashFlowConfig] = None,
    date_from: Optional[FinancialDate] = None,
    date_to: Optional[FinancialDate] = None,
) -> DFCSummary:
    """Convenience wrapper around CashFlowAggregator.aggregate."""
    return CashFlowAggregator(config).aggregate(movements, working_capital, date_from, date_to)
