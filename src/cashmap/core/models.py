#!/usr/bin/env python3
"""
Core Data Models for Cash Map

Data structures shared by the parser, the analytics engines and the
persistence layer. Every model round-trips through a plain dict so the
store can write it as JSON.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from ..classification.taxonomy import Category, Direction, Nature, nature_of
from .currency import safe_divide
from .dates import FinancialDate


class ClientStatus(Enum):
    """Workflow stage of a client diagnostic, in funnel order."""

    NO_DATA = "NO_DATA"
    IMPORTED = "IMPORTED"
    CLASSIFIED = "CLASSIFIED"
    DEBTS_MAPPED = "DEBTS_MAPPED"
    PROJECTION_DONE = "PROJECTION_DONE"

    @property
    def rank(self) -> int:
        """Position in the funnel (NO_DATA = 0)."""
        return list(ClientStatus).index(self)


class RiskLevel(Enum):
    """Discrete cash-risk classification produced by the simulator."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class DocumentType(Enum):
    """Kind of taxpayer document identifying a client."""

    CNPJ = "CNPJ"
    CPF = "CPF"
    FOREIGN = "FOREIGN"


class DebtType(Enum):
    """Kinds of debt tracked for a client."""

    LOAN = "LOAN"
    FIDC = "FIDC"
    SUPPLIER = "SUPPLIER"
    CARD = "CARD"
    OTHER = "OTHER"


class ActionType(Enum):
    """Whether an action item targets revenue or cost."""

    REVENUE = "REVENUE"
    COST = "COST"


class ActionImpact(Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class ActionHorizon(Enum):
    SHORT = "SHORT"
    MEDIUM = "MEDIUM"
    LONG = "LONG"


def _parse_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _format_datetime(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


@dataclass
class Movement:
    """
    One normalized bank-statement movement.

    The magnitude is never negative; the sign lives in `direction`.
    `nature` is derived from `category` on every read, so it can never drift
    from the taxonomy.
    """

    id: str
    client_id: str
    date: FinancialDate
    description: str
    magnitude: float
    direction: Direction
    category: Category = Category.UNCATEGORIZED
    auto_classified: bool = False

    def __post_init__(self) -> None:
        if self.magnitude < 0:
            raise ValueError(f"Movement magnitude must be non-negative, got {self.magnitude}")

    @property
    def nature(self) -> Nature | None:
        """DFC nature derived from the category."""
        return nature_of(self.category)

    @property
    def signed_amount(self) -> float:
        """Magnitude with IN positive and OUT negative."""
        return self.magnitude if self.direction is Direction.IN else -self.magnitude

    @property
    def is_uncategorized(self) -> bool:
        return self.category is Category.UNCATEGORIZED

    @property
    def is_transfer(self) -> bool:
        return self.category is Category.TRANSFER

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        nature = self.nature
        return {
            "id": self.id,
            "client_id": self.client_id,
            "date": self.date.to_iso_string(),
            "description": self.description,
            "magnitude": self.magnitude,
            "direction": self.direction.value,
            "category": self.category.value,
            "nature": nature.value if nature else None,
            "auto_classified": self.auto_classified,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Movement":
        """Create Movement from dictionary. A stored `nature` is ignored."""
        return cls(
            id=data["id"],
            client_id=data["client_id"],
            date=FinancialDate.from_string(data["date"]),
            description=data["description"],
            magnitude=float(data["magnitude"]),
            direction=Direction(data["direction"]),
            category=Category(data.get("category", Category.UNCATEGORIZED.value)),
            auto_classified=bool(data.get("auto_classified", False)),
        )


@dataclass
class Debt:
    """
    Outstanding debt of a client.

    Only the monthly payment feeds the simulator; balance and rate feed the
    portfolio summary.
    """

    id: str
    client_id: str
    institution: str
    debt_type: DebtType
    outstanding_balance: float
    monthly_rate_pct: float = 0.0
    monthly_payment: float = 0.0
    due_date: FinancialDate | None = None

    def __post_init__(self) -> None:
        if self.outstanding_balance <= 0:
            raise ValueError(f"Debt balance must be positive, got {self.outstanding_balance}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "client_id": self.client_id,
            "institution": self.institution,
            "debt_type": self.debt_type.value,
            "outstanding_balance": self.outstanding_balance,
            "monthly_rate_pct": self.monthly_rate_pct,
            "monthly_payment": self.monthly_payment,
            "due_date": self.due_date.to_iso_string() if self.due_date else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Debt":
        return cls(
            id=data["id"],
            client_id=data["client_id"],
            institution=data["institution"],
            debt_type=DebtType(data.get("debt_type", DebtType.OTHER.value)),
            outstanding_balance=float(data["outstanding_balance"]),
            monthly_rate_pct=float(data.get("monthly_rate_pct", 0.0)),
            monthly_payment=float(data.get("monthly_payment") or 0.0),
            due_date=FinancialDate.from_string(data["due_date"]) if data.get("due_date") else None,
        )


@dataclass
class ProjectionAssumptions:
    """
    Editable monthly working set behind the projection and break-even math.

    All money figures are monthly-normalized.
    """

    revenue: float = 0.0
    variable_cost: float = 0.0
    fixed_cost: float = 0.0
    financial_cost: float = 0.0
    investments: float = 0.0
    starting_balance: float = 0.0
    liquidity_injection: float = 0.0
    horizon_days: int = 30
    updated_at: datetime | None = None

    @property
    def contribution_margin(self) -> float:
        return self.revenue - self.variable_cost

    @property
    def margin_ratio(self) -> float:
        """Contribution margin as a share of revenue (0 when revenue is 0)."""
        return safe_divide(self.contribution_margin, self.revenue)

    @property
    def operating_result(self) -> float:
        return self.contribution_margin - self.fixed_cost

    @property
    def net_result(self) -> float:
        return self.operating_result - self.financial_cost - self.investments

    @property
    def total_fixed_obligations(self) -> float:
        return self.fixed_cost + self.financial_cost + self.investments

    def to_dict(self) -> dict[str, Any]:
        return {
            "revenue": self.revenue,
            "variable_cost": self.variable_cost,
            "fixed_cost": self.fixed_cost,
            "financial_cost": self.financial_cost,
            "investments": self.investments,
            "starting_balance": self.starting_balance,
            "liquidity_injection": self.liquidity_injection,
            "horizon_days": self.horizon_days,
            "updated_at": _format_datetime(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProjectionAssumptions":
        return cls(
            revenue=float(data.get("revenue", 0.0)),
            variable_cost=float(data.get("variable_cost", 0.0)),
            fixed_cost=float(data.get("fixed_cost", 0.0)),
            financial_cost=float(data.get("financial_cost", 0.0)),
            investments=float(data.get("investments", 0.0)),
            starting_balance=float(data.get("starting_balance", 0.0)),
            liquidity_injection=float(data.get("liquidity_injection", 0.0)),
            horizon_days=int(data.get("horizon_days", 30)),
            updated_at=_parse_datetime(data.get("updated_at")),
        )


@dataclass
class WorkingCapital:
    """Average days to collect receivables (PMR) and to pay suppliers (PMP)."""

    pmr_days: float
    pmp_days: float

    def __post_init__(self) -> None:
        if self.pmr_days < 0 or self.pmp_days < 0:
            raise ValueError("PMR and PMP must be non-negative")

    def to_dict(self) -> dict[str, Any]:
        return {"pmr_days": self.pmr_days, "pmp_days": self.pmp_days}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WorkingCapital":
        return cls(pmr_days=float(data["pmr_days"]), pmp_days=float(data["pmp_days"]))


@dataclass
class Client:
    """
    Business under diagnostic.

    `status` is recomputed from data by the lifecycle module; `last_risk_level`
    is written only when a projection is marked complete.
    """

    id: str
    name: str
    sector: str = ""
    document_type: DocumentType = DocumentType.CNPJ
    document: str = ""
    contact_name: str = ""
    contact_role: str | None = None
    created_at: datetime = field(default_factory=datetime.now)

    status: ClientStatus = ClientStatus.NO_DATA
    last_risk_level: RiskLevel | None = None
    last_analysis_at: datetime | None = None
    report_notes: str | None = None

    assumptions: ProjectionAssumptions | None = None
    working_capital: WorkingCapital | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "sector": self.sector,
            "document_type": self.document_type.value,
            "document": self.document,
            "contact_name": self.contact_name,
            "contact_role": self.contact_role,
            "created_at": _format_datetime(self.created_at),
            "status": self.status.value,
            "last_risk_level": self.last_risk_level.value if self.last_risk_level else None,
            "last_analysis_at": _format_datetime(self.last_analysis_at),
            "report_notes": self.report_notes,
            "assumptions": self.assumptions.to_dict() if self.assumptions else None,
            "working_capital": self.working_capital.to_dict() if self.working_capital else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Client":
        return cls(
            id=data["id"],
            name=data["name"],
            sector=data.get("sector", ""),
            document_type=DocumentType(data.get("document_type", DocumentType.CNPJ.value)),
            document=data.get("document", ""),
            contact_name=data.get("contact_name", ""),
            contact_role=data.get("contact_role"),
            created_at=_parse_datetime(data.get("created_at")) or datetime.now(),
            status=ClientStatus(data.get("status", ClientStatus.NO_DATA.value)),
            last_risk_level=RiskLevel(data["last_risk_level"]) if data.get("last_risk_level") else None,
            last_analysis_at=_parse_datetime(data.get("last_analysis_at")),
            report_notes=data.get("report_notes"),
            assumptions=(
                ProjectionAssumptions.from_dict(data["assumptions"]) if data.get("assumptions") else None
            ),
            working_capital=(
                WorkingCapital.from_dict(data["working_capital"]) if data.get("working_capital") else None
            ),
        )


@dataclass
class ActionItem:
    """Corrective action proposed by the consultant."""

    id: str
    client_id: str
    action_type: ActionType
    title: str
    impact: ActionImpact = ActionImpact.MEDIUM
    horizon: ActionHorizon = ActionHorizon.SHORT
    description: str | None = None
    related_category: Category | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "client_id": self.client_id,
            "action_type": self.action_type.value,
            "title": self.title,
            "impact": self.impact.value,
            "horizon": self.horizon.value,
            "description": self.description,
            "related_category": self.related_category.value if self.related_category else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ActionItem":
        return cls(
            id=data["id"],
            client_id=data["client_id"],
            action_type=ActionType(data["action_type"]),
            title=data["title"],
            impact=ActionImpact(data.get("impact", ActionImpact.MEDIUM.value)),
            horizon=ActionHorizon(data.get("horizon", ActionHorizon.SHORT.value)),
            description=data.get("description"),
            related_category=Category(data["related_category"]) if data.get("related_category") else None,
        )


# Type aliases for common data structures
MovementList = list[Movement]
DebtList = list[Debt]
