"""
Core Utilities Package

Shared data models, configuration and persistence used by every engine.

This package provides:
- Brazilian amount parsing and formatting
- Statement date handling
- Data models for clients, movements, debts and action items
- Configuration management for environment-specific settings
- The JSON-file diagnostic store
"""

from .config import (
    Config,
    Environment,
    get_config,
    get_data_dir,
    get_output_dir,
    get_store_dir,
    is_test,
    reload_config,
)
from .currency import format_brl, format_percent, parse_amount, safe_divide
from .dates import FinancialDate, inclusive_span_days
from .models import (
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

__all__ = [
    "ActionHorizon",
    "ActionImpact",
    "ActionItem",
    "ActionType",
    "Client",
    "ClientStatus",
    "Config",
    "Debt",
    "DebtType",
    "DocumentType",
    "Environment",
    "FinancialDate",
    "Movement",
    "ProjectionAssumptions",
    "RiskLevel",
    "WorkingCapital",
    "format_brl",
    "format_percent",
    "get_config",
    "get_data_dir",
    "get_output_dir",
    "get_store_dir",
    "inclusive_span_days",
    "is_test",
    "parse_amount",
    "reload_config",
    "safe_divide",
]
