"""
Cash Map - Cash-Crisis Diagnostic Engine

Ingests small-business bank statements, classifies every movement into a
cash-flow taxonomy, builds the managerial cash-flow statement (DFC) and
simulates the cash runway under alternative scenarios.

Packages:
- core: Amounts, dates, data models, configuration and persistence
- ingest: Tolerant bank-statement parser
- classification: Category taxonomy and keyword auto-classifier
- analysis: DFC aggregation, debt summary and projection simulator
- lifecycle: Client diagnostic status
- cli: Command-line interface

Example Usage:
    from cashmap.service import DiagnosticService

    service = DiagnosticService()
    client = service.add_client("Padaria Central")
    service.import_statement(client.id, raw_csv_text)
    service.auto_classify(client.id)
    result = service.simulate(client.id)
"""

__version__ = "0.1.0"
__author__ = "Cash Map Team"

from .core.config import Environment, get_config
from .core.models import Client, ClientStatus, Movement, RiskLevel

__all__ = [
    "Client",
    "ClientStatus",
    "Environment",
    "Movement",
    "RiskLevel",
    "get_config",
]
