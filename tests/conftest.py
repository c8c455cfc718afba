"""
Pytest Configuration and Shared Fixtures

Provides common test fixtures and configuration for the entire test suite.
"""

import pytest

from cashmap.core import config as config_module
from cashmap.core.dates import FinancialDate
from cashmap.core.datastore import DiagnosticStore
from cashmap.service import DiagnosticService

from tests.fixtures.synthetic_data import (
    make_movement,
    synthetic_movements,
    synthetic_statement,
)


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """Point configuration at an isolated test data directory."""
    monkeypatch.setenv("CASHMAP_ENV", "test")
    monkeypatch.setenv("CASHMAP_DATA_DIR", str(tmp_path / "cashmap_data"))
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.setattr(config_module, "_config", None)


@pytest.fixture
def store(tmp_path) -> DiagnosticStore:
    """Empty diagnostic store in a temporary directory."""
    return DiagnosticStore(tmp_path / "store")


@pytest.fixture
def service() -> DiagnosticService:
    """In-memory service without a store."""
    return DiagnosticService()


@pytest.fixture
def client_id(service) -> str:
    """Id of a freshly registered client in `service`."""
    return service.add_client("Padaria Teste", sector="Alimentação").id


@pytest.fixture
def sample_statement() -> str:
    """Small ';'-delimited statement with a type column."""
    return synthetic_statement()


@pytest.fixture
def classified_movements():
    """Thirty days of fully classified movements for client 'c1'."""
    return synthetic_movements("c1", days=30, start=FinancialDate.from_string("2024-03-01"))


@pytest.fixture
def movement_factory():
    """Build a single movement with sensible defaults."""
    return make_movement


# Test markers for categorizing tests
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for complete workflows")
    config.addinivalue_line("markers", "currency: Tests for amount parsing and formatting")
    config.addinivalue_line("markers", "parser: Tests for bank statement ingestion")
    config.addinivalue_line("markers", "classification: Tests for the taxonomy and auto-classifier")
    config.addinivalue_line("markers", "analysis: Tests for cash-flow aggregation and projection")
    config.addinivalue_line("markers", "lifecycle: Tests for client status transitions")
