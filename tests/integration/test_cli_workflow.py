#!/usr/bin/env python3
"""
Integration tests for a complete diagnostic run through the CLI.

Every command loads the store, runs one operation and commits, so each
step below sees the state left by the previous one.
"""

import json
import re

import pytest
from click.testing import CliRunner

from cashmap.cli.main import main

from tests.fixtures.synthetic_data import synthetic_statement

CLIENT_ID = re.compile(r"client-[0-9a-f]{12}")
DEBT_ID = re.compile(r"debt-[0-9a-f]{12}")
ACTION_ID = re.compile(r"action-[0-9a-f]{12}")
MOVEMENT_ID = re.compile(r"stmt-\S+")


@pytest.mark.integration
class TestDiagnosticWorkflow:
    """Test the consultant's workflow end to end."""

    def setup_method(self):
        self.runner = CliRunner()

    def invoke(self, *args: str):
        result = self.runner.invoke(main, list(args))
        assert result.exit_code == 0, result.output
        return result

    def add_client(self) -> str:
        result = self.invoke("client", "add", "Padaria Pão Quente", "--sector", "Alimentação")
        return CLIENT_ID.search(result.output).group(0)

    def import_sample(self, tmp_path, client_id: str, auto: bool = True):
        statement = tmp_path / "extrato.csv"
        statement.write_text(synthetic_statement(), encoding="utf-8")
        args = ["import", str(statement), "--client", client_id]
        if auto:
            args.append("--auto")
        return self.invoke(*args)

    def test_full_diagnostic(self, tmp_path):
        client_id = self.add_client()

        result = self.import_sample(tmp_path, client_id)
        assert "Imported 6 movements (2024-03-01 to 2024-03-06)" in result.output
        assert "Auto-classified 5 movements" in result.output
        assert "Status: IMPORTED" in result.output

        pending = self.invoke("classify", "pending", "--client", client_id)
        assert "TRANSF ENTRE CONTAS" in pending.output
        movement_id = MOVEMENT_ID.search(pending.output).group(0)

        self.invoke("classify", "set", movement_id, "transfer", "--client", client_id)
        assert "Status: CLASSIFIED" in self.invoke("status", "--client", client_id).output

        debt = self.invoke(
            "debt", "add", "--client", client_id, "--institution", "Banco X", "--balance", "5000", "--payment", "500"
        )
        assert DEBT_ID.search(debt.output)
        assert "Status: DEBTS_MAPPED" in self.invoke("status", "--client", client_id).output

        dfc = json.loads(self.invoke("dfc", "--client", client_id, "--json").output)
        assert dfc["total_in"] == pytest.approx(1500.0)
        assert dfc["total_out"] == pytest.approx(2690.4)
        assert dfc["uncategorized_count"] == 0
        assert sum(dfc["flow_by_nature"].values()) == pytest.approx(1500.0 - 2690.4)

        simulation = self.invoke(
            "simulate", "--client", client_id, "--horizon", "30", "--start-date", "2024-04-01", "--complete"
        )
        assert "Risk:" in simulation.output
        assert "Projection marked complete" in simulation.output

        listing = self.invoke("client", "list")
        assert "PROJECTION_DONE" in listing.output

        shown = self.invoke("client", "show", client_id)
        assert "Padaria Pão Quente" in shown.output
        assert "Movements: 6" in shown.output

    def test_simulation_json(self, tmp_path):
        client_id = self.add_client()
        self.import_sample(tmp_path, client_id)

        result = self.invoke(
            "simulate", "--client", client_id, "--scenario", "pessimist", "--horizon", "7", "--json"
        )
        data = json.loads(result.output)

        assert data["scenario"] == "PESSIMIST"
        assert len(data["days"]) == 7
        assert data["risk_level"] in {"LOW", "MEDIUM", "HIGH"}

    def test_bulk_classification(self, tmp_path):
        client_id = self.add_client()
        self.import_sample(tmp_path, client_id, auto=False)

        pending = self.invoke("classify", "pending", "--client", client_id)
        ids = MOVEMENT_ID.findall(pending.output)
        assert len(ids) == 6

        result = self.invoke("classify", "bulk", "other_out", *ids[:3], "--client", client_id)
        assert "Classified 3 movements" in result.output

        remaining = self.invoke("classify", "pending", "--client", client_id)
        assert "3 uncategorized movements" in remaining.output

    def test_working_capital_is_saved(self, tmp_path):
        client_id = self.add_client()
        self.import_sample(tmp_path, client_id)

        self.invoke("dfc", "--client", client_id, "--pmr", "30", "--pmp", "20", "--save-cycle")
        data = json.loads(self.invoke("dfc", "--client", client_id, "--json").output)

        assert data["working_capital"]["cycle_gap_days"] == 10

    def test_dfc_date_range(self, tmp_path):
        client_id = self.add_client()
        self.import_sample(tmp_path, client_id)

        result = self.invoke("dfc", "--client", client_id, "--from", "2024-03-02", "--to", "2024-03-05", "--json")
        data = json.loads(result.output)

        assert data["total_in"] == 0.0
        assert data["total_out"] == pytest.approx(2690.40)
        assert data["period_days"] == 4

    def test_reports_are_saved(self, tmp_path):
        client_id = self.add_client()
        self.import_sample(tmp_path, client_id)
        pending = self.invoke("classify", "pending", "--client", client_id)
        self.invoke("classify", "set", MOVEMENT_ID.search(pending.output).group(0), "transfer", "--client", client_id)

        self.invoke("dfc", "--client", client_id, "--save")
        self.invoke("simulate", "--client", client_id, "--scenario", "optimist", "--save")

        reports = tmp_path / "cashmap_data" / "reports"
        dfc = json.loads((reports / f"{client_id}_dfc.json").read_text())
        projection = json.loads((reports / f"{client_id}_projection_optimist.json").read_text())
        assert dfc["total_in"] == pytest.approx(1500.0)
        assert projection["scenario"] == "OPTIMIST"

    def test_debts_and_actions(self):
        client_id = self.add_client()

        debt_id = DEBT_ID.search(
            self.invoke(
                "debt", "add", "--client", client_id, "--institution", "FIDC Y",
                "--type", "fidc", "--balance", "10000", "--rate", "3.5",
            ).output
        ).group(0)
        listing = self.invoke("debt", "list", "--client", client_id)
        assert "FIDC Y" in listing.output
        assert "Weighted rate: 3.50% a.m." in listing.output

        self.invoke("debt", "remove", debt_id, "--client", client_id)
        assert "FIDC Y" not in self.invoke("debt", "list", "--client", client_id).output

        action_id = ACTION_ID.search(
            self.invoke(
                "action", "add", "Renegociar aluguel", "--client", client_id,
                "--type", "cost", "--impact", "high", "--category", "exp_occupancy",
            ).output
        ).group(0)
        actions = self.invoke("action", "list", "--client", client_id)
        assert "[COST] Renegociar aluguel (impact HIGH, horizon SHORT)" in actions.output

        self.invoke("action", "remove", action_id, "--client", client_id)
        assert "No actions planned" in self.invoke("action", "list", "--client", client_id).output

    def test_client_notes(self):
        client_id = self.add_client()

        self.invoke("client", "notes", client_id, "Caixa zerado em abril")
        assert "Caixa zerado em abril" in self.invoke("client", "notes", client_id).output

        self.invoke("client", "notes", client_id, "--clear")
        assert "(no notes)" in self.invoke("client", "notes", client_id).output


@pytest.mark.integration
class TestCLIErrors:
    """Test error reporting of CLI commands."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_bad_statement_is_reported_verbatim(self, tmp_path):
        client_id = CLIENT_ID.search(self.runner.invoke(main, ["client", "add", "Loja"]).output).group(0)
        bad = tmp_path / "ruim.csv"
        bad.write_text("Data;Descrição;Valor\nontem;X;10\n", encoding="utf-8")

        result = self.runner.invoke(main, ["import", str(bad), "--client", client_id])

        assert result.exit_code == 1
        assert "no valid rows" in result.output

    def test_pmr_requires_pmp(self):
        result = self.runner.invoke(main, ["dfc", "--client", "x", "--pmr", "10"])

        assert result.exit_code == 2
        assert "--pmr and --pmp must be given together" in result.output

    def test_unknown_category(self):
        result = self.runner.invoke(main, ["classify", "set", "m1", "lanches", "--client", "x"])

        assert result.exit_code == 2
        assert "Unknown category" in result.output

    def test_unknown_movement(self):
        client_id = CLIENT_ID.search(self.runner.invoke(main, ["client", "add", "Loja"]).output).group(0)

        result = self.runner.invoke(main, ["classify", "set", "m1", "transfer", "--client", client_id])

        assert result.exit_code == 1
        assert "Unknown movement: m1" in result.output

    def test_wrong_encoding_suggests_latin1(self, tmp_path):
        client_id = CLIENT_ID.search(self.runner.invoke(main, ["client", "add", "Loja"]).output).group(0)
        latin = tmp_path / "extrato_latin1.csv"
        latin.write_bytes("Data;Descrição;Valor\n01/03/2024;Pão;10,00\n".encode("latin-1"))

        result = self.runner.invoke(main, ["import", str(latin), "--client", client_id])

        assert result.exit_code == 1
        assert "--encoding latin-1" in result.output

        result = self.runner.invoke(main, ["import", str(latin), "--client", client_id, "--encoding", "latin-1"])
        assert result.exit_code == 0
        assert "Imported 1 movements" in result.output

    def test_corrupted_store_is_reported(self, tmp_path):
        store_dir = tmp_path / "cashmap_data" / "store"
        store_dir.mkdir(parents=True, exist_ok=True)
        (store_dir / "clients.json").write_text('[{"name": "sem id"}]', encoding="utf-8")

        result = self.runner.invoke(main, ["client", "list"])

        assert result.exit_code == 1
        assert "Corrupted store" in result.output

    def test_projection_cannot_complete_with_pending_movements(self, tmp_path):
        client_id = CLIENT_ID.search(self.runner.invoke(main, ["client", "add", "Loja"]).output).group(0)
        statement = tmp_path / "extrato.csv"
        statement.write_text(synthetic_statement(), encoding="utf-8")
        self.runner.invoke(main, ["import", str(statement), "--client", client_id])

        result = self.runner.invoke(main, ["simulate", "--client", client_id, "--complete"])

        assert result.exit_code == 1
        assert "6 uncategorized movements" in result.output
        assert "Status: IMPORTED" in self.runner.invoke(main, ["status", "--client", client_id]).output

    def test_dfc_rejects_reversed_date_range(self):
        client_id = CLIENT_ID.search(self.runner.invoke(main, ["client", "add", "Loja"]).output).group(0)

        result = self.runner.invoke(
            main, ["dfc", "--client", client_id, "--from", "2024-03-10", "--to", "2024-03-01"]
        )

        assert result.exit_code == 1
        assert "after end date" in result.output

    def test_dfc_rejects_malformed_date(self):
        result = self.runner.invoke(main, ["dfc", "--client", "x", "--from", "10/03/2024"])

        assert result.exit_code == 2
        assert "Use YYYY-MM-DD" in result.output
