"""End-to-end tests for the click CLI against a temporary data directory."""

import pytest
from click.testing import CliRunner

from rentals.infrastructure.cli.main import cli


@pytest.fixture
def run(tmp_path):
    runner = CliRunner()

    def _run(*args, actor="vendor:v1", input=None):
        prefix = ["--actor", actor] if actor else []
        return runner.invoke(
            cli,
            prefix + list(args),
            env={"RENTALS_DATA_DIR": str(tmp_path), "RENTALS_LOG_LEVEL": "WARNING"},
            input=input,
        )

    return _run


def _seed(run):
    result = run("product", "add", "--name", "Camera", "--quantity", "5", "--price", "10")
    assert result.exit_code == 0, result.output
    return result


class TestProductCommands:

    def test_add_and_list(self, run):
        assert "Product 'Camera' added" in _seed(run).output
        result = run("product", "list", actor=None)
        assert result.exit_code == 0
        assert "Camera" in result.output

    def test_customer_cannot_add(self, run):
        result = run("product", "add", "--name", "Tent", "--quantity", "1", "--price", "5",
                     actor="customer:c1")
        assert result.exit_code == 1
        assert "Customers cannot list products" in result.output

    def test_availability(self, run):
        _seed(run)
        result = run("product", "availability", "1",
                     "--start", "2026-01-01", "--end", "2026-01-05", actor=None)
        assert result.exit_code == 0
        assert "Available: 5" in result.output


class TestOrderCommands:

    def test_needs_actor(self, run):
        _seed(run)
        result = run("order", "approve", "1", actor=None)
        assert result.exit_code == 2
        assert "--actor" in result.output

    def test_bad_actor(self, run):
        result = run("product", "list", actor="pilot:p1")
        assert result.exit_code == 2
        assert "Unknown role" in result.output

    def test_quote_approve_confirm(self, run):
        _seed(run)
        result = run("order", "quote", "--customer", "c1",
                     "--line", "1", "3", "2026-01-01", "2026-01-05")
        assert result.exit_code == 0, result.output
        assert "Quotation S00001 created" in result.output
        assert "$120.00" in result.output

        assert run("order", "approve", "1").exit_code == 0
        result = run("order", "confirm", "1")
        assert result.exit_code == 0, result.output
        assert "confirmed" in result.output

        shown = run("order", "show", "1", actor=None)
        assert "status=CONFIRMED" in shown.output

    def test_conflict_reported(self, run):
        _seed(run)
        run("order", "quote", "--customer", "c1", "--line", "1", "3", "2026-01-01", "2026-01-05")
        run("order", "quote", "--customer", "c2", "--line", "1", "3", "2026-01-03", "2026-01-07")
        for order_id in ("1", "2"):
            assert run("order", "approve", order_id).exit_code == 0
        assert run("order", "confirm", "1").exit_code == 0

        result = run("order", "confirm", "2")

        assert result.exit_code == 1
        assert "Stock conflict for Camera" in result.output
        assert "Insufficient stock" in result.output

    def test_admin_override(self, run):
        _seed(run)
        run("order", "quote", "--customer", "c1", "--line", "1", "5", "2026-01-01", "2026-01-05")
        run("order", "quote", "--customer", "c2", "--line", "1", "1", "2026-01-02", "2026-01-03")
        run("order", "approve", "1")
        run("order", "approve", "2")
        run("order", "confirm", "1")

        result = run("order", "confirm", "2", "--allow-override", actor="admin:root", input="y\n")

        assert result.exit_code == 0, result.output
        assert "confirmed with override" in result.output

    def test_reject_needs_reason(self, run):
        _seed(run)
        run("order", "quote", "--customer", "c1", "--line", "1", "1", "2026-01-01", "2026-01-02")
        result = run("order", "reject", "1", "--reason", " ")
        assert result.exit_code == 1
        assert "reason is required" in result.output


class TestFullRental:

    def test_invoice_pay_pickup_return(self, run):
        _seed(run)
        run("order", "quote", "--customer", "c1", "--line", "1", "1", "2026-01-01", "2026-01-10")
        run("order", "approve", "1")
        run("order", "confirm", "1")

        result = run("invoice", "create", "1")
        assert result.exit_code == 0, result.output
        assert "INV/" in result.output
        assert "$90.00" in result.output

        result = run("order", "pickup", "1")
        assert result.exit_code == 1
        assert "payment status is UNPAID" in result.output

        result = run("invoice", "dispatch", "1")
        assert result.exit_code == 0, result.output
        assert "Pay at:" in result.output

        result = run("invoice", "pay", "1", "90", actor="customer:c1")
        assert result.exit_code == 0, result.output
        assert "PAID" in result.output

        assert run("order", "pickup", "1").exit_code == 0

        result = run("order", "return", "1", "--returned-at", "2026-01-12")
        assert result.exit_code == 0, result.output
        assert "Late fee charged: $20.00" in result.output

        result = run("invoice", "show", "--order", "1", actor=None)
        assert "$110.00" in result.output
        assert "PARTIAL" in result.output

    def test_refresh_without_provider_keeps_recorded_payments(self, run):
        _seed(run)
        run("order", "quote", "--customer", "c1", "--line", "1", "1", "2026-01-01", "2026-01-10")
        run("order", "approve", "1")
        run("order", "confirm", "1")
        run("invoice", "create", "1")
        run("invoice", "pay", "1", "40", actor="customer:c1")

        result = run("invoice", "refresh", "1")
        assert result.exit_code == 0, result.output
        assert "PARTIAL" in result.output
        assert "$50.00" in result.output

        result = run("order", "pickup", "1")
        assert result.exit_code == 1
        assert "payment status is PARTIAL" in result.output
