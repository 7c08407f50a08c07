"""Integration tests for CLI."""

import json
import os
import subprocess
import sys
from pathlib import Path

from shopcore.cli import main


def run_shopcore(args: list[str], cwd: Path, env: dict[str, str] | None = None) -> subprocess.CompletedProcess:
    """Run shopcore CLI command."""
    return subprocess.run(
        [sys.executable, "-m", "shopcore.cli"] + args,
        cwd=cwd,
        capture_output=True,
        text=True,
        env={**os.environ, **(env or {})},
    )


SEED = {
    "users": [
        {"username": "alice", "email": "alice@example.com", "first_name": "Alice", "last_name": "Smith"}
    ],
    "products": [
        {"name": "Widget", "sku": "WID-1", "price": "10.00", "category": "OTHER", "stock": 5}
    ],
    "orders": [
        {"customer": "alice", "order_number": "A-1", "lines": [{"sku": "WID-1", "quantity": 2}]}
    ],
}


class TestCLIIntegration:
    """Integration tests for CLI commands."""

    def test_demo(self, temp_dir):
        result = run_shopcore(["demo"], temp_dir)

        assert result.returncode == 0
        assert "User: alice (Alice Smith)" in result.stdout
        assert "stock=2" in result.stdout
        assert "SHIPPED" in result.stdout

    def test_demo_json(self, temp_dir):
        result = run_shopcore(["demo", "--json"], temp_dir)

        assert result.returncode == 0
        data = json.loads(result.stdout)
        assert data["order"]["status"] == "SHIPPED"
        assert data["order"]["subtotal"] == "30.00"
        assert data["order"]["order_number"] == "ORD-000001"
        assert data["product"]["stock_quantity"] == 2

    def test_seed(self, temp_dir):
        path = temp_dir / "seed.json"
        path.write_text(json.dumps(SEED))

        result = run_shopcore(["seed", str(path)], temp_dir)

        assert result.returncode == 0
        assert "Users: 1" in result.stdout
        assert "Products: 1 (1 available)" in result.stdout
        assert "A-1" in result.stdout

    def test_seed_json_uses_env_actor(self, temp_dir):
        path = temp_dir / "seed.json"
        path.write_text(json.dumps(SEED))

        result = run_shopcore(["seed", str(path), "--json"], temp_dir, env={"SHOPCORE_ACTOR": "loader"})

        assert result.returncode == 0
        data = json.loads(result.stdout)
        assert data["users"][0]["created_by"] == "loader"
        assert data["orders"][0]["total_amount"] == "20.00"

    def test_seed_missing_file_fails(self, temp_dir):
        result = run_shopcore(["seed", "nowhere.json"], temp_dir)

        assert result.returncode == 1
        assert "Error:" in result.stderr

    def test_seed_duplicate_sku_fails(self, temp_dir):
        data = dict(SEED, products=SEED["products"] * 2)
        path = temp_dir / "dupes.json"
        path.write_text(json.dumps(data))

        result = run_shopcore(["seed", str(path)], temp_dir)

        assert result.returncode == 1
        assert "already exists" in result.stderr

    def test_info_logging_goes_to_stderr(self, temp_dir):
        result = run_shopcore(["--log-level", "INFO", "demo", "--json"], temp_dir)

        assert result.returncode == 0
        assert "Product created successfully" in result.stderr
        json.loads(result.stdout)


class TestMain:
    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out

    def test_demo_in_process(self, capsys):
        assert main(["demo"]) == 0
        assert "ORD-000001" in capsys.readouterr().out
